import calendar
import datetime
import logging
import math
import time
from typing import Any, Optional, Union

from . import utils
from .exceptions import InvalidTime, UnsupportedReferenceTime
from .otp import OTP, AlgorithmLike, SecretLike
from .renderers import Integer, Renderer, Steam
from .types import HashAlgorithm, Secret, TimeStep, VerificationWindow

logger = logging.getLogger(__name__)

TimeLike = Union[int, float, datetime.datetime]


class TOTP(OTP):
    """
    Handler for time-based OTP counters.

    RFC 6238 says nothing about the sign of the reference time T0, so
    reference times before the Unix epoch are allowed.
    """

    DEFAULT_REFERENCE_TIME = 0

    def __init__(
        self,
        secret: Optional[SecretLike] = None,
        renderer: Optional[Renderer] = None,
        time_step: int = TimeStep.DEFAULT,
        reference_time: Union[int, datetime.datetime] = DEFAULT_REFERENCE_TIME,
        algorithm: AlgorithmLike = HashAlgorithm.SHA1,
        name: Optional[str] = None,
        issuer: Optional[str] = None,
    ) -> None:
        """
        :param secret: a Secret, raw secret bytes, or the secret in Base32.
            A random 512-bit secret is generated if it's not given.
        :param renderer: turns HMACs into passwords, defaults to six digits
        :param time_step: the number of seconds each password is valid for
        :param reference_time: T0, the time at which the counter is 0, as a
            Unix timestamp or datetime
        :param algorithm: the HMAC hash algorithm, defaults to SHA1
        :param name: account name
        :param issuer: issuer
        """
        self._time_step = TimeStep(time_step)
        self._reference_time = self._coerce_reference_time(reference_time)
        super().__init__(
            secret=Secret.random() if secret is None else secret,
            renderer=renderer,
            algorithm=algorithm,
            name=name,
            issuer=issuer,
        )

    @classmethod
    def six_digits(cls, secret: Optional[SecretLike] = None, **kwargs: Any) -> "TOTP":
        return cls(secret, renderer=Integer(6), **kwargs)

    @classmethod
    def eight_digits(cls, secret: Optional[SecretLike] = None, **kwargs: Any) -> "TOTP":
        return cls(secret, renderer=Integer(8), **kwargs)

    @classmethod
    def integer(cls, digits: int, secret: Optional[SecretLike] = None, **kwargs: Any) -> "TOTP":
        return cls(secret, renderer=Integer(digits), **kwargs)

    @classmethod
    def steam(cls, secret: Optional[SecretLike] = None, **kwargs: Any) -> "TOTP":
        return cls(secret, renderer=Steam(), **kwargs)

    @property
    def time_step(self) -> TimeStep:
        return self._time_step

    @time_step.setter
    def time_step(self, time_step: int) -> None:
        self._time_step = TimeStep(time_step)

    @property
    def reference_time(self) -> int:
        """
        T0 as a Unix timestamp.
        """
        return self._reference_time

    @reference_time.setter
    def reference_time(self, reference_time: Union[int, datetime.datetime]) -> None:
        self._reference_time = self._coerce_reference_time(reference_time)

    @property
    def reference_datetime(self) -> datetime.datetime:
        return datetime.datetime.fromtimestamp(self._reference_time, tz=datetime.timezone.utc)

    def counter_at(self, for_time: TimeLike) -> int:
        """
        The number of whole time steps between the reference time and a
        given time.

        :raises InvalidTime: if the time is before the reference time
        """
        timestamp = self._timestamp(for_time)
        if timestamp < self._reference_time:
            raise InvalidTime(timestamp, "The time at which the counter was requested is before the reference time.")
        return (timestamp - self._reference_time) // self._time_step

    # pyotp's name for the counter
    timecode = counter_at

    def counter(self) -> int:
        return self.counter_at(time.time())

    def counter_bytes_at(self, for_time: TimeLike) -> bytes:
        """
        The counter as the 64-bit big-endian integer RFC 4226 feeds to the HMAC.
        """
        return self.int_to_bytestring(self.counter_at(for_time))

    def counter_bytes(self) -> bytes:
        return self.counter_bytes_at(time.time())

    def hmac_at(self, for_time: TimeLike) -> bytes:
        return self.generate_hmac(self.counter_at(for_time))

    def hmac(self) -> bytes:
        return self.hmac_at(time.time())

    def password_at(self, for_time: TimeLike) -> str:
        """
        Accepts either a Unix timestamp integer or a datetime object.

        :param for_time: the time to generate an OTP for
        :returns: OTP value
        :raises InvalidTime: if the time is before the reference time
        """
        return self._renderer.render(self.hmac_at(for_time))

    at = password_at

    def password(self) -> str:
        """
        Generate the current time OTP

        :returns: OTP value
        """
        return self.password_at(time.time())

    now = password

    def remaining_seconds(self, for_time: Optional[TimeLike] = None) -> int:
        """
        The number of seconds until the password following the one at
        the given time (or now) takes over.
        """
        timestamp = self._timestamp(time.time() if for_time is None else for_time)
        self.counter_at(timestamp)
        return self._time_step - (timestamp - self._reference_time) % self._time_step

    def verify(self, otp: str, window: int = VerificationWindow.DEFAULT) -> bool:
        """
        Verifies the OTP passed in against the current time OTP.

        :param otp: the OTP to check against
        :param window: also accept the passwords of this many preceding
            time steps. Keep it small: every step accepted widens the
            opportunity for replay.
        """
        return self.verify_at(otp, time.time(), window)

    def verify_at(self, otp: str, for_time: TimeLike, window: int = VerificationWindow.DEFAULT) -> bool:
        """
        Verifies an OTP against the one at a given time, and optionally
        against those of the time steps before it. Passwords for later
        time steps are never accepted, and neither are steps before the
        reference time.

        Whether the password was already used is not checked here; that
        is up to the caller.

        :param otp: the OTP to check against
        :param for_time: the time to check the OTP at
        :param window: the number of preceding time steps to also accept
        :raises InvalidVerificationWindow: if the window is negative
        :raises InvalidTime: if the time is before the reference time
        """
        window = VerificationWindow(window)
        timestamp = self._timestamp(for_time)
        if timestamp < self._reference_time:
            raise InvalidTime(
                timestamp, "The time at which to verify the password is before the TOTP's reference time."
            )

        counter = self.counter_at(timestamp)
        candidate = str(otp)

        for steps_back in range(min(window, counter) + 1):
            if utils.strings_equal(candidate, self.generate_otp(counter - steps_back)):
                logger.debug("password verified at counter %d (%d steps back)", counter - steps_back, steps_back)
                return True

        logger.debug("password rejected at counter %d with window %d", counter, window)
        return False

    def provisioning_uri(self, name: Optional[str] = None, issuer_name: Optional[str] = None, **kwargs: str) -> str:
        """
        Returns the provisioning URI for the OTP.  This can then be
        encoded in a QR Code and used to provision an OTP app like
        Google Authenticator.

        See also:
            https://github.com/google/google-authenticator/wiki/Key-Uri-Format

        :param name: name of the user account
        :param issuer_name: the name of the OTP issuer; this will be the
            organization title of the OTP entry in Authenticator
        :returns: provisioning URI
        :raises UnsupportedReferenceTime: if the reference time isn't the
            Unix epoch, since the URI has no way to say so
        """
        if self._reference_time != self.DEFAULT_REFERENCE_TIME:
            raise UnsupportedReferenceTime(
                self._reference_time, "Provisioning URIs can only describe TOTPs with a reference time of 0."
            )
        if not isinstance(self._renderer, Integer):
            kwargs.setdefault("encoder", self._renderer.name)
        return utils.build_uri(
            self.secret.base32,
            name if name else self.name,
            issuer=issuer_name if issuer_name else self.issuer,
            algorithm=self.algorithm.value,
            digits=self.digits,
            period=int(self._time_step),
            **kwargs,
        )

    @staticmethod
    def _coerce_reference_time(reference_time: Union[int, datetime.datetime]) -> int:
        if isinstance(reference_time, datetime.datetime):
            return TOTP._timestamp(reference_time)
        if isinstance(reference_time, bool) or not isinstance(reference_time, int):
            raise TypeError(
                "reference time must be an int or datetime, not {}".format(type(reference_time).__name__)
            )
        return reference_time

    @staticmethod
    def _timestamp(for_time: TimeLike) -> int:
        if isinstance(for_time, datetime.datetime):
            if not for_time.tzinfo:
                return int(time.mktime(for_time.timetuple()))
            return calendar.timegm(for_time.utctimetuple())
        if isinstance(for_time, float):
            return math.floor(for_time)
        return int(for_time)

    def __repr__(self) -> str:
        return "TOTP(renderer={!r}, time_step={}, reference_time={}, algorithm={})".format(
            self._renderer, int(self._time_step), self._reference_time, self._algorithm.value
        )
