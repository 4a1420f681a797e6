from typing import Optional

from . import utils
from .exceptions import InvalidCounter
from .otp import OTP, AlgorithmLike, SecretLike
from .renderers import Integer, Renderer
from .types import HashAlgorithm


class HOTP(OTP):
    """
    Handler for HMAC-based OTP counters.
    """

    def __init__(
        self,
        secret: SecretLike,
        renderer: Optional[Renderer] = None,
        algorithm: AlgorithmLike = HashAlgorithm.SHA1,
        name: Optional[str] = None,
        issuer: Optional[str] = None,
        initial_count: int = 0,
    ) -> None:
        """
        :param secret: a Secret, raw secret bytes, or the secret in Base32
        :param renderer: turns HMACs into passwords, defaults to six digits
        :param algorithm: the HMAC hash algorithm, defaults to SHA1
        :param name: account name
        :param issuer: issuer
        :param initial_count: starting HMAC counter value, defaults to 0
        """
        if initial_count < 0:
            raise InvalidCounter(initial_count, "initial count must not be negative")
        self.initial_count = initial_count
        super().__init__(secret=secret, renderer=renderer, algorithm=algorithm, name=name, issuer=issuer)

    def at(self, count: int) -> str:
        """
        Generates the OTP for the given count.

        :param count: the OTP HMAC counter
        :returns: OTP
        """
        return self.generate_otp(self.initial_count + count)

    def verify(self, otp: str, counter: int) -> bool:
        """
        Verifies the OTP passed in against the current counter OTP.

        :param otp: the OTP to check against
        :param counter: the OTP HMAC counter
        """
        return utils.strings_equal(str(otp), self.at(counter))

    def provisioning_uri(
        self,
        name: Optional[str] = None,
        initial_count: Optional[int] = None,
        issuer_name: Optional[str] = None,
        **kwargs: str,
    ) -> str:
        """
        Returns the provisioning URI for the OTP.  This can then be
        encoded in a QR Code and used to provision an OTP app like
        Google Authenticator.

        See also:
            https://github.com/google/google-authenticator/wiki/Key-Uri-Format

        :param name: name of the user account
        :param initial_count: starting HMAC counter value, defaults to 0
        :param issuer_name: the name of the OTP issuer; this will be the
            organization title of the OTP entry in Authenticator
        :returns: provisioning URI
        """
        if not isinstance(self.renderer, Integer):
            kwargs.setdefault("encoder", self.renderer.name)
        return utils.build_uri(
            self.secret.base32,
            name=name if name else self.name,
            initial_count=initial_count if initial_count is not None else self.initial_count,
            issuer=issuer_name if issuer_name else self.issuer,
            algorithm=self.algorithm.value,
            digits=self.digits,
            **kwargs,
        )
