import enum
import hashlib
import logging
import secrets
from hmac import compare_digest
from typing import Any, Callable, ClassVar, Optional, Set, Type, TypeVar, Union

from .codecs import Base32, Base64, BytesLike
from .exceptions import InvalidDigits, InvalidHashAlgorithm, InvalidSecret, InvalidTimeStep, InvalidVerificationWindow
from .utils import scrub

logger = logging.getLogger(__name__)

_I = TypeVar("_I", bound="_ValidatedInt")


class HashAlgorithm(enum.Enum):
    """
    The hash algorithms TOTP allows for the HMAC.
    """

    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA512 = "sha512"

    @classmethod
    def from_label(cls, label: Union["HashAlgorithm", str]) -> "HashAlgorithm":
        """
        :param label: a member, or one of "sha1", "sha256", "sha512" in any case
        :raises InvalidHashAlgorithm: for anything else
        """
        if isinstance(label, cls):
            return label
        if isinstance(label, str):
            try:
                return cls(label.lower())
            except ValueError:
                pass
        raise InvalidHashAlgorithm(label, "Expected one of sha1, sha256 or sha512, found {!r}".format(label))

    @property
    def digest(self) -> Callable[..., Any]:
        return getattr(hashlib, self.value)

    @property
    def digest_size(self) -> int:
        return self.digest().digest_size

    def __str__(self) -> str:
        return self.value


class _ValidatedInt(int):
    minimum = 0
    error: Type[Exception] = ValueError
    description = "value"

    def __new__(cls: Type[_I], value: int) -> _I:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError("{} must be an int, not {}".format(cls.description, type(value).__name__))
        if value < cls.minimum:
            raise cls.error(value, "Expected {} >= {}, found {}".format(cls.description, cls.minimum, value))
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return "{}({})".format(type(self).__name__, int(self))

    def __str__(self) -> str:
        return str(int(self))


class TimeStep(_ValidatedInt):
    """
    The number of seconds each password is valid for.
    """

    DEFAULT = 30
    minimum = 1
    error = InvalidTimeStep
    description = "time step"

    @classmethod
    def from_minutes(cls, minutes: int) -> "TimeStep":
        return cls(minutes * 60)


class Digits(_ValidatedInt):
    """
    The number of digits in an integer password.

    RFC 4226 requires at least 6. The truncated integer is 31 bits, so
    anything past 10 digits is always zero-padding.
    """

    DEFAULT = 6
    minimum = 6
    error = InvalidDigits
    description = "digits"


class VerificationWindow(_ValidatedInt):
    """
    The number of time steps before the verification time whose
    passwords are also accepted.
    """

    DEFAULT = 0
    RECOMMENDED_MAXIMUM = 2
    minimum = 0
    error = InvalidVerificationWindow
    description = "verification window"

    # window sizes already warned about, each is only logged once
    _warned: ClassVar[Set[int]] = set()

    def __new__(cls, value: int) -> "VerificationWindow":
        window = super().__new__(cls, value)
        if window > cls.RECOMMENDED_MAXIMUM and int(window) not in cls._warned:
            cls._warned.add(int(window))
            logger.warning(
                "verification window of %d steps exceeds the recommended maximum of %d",
                window,
                cls.RECOMMENDED_MAXIMUM,
            )
        return window


class Secret(object):
    """
    The shared secret for a TOTP or HOTP.

    The bytes are kept in a private buffer that scrub() overwrites with
    random data. Use the secret as a context manager to guarantee the
    buffer is scrubbed however the block is left::

        with Secret.from_base32(text) as secret:
            ...
    """

    MINIMUM_BYTES = 16
    GENERATED_BYTES = 64

    def __init__(self, raw: BytesLike) -> None:
        """
        :param raw: the raw secret, at least 128 bits
        :raises InvalidSecret: if it is shorter than that
        """
        if not isinstance(raw, (bytes, bytearray, memoryview)):
            raise TypeError("raw secret must be bytes-like, not {}".format(type(raw).__name__))
        if len(raw) < self.MINIMUM_BYTES:
            raise InvalidSecret(
                len(raw),
                "TOTP secrets must be at least {} bits ({} bytes), found {} bytes".format(
                    self.MINIMUM_BYTES * 8, self.MINIMUM_BYTES, len(raw)
                ),
            )
        self._raw = bytearray(raw)

    @classmethod
    def from_raw(cls, raw: BytesLike) -> "Secret":
        return cls(raw)

    @classmethod
    def from_base32(cls, encoded: str) -> "Secret":
        """
        :raises InvalidBase32Data: if the text is not valid Base32
        :raises InvalidSecret: if it decodes to fewer than 16 bytes
        """
        return cls(Base32.decode(encoded))

    @classmethod
    def from_base64(cls, encoded: str) -> "Secret":
        """
        :raises InvalidBase64Data: if the text is not valid Base64
        :raises InvalidSecret: if it decodes to fewer than 16 bytes
        """
        return cls(Base64.decode(encoded))

    @classmethod
    def random(cls, length: Optional[int] = None) -> "Secret":
        return cls(secrets.token_bytes(cls.GENERATED_BYTES if length is None else length))

    @property
    def raw(self) -> bytes:
        return bytes(self._raw)

    @property
    def base32(self) -> str:
        return Base32.encode(self._raw)

    @property
    def base64(self) -> str:
        return Base64.encode(self._raw)

    def key(self) -> bytearray:
        """
        The backing buffer, for keying the HMAC without making a copy.
        """
        return self._raw

    def scrub(self) -> None:
        """
        Overwrites every byte of the secret with a different random byte.
        """
        scrub(self._raw)

    def __len__(self) -> int:
        return len(self._raw)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Secret):
            return NotImplemented
        return compare_digest(self._raw, other._raw)

    __hash__ = None  # type: ignore

    def __enter__(self) -> "Secret":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.scrub()

    def __repr__(self) -> str:
        return "<Secret of {} bytes>".format(len(self._raw))
