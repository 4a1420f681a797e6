import abc
import base64
import string
from typing import ClassVar, Dict, FrozenSet, Optional, Union

from .exceptions import InvalidBase32Data, InvalidBase64Data, TotpError

BytesLike = Union[bytes, bytearray, memoryview]

# str.upper() maps some non-ASCII letters onto the Base32 dictionary
_ASCII_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)


class Codec(abc.ABC):
    """
    Base class for the text codecs used to move secrets around.

    An instance holds either the raw bytes or the encoded text and
    computes the other form the first time it is asked for, so setting
    one form and reading back the same form costs nothing.
    """

    #: the characters allowed outside the padding
    dictionary: ClassVar[str] = ""
    #: the encoded length must be a multiple of this
    block_size: ClassVar[int] = 1
    #: the allowed lengths of the trailing "=" run
    padding_lengths: ClassVar[FrozenSet[int]] = frozenset({0})
    error: ClassVar[type] = TotpError
    name: ClassVar[str] = ""

    def __init__(self, raw: BytesLike = b"") -> None:
        self._raw: Optional[bytes] = _to_bytes(raw)
        self._encoded: Optional[str] = None

    @property
    def raw(self) -> bytes:
        if self._raw is None:
            self._raw = self._decode(self._encoded)  # type: ignore
        return self._raw

    @property
    def encoded(self) -> str:
        if self._encoded is None:
            self._encoded = self._encode(self._raw)  # type: ignore
        return self._encoded

    def set_raw(self, raw: BytesLike) -> None:
        self._raw = _to_bytes(raw)
        self._encoded = None

    def set_encoded(self, encoded: str) -> None:
        """
        :param encoded: the encoded text
        :raises: the codec's invalid-data error if the text is not valid.
            The codec is left unchanged in that case.
        """
        self._encoded = self.validate(encoded)
        self._raw = None

    @classmethod
    def encode(cls, raw: BytesLike) -> str:
        return cls(raw).encoded

    @classmethod
    def decode(cls, encoded: str) -> bytes:
        codec = cls()
        codec.set_encoded(encoded)
        return codec.raw

    @classmethod
    def canonicalize(cls, encoded: str) -> str:
        return encoded

    @classmethod
    def validate(cls, encoded: str) -> str:
        """
        Checks the encoded text is well formed.

        :returns: the text in canonical form
        """
        if not isinstance(encoded, str):
            raise TypeError("{} data must be a str, not {}".format(cls.name, type(encoded).__name__))

        canonical = cls.canonicalize(encoded)
        length = len(canonical)

        if length % cls.block_size != 0:
            raise cls.error(
                encoded, "{} data must be padded to a multiple of {} characters.".format(cls.name, cls.block_size)
            )

        data_length = len(canonical.rstrip("="))

        if length - data_length not in cls.padding_lengths:
            raise cls.error(
                encoded,
                "{} data must be padded with {} '=' characters.".format(
                    cls.name, ", ".join(str(n) for n in sorted(cls.padding_lengths))
                ),
            )

        for position, char in enumerate(canonical[:data_length]):
            if char not in cls.dictionary:
                raise cls.error(encoded, "Invalid {} character found at position {}.".format(cls.name, position))

        return canonical

    @classmethod
    @abc.abstractmethod
    def _encode(cls, raw: bytes) -> str:
        ...

    @classmethod
    @abc.abstractmethod
    def _decode(cls, encoded: str) -> bytes:
        ...

    def __repr__(self) -> str:
        return "{}({!r})".format(type(self).__name__, self.encoded)


class Base32(Codec):
    """
    RFC 4648 Base32.

    Lower case ASCII input is accepted and upper-cased before it is
    validated. Other characters are left as they are, so they fail
    validation.
    """

    dictionary = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
    block_size = 8
    padding_lengths = frozenset({0, 1, 3, 4, 6})
    error = InvalidBase32Data
    name = "Base32"

    # number of leftover raw bytes -> number of "=" in the last group
    _ENCODED_PADDING: ClassVar[Dict[int, int]] = {0: 0, 1: 6, 2: 4, 3: 3, 4: 1}
    # number of characters before the padding -> number of raw bytes in the group
    _DECODED_BYTES: ClassVar[Dict[int, int]] = {8: 5, 7: 4, 5: 3, 4: 2, 2: 1}

    @classmethod
    def canonicalize(cls, encoded: str) -> str:
        return encoded.translate(_ASCII_UPPER)

    @classmethod
    def _encode(cls, raw: bytes) -> str:
        length = len(raw)

        if length == 0:
            return ""

        # temporarily pad so there's a whole number of 40-bit groups
        leftover = length % 5
        padded = raw + b"\0" * ((5 - leftover) % 5)
        chars = []

        for pos in range(0, len(padded), 5):
            bits = int.from_bytes(padded[pos : pos + 5], "big")
            # the first character is the leftmost 5 bits
            for shift in range(35, -1, -5):
                chars.append(cls.dictionary[(bits >> shift) & 0x1F])

        padding = cls._ENCODED_PADDING[leftover]

        if padding:
            chars[-padding:] = "=" * padding

        return "".join(chars)

    @classmethod
    def _decode(cls, encoded: str) -> bytes:
        raw = bytearray()

        for pos in range(0, len(encoded), 8):
            group = encoded[pos : pos + 8].rstrip("=")
            bits = 0

            for char in group:
                bits = (bits << 5) | cls.dictionary.index(char)

            # realign a short final group to 40 bits, the low-order bits are the encoder's zero padding
            bits <<= 5 * (8 - len(group))
            raw += bits.to_bytes(5, "big")[: cls._DECODED_BYTES[len(group)]]

        return bytes(raw)


class Base64(Codec):
    """
    RFC 4648 standard Base64.

    The standard library decoder tolerates malformed input, so the text
    is validated here before it is handed over.
    """

    dictionary = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
    block_size = 4
    padding_lengths = frozenset({0, 1, 2})
    error = InvalidBase64Data
    name = "Base64"

    @classmethod
    def _encode(cls, raw: bytes) -> str:
        return base64.b64encode(raw).decode("ascii")

    @classmethod
    def _decode(cls, encoded: str) -> bytes:
        return base64.b64decode(encoded, validate=True)


def _to_bytes(raw: BytesLike) -> bytes:
    if not isinstance(raw, (bytes, bytearray, memoryview)):
        raise TypeError("raw data must be bytes-like, not {}".format(type(raw).__name__))
    return bytes(raw)
