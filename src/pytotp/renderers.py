"""
Renderers turn a computed HMAC into the password shown to the user.

The set is closed: integer passwords of a given number of digits, and
Steam's five-character codes.
"""
import abc
from typing import Optional, Union

from .types import Digits

#: RFC 4226 dynamic truncation reads up to 4 bytes past an offset of at most 15
MINIMUM_HMAC_BYTES = 20


def extract_31_bit_integer(hmac: bytes) -> int:
    """
    Dynamic truncation as described in RFC 4226 section 5.3.

    The low nibble of the last byte picks an offset, and the four bytes
    from there are read as a big-endian integer with the top bit masked
    off.
    """
    if len(hmac) < MINIMUM_HMAC_BYTES:
        raise ValueError("HMAC must be at least {} bytes, found {}".format(MINIMUM_HMAC_BYTES, len(hmac)))

    offset = hmac[-1] & 0xF
    return (
        (hmac[offset] & 0x7F) << 24
        | (hmac[offset + 1] & 0xFF) << 16
        | (hmac[offset + 2] & 0xFF) << 8
        | (hmac[offset + 3] & 0xFF)
    )


class Renderer(abc.ABC):
    @property
    @abc.abstractmethod
    def name(self) -> str:
        ...

    @abc.abstractmethod
    def render(self, hmac: bytes) -> str:
        """
        :param hmac: the HMAC, at least 20 bytes
        :returns: the password
        """


class Integer(Renderer):
    """
    Decimal passwords, zero-padded on the left to a fixed width.
    """

    def __init__(self, digits: Union[Digits, int] = Digits.DEFAULT) -> None:
        self._digits = Digits(digits)

    @property
    def digits(self) -> Digits:
        return self._digits

    @property
    def name(self) -> str:
        return "{}-digits".format(self._digits)

    def with_digits(self, digits: Union[Digits, int]) -> "Integer":
        return Integer(digits)

    def render(self, hmac: bytes) -> str:
        return str(extract_31_bit_integer(hmac) % 10**self._digits).zfill(self._digits)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Integer):
            return NotImplemented
        return self._digits == other._digits

    def __hash__(self) -> int:
        return hash((Integer, int(self._digits)))

    def __repr__(self) -> str:
        return "Integer(digits={})".format(int(self._digits))


def SixDigits() -> Integer:
    return Integer(6)


def EightDigits() -> Integer:
    return Integer(8)


class Steam(Renderer):
    """
    Steam Guard style codes.

    The scheme is not published anywhere; this follows the behaviour of
    the commonly used open source clients and should be treated as
    best-effort compatibility.
    """

    ALPHABET = "23456789BCDFGHJKMNPQRTVWXY"
    CHARACTER_COUNT = 5

    @property
    def name(self) -> str:
        return "steam"

    def render(self, hmac: bytes) -> str:
        code = extract_31_bit_integer(hmac)
        chars = []
        # least significant remainder first, no reversal
        for _ in range(self.CHARACTER_COUNT):
            code, remainder = divmod(code, len(self.ALPHABET))
            chars.append(self.ALPHABET[remainder])
        return "".join(chars)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Steam):
            return NotImplemented
        return True

    def __hash__(self) -> int:
        return hash(Steam)

    def __repr__(self) -> str:
        return "Steam()"


def renderer_from_name(name: str, digits: Optional[int] = None) -> Renderer:
    """
    :param name: "integer", "steam", or an integer renderer's name such as "8-digits"
    :param digits: the digit count for "integer"
    """
    lowered = name.lower()
    if lowered == "steam":
        if digits is not None:
            raise ValueError("Steam passwords have a fixed length")
        return Steam()
    if lowered == "integer":
        return Integer(Digits.DEFAULT if digits is None else digits)
    if lowered.endswith("-digits") and lowered[: -len("-digits")].isdigit():
        return Integer(int(lowered[: -len("-digits")]))
    raise ValueError("Unknown renderer {!r}".format(name))
