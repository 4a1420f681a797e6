import logging
from re import split
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl, unquote, urlparse

from .codecs import Base32 as Base32
from .codecs import Base64 as Base64
from .config import from_config as from_config
from .exceptions import (
    InvalidBase32Data,
    InvalidBase64Data,
    InvalidConfiguration,
    InvalidCounter,
    InvalidDigits,
    InvalidHashAlgorithm,
    InvalidSecret,
    InvalidTime,
    InvalidTimeStep,
    InvalidUri,
    InvalidVerificationWindow,
    TotpError,
    UnsupportedReferenceTime,
)
from .hotp import HOTP as HOTP
from .otp import OTP as OTP
from .renderers import EightDigits, Integer, Renderer, SixDigits, Steam
from .totp import TOTP as TOTP
from .types import Digits, HashAlgorithm, Secret, TimeStep, VerificationWindow

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Base32",
    "Base64",
    "Digits",
    "EightDigits",
    "HOTP",
    "HashAlgorithm",
    "Integer",
    "InvalidBase32Data",
    "InvalidBase64Data",
    "InvalidConfiguration",
    "InvalidCounter",
    "InvalidDigits",
    "InvalidHashAlgorithm",
    "InvalidSecret",
    "InvalidTime",
    "InvalidTimeStep",
    "InvalidUri",
    "InvalidVerificationWindow",
    "OTP",
    "Renderer",
    "Secret",
    "SixDigits",
    "Steam",
    "TOTP",
    "TimeStep",
    "TotpError",
    "UnsupportedReferenceTime",
    "VerificationWindow",
    "from_config",
    "parse_uri",
    "random_base32",
    "random_secret",
]


def random_secret() -> Secret:
    """
    A new 512-bit secret, long enough for every supported algorithm.
    """
    return Secret.random()


def random_base32() -> str:
    # the otpauth scheme doesn't use padding; 64 bytes encode with one "=" which build_uri strips
    return random_secret().base32


def parse_uri(uri: str) -> OTP:
    """
    Parses the provisioning URI for the OTP; works for either TOTP or HOTP.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param uri: the hotp/totp URI to parse
    :returns: OTP object
    :raises InvalidUri: if the URI can't be used to build an OTP
    """
    secret: Optional[str] = None
    encoder: Optional[str] = None
    digits: Optional[int] = None

    # Data we'll parse to the correct constructor
    otp_data: Dict[str, Any] = {}

    parsed_uri = urlparse(unquote(uri))

    if parsed_uri.scheme != "otpauth":
        raise InvalidUri(uri, "Not an otpauth URI")

    # issuer and account name
    accountinfo_parts = split(":|%3A", parsed_uri.path[1:], maxsplit=1)
    if len(accountinfo_parts) == 1:
        otp_data["name"] = accountinfo_parts[0]
    else:
        otp_data["issuer"] = accountinfo_parts[0]
        otp_data["name"] = accountinfo_parts[1]

    try:
        for key, value in parse_qsl(parsed_uri.query):
            if key == "secret":
                secret = value
            elif key == "issuer":
                if "issuer" in otp_data and otp_data["issuer"] is not None and otp_data["issuer"] != value:
                    raise InvalidUri(uri, "If issuer is specified in both label and parameters, it should be equal.")
                otp_data["issuer"] = value
            elif key == "algorithm":
                otp_data["algorithm"] = HashAlgorithm.from_label(value)
            elif key == "encoder":
                encoder = value
            elif key == "digits":
                digits = int(value)
            elif key == "period":
                otp_data["time_step"] = int(value)
            elif key == "counter":
                otp_data["initial_count"] = int(value)

        if not secret:
            raise InvalidUri(uri, "No secret found in URI")

        # authenticator apps leave the padding off
        secret = secret + "=" * (-len(secret) % 8)

        if encoder == "steam":
            otp_data.pop("initial_count", None)
            return TOTP(secret, renderer=Steam(), **otp_data)

        renderer = Integer(Digits.DEFAULT if digits is None else digits)
        if parsed_uri.netloc == "totp":
            otp_data.pop("initial_count", None)
            return TOTP(secret, renderer=renderer, **otp_data)
        elif parsed_uri.netloc == "hotp":
            otp_data.pop("time_step", None)
            return HOTP(secret, renderer=renderer, **otp_data)
    except InvalidUri:
        raise
    except ValueError as e:
        raise InvalidUri(uri, "Invalid otpauth URI: {}".format(e)) from e

    raise InvalidUri(uri, "Not a supported OTP type")
