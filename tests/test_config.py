import pytest

from pytotp import TOTP, HashAlgorithm, Integer, Steam, from_config
from pytotp.exceptions import (
    InvalidBase64Data,
    InvalidConfiguration,
    InvalidDigits,
    InvalidHashAlgorithm,
    InvalidSecret,
    InvalidTimeStep,
)

RFC_SECRET = b"12345678901234567890"


def test_defaults():
    totp = from_config({"secret": RFC_SECRET})
    assert isinstance(totp, TOTP)
    assert totp.secret.raw == RFC_SECRET
    assert totp.algorithm is HashAlgorithm.SHA1
    assert totp.time_step == 30
    assert totp.reference_time == 0
    assert totp.renderer == Integer(6)


def test_all_options():
    totp = from_config(
        {
            "secret": "MTIzNDU2Nzg5MDEyMzQ1Njc4OTA=",
            "encoding": "base64",
            "algorithm": "sha1",
            "time_step": 30,
            "reference_time": 0,
            "digits": 8,
            "renderer": "integer",
        }
    )
    assert totp.password_at(59) == "94287082"


def test_string_secret_defaults_to_base32():
    totp = from_config({"secret": "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ", "digits": 8})
    assert totp.password_at(59) == "94287082"


def test_steam():
    totp = from_config({"secret": RFC_SECRET, "renderer": "steam", "time_step": 60, "reference_time": 120})
    assert isinstance(totp.renderer, Steam)
    assert totp.time_step == 60
    assert totp.reference_time == 120


@pytest.mark.parametrize(
    "config, key",
    [
        ({}, "secret"),
        ({"secret": RFC_SECRET, "period": 30}, "period"),
        ({"secret": RFC_SECRET, "renderer": "hex"}, "renderer"),
        ({"secret": RFC_SECRET, "renderer": "steam", "digits": 6}, "digits"),
        ({"secret": RFC_SECRET, "encoding": "hex"}, "encoding"),
        ({"secret": "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ", "encoding": "raw"}, "secret"),
        ({"secret": RFC_SECRET, "encoding": "base32"}, "secret"),
    ],
)
def test_invalid_configuration(config, key):
    with pytest.raises(InvalidConfiguration) as exc_info:
        from_config(config)
    assert exc_info.value.key == key


@pytest.mark.parametrize(
    "config, error",
    [
        ({"secret": b"short"}, InvalidSecret),
        ({"secret": "Zm9v!A==", "encoding": "base64"}, InvalidBase64Data),
        ({"secret": RFC_SECRET, "algorithm": "md5"}, InvalidHashAlgorithm),
        ({"secret": RFC_SECRET, "time_step": 0}, InvalidTimeStep),
        ({"secret": RFC_SECRET, "digits": 5}, InvalidDigits),
    ],
)
def test_invalid_values(config, error):
    with pytest.raises(error):
        from_config(config)
