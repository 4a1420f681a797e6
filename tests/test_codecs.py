import base64
import os

import pytest

from pytotp.codecs import Base32, Base64, Codec
from pytotp.exceptions import InvalidBase32Data, InvalidBase64Data

RFC4648_BASE32 = [
    (b"", ""),
    (b"f", "MY======"),
    (b"fo", "MZXQ===="),
    (b"foo", "MZXW6==="),
    (b"foob", "MZXW6YQ="),
    (b"fooba", "MZXW6YTB"),
    (b"foobar", "MZXW6YTBOI======"),
    (b"test-data-to-encode", "ORSXG5BNMRQXIYJNORXS2ZLOMNXWIZI="),
    (b"\xff\xfe\xfd\xfc\xfb\xfa\xf8\xf7", "777P37H37L4PO==="),
    (b"12345678901234567890", "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"),
    (
        b"test-\xff-mixed-\x80-data-\x00-to-\x8f-encode\n\n",
        "ORSXG5BN74WW22LYMVSC3ABNMRQXIYJNAAWXI3ZNR4WWK3TDN5SGKCQK",
    ),
]

RFC4648_BASE64 = [
    (b"", ""),
    (b"f", "Zg=="),
    (b"fo", "Zm8="),
    (b"foo", "Zm9v"),
    (b"foob", "Zm9vYg=="),
    (b"fooba", "Zm9vYmE="),
    (b"foobar", "Zm9vYmFy"),
    (b"12345678901234567890", "MTIzNDU2Nzg5MDEyMzQ1Njc4OTA="),
]


@pytest.mark.parametrize("raw, encoded", RFC4648_BASE32)
def test_base32_encode(raw, encoded):
    assert Base32.encode(raw) == encoded


@pytest.mark.parametrize("raw, encoded", RFC4648_BASE32)
def test_base32_decode(raw, encoded):
    assert Base32.decode(encoded) == raw


def test_base32_decode_accepts_lower_case():
    assert Base32.decode("mzxw6ytboi======") == b"foobar"
    assert Base32.decode("ORSXG5BNMRQXIYJNORXS2ZLOMNXWIZi=") == b"test-data-to-encode"


def test_base32_lower_case_folding_is_ascii_only():
    assert Base32.canonicalize("abc\u0131\u017f\u00df") == "ABC\u0131\u017f\u00df"


def test_base32_matches_standard_library():
    for length in range(0, 41):
        raw = os.urandom(length)
        assert Base32.encode(raw) == base64.b32encode(raw).decode("ascii")
        assert Base32.decode(Base32.encode(raw)) == raw


@pytest.mark.parametrize("length, padding", [(5, 0), (6, 6), (7, 4), (8, 3), (9, 1), (10, 0)])
def test_base32_padding(length, padding):
    encoded = Base32.encode(b"\x5a" * length)
    assert len(encoded) % 8 == 0
    assert len(encoded) - len(encoded.rstrip("=")) == padding


@pytest.mark.parametrize(
    "encoded",
    [
        "777P37H37L4PO==",
        "MZXW6YT",
        "MZXW6YTBOI=====",
        "M=======",
        "MZXW6===MZXW6===",
        "MZXW6YT1",
        "MZXW6YT8",
        "MZXW 6YT",
        "\xff\xfe\xfd\xfc\xfb\xfa\xf8\xf7",
        "========",
        "\u00dfAAAAAA",
        "\u0131AAAAAAA",
        "\u017fAAAAAAA",
    ],
)
def test_base32_rejects_invalid_data(encoded):
    with pytest.raises(InvalidBase32Data) as exc_info:
        Base32.decode(encoded)
    assert exc_info.value.data == encoded


def test_base32_error_is_value_error():
    with pytest.raises(ValueError):
        Base32.decode("0")


def test_base32_rejects_non_string():
    with pytest.raises(TypeError):
        Base32.decode(b"MZXW6YTB")
    with pytest.raises(TypeError):
        Base32.encode("foobar")


def test_base32_instance_is_lazy():
    codec = Base32(b"foobar")
    assert codec._encoded is None
    assert codec.encoded == "MZXW6YTBOI======"
    assert codec.raw == b"foobar"

    codec.set_encoded("mzxw6===")
    assert codec._raw is None
    assert codec.raw == b"foo"
    assert codec.encoded == "MZXW6==="


def test_base32_invalid_encoded_leaves_codec_unchanged():
    codec = Base32(b"foo")
    with pytest.raises(InvalidBase32Data):
        codec.set_encoded("not base32")
    assert codec.raw == b"foo"
    assert codec.encoded == "MZXW6==="


@pytest.mark.parametrize("raw, encoded", RFC4648_BASE64)
def test_base64_encode(raw, encoded):
    assert Base64.encode(raw) == encoded


@pytest.mark.parametrize("raw, encoded", RFC4648_BASE64)
def test_base64_decode(raw, encoded):
    assert Base64.decode(encoded) == raw


def test_base64_round_trip():
    for length in range(0, 33):
        raw = os.urandom(length)
        encoded = Base64.encode(raw)
        assert len(encoded) % 4 == 0
        assert len(encoded) - len(encoded.rstrip("=")) == (3 - length % 3) % 3
        assert Base64.decode(encoded) == raw


@pytest.mark.parametrize(
    "encoded",
    [
        "Zm9",
        "Zg=",
        "Z===",
        "Zm9v!A==",
        "Zm9v-_==",
        "Zm=v",
        "Zm9v\nYmFy",
        "Zm 9",
    ],
)
def test_base64_rejects_invalid_data(encoded):
    with pytest.raises(InvalidBase64Data) as exc_info:
        Base64.decode(encoded)
    assert exc_info.value.data == encoded


def test_base64_is_case_sensitive():
    assert Base64.decode("Zm9v") != Base64.decode("zM9V")


def test_codec_base_class_is_abstract():
    with pytest.raises(TypeError):
        Codec()
