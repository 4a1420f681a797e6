"""
Building a TOTP from a plain mapping, such as a parsed settings file.

Recognised keys::

    secret          bytes (raw) or str (encoded), required
    encoding        "raw", "base32" or "base64"
    algorithm       "sha1", "sha256" or "sha512"
    time_step       seconds, >= 1
    reference_time  Unix timestamp
    digits          >= 6, integer renderer only
    renderer        "integer" or "steam"
"""
import logging
from typing import Any, Dict, Mapping

from .exceptions import InvalidConfiguration
from .renderers import renderer_from_name
from .totp import TOTP
from .types import HashAlgorithm, Secret, TimeStep

logger = logging.getLogger(__name__)

DEFAULTS: Dict[str, Any] = {
    "algorithm": HashAlgorithm.SHA1.value,
    "time_step": TimeStep.DEFAULT,
    "reference_time": TOTP.DEFAULT_REFERENCE_TIME,
    "renderer": "integer",
}

KEYS = frozenset(["secret", "encoding", "digits", *DEFAULTS])


def load_secret(value: Any, encoding: Any = None) -> Secret:
    if encoding is None:
        encoding = "base32" if isinstance(value, str) else "raw"

    if encoding == "raw":
        if not isinstance(value, (bytes, bytearray)):
            raise InvalidConfiguration("secret", "A raw secret must be bytes")
        return Secret.from_raw(value)
    if encoding in ("base32", "base64"):
        if not isinstance(value, str):
            raise InvalidConfiguration("secret", "An encoded secret must be a str")
        return Secret.from_base32(value) if encoding == "base32" else Secret.from_base64(value)
    raise InvalidConfiguration("encoding", "Expected raw, base32 or base64 encoding, found {!r}".format(encoding))


def from_config(config: Mapping[str, Any]) -> TOTP:
    """
    :param config: the settings, see the module docs for the keys
    :returns: a TOTP configured accordingly
    :raises InvalidConfiguration: for unknown keys, a missing secret, or
        options that don't go together. Values are validated by the types
        they configure and raise those types' errors.
    """
    unknown = sorted(set(config) - KEYS)
    if unknown:
        raise InvalidConfiguration(unknown[0], "Unknown configuration key {!r}".format(unknown[0]))
    if "secret" not in config:
        raise InvalidConfiguration("secret", "A secret is required")

    options = dict(DEFAULTS)
    options.update(config)

    renderer_name = options["renderer"]
    if renderer_name not in ("integer", "steam"):
        raise InvalidConfiguration("renderer", "Expected integer or steam renderer, found {!r}".format(renderer_name))
    if renderer_name == "steam" and "digits" in options:
        raise InvalidConfiguration("digits", "Steam passwords have a fixed length")

    totp = TOTP(
        load_secret(options["secret"], options.get("encoding")),
        renderer=renderer_from_name(renderer_name, options.get("digits")),
        time_step=options["time_step"],
        reference_time=options["reference_time"],
        algorithm=options["algorithm"],
    )
    logger.debug("configured %r", totp)
    return totp
