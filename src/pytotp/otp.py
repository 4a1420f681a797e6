import hmac
from typing import Optional, Union

from .codecs import BytesLike
from .exceptions import InvalidCounter
from .renderers import Integer, Renderer
from .types import HashAlgorithm, Secret

SecretLike = Union[Secret, BytesLike, str]
AlgorithmLike = Union[HashAlgorithm, str]


class OTP(object):
    """
    Base class for OTP handlers.

    Holds the secret, the hash algorithm and the renderer, and turns a
    counter into a password. Subclasses decide where the counter comes
    from.
    """

    def __init__(
        self,
        secret: SecretLike,
        renderer: Optional[Renderer] = None,
        algorithm: AlgorithmLike = HashAlgorithm.SHA1,
        name: Optional[str] = None,
        issuer: Optional[str] = None,
    ) -> None:
        """
        :param secret: a Secret, raw secret bytes, or the secret in Base32
        :param renderer: turns HMACs into passwords, defaults to six digits
        :param algorithm: the HMAC hash algorithm, defaults to SHA1
        :param name: account name, used for provisioning URIs
        :param issuer: issuer, used for provisioning URIs
        """
        self._secret = self._coerce_secret(secret)
        self._renderer = self._coerce_renderer(Integer() if renderer is None else renderer)
        self._algorithm = HashAlgorithm.from_label(algorithm)
        self.name = name or "Secret"
        self.issuer = issuer

    @property
    def secret(self) -> Secret:
        return self._secret

    @secret.setter
    def secret(self, secret: SecretLike) -> None:
        self._secret = self._coerce_secret(secret)

    @property
    def algorithm(self) -> HashAlgorithm:
        return self._algorithm

    @algorithm.setter
    def algorithm(self, algorithm: AlgorithmLike) -> None:
        self._algorithm = HashAlgorithm.from_label(algorithm)

    @property
    def renderer(self) -> Renderer:
        return self._renderer

    @renderer.setter
    def renderer(self, renderer: Renderer) -> None:
        self._renderer = self._coerce_renderer(renderer)

    @property
    def digits(self) -> Optional[int]:
        """
        The password length for integer renderers, None otherwise.
        """
        if isinstance(self._renderer, Integer):
            return int(self._renderer.digits)
        return None

    def generate_hmac(self, input: int) -> bytes:
        """
        :param input: the HMAC counter value to use as the OTP input.
            Usually either the counter, or the computed integer based on the Unix timestamp
        """
        # Implements RFC 4226
        if input < 0:
            raise InvalidCounter(input, "input must be positive integer")
        return hmac.new(self._secret.key(), self.int_to_bytestring(input), self._algorithm.digest).digest()

    def generate_otp(self, input: int) -> str:
        return self._renderer.render(self.generate_hmac(input))

    @staticmethod
    def int_to_bytestring(i: int, padding: int = 8) -> bytes:
        """
        Turns an integer to the OATH specified
        bytestring, which is fed to the HMAC
        along with the secret
        """
        return i.to_bytes(padding, "big")

    @staticmethod
    def _coerce_secret(secret: SecretLike) -> Secret:
        if isinstance(secret, Secret):
            return secret
        if isinstance(secret, str):
            return Secret.from_base32(secret)
        return Secret(secret)

    @staticmethod
    def _coerce_renderer(renderer: Renderer) -> Renderer:
        if not isinstance(renderer, Renderer):
            raise TypeError("renderer must be a Renderer, not {}".format(type(renderer).__name__))
        return renderer

    def scrub(self) -> None:
        self._secret.scrub()

    def __enter__(self) -> "OTP":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.scrub()
