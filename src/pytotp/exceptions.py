import datetime
from typing import Optional


class TotpError(ValueError):
    """
    Base class for all errors raised by pytotp.

    Subclasses ValueError so that callers handling invalid input the
    way they would for any other library keep working.
    """


class InvalidBase32Data(TotpError):
    def __init__(self, data: str, message: str = "") -> None:
        super().__init__(message or "Invalid base32 data")
        self.data = data


class InvalidBase64Data(TotpError):
    def __init__(self, data: str, message: str = "") -> None:
        super().__init__(message or "Invalid base64 data")
        self.data = data


class InvalidSecret(TotpError):
    """
    The secret is too short. Only its length is kept, never the bytes.
    """

    def __init__(self, length: int, message: str = "") -> None:
        super().__init__(message or "Invalid secret ({} bytes)".format(length))
        self.length = length


class InvalidHashAlgorithm(TotpError):
    def __init__(self, algorithm: object, message: str = "") -> None:
        super().__init__(message or "Invalid hash algorithm {!r}".format(algorithm))
        self.algorithm = algorithm


class InvalidTimeStep(TotpError):
    def __init__(self, time_step: int, message: str = "") -> None:
        super().__init__(message or "Invalid time step {}".format(time_step))
        self.time_step = time_step


class InvalidDigits(TotpError):
    def __init__(self, digits: int, message: str = "") -> None:
        super().__init__(message or "Invalid digits {}".format(digits))
        self.digits = digits


class InvalidVerificationWindow(TotpError):
    def __init__(self, window: int, message: str = "") -> None:
        super().__init__(message or "Invalid verification window {}".format(window))
        self.window = window


class InvalidCounter(TotpError):
    def __init__(self, counter: int, message: str = "") -> None:
        super().__init__(message or "Invalid counter {}".format(counter))
        self.counter = counter


class InvalidTime(TotpError):
    """
    A time earlier than the reference time was used to compute or verify
    a password.
    """

    def __init__(self, timestamp: int, message: str = "") -> None:
        super().__init__(message or "Invalid time {}".format(timestamp))
        self.timestamp = timestamp

    @property
    def time(self) -> datetime.datetime:
        return datetime.datetime.fromtimestamp(self.timestamp, tz=datetime.timezone.utc)


class UnsupportedReferenceTime(TotpError):
    """
    Provisioning URIs have no parameter for the reference time, so only
    TOTPs measured from the Unix epoch can be exported.
    """

    def __init__(self, timestamp: int, message: str = "") -> None:
        super().__init__(message or "Unsupported reference time {}".format(timestamp))
        self.timestamp = timestamp


class InvalidUri(TotpError):
    def __init__(self, uri: str, message: str = "") -> None:
        super().__init__(message or "Invalid otpauth URI")
        self.uri = uri


class InvalidConfiguration(TotpError):
    def __init__(self, key: Optional[str], message: str = "") -> None:
        super().__init__(message or "Invalid configuration key {!r}".format(key))
        self.key = key
