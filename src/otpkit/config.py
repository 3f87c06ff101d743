import hashlib
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Union

from .exceptions import OtpValidationError

DEFAULT_DIGITS = 6
DEFAULT_INTERVAL = 30
MAX_DIGITS = 10
# int_to_bytestring packs into 8 unsigned bytes
MAX_COUNTER = 2**64 - 1


class HashAlgorithm(str, Enum):
    """
    Hash functions usable as the HMAC digest.
    """

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    @property
    def hash_function(self) -> Callable[..., Any]:
        return _HASH_FUNCTIONS[self]

    @classmethod
    def parse(cls, value: Union[str, "HashAlgorithm"]) -> "HashAlgorithm":
        """
        Accepts a member or a case-insensitive name such as "sha256" or "SHA-256".

        :raises OtpValidationError: if the algorithm is not supported
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise OtpValidationError("algorithm", "must be a string or HashAlgorithm")
        try:
            return cls(value.upper().replace("-", ""))
        except ValueError:
            raise OtpValidationError("algorithm", "must be SHA1, SHA256 or SHA512, got {!r}".format(value)) from None


_HASH_FUNCTIONS = {
    HashAlgorithm.SHA1: hashlib.sha1,
    HashAlgorithm.SHA256: hashlib.sha256,
    HashAlgorithm.SHA512: hashlib.sha512,
}

DEFAULT_ALGORITHM = HashAlgorithm.SHA1


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class OtpConfig:
    """
    Immutable OTP parameters, validated once at construction.

    :param digits: number of digits in each code, 1 to 10
    :param algorithm: HMAC digest; a HashAlgorithm or its name
    :param interval: TOTP time step in seconds (ignored by HOTP)
    """

    digits: int = DEFAULT_DIGITS
    algorithm: HashAlgorithm = DEFAULT_ALGORITHM
    interval: int = DEFAULT_INTERVAL

    def __post_init__(self) -> None:
        if not _is_int(self.digits):
            raise OtpValidationError("digits", "must be an integer")
        if self.digits <= 0:
            raise OtpValidationError("digits", "must be positive")
        if self.digits > MAX_DIGITS:
            raise OtpValidationError("digits", "must be no greater than {}".format(MAX_DIGITS))
        if not _is_int(self.interval):
            raise OtpValidationError("interval", "must be an integer")
        if self.interval <= 0:
            raise OtpValidationError("interval", "must be positive")
        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "algorithm", HashAlgorithm.parse(self.algorithm))
