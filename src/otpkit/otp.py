import hmac
from typing import Optional, Union

from . import utils
from .config import DEFAULT_DIGITS, DEFAULT_INTERVAL, HashAlgorithm, OtpConfig
from .exceptions import OtpValidationError


def int_to_bytestring(i: int, padding: int = 8) -> bytes:
    """
    Turns an integer to the OATH specified
    bytestring, which is fed to the HMAC
    along with the secret.

    Integers wider than ``padding`` bytes are rejected rather than wrapped.
    """
    utils.check_counter("input", i)
    result = bytearray()
    while i != 0:
        result.append(i & 0xFF)
        i >>= 8
    if len(result) > padding:
        raise OtpValidationError("input", "does not fit in {} bytes".format(padding))
    return bytes(bytearray(reversed(result)).rjust(padding, b"\0"))


def generate_otp(secret: bytes, config: OtpConfig, input: int) -> str:
    """
    Computes the RFC 4226 code for ``input``.

    :param secret: raw HMAC key
    :param config: digit count and hash algorithm
    :param input: the HMAC counter value to use as the OTP input.
        Usually either the counter, or the computed integer based on the Unix timestamp
    :returns: the code, left-padded with zeros to ``config.digits``
    """
    secret = utils.check_secret(secret)
    hasher = hmac.new(secret, int_to_bytestring(input), config.algorithm.hash_function)
    hmac_hash = bytearray(hasher.digest())
    offset = hmac_hash[-1] & 0xF
    code = (
        (hmac_hash[offset] & 0x7F) << 24
        | (hmac_hash[offset + 1] & 0xFF) << 16
        | (hmac_hash[offset + 2] & 0xFF) << 8
        | (hmac_hash[offset + 3] & 0xFF)
    )
    return str(code % 10**config.digits).rjust(config.digits, "0")


class OTP(object):
    """
    Base class for OTP handlers.
    """

    def __init__(
        self,
        s: bytes,
        digits: int = DEFAULT_DIGITS,
        digest: Union[str, HashAlgorithm] = "SHA1",
        name: Optional[str] = None,
        issuer: Optional[str] = None,
        interval: int = DEFAULT_INTERVAL,
    ) -> None:
        """
        :param s: raw secret bytes used as the HMAC key
        :param digits: number of integers in the OTP
        :param digest: name of the HMAC hash, SHA1, SHA256 or SHA512
        :param name: account name
        :param issuer: issuer
        :param interval: time step in seconds, only meaningful for TOTP
        """
        self._secret = utils.check_secret(s)
        self._config = OtpConfig(digits=digits, algorithm=digest, interval=interval)  # type: ignore
        self.name = name or "Secret"
        self.issuer = issuer

    @property
    def secret(self) -> bytes:
        return self._secret

    @property
    def config(self) -> OtpConfig:
        return self._config

    @property
    def digits(self) -> int:
        return self._config.digits

    @property
    def digest(self) -> HashAlgorithm:
        return self._config.algorithm

    def generate_otp(self, input: int) -> str:
        return generate_otp(self._secret, self._config, input)

    def __repr__(self) -> str:
        # secret omitted
        return "<{} digits={} digest={} name={!r} issuer={!r}>".format(
            type(self).__name__, self.digits, self.digest.value, self.name, self.issuer
        )
