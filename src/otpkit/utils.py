import base64
import binascii
import math
import unicodedata
from typing import Any, Dict, Optional, Union
from urllib.parse import quote, urlencode, urlparse

from .config import DEFAULT_ALGORITHM, DEFAULT_DIGITS, DEFAULT_INTERVAL, MAX_COUNTER, HashAlgorithm
from .exceptions import OtpValidationError


def build_uri(
    secret: bytes,
    name: str,
    initial_count: Optional[int] = None,
    issuer: Optional[str] = None,
    algorithm: Optional[HashAlgorithm] = None,
    digits: Optional[int] = None,
    period: Optional[int] = None,
    **kwargs,
) -> str:
    """
    Returns the provisioning URI for the OTP; works for either TOTP or HOTP.

    This can then be encoded in a QR Code and used to provision the Google
    Authenticator app. Parameters equal to their defaults (SHA1, 6 digits,
    30 second period) are left out of the query string, since some
    authenticator apps reject them.

    For module-internal use.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param secret: the raw hotp/totp secret; it is base32-encoded into the URI
    :param name: name of the account
    :param initial_count: starting counter value, defaults to None.
        If none, the OTP type will be assumed as TOTP.
    :param issuer: the name of the OTP issuer; this will be the
        organization title of the OTP entry in Authenticator
    :param algorithm: the algorithm used in the OTP generation.
    :param digits: the length of the OTP generated code.
    :param period: the number of seconds the OTP generator is set to
        expire every code.
    :param kwargs: other query string parameters to include in the URI
    :returns: provisioning uri
    """
    # initial_count may be 0 as a valid param
    is_initial_count_present = initial_count is not None

    is_algorithm_set = algorithm is not None and HashAlgorithm.parse(algorithm) != DEFAULT_ALGORITHM
    is_digits_set = digits is not None and digits != DEFAULT_DIGITS
    is_period_set = period is not None and period != DEFAULT_INTERVAL

    otp_type = "hotp" if is_initial_count_present else "totp"
    base_uri = "otpauth://{0}/{1}?{2}"

    url_args: Dict[str, Union[None, int, str]] = {"secret": encode_base32_secret(secret)}

    label = quote(name)
    if issuer is not None:
        label = quote(issuer) + ":" + label
        url_args["issuer"] = issuer

    if is_digits_set:
        url_args["digits"] = digits
    if is_period_set:
        url_args["period"] = period
    if is_algorithm_set:
        url_args["algorithm"] = HashAlgorithm.parse(algorithm).value  # type: ignore
    if is_initial_count_present:
        url_args["counter"] = initial_count
    for k, v in kwargs.items():
        if not isinstance(v, str):
            raise OtpValidationError(k, "otpauth uri parameters must be strings")
        if k == "image":
            image_uri = urlparse(v)
            if image_uri.scheme != "https" or not image_uri.netloc or not image_uri.path:
                raise OtpValidationError("image", "{} is not a valid url".format(v))
        url_args[k] = v

    return base_uri.format(otp_type, label, urlencode(url_args).replace("+", "%20"))


def strings_equal(s1: str, s2: str) -> bool:
    """
    Timing-attack resistant string comparison.

    Normal comparison using == will short-circuit on the first mismatching
    character. This avoids that by folding every byte pair into one
    accumulator, though we still reveal to a timing attack whether the
    strings are the same length. Empty strings never compare equal.
    """
    b1 = unicodedata.normalize("NFKC", s1).encode("utf-8", "surrogatepass")
    b2 = unicodedata.normalize("NFKC", s2).encode("utf-8", "surrogatepass")
    if not b1 or not b2 or len(b1) != len(b2):
        return False
    result = 0
    for x, y in zip(b1, b2):
        result |= x ^ y
    return result == 0


def decode_base32_secret(secret: str) -> bytes:
    """
    Decodes a base32 secret, tolerating missing padding and lowercase input.

    :raises OtpValidationError: if the secret is not valid base32
    """
    if not isinstance(secret, str):
        raise OtpValidationError("secret", "must be a base32 string")
    secret = secret.replace(" ", "")
    missing_padding = len(secret) % 8
    if missing_padding != 0:
        secret += "=" * (8 - missing_padding)
    try:
        decoded = base64.b32decode(secret, casefold=True)
    except binascii.Error as e:
        raise OtpValidationError("secret", "invalid base32: {}".format(e)) from e
    if not decoded:
        raise OtpValidationError("secret", "must not be empty")
    return decoded


def encode_base32_secret(secret: bytes) -> str:
    # the otpauth scheme does not use base32 padding
    return base64.b32encode(secret).decode("ascii").rstrip("=")


def check_secret(secret: Any) -> bytes:
    if not isinstance(secret, (bytes, bytearray)):
        raise OtpValidationError("secret", "must be bytes")
    if len(secret) == 0:
        raise OtpValidationError("secret", "must not be empty")
    return bytes(secret)


def check_counter(field: str, value: Any) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise OtpValidationError(field, "must be an integer")
    if value < 0:
        raise OtpValidationError(field, "can't be less than 0")
    if value > MAX_COUNTER:
        raise OtpValidationError(field, "does not fit in 8 bytes")
    return value


def check_drift(value: Any) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise OtpValidationError("drift", "must be an integer number of seconds")
    if value < 0:
        raise OtpValidationError("drift", "can't be less than 0")
    return value


def check_timestamp(field: str, value: Any) -> Union[int, float]:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise OtpValidationError(field, "must be a Unix timestamp (int or float)")
    if not math.isfinite(value):
        raise OtpValidationError(field, "must be finite")
    if value < 0:
        raise OtpValidationError(field, "can't be less than 0")
    return value


def check_otp(value: Any) -> str:
    if not isinstance(value, str):
        raise OtpValidationError("otp", "should be a string")
    return value
