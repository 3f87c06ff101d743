import secrets
from re import IGNORECASE, split
from typing import Any, Dict, Sequence
from urllib.parse import parse_qsl, unquote, urlparse

from .config import HashAlgorithm as HashAlgorithm
from .config import OtpConfig as OtpConfig
from .exceptions import OtpError as OtpError
from .exceptions import OtpValidationError as OtpValidationError
from .hotp import HOTP as HOTP
from .otp import OTP as OTP
from .otp import generate_otp as generate_otp
from .totp import TOTP as TOTP
from .utils import decode_base32_secret, strings_equal as strings_equal


def random_base32(length: int = 32, chars: Sequence[str] = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567") -> str:
    # Note: the otpauth scheme DOES NOT use base32 padding for secret lengths not divisible by 8.
    # Some third-party tools have bugs when dealing with such secrets.
    if length < 32:
        raise OtpValidationError("length", "secrets should be at least 160 bits")

    return "".join(secrets.choice(chars) for _ in range(length))


def random_hex(length: int = 40, chars: Sequence[str] = "ABCDEF0123456789") -> str:
    if length < 40:
        raise OtpValidationError("length", "secrets should be at least 160 bits")
    return "".join(secrets.choice(chars) for _ in range(length))


def parse_uri(uri: str) -> OTP:
    """
    Parses the provisioning URI for the OTP; works for either TOTP or HOTP.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param uri: the hotp/totp URI to parse
    :returns: OTP object
    """

    # Secret (to be filled in later)
    secret = None

    # Data we'll parse to the correct constructor
    otp_data: Dict[str, Any] = {}

    # Parse with URLlib; the label is unquoted only after it is split,
    # and parse_qsl unquotes the query values itself
    parsed_uri = urlparse(uri)

    if parsed_uri.scheme != "otpauth":
        raise OtpValidationError("uri", "not an otpauth URI")

    # Parse issuer/accountname info, preferring a literal ":" separator
    label = parsed_uri.path[1:]
    if ":" in label:
        accountinfo_parts = label.split(":", 1)
    else:
        accountinfo_parts = split("%3A", label, maxsplit=1, flags=IGNORECASE)
    if len(accountinfo_parts) == 1:
        otp_data["name"] = unquote(accountinfo_parts[0])
    else:
        otp_data["issuer"] = unquote(accountinfo_parts[0])
        otp_data["name"] = unquote(accountinfo_parts[1])

    # Parse values
    for key, value in parse_qsl(parsed_uri.query):
        if key == "secret":
            secret = value
        elif key == "issuer":
            if "issuer" in otp_data and otp_data["issuer"] is not None and otp_data["issuer"] != value:
                raise OtpValidationError("issuer", "if specified in both label and parameters, it should be equal")
            otp_data["issuer"] = value
        elif key == "algorithm":
            otp_data["digest"] = HashAlgorithm.parse(value)
        elif key == "digits":
            digits = _parse_int("digits", value)
            if digits not in [6, 7, 8]:
                raise OtpValidationError("digits", "may only be 6, 7, or 8")
            otp_data["digits"] = digits
        elif key == "period":
            otp_data["interval"] = _parse_int("period", value)
        elif key == "counter":
            otp_data["initial_count"] = _parse_int("counter", value)

    if not secret:
        raise OtpValidationError("secret", "no secret found in URI")

    # Create objects
    if parsed_uri.netloc == "totp":
        otp_data.pop("initial_count", None)
        return TOTP(decode_base32_secret(secret), **otp_data)
    elif parsed_uri.netloc == "hotp":
        otp_data.pop("interval", None)
        return HOTP(decode_base32_secret(secret), **otp_data)
    raise OtpValidationError("uri", "not a supported OTP type")


def _parse_int(field: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise OtpValidationError(field, "must be an integer, got {!r}".format(value)) from None
