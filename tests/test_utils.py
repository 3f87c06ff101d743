import pytest

from otpkit import OtpValidationError, random_base32, random_hex
from otpkit.config import HashAlgorithm
from otpkit.utils import build_uri, decode_base32_secret, encode_base32_secret, strings_equal


def test_strings_equal() -> None:
    assert strings_equal("123456", "123456")
    assert not strings_equal("123456", "123457")
    assert not strings_equal("023456", "123456")


def test_strings_equal_empty_never_matches() -> None:
    assert not strings_equal("", "")
    assert not strings_equal("", "123456")
    assert not strings_equal("123456", "")


def test_strings_equal_length_mismatch() -> None:
    assert not strings_equal("123456", "123")
    assert not strings_equal("123", "123456")


def test_strings_equal_normalizes_unicode() -> None:
    assert strings_equal("１２３", "123")


def test_strings_equal_touches_every_byte(monkeypatch) -> None:
    seen = []
    real_zip = zip

    def recording_zip(a, b):
        for pair in real_zip(a, b):
            seen.append(pair)
            yield pair

    monkeypatch.setattr("otpkit.utils.zip", recording_zip, raising=False)
    assert not strings_equal("900000", "123456")
    assert len(seen) == 6


def test_base32_round_trip() -> None:
    assert encode_base32_secret(b"12345678901234567890") == "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
    assert decode_base32_secret("GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ") == b"12345678901234567890"


def test_decode_base32_tolerates_padding_case_and_spaces() -> None:
    assert decode_base32_secret("jbswy3dpehpk3pxp") == decode_base32_secret("JBSW Y3DP EHPK 3PXP")
    assert decode_base32_secret("MFRGG") == b"abc"


@pytest.mark.parametrize("value", ["not*base32", "", 42])
def test_decode_base32_rejects_garbage(value) -> None:
    with pytest.raises(OtpValidationError) as excinfo:
        decode_base32_secret(value)
    assert excinfo.value.field == "secret"


def test_build_uri_totp_defaults_are_omitted() -> None:
    uri = build_uri(
        b"12345678901234567890",
        "alice@google.com",
        issuer="Example Co",
        algorithm=HashAlgorithm.SHA1,
        digits=6,
        period=30,
    )
    assert uri == (
        "otpauth://totp/Example%20Co:alice%40google.com"
        "?secret=GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ&issuer=Example%20Co"
    )


def test_build_uri_totp_non_defaults() -> None:
    uri = build_uri(
        b"12345678901234567890",
        "alice",
        issuer="Acme",
        algorithm=HashAlgorithm.SHA256,
        digits=8,
        period=60,
    )
    assert uri == (
        "otpauth://totp/Acme:alice?secret=GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
        "&issuer=Acme&digits=8&period=60&algorithm=SHA256"
    )


def test_build_uri_hotp() -> None:
    uri = build_uri(b"12345678901234567890", "alice", initial_count=0)
    assert uri == "otpauth://hotp/alice?secret=GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ&counter=0"


def test_build_uri_image() -> None:
    uri = build_uri(b"12345678901234567890", "alice", image="https://example.com/logo.png")
    assert uri.endswith("&image=https%3A%2F%2Fexample.com%2Flogo.png")
    with pytest.raises(OtpValidationError):
        build_uri(b"12345678901234567890", "alice", image="http://example.com/logo.png")
    with pytest.raises(OtpValidationError):
        build_uri(b"12345678901234567890", "alice", extra=5)


def test_random_secrets() -> None:
    assert len(random_base32()) == 32
    assert len(decode_base32_secret(random_base32())) == 20
    assert len(random_hex()) == 40
    with pytest.raises(ValueError):
        random_base32(length=16)
    with pytest.raises(ValueError):
        random_hex(length=20)


def test_strings_equal_lone_surrogates_do_not_raise() -> None:
    assert not strings_equal("\ud800\ud800\ud800", "123456")
    assert strings_equal("\ud800", "\ud800")
