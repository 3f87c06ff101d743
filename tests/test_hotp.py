import pytest

from otpkit import HOTP, OtpValidationError
from otpkit.config import HashAlgorithm

RFC_SECRET = b"12345678901234567890"


def test_at_matches_rfc4226() -> None:
    hotp = HOTP(RFC_SECRET)
    assert hotp.at(0) == "755224"
    assert hotp.at(1) == "287082"
    assert hotp.at(9) == "520489"


def test_initial_count_offsets_at() -> None:
    assert HOTP(RFC_SECRET, initial_count=2).at(0) == "359152"


def test_verify_matches_expected_counter() -> None:
    hotp = HOTP(RFC_SECRET)
    code = hotp.at(5)
    assert hotp.verify(code, 5) == 5
    assert hotp.verify(code, 6) is None


def test_verify_counter_zero_is_a_match_not_falsy_miss() -> None:
    hotp = HOTP(RFC_SECRET)
    assert hotp.verify("755224", 0) == 0
    assert hotp.verify("755224", 0) is not None


def test_verify_wrong_length_is_a_miss() -> None:
    hotp = HOTP(RFC_SECRET)
    assert hotp.verify("75522", 0) is None
    assert hotp.verify("", 0) is None


def test_verify_rejects_bad_arguments() -> None:
    hotp = HOTP(RFC_SECRET)
    with pytest.raises(OtpValidationError) as excinfo:
        hotp.verify(755224, 0)  # type: ignore
    assert excinfo.value.field == "otp"
    with pytest.raises(OtpValidationError) as excinfo:
        hotp.verify("755224", -1)
    assert excinfo.value.field == "counter"
    with pytest.raises(OtpValidationError):
        hotp.verify("755224", "0")  # type: ignore


@pytest.mark.parametrize(
    "kwargs,field",
    [
        ({"s": b""}, "secret"),
        ({"s": "GEZDGNBVGY3TQOJQ"}, "secret"),
        ({"s": RFC_SECRET, "digits": 0}, "digits"),
        ({"s": RFC_SECRET, "digest": "MD5"}, "algorithm"),
        ({"s": RFC_SECRET, "initial_count": -1}, "initial_count"),
    ],
)
def test_construction_rejects_invalid_configuration(kwargs, field) -> None:
    with pytest.raises(OtpValidationError) as excinfo:
        HOTP(**kwargs)
    assert excinfo.value.field == field


def test_read_only_attributes() -> None:
    hotp = HOTP(bytearray(RFC_SECRET), digits=8, digest="sha512")
    assert hotp.secret == RFC_SECRET
    assert isinstance(hotp.secret, bytes)
    assert hotp.digits == 8
    assert hotp.digest is HashAlgorithm.SHA512
    with pytest.raises(AttributeError):
        hotp.digits = 6  # type: ignore
    assert "12345678901234567890" not in repr(hotp)


def test_provisioning_uri() -> None:
    hotp = HOTP(RFC_SECRET, name="alice", issuer="Acme", initial_count=3)
    assert hotp.provisioning_uri() == (
        "otpauth://hotp/Acme:alice?secret=GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ&issuer=Acme&counter=3"
    )
    assert hotp.provisioning_uri(name="bob", initial_count=0, issuer_name="Other") == (
        "otpauth://hotp/Other:bob?secret=GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ&issuer=Other&counter=0"
    )


def test_verify_uses_absolute_counter_regardless_of_initial_count() -> None:
    hotp = HOTP(RFC_SECRET, initial_count=2)
    assert hotp.verify("254676", 5) == 5
    assert hotp.verify(hotp.at(3), 5) == 5
    assert hotp.verify("969429", 5) is None


def test_verify_lone_surrogates_are_a_miss() -> None:
    assert HOTP(RFC_SECRET).verify("\ud800\ud800\ud800", 0) is None
