import logging

import pytest

from libotp import totp, totp_from_base32
from libotp._utils.binary import b32decode
from libotp.exc import InvalidCharacterError, InvalidLengthError, MalformedTokenError
from libotp.tokens import TotpGenerator, hotp

#: RFC 4226 / RFC 6238 appendix secret
RFC_SECRET = b"12345678901234567890"
RFC_SECRET_B32 = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"

KEY1 = "XEXW5BSAXP4IFA2V"


@pytest.mark.parametrize(
    ("counter", "token"),
    [
        # RFC 4226 appendix D
        (0, "755224"),
        (1, "287082"),
        (2, "359152"),
        (3, "969429"),
        (4, "338314"),
        (5, "254676"),
        (6, "287922"),
        (7, "162583"),
        (8, "399871"),
        (9, "520489"),
    ],
)
def test_hotp_rfc4226_vectors(counter: int, token: str) -> None:
    assert hotp(RFC_SECRET, counter) == token


@pytest.mark.parametrize("counter", [-1, 1 << 64])
def test_hotp_counter_range(counter: int) -> None:
    with pytest.raises(ValueError, match="counter"):
        hotp(RFC_SECRET, counter)


@pytest.mark.parametrize(
    ("time", "token"),
    [
        # RFC 6238 appendix B (SHA1), last 6 of the 8-digit tokens
        (59, "287082"),
        (1111111109, "081804"),
        (1111111111, "050471"),
        (1234567890, "005924"),
        (2000000000, "279037"),
        (20000000000, "353130"),
    ],
)
def test_totp_rfc6238_vectors(time: int, token: str) -> None:
    assert totp(RFC_SECRET, time) == token
    assert totp_from_base32(RFC_SECRET_B32, time) == token


def test_totp_known_secret():
    assert totp(b32decode(KEY1), 1530334470) == "013549"
    assert totp_from_base32(KEY1, 1530334470) == "013549"


def test_left_zero_padding():
    # 89005924 % 10**6 == 5924, well below 100000
    token = totp(RFC_SECRET, 1234567890)
    assert token == "005924"
    assert token != "5924"
    assert token != "592400"


@pytest.mark.parametrize("time", [0, 1, 29, 30, 59, 1530334470, 1530334499, 2**40 + 7])
def test_time_step_flooring(time: int) -> None:
    assert totp(RFC_SECRET, time) == totp(RFC_SECRET, time - (time % 30))


def test_output_shape():
    for time in range(0, 30 * 200, 30):
        token = totp(RFC_SECRET, time)
        assert len(token) == 6
        assert token.isascii()
        assert token.isdigit()


def test_idempotent():
    assert totp(RFC_SECRET, 1530334470) == totp(RFC_SECRET, 1530334470)


def test_float_time_truncated():
    assert totp(RFC_SECRET, 59.999) == "287082"


@pytest.mark.parametrize(
    "time",
    [
        -1,
        -0.5,
        -30.5,
        (1 << 64),
        float(1 << 64),
        float("inf"),
        float("-inf"),
        float("nan"),
    ],
)
def test_time_out_of_range(time) -> None:
    with pytest.raises(ValueError, match="time must"):
        totp(RFC_SECRET, time)


@pytest.mark.parametrize("time", ["59", None, True, b"59"])
def test_time_wrong_type(time) -> None:
    with pytest.raises(TypeError):
        totp(RFC_SECRET, time)


def test_fractional_time_near_zero():
    generator = TotpGenerator()
    assert generator.time_to_counter(0.5) == 0
    assert totp(RFC_SECRET, 0.5) == "755224"


def test_max_time():
    token = totp(RFC_SECRET, (1 << 64) - 1)
    assert len(token) == 6


def test_time_to_counter():
    generator = TotpGenerator()
    assert generator.time_to_counter(0) == 0
    assert generator.time_to_counter(29) == 0
    assert generator.time_to_counter(30) == 1
    assert generator.time_to_counter(1530334470) == 51011149


@pytest.mark.parametrize(
    ("secret", "error"),
    [
        ("XEXW5BSAXP4IFA2", InvalidLengthError),
        ("XEXW5BSAXP4IFA2V=", InvalidLengthError),
        ("1ZXW6YTB", InvalidCharacterError),
        ("xexw5bsaxp4ifa2v", InvalidCharacterError),
    ],
)
def test_base32_errors_propagate(secret: str, error: type) -> None:
    with pytest.raises(error):
        totp_from_base32(secret, 1530334470)


def test_base32_error_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="libotp")
    with pytest.raises(InvalidCharacterError):
        TotpGenerator().generate_from_encoded("1ZXW6YTB", 0)
    assert "rejected base32 secret: InvalidCharacterError" in caplog.text
    assert "1ZXW6YTB" not in caplog.text


def test_negative_window():
    with pytest.raises(ValueError, match="window"):
        TotpGenerator(window=-1)


@pytest.mark.parametrize(
    "token",
    ["287082", " 287 082 ", "287-082", b"287082", 287082],
)
def test_verify_accepts_token(token) -> None:
    assert TotpGenerator().verify(RFC_SECRET, token, 59)


def test_verify_int_token_zero_padded():
    assert TotpGenerator().verify(RFC_SECRET, 5924, 1234567890)


def test_verify_rejects_wrong_token():
    assert not TotpGenerator().verify(RFC_SECRET, "000000", 59)


def test_verify_window():
    # "287082" belongs to counter 1 (t=30..59)
    generator = TotpGenerator(window=1)
    assert generator.verify(RFC_SECRET, "287082", 89)
    assert generator.verify(RFC_SECRET, "287082", 0)
    assert not generator.verify(RFC_SECRET, "287082", 90)

    strict = TotpGenerator(window=0)
    assert strict.verify(RFC_SECRET, "287082", 30)
    assert not strict.verify(RFC_SECRET, "287082", 89)


def test_verify_window_clamped_at_zero():
    assert TotpGenerator(window=5).verify(RFC_SECRET, "755224", 0)


def test_verify_rejection_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="libotp")
    assert not TotpGenerator().verify(RFC_SECRET, "000000", 59)
    assert "token rejected for counter range 0 .. 2" in caplog.text


@pytest.mark.parametrize(
    "token",
    [
        "28708",
        "2870821",
        "94287082",
        "28708a",
        "",
        "２８７０８２",
        b"\xff\xfe28708",
        b"287\xe2\x80\x93082",
        -1,
        1234567,
    ],
)
def test_verify_malformed_token(token) -> None:
    with pytest.raises(MalformedTokenError):
        TotpGenerator().verify(RFC_SECRET, token, 59)


def test_normalize_token():
    generator = TotpGenerator()
    assert generator.normalize_token(42) == "000042"
    assert generator.normalize_token(" 000 042") == "000042"
