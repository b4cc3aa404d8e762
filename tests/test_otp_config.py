import pytest

from otptoken.otp_config import DEFAULT_CONFIG, InvalidInputError, OTPConfig, OTPError


def test_defaults() -> None:
    assert (DEFAULT_CONFIG.step_seconds, DEFAULT_CONFIG.seed_length, DEFAULT_CONFIG.code_length) == (30, 20, 6)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"code_length": 0},
        {"code_length": -6},
        {"code_length": 11},
        {"step_seconds": 0},
        {"seed_length": 0},
        {"code_length": True},
        {"step_seconds": 30.0},
    ],
)
def test_invalid_values(kwargs: dict) -> None:
    with pytest.raises(InvalidInputError):
        OTPConfig(**kwargs)


def test_error_hierarchy() -> None:
    assert issubclass(InvalidInputError, OTPError)
    assert issubclass(InvalidInputError, ValueError)


def test_replace_skips_none() -> None:
    config = DEFAULT_CONFIG.replace(step_seconds=None, code_length=8)
    assert config == OTPConfig(code_length=8)
    assert DEFAULT_CONFIG.code_length == 6


def test_replace_validates() -> None:
    with pytest.raises(InvalidInputError):
        DEFAULT_CONFIG.replace(code_length=0)


def test_from_env() -> None:
    environ = {"OTP_STEP_SECONDS": "60", "OTP_CODE_LENGTH": " 8 ", "OTP_SEED_LENGTH": ""}
    assert OTPConfig.from_env(environ) == OTPConfig(step_seconds=60, code_length=8)


def test_from_env_empty() -> None:
    assert OTPConfig.from_env({}) == DEFAULT_CONFIG


def test_from_env_reads_os_environ(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OTP_SEED_LENGTH", "10")
    assert OTPConfig.from_env().seed_length == 10


@pytest.mark.parametrize("value", ["six", "6.5"])
def test_from_env_invalid(value: str) -> None:
    with pytest.raises(InvalidInputError):
        OTPConfig.from_env({"OTP_CODE_LENGTH": value})
