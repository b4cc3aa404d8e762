import pytest

from otptoken.otp_cli import EXIT_ERROR, EXIT_INVALID, EXIT_VALID, main
from otptoken.otp_core import SECRET_ALPHABET, token_from_base32

SEED_B32 = "IFBEGRCFIZDUQSKKJNGE2TSPKBIVEU2U"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("OTP_STEP_SECONDS", "OTP_SEED_LENGTH", "OTP_CODE_LENGTH"):
        monkeypatch.delenv(name, raising=False)


def test_new(capsys: pytest.CaptureFixture) -> None:
    assert main(["new", "--seed-length", "12"]) == EXIT_VALID
    secret = token_from_base32(capsys.readouterr().out.strip()).secret
    assert len(secret) == 12
    assert set(secret.decode("ascii")) <= set(SECRET_ALPHABET)


def test_totp(capsys: pytest.CaptureFixture) -> None:
    assert main(["totp", "--secret", SEED_B32, "--time", "100000"]) == EXIT_VALID
    assert capsys.readouterr().out == "TOTP (6d): 111782  (valid ~20s)\n"


def test_totp_env_config(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    monkeypatch.setenv("OTP_CODE_LENGTH", "8")
    assert main(["totp", "--secret", SEED_B32, "--time", "100000"]) == EXIT_VALID
    out = capsys.readouterr().out
    assert out.startswith("TOTP (8d): ")
    assert out.split()[2][-6:] == "111782"


def test_flag_overrides_env(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    monkeypatch.setenv("OTP_CODE_LENGTH", "8")
    assert main(["totp", "--secret", SEED_B32, "--time", "100000", "--digits", "6"]) == EXIT_VALID
    assert "111782" in capsys.readouterr().out


def test_hotp(capsys: pytest.CaptureFixture) -> None:
    assert main(["hotp", "--secret", SEED_B32, "--counter", "3333"]) == EXIT_VALID
    assert capsys.readouterr().out == "HOTP(6d, counter=3333): 111782\n"


def test_verify_valid(capsys: pytest.CaptureFixture) -> None:
    code = main(["verify", "--secret", SEED_B32, "--code", "111782", "--time", "100030"])
    assert code == EXIT_VALID
    assert "VALID" in capsys.readouterr().out


def test_verify_no_drift(capsys: pytest.CaptureFixture) -> None:
    args = ["verify", "--secret", SEED_B32, "--code", "111782", "--time", "100030", "--no-drift"]
    assert main(args) == EXIT_INVALID
    assert "INVALID" in capsys.readouterr().out


def test_bad_secret(capsys: pytest.CaptureFixture) -> None:
    assert main(["hotp", "--secret", "not base32!", "--counter", "1"]) == EXIT_ERROR
    assert capsys.readouterr().err.startswith("[!] ")


def test_bad_digits(capsys: pytest.CaptureFixture) -> None:
    assert main(["new", "--digits", "0"]) == EXIT_ERROR
    assert "code_length" in capsys.readouterr().err


def test_missing_command() -> None:
    with pytest.raises(SystemExit):
        main([])
