"""
otp_config.py — Configuration and error types shared by the OTP core and CLI.

The step duration, secret length and code length used to be process-wide
globals. They now live in an immutable OTPConfig that a Token holds from
construction, so changing one token's settings never leaks into another.
"""

from dataclasses import dataclass, fields, replace as dc_replace
import os
from typing import Mapping, Optional

# --- Defaults ---------------------------------------------------------------
DEFAULT_STEP_SECONDS = 30   # RFC 6238 time step
DEFAULT_SEED_LENGTH = 20    # characters in a generated secret
DEFAULT_CODE_LENGTH = 6     # usually 6, sometimes 8
MAX_CODE_LENGTH = 10        # truncated value is 31 bits -> at most 10 digits

ENV_PREFIX = "OTP_"


# --- Errors -----------------------------------------------------------------
class OTPError(Exception):
    """Base class for every error raised by otptoken."""


class InvalidInputError(OTPError, ValueError):
    """A secret, counter or configuration value is unusable."""


# --- Config -----------------------------------------------------------------
@dataclass(frozen=True)
class OTPConfig:
    """
    Parameters shared by generation and verification.

    Attributes:
        step_seconds: length of one TOTP time step
        seed_length: number of characters in a random secret
        code_length: number of digits in a generated code

    Raises:
        InvalidInputError: if any value is out of range
    """

    step_seconds: int = DEFAULT_STEP_SECONDS
    seed_length: int = DEFAULT_SEED_LENGTH
    code_length: int = DEFAULT_CODE_LENGTH

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidInputError(f"{f.name} must be an integer, got {value!r}")
        if self.step_seconds < 1:
            raise InvalidInputError("step_seconds must be at least 1")
        if self.seed_length < 1:
            raise InvalidInputError("seed_length must be at least 1")
        if not 1 <= self.code_length <= MAX_CODE_LENGTH:
            raise InvalidInputError(
                f"code_length must be between 1 and {MAX_CODE_LENGTH}"
            )

    def replace(self, **changes: Optional[int]) -> "OTPConfig":
        """Return a new config with the non-None values in `changes` applied."""
        changes = {k: v for k, v in changes.items() if v is not None}
        return dc_replace(self, **changes)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "OTPConfig":
        """
        Build a config from OTP_STEP_SECONDS, OTP_SEED_LENGTH and OTP_CODE_LENGTH.

        Unset or blank variables keep their defaults.
        """
        if environ is None:
            environ = os.environ
        values = {}
        for f in fields(cls):
            name = ENV_PREFIX + f.name.upper()
            raw = environ.get(name, "").strip()
            if not raw:
                continue
            try:
                values[f.name] = int(raw)
            except ValueError as e:
                raise InvalidInputError(f"{name} must be an integer, got {raw!r}") from e
        return cls(**values)


DEFAULT_CONFIG = OTPConfig()
