"""
otptoken package
================

HOTP / TOTP codes (RFC 4226 & RFC 6238, HMAC-SHA1) bound to a Token.

──────────────────────────────────────────────
Core algorithm
──────────────────────────────────────────────
- HOTP (HMAC-based One-Time Password):
  code = Truncate(HMAC-SHA1(key=secret, msg=counter)) mod 10^digits

- TOTP (Time-based One-Time Password):
  HOTP with counter = floor(timestamp / step), step = 30s by default.

- Dynamic Truncation:
  4 bytes taken from the HMAC at offset (last byte & 0x0F), top bit cleared.

──────────────────────────────────────────────
Quick usage
──────────────────────────────────────────────
>>> from otptoken import new_random_token, token_from_base32
>>> token = new_random_token()
>>> secret_for_user = token.base32
>>> code = token.now()
>>> token.verify(code)                 # +/- one step by default
True
>>> token_from_base32(token.base32).verify(code, allow_drift=False)
True

Settings live in OTPConfig (step_seconds, seed_length, code_length);
pass one to token construction to change them.
"""
from .otp_config import (
    DEFAULT_CODE_LENGTH,
    DEFAULT_CONFIG,
    DEFAULT_SEED_LENGTH,
    DEFAULT_STEP_SECONDS,
    InvalidInputError,
    OTPConfig,
    OTPError,
)
from .otp_core import (
    Token,
    counter_to_bytes,
    dynamic_truncate,
    format_code,
    generate,
    generate_for_time,
    hotp,
    new_random_token,
    seconds_remaining,
    time_step,
    token_from_base32,
    token_from_secret,
    verify,
    verify_now,
)

__all__ = [
    "DEFAULT_CODE_LENGTH",
    "DEFAULT_CONFIG",
    "DEFAULT_SEED_LENGTH",
    "DEFAULT_STEP_SECONDS",
    "InvalidInputError",
    "OTPConfig",
    "OTPError",
    "Token",
    "counter_to_bytes",
    "dynamic_truncate",
    "format_code",
    "generate",
    "generate_for_time",
    "hotp",
    "new_random_token",
    "seconds_remaining",
    "time_step",
    "token_from_base32",
    "token_from_secret",
    "verify",
    "verify_now",
]
