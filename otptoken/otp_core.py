#!/usr/bin/env python3
"""
otp_core.py — Core library for HOTP / TOTP codes bound to a Token.

Goals:
- Pure functions for code generation and verification; no I/O, no CLI.
- A small immutable Token that carries its secret, the display encoding
  of that secret and the OTPConfig it works with.

Security notes:
- HMAC-SHA1 as required by RFC 4226 / RFC 6238 (Google Authenticator and
  friends all speak it).
- Random secrets come from the `secrets` CSPRNG, never from a generator
  seeded with the clock.
- Secrets and codes are never logged above DEBUG.
"""

from dataclasses import dataclass, field
import base64
import binascii
import hashlib
import hmac
import logging
import math
import secrets
import struct
import time
from typing import Iterator, Optional, Union

from .otp_config import DEFAULT_CONFIG, InvalidInputError, OTPConfig, OTPError

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]
BYTES_TYPES = (bytes, bytearray, memoryview)

# Alphabet for random secrets. Each character's ASCII value is used as a
# secret byte, the characters are not decoded.
SECRET_ALPHABET = "1234567890ABCDEFGHIJKLMNOPQRSTUVWXYZ"
MAX_COUNTER = 2 ** 64 - 1


# --- RFC helpers -----------------------------------------------------------
def counter_to_bytes(counter: int) -> bytes:
    """
    Encode an integer counter as the 8-byte big-endian message RFC 4226 uses.

    Example: counter_to_bytes(1) -> b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'

    Raises:
        InvalidInputError: if the counter is negative or wider than 64 bits
    """
    if not 0 <= counter <= MAX_COUNTER:
        raise InvalidInputError(f"counter out of range: {counter}")
    return struct.pack(">Q", counter)


def dynamic_truncate(hmac_digest: bytes) -> int:
    """
    Apply RFC 4226 dynamic truncation.

    - offset = low nibble of the last byte (0..15)
    - take 4 bytes from offset, clear the top bit of the first one
    - return them as a 31-bit unsigned integer

    A SHA1 digest is 20 bytes, so offset + 3 <= 18 is always in range.
    """
    offset = hmac_digest[-1] & 0x0F
    return (
        ((hmac_digest[offset] & 0x7F) << 24)
        | ((hmac_digest[offset + 1] & 0xFF) << 16)
        | ((hmac_digest[offset + 2] & 0xFF) << 8)
        | (hmac_digest[offset + 3] & 0xFF)
    )


def format_code(value: int, digits: int) -> str:
    """Reduce `value` modulo 10^digits and zero-pad it to exactly `digits` characters."""
    return str(value % (10 ** digits)).zfill(digits)


# --- Counter-based codes ---------------------------------------------------
def generate(secret: BytesLike, counter: BytesLike, config: OTPConfig = DEFAULT_CONFIG) -> str:
    """
    Generate an HOTP code from a raw secret and counter message.

    Steps:
    1. HMAC-SHA1(key=secret, msg=counter)
    2. Dynamic truncate -> 31-bit integer
    3. code = value % 10^code_length, zero-padded

    Arguments:
        secret: raw key bytes
        counter: counter message, normally the output of counter_to_bytes
        config: supplies code_length

    Returns:
        str: code of exactly config.code_length digits

    Raises:
        InvalidInputError: if secret or counter is empty or not bytes
    """
    if not isinstance(secret, BYTES_TYPES) or not isinstance(counter, BYTES_TYPES):
        raise InvalidInputError("secret and counter must be bytes")
    if not secret:
        raise InvalidInputError("OTP has no secret")
    if not counter:
        raise InvalidInputError("counter is empty")

    digest = hmac.new(bytes(secret), bytes(counter), hashlib.sha1).digest()
    value = dynamic_truncate(digest)
    logger.debug("HOTP: counter=%s truncated=%d", bytes(counter).hex(), value)
    return format_code(value, config.code_length)


def hotp(secret: BytesLike, counter: int, config: OTPConfig = DEFAULT_CONFIG) -> str:
    """HOTP for an integer counter."""
    return generate(secret, counter_to_bytes(counter), config)


# --- Time-based codes ------------------------------------------------------
def time_step(unix_seconds: Union[int, float], config: OTPConfig = DEFAULT_CONFIG) -> int:
    """
    floor(unix_seconds / step_seconds)

    Raises:
        InvalidInputError: if unix_seconds is an infinite or NaN float
    """
    if isinstance(unix_seconds, float) and not math.isfinite(unix_seconds):
        raise InvalidInputError(f"time must be finite, got {unix_seconds}")
    return int(unix_seconds // config.step_seconds)


def seconds_remaining(unix_seconds: Union[int, float], config: OTPConfig = DEFAULT_CONFIG) -> int:
    """Seconds until the step containing `unix_seconds` ends (1..step_seconds)."""
    return config.step_seconds - int(unix_seconds % config.step_seconds)


def generate_for_time(
    secret: BytesLike,
    unix_seconds: Union[int, float],
    config: OTPConfig = DEFAULT_CONFIG,
) -> str:
    """
    Generate the TOTP code for a point in time.

    Arguments:
        secret: raw key bytes
        unix_seconds: seconds since 1970-01-01T00:00:00Z
        config: supplies step_seconds and code_length

    Raises:
        InvalidInputError: if the secret is empty or the time is before the epoch
    """
    step = time_step(unix_seconds, config)
    logger.debug("TOTP: time=%s step=%d", unix_seconds, step)
    return generate(secret, counter_to_bytes(step), config)


def _candidate_times(
    unix_seconds: Union[int, float], allow_drift: bool, config: OTPConfig
) -> Iterator[Union[int, float]]:
    yield unix_seconds
    if allow_drift:
        yield unix_seconds - config.step_seconds
        yield unix_seconds + config.step_seconds


def verify(
    secret: BytesLike,
    challenge: str,
    allow_drift: bool,
    unix_seconds: Union[int, float],
    config: OTPConfig = DEFAULT_CONFIG,
) -> bool:
    """
    Check a user-supplied TOTP code against the code for `unix_seconds`.

    With allow_drift the codes of the previous and next step are accepted
    too, which absorbs modest clock skew and codes typed right at a step
    boundary. Neighbouring steps before the epoch are skipped; a reference
    time before the epoch never verifies.

    Returns:
        bool: True on the first matching candidate. False when nothing
        matches or a code could not be generated.
    """
    if not isinstance(challenge, str):
        return False

    try:
        if time_step(unix_seconds, config) < 0:
            return False
        for candidate_time in _candidate_times(unix_seconds, allow_drift, config):
            if time_step(candidate_time, config) < 0:
                continue
            expected = generate_for_time(secret, candidate_time, config)
            if hmac.compare_digest(expected.encode(), challenge.encode()):
                return True
    except OTPError as e:
        logger.debug("TOTP verification aborted: %s", e)
    return False


def verify_now(
    secret: BytesLike,
    challenge: str,
    allow_drift: bool = True,
    config: OTPConfig = DEFAULT_CONFIG,
) -> bool:
    """verify() against the system clock."""
    return verify(secret, challenge, allow_drift, int(time.time()), config)


# --- Token -----------------------------------------------------------------
@dataclass(frozen=True)
class Token:
    """
    One provisioned credential.

    `base32` is derived from `secret` once, in __post_init__, so the two
    can never disagree. The secret is kept out of repr().
    """

    secret: bytes = field(repr=False)
    config: OTPConfig = DEFAULT_CONFIG
    base32: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.secret, BYTES_TYPES):
            raise InvalidInputError(f"secret must be bytes, got {type(self.secret).__name__}")
        secret = bytes(self.secret)
        if not secret:
            raise InvalidInputError("secret is empty")
        object.__setattr__(self, "secret", secret)
        object.__setattr__(self, "base32", base64.b32encode(secret).decode("ascii").upper())

    def generate_otp(self, counter: BytesLike) -> str:
        return generate(self.secret, counter, self.config)

    def hotp(self, counter: int) -> str:
        return hotp(self.secret, counter, self.config)

    def generate_totp(self, unix_seconds: Union[int, float]) -> str:
        return generate_for_time(self.secret, unix_seconds, self.config)

    def now(self) -> str:
        """Current TOTP code."""
        return self.generate_totp(int(time.time()))

    def verify(
        self,
        challenge: str,
        allow_drift: bool = True,
        at: Optional[Union[int, float]] = None,
    ) -> bool:
        """Verify `challenge` at time `at`, or now when `at` is None."""
        if at is None:
            at = int(time.time())
        return verify(self.secret, challenge, allow_drift, at, self.config)


def token_from_secret(secret: BytesLike, config: OTPConfig = DEFAULT_CONFIG) -> Token:
    """
    Wrap existing secret bytes in a Token.

    Raises:
        InvalidInputError: if the secret is empty
    """
    return Token(secret=secret, config=config)


def token_from_base32(text: str, config: OTPConfig = DEFAULT_CONFIG) -> Token:
    """
    Build a Token from a base-32 secret as shown to users.

    - Case-insensitive, surrounding whitespace and spaces ignored.
    - Missing '=' padding is restored before decoding.

    Raises:
        InvalidInputError: if the text is not valid base-32
    """
    if not isinstance(text, str):
        raise InvalidInputError(f"secret must be a string, got {type(text).__name__}")
    cleaned = "".join(text.split()).upper().rstrip("=")
    cleaned += "=" * (-len(cleaned) % 8)
    try:
        secret = base64.b32decode(cleaned)
    except binascii.Error as e:
        raise InvalidInputError("Invalid Base32 secret") from e
    return token_from_secret(secret, config)


def new_random_token(config: OTPConfig = DEFAULT_CONFIG) -> Token:
    """
    Create a Token with a random secret of config.seed_length characters.

    Characters are drawn uniformly from SECRET_ALPHABET with `secrets`.
    """
    seed = "".join(secrets.choice(SECRET_ALPHABET) for _ in range(config.seed_length))
    logger.debug("Generated %d-character secret", config.seed_length)
    return token_from_secret(seed.encode("ascii"), config)
