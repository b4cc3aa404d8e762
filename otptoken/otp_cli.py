#!/usr/bin/env python3
"""
otp_cli.py — CLI wrapper for otp_core.py

Subcommands:
- new    : create a random token and print its Base32 secret
- totp   : print the TOTP code for now (or --time)
- hotp   : print the HOTP code for a counter
- verify : check a TOTP code, exit status 0 when valid, 1 otherwise

Settings come from OTP_STEP_SECONDS / OTP_SEED_LENGTH / OTP_CODE_LENGTH,
then from --period / --seed-length / --digits.
"""

import argparse
import logging
import sys
import time
from typing import List, Optional

from . import otp_core
from .otp_config import OTPConfig, OTPError

EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_ERROR = 2


def _config(args) -> OTPConfig:
    return OTPConfig.from_env().replace(
        step_seconds=args.period,
        seed_length=args.seed_length,
        code_length=args.digits,
    )


def _now(args) -> int:
    return int(time.time()) if args.time is None else args.time


# --- CLI command handlers ---
def cmd_new(args) -> int:
    token = otp_core.new_random_token(_config(args))
    print(token.base32)
    return EXIT_VALID


def cmd_totp(args) -> int:
    config = _config(args)
    token = otp_core.token_from_base32(args.secret, config)
    now = _now(args)
    code = token.generate_totp(now)
    remaining = otp_core.seconds_remaining(now, config)
    print(f"TOTP ({config.code_length}d): {code}  (valid ~{remaining:2d}s)")
    return EXIT_VALID


def cmd_hotp(args) -> int:
    config = _config(args)
    token = otp_core.token_from_base32(args.secret, config)
    code = token.hotp(args.counter)
    print(f"HOTP({config.code_length}d, counter={args.counter}): {code}")
    return EXIT_VALID


def cmd_verify(args) -> int:
    token = otp_core.token_from_base32(args.secret, _config(args))
    if token.verify(args.code, allow_drift=not args.no_drift, at=_now(args)):
        print("[+] TOTP code is VALID")
        return EXIT_VALID
    print("[-] TOTP code is INVALID")
    return EXIT_INVALID


# --- Argparse builder ---
def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--digits", type=int, help="Number of OTP digits")
    common.add_argument("--period", type=int, help="TOTP time step (seconds)")
    common.add_argument("--seed-length", type=int, help="Characters in a generated secret")
    common.add_argument("--verbose", action="store_true", help="Verbose output")

    p = argparse.ArgumentParser(prog="otptoken", description="TOTP/HOTP (HMAC-SHA1) token tool")
    sub = p.add_subparsers(dest="cmd", required=True)

    pn = sub.add_parser("new", parents=[common], help="Create a token with a random secret")
    pn.set_defaults(func=cmd_new)

    pt = sub.add_parser("totp", parents=[common], help="Print the TOTP code")
    pt.add_argument("--secret", required=True, help="Base32 secret")
    pt.add_argument("--time", type=int, help="Unix time to generate for (default: now)")
    pt.set_defaults(func=cmd_totp)

    ph = sub.add_parser("hotp", parents=[common], help="Print the HOTP code for a counter")
    ph.add_argument("--secret", required=True, help="Base32 secret")
    ph.add_argument("--counter", type=int, required=True)
    ph.set_defaults(func=cmd_hotp)

    pv = sub.add_parser("verify", parents=[common], help="Verify a TOTP code")
    pv.add_argument("--secret", required=True, help="Base32 secret")
    pv.add_argument("--code", required=True, help="OTP code to verify")
    pv.add_argument("--time", type=int, help="Unix time to verify at (default: now)")
    pv.add_argument("--no-drift", action="store_true", help="Only accept the current step")
    pv.set_defaults(func=cmd_verify)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="[+] %(message)s")
    try:
        return args.func(args)
    except OTPError as e:
        print(f"[!] {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
