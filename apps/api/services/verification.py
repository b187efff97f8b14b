"""Verification code generation."""

from __future__ import annotations

import datetime as dt
import secrets

CODE_MIN = 100000
CODE_MAX = 999999
VERIFICATION_CODE_TTL = dt.timedelta(minutes=10)


def generate_verification_code(
    now: dt.datetime | None = None,
    ttl: dt.timedelta = VERIFICATION_CODE_TTL,
) -> tuple[str, dt.datetime]:
    """Generate a six digit code and the moment it expires.

    Args:
        now: Reference time, defaults to the current UTC time.
        ttl: How long the code stays valid.

    Returns:
        Tuple of (code, expires_at).
    """
    code = str(CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1))
    issued_at = now or dt.datetime.now(dt.timezone.utc)
    return code, issued_at + ttl


def codes_match(supplied: str, stored: str) -> bool:
    """Compare a supplied code against the stored one in constant time."""
    return secrets.compare_digest(supplied.encode("utf-8"), stored.encode("utf-8"))
