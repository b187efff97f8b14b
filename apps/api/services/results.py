"""Tagged results returned by AuthService.

Each auth operation returns one of these instead of raising for expected
outcomes. Handlers branch on the concrete type.
"""

from __future__ import annotations

from typing import Literal

import msgspec
from aiarcade_sdk.auth import PublicUser

FailureReason = Literal[
    "validation",
    "already_exists",
    "invalid_credentials",
    "code_expired",
    "code_mismatch",
    "not_found",
    "already_verified",
]


class AuthFailure(msgspec.Struct, frozen=True):
    reason: FailureReason
    message: str
    errors: list[str] = []


class Registered(msgspec.Struct, frozen=True):
    """Account created; the code must be dispatched by the caller."""

    user_id: str
    email: str
    user_name: str
    code: str


class LoggedIn(msgspec.Struct, frozen=True):
    user: PublicUser


class VerificationRequired(msgspec.Struct, frozen=True):
    """Credentials matched but the email is unverified; a fresh code was issued."""

    email: str
    user_name: str
    code: str


class EmailVerified(msgspec.Struct, frozen=True):
    user: PublicUser


class CodeIssued(msgspec.Struct, frozen=True):
    email: str
    user_name: str
    code: str


class RecoveryRequested(msgspec.Struct, frozen=True):
    """Generic recovery outcome.

    ``code`` and ``user_name`` are only set when the account exists. They
    never reach the HTTP response.
    """

    email: str
    user_name: str | None = None
    code: str | None = None


class PasswordReset(msgspec.Struct, frozen=True):
    user_id: str


RegisterResult = Registered | AuthFailure
LoginResult = LoggedIn | VerificationRequired | AuthFailure
VerifyResult = EmailVerified | AuthFailure
ResendResult = CodeIssued | AuthFailure
ResetResult = PasswordReset | AuthFailure
