"""Authentication models for email-based users."""

import datetime as dt

from msgspec import Struct

__all__ = (
    "LoginRequest",
    "PasswordResetConfirmRequest",
    "PasswordResetRequest",
    "PublicUser",
    "RegisterRequest",
    "ResendVerificationRequest",
    "VerifyEmailRequest",
)


class RegisterRequest(Struct, rename="camel"):
    """Payload for registering a new user, or for re-sending the code.

    Every field is optional on the wire so the handler can answer a missing
    field with its own 400 message.

    Attributes:
        email: User's email address.
        password: Plaintext password (hashed server-side).
        username: Unique handle, also used as the initial display name.
        linkedin_profile: Optional LinkedIn profile URL.
        github_profile: Optional GitHub profile URL.
        resend_only: When true only ``email`` is read and a fresh code is issued.
    """

    email: str | None = None
    password: str | None = None
    username: str | None = None
    linkedin_profile: str | None = None
    github_profile: str | None = None
    resend_only: bool = False


class LoginRequest(Struct, rename="camel"):
    """Payload for email-based login.

    Attributes:
        email: User's email address.
        password: Plaintext password to verify.
    """

    email: str | None = None
    password: str | None = None


class VerifyEmailRequest(Struct, rename="camel"):
    """Payload for email verification.

    Attributes:
        email: User's email address.
        code: The six digit code from the verification email.
    """

    email: str | None = None
    code: str | None = None


class ResendVerificationRequest(Struct, rename="camel"):
    """Payload for re-issuing a verification code."""

    email: str | None = None


class PasswordResetRequest(Struct, rename="camel"):
    """Payload for initiating password recovery."""

    email: str | None = None


class PasswordResetConfirmRequest(Struct, rename="camel"):
    """Payload for completing a password reset.

    The account can be named by ``email`` or by ``user_id``; the code can be
    sent as ``code`` or under its older name ``secret``.

    Attributes:
        email: User's email address.
        user_id: Opaque user identifier.
        code: The six digit reset code.
        secret: Alias of ``code``.
        new_password: New plaintext password.
    """

    email: str | None = None
    user_id: str | None = None
    code: str | None = None
    secret: str | None = None
    new_password: str | None = None


class PublicUser(Struct, rename="camel"):
    """Sanitized user profile returned to clients.

    Never carries the password hash, the pending verification code or the
    lockout counters.

    Attributes:
        user_id: Opaque, immutable user identifier.
        email: Login email (lower-cased).
        name: Display name.
        username: Unique handle.
        type: Account type, ``"user"`` for every self-registered account.
        arcade_coins: Current coin balance.
        linkedin_profile: LinkedIn profile URL.
        github_profile: GitHub profile URL.
        image: Avatar image reference.
        is_email_verified: Whether the verification handshake completed.
        username_last_updated_at: When the username last changed.
    """

    user_id: str
    email: str
    name: str
    username: str
    type: str = "user"
    arcade_coins: int = 0
    linkedin_profile: str | None = None
    github_profile: str | None = None
    image: str | None = None
    is_email_verified: bool = False
    username_last_updated_at: dt.datetime | None = None
