"""Authentication service for business logic."""

from __future__ import annotations

import logging
import os
import re
import uuid
from datetime import datetime, timedelta, timezone

import bcrypt
from aiarcade_sdk.auth import PublicUser, RegisterRequest
from asyncpg import Pool
from litestar.datastructures import State

from repository.auth_repository import AuthRepository
from repository.exceptions import UniqueConstraintViolationError

from .base import BaseService
from .results import (
    AuthFailure,
    CodeIssued,
    EmailVerified,
    LoggedIn,
    LoginResult,
    PasswordReset,
    RecoveryRequested,
    Registered,
    RegisterResult,
    ResendResult,
    ResetResult,
    VerificationRequired,
    VerifyResult,
)
from .verification import codes_match, generate_verification_code

log = logging.getLogger(__name__)

# Constants
BCRYPT_ROUNDS = 12
MAX_FAILED_LOGIN_ATTEMPTS = 5
LOCKOUT_DURATION = timedelta(minutes=15)
LOGIN_LOCKOUT_ENABLED = os.getenv("LOGIN_LOCKOUT_ENABLED", "1") not in ("0", "false", "False")

PURPOSE_EMAIL_VERIFICATION = "email_verification"
PURPOSE_PASSWORD_RESET = "password_reset"

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

PASSWORD_MIN_LENGTH = 8
PASSWORD_REQUIREMENTS = [
    (r"[A-Za-z]", "Password must contain at least one letter."),
    (r"[0-9]", "Password must contain at least one number."),
]

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.\-]+$")
USERNAME_MIN_LENGTH = 1
USERNAME_MAX_LENGTH = 12

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password."
RECOVERY_MESSAGE = "If the account exists, a recovery email will be sent."

CODE_MESSAGES = {
    PURPOSE_EMAIL_VERIFICATION: {
        "code_mismatch": "Invalid verification code.",
        "code_expired": "Verification code has expired. Please request a new one.",
    },
    PURPOSE_PASSWORD_RESET: {
        "code_mismatch": "Invalid or expired reset code.",
        "code_expired": "Reset code has expired. Please request a new one.",
    },
}

UNIQUE_CONSTRAINT_MESSAGES = {
    "accounts_email_key": "An account with this email already exists.",
    "accounts_username_key": "This username is already taken.",
}


def normalize_email(email: str | None) -> str:
    """Trim and lower-case an email address."""
    return (email or "").strip().lower()


def to_public_user(row: dict) -> PublicUser:
    """Build the sanitized profile from an account row.

    Args:
        row: ``users.accounts`` row as a dict.

    Returns:
        PublicUser without any credential fields.
    """
    return PublicUser(
        user_id=row["user_id"],
        email=row["email"],
        name=row.get("name") or row["username"],
        username=row["username"],
        type=row.get("account_type") or "user",
        arcade_coins=row.get("arcade_coins") or 0,
        linkedin_profile=row.get("linkedin_profile"),
        github_profile=row.get("github_profile"),
        image=row.get("image"),
        is_email_verified=bool(row.get("is_email_verified")),
        username_last_updated_at=row.get("username_last_updated_at"),
    )


class AuthService(BaseService):
    """Service for authentication business logic.

    Expected outcomes (bad input, wrong password, stale code) come back as
    result structs. Database and network errors propagate.
    """

    def __init__(
        self,
        pool: Pool | None,
        state: State,
        auth_repo: AuthRepository,
        *,
        lockout_enabled: bool = LOGIN_LOCKOUT_ENABLED,
    ) -> None:
        """Initialize auth service.

        Args:
            pool: AsyncPG connection pool.
            state: Application state.
            auth_repo: Authentication repository.
            lockout_enabled: Whether repeated login failures lock the account.
        """
        super().__init__(pool, state)
        self._auth_repo = auth_repo
        self._lockout_enabled = lockout_enabled

    # ===== Validation Methods =====

    @staticmethod
    def validate_email(email: str) -> list[str]:
        """Validate an already normalized email.

        Args:
            email: Email address to validate.

        Returns:
            Error messages, empty when valid.
        """
        if not email:
            return ["Email is required."]
        if not EMAIL_PATTERN.match(email):
            return ["Invalid email format."]
        return []

    @staticmethod
    def validate_password(password: str) -> list[str]:
        """Validate password against every rule of the policy.

        Args:
            password: Plaintext password to validate.

        Returns:
            One message per violated rule, empty when valid.
        """
        errors = []
        if len(password) < PASSWORD_MIN_LENGTH:
            errors.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long.")
        for pattern, message in PASSWORD_REQUIREMENTS:
            if not re.search(pattern, password):
                errors.append(message)
        return errors

    @staticmethod
    def validate_username(username: str) -> list[str]:
        """Validate username meets requirements.

        Args:
            username: Trimmed username to validate.

        Returns:
            Error messages, empty when valid.
        """
        if len(username) < USERNAME_MIN_LENGTH or len(username) > USERNAME_MAX_LENGTH:
            return [f"Username must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters."]
        if not USERNAME_PATTERN.match(username):
            return ["Username can only contain letters, numbers, underscores, hyphens, and periods."]
        return []

    # ===== Cryptographic Helpers =====

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plaintext password.

        Returns:
            Bcrypt hash string.
        """
        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    @staticmethod
    def verify_password(password: str, password_hash: str) -> bool:
        """Verify a password against its hash.

        Args:
            password: Plaintext password to verify.
            password_hash: Stored bcrypt hash.

        Returns:
            True if password matches, False otherwise.
        """
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            log.warning("Stored password hash is malformed")
            return False

    @staticmethod
    def _check_pending_code(account: dict, code: str, purpose: str) -> AuthFailure | None:
        """Check a supplied code against the account's pending code.

        Expiry is checked before the comparison, so a stale code reports
        ``code_expired`` whether or not it matches.
        """
        messages = CODE_MESSAGES[purpose]
        stored = account.get("verification_code")
        if not stored or account.get("verification_code_purpose") != purpose:
            return AuthFailure("code_mismatch", messages["code_mismatch"])
        expiry = account.get("verification_code_expiry")
        if expiry is None or datetime.now(timezone.utc) > expiry:
            return AuthFailure("code_expired", messages["code_expired"])
        if not codes_match(code, stored):
            return AuthFailure("code_mismatch", messages["code_mismatch"])
        return None

    async def _issue_code(self, account: dict, purpose: str) -> str:
        code, expires_at = generate_verification_code()
        await self._auth_repo.set_pending_code(account["user_id"], code, expires_at, purpose)
        return code

    # ===== Registration =====

    async def register(self, data: RegisterRequest) -> RegisterResult:
        """Register a new, unverified account and issue its verification code.

        Args:
            data: Registration payload.

        Returns:
            Registered with the code to dispatch, or AuthFailure.
        """
        email = normalize_email(data.email)
        username = (data.username or "").strip()
        password = data.password or ""

        errors = [
            *self.validate_email(email),
            *self.validate_username(username),
            *self.validate_password(password),
        ]
        if errors:
            return AuthFailure("validation", errors[0], errors)

        if await self._auth_repo.check_email_exists(email):
            return AuthFailure("already_exists", UNIQUE_CONSTRAINT_MESSAGES["accounts_email_key"])
        if await self._auth_repo.check_username_exists(username):
            return AuthFailure("already_exists", UNIQUE_CONSTRAINT_MESSAGES["accounts_username_key"])

        password_hash = self.hash_password(password)
        code, expires_at = generate_verification_code()
        user_id = uuid.uuid4().hex

        try:
            await self._auth_repo.create_account(
                user_id=user_id,
                email=email,
                username=username,
                name=username,
                password_hash=password_hash,
                linkedin_profile=data.linkedin_profile or None,
                github_profile=data.github_profile or None,
                verification_code=code,
                verification_code_expiry=expires_at,
            )
        except UniqueConstraintViolationError as e:
            log.warning("Unique constraint violation during registration: %s", e.constraint_name)
            message = UNIQUE_CONSTRAINT_MESSAGES.get(e.constraint_name, "An account with these details already exists.")
            return AuthFailure("already_exists", message)

        log.info("Registered account %s", user_id)
        return Registered(user_id=user_id, email=email, user_name=username, code=code)

    # ===== Login =====

    async def login(self, email: str, password: str) -> LoginResult:
        """Authenticate with email and password.

        An unverified account is not logged in; a fresh verification code is
        issued instead. A locked account answers exactly like a wrong
        password, so the lock does not reveal that the email is registered.

        Args:
            email: Login email.
            password: Plaintext password.

        Returns:
            LoggedIn, VerificationRequired or AuthFailure.
        """
        email = normalize_email(email)
        account = await self._auth_repo.get_account_by_email(email)
        if not account:
            return AuthFailure("invalid_credentials", INVALID_CREDENTIALS_MESSAGE)

        now = datetime.now(timezone.utc)
        lock_until = account.get("account_lock_until")
        if self._lockout_enabled and lock_until is not None and lock_until > now:
            log.info("Login rejected for locked account %s", account["user_id"])
            return AuthFailure("invalid_credentials", INVALID_CREDENTIALS_MESSAGE)

        if not self.verify_password(password, account["password_hash"]):
            if self._lockout_enabled:
                await self._record_failure(account, now)
            return AuthFailure("invalid_credentials", INVALID_CREDENTIALS_MESSAGE)

        if account.get("failed_login_attempts") or lock_until is not None:
            await self._auth_repo.set_login_failures(account["user_id"], 0, None)

        if not account.get("is_email_verified"):
            code = await self._issue_code(account, PURPOSE_EMAIL_VERIFICATION)
            return VerificationRequired(email=account["email"], user_name=account["username"], code=code)

        return LoggedIn(user=to_public_user(account))

    async def _record_failure(self, account: dict, now: datetime) -> None:
        attempts = (account.get("failed_login_attempts") or 0) + 1
        lock_until = None
        if attempts >= MAX_FAILED_LOGIN_ATTEMPTS:
            lock_until = now + LOCKOUT_DURATION
            attempts = 0
            log.warning("Locking account %s until %s", account["user_id"], lock_until.isoformat())
        await self._auth_repo.set_login_failures(account["user_id"], attempts, lock_until)

    # ===== Email Verification =====

    async def verify_email_with_code(self, email: str, code: str) -> VerifyResult:
        """Complete the verification handshake.

        Args:
            email: Account email.
            code: Code the user received.

        Returns:
            EmailVerified with the refreshed profile, or AuthFailure.
        """
        email = normalize_email(email)
        if not email or not code:
            return AuthFailure("validation", "Email and verification code are required.")

        account = await self._auth_repo.get_account_by_email(email)
        if not account:
            return AuthFailure("not_found", "No account found with this email.")
        failure = self._check_pending_code(account, code, PURPOSE_EMAIL_VERIFICATION)
        if failure:
            return failure

        updated = await self._auth_repo.mark_email_verified(account["user_id"])
        log.info("Email verified for account %s", account["user_id"])
        return EmailVerified(user=to_public_user(updated or {**account, "is_email_verified": True}))

    async def resend_verification_code(self, email: str) -> ResendResult:
        """Issue a new verification code, replacing any pending one.

        Args:
            email: Account email.

        Returns:
            CodeIssued or AuthFailure.
        """
        email = normalize_email(email)
        if errors := self.validate_email(email):
            return AuthFailure("validation", errors[0], errors)

        account = await self._auth_repo.get_account_by_email(email)
        if not account:
            return AuthFailure("not_found", "No account found with this email.")
        if account.get("is_email_verified"):
            return AuthFailure("already_verified", "Email is already verified.")

        code = await self._issue_code(account, PURPOSE_EMAIL_VERIFICATION)
        return CodeIssued(email=account["email"], user_name=account["username"], code=code)

    # ===== Password Reset =====

    async def send_password_recovery(self, email: str) -> RecoveryRequested:
        """Start password recovery.

        The outcome looks the same whether or not the account exists; only
        the internal ``code`` field differs.

        Args:
            email: Account email.

        Returns:
            RecoveryRequested.
        """
        email = normalize_email(email)
        if self.validate_email(email):
            return RecoveryRequested(email=email)

        account = await self._auth_repo.get_account_by_email(email)
        if not account:
            log.debug("Password recovery requested for unknown email")
            return RecoveryRequested(email=email)

        code = await self._issue_code(account, PURPOSE_PASSWORD_RESET)
        log.info("Password reset code issued for account %s", account["user_id"])
        return RecoveryRequested(email=account["email"], user_name=account["username"], code=code)

    async def reset_password(self, email: str, code: str, new_password: str) -> ResetResult:
        """Replace the password after checking the reset code.

        Email verification status is left untouched.

        Args:
            email: Account email.
            code: Reset code.
            new_password: New plaintext password.

        Returns:
            PasswordReset or AuthFailure.
        """
        if errors := self.validate_password(new_password or ""):
            return AuthFailure("validation", "Password does not meet requirements.", errors)

        messages = CODE_MESSAGES[PURPOSE_PASSWORD_RESET]
        email = normalize_email(email)
        if not email or not code:
            return AuthFailure("code_mismatch", messages["code_mismatch"])

        account = await self._auth_repo.get_account_by_email(email)
        if not account:
            return AuthFailure("code_mismatch", messages["code_mismatch"])

        failure = self._check_pending_code(account, code, PURPOSE_PASSWORD_RESET)
        if failure:
            return failure

        await self._auth_repo.update_password(account["user_id"], self.hash_password(new_password))
        log.info("Password reset for account %s", account["user_id"])
        return PasswordReset(user_id=account["user_id"])

    # ===== Lookups =====

    async def get_public_user(self, user_id: str) -> PublicUser | None:
        """Fetch the sanitized profile for a session's user."""
        account = await self._auth_repo.get_account_by_user_id(user_id)
        return to_public_user(account) if account else None

    async def email_for_user_id(self, user_id: str) -> str | None:
        account = await self._auth_repo.get_account_by_user_id(user_id)
        return account["email"] if account else None


async def provide_auth_service(state: State, auth_repo: AuthRepository) -> AuthService:
    """Litestar DI provider for AuthService.

    Args:
        state: Application state.
        auth_repo: Authentication repository instance.

    Returns:
        AuthService instance.
    """
    return AuthService(getattr(state, "db_pool", None), state, auth_repo)
