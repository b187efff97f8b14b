"""Authentication repository for data access."""

from __future__ import annotations

import datetime as dt
from logging import getLogger

import asyncpg
from asyncpg import Connection
from litestar.datastructures import State

from .base import BaseRepository

log = getLogger(__name__)

ACCOUNT_COLUMNS = """
    user_id,
    email,
    username,
    name,
    password_hash,
    account_type,
    arcade_coins,
    linkedin_profile,
    github_profile,
    image,
    is_email_verified,
    verification_code,
    verification_code_expiry,
    verification_code_purpose,
    failed_login_attempts,
    account_lock_until,
    username_last_updated_at
"""


class AuthRepository(BaseRepository):
    """Repository for the credential store (``users.accounts``)."""

    async def get_account_by_email(
        self,
        email: str,
        *,
        conn: Connection | None = None,
    ) -> dict | None:
        """Get an account by email, case-insensitively.

        Args:
            email: Email address.
            conn: Optional connection for transaction participation.

        Returns:
            Account row as a dict or None if not found.
        """
        _conn = self._get_connection(conn)

        query = f"SELECT {ACCOUNT_COLUMNS} FROM users.accounts WHERE lower(email) = lower($1)"
        row = await _conn.fetchrow(query, email)
        return dict(row) if row else None

    async def get_account_by_user_id(
        self,
        user_id: str,
        *,
        conn: Connection | None = None,
    ) -> dict | None:
        """Get an account by its opaque user ID.

        Args:
            user_id: The user ID.
            conn: Optional connection for transaction participation.

        Returns:
            Account row as a dict or None if not found.
        """
        _conn = self._get_connection(conn)

        query = f"SELECT {ACCOUNT_COLUMNS} FROM users.accounts WHERE user_id = $1"
        row = await _conn.fetchrow(query, user_id)
        return dict(row) if row else None

    async def check_email_exists(
        self,
        email: str,
        *,
        conn: Connection | None = None,
    ) -> bool:
        """Check if an email address is already registered.

        Args:
            email: Email address to check.
            conn: Optional connection for transaction participation.

        Returns:
            True if email exists, False otherwise.
        """
        _conn = self._get_connection(conn)

        query = "SELECT EXISTS(SELECT 1 FROM users.accounts WHERE lower(email) = lower($1))"
        exists = await _conn.fetchval(query, email)
        return exists or False

    async def check_username_exists(
        self,
        username: str,
        *,
        conn: Connection | None = None,
    ) -> bool:
        """Check if a username is already taken.

        Args:
            username: Username to check.
            conn: Optional connection for transaction participation.

        Returns:
            True if username exists, False otherwise.
        """
        _conn = self._get_connection(conn)

        query = "SELECT EXISTS(SELECT 1 FROM users.accounts WHERE lower(username) = lower($1))"
        exists = await _conn.fetchval(query, username)
        return exists or False

    async def create_account(  # noqa: PLR0913
        self,
        *,
        user_id: str,
        email: str,
        username: str,
        name: str,
        password_hash: str,
        linkedin_profile: str | None,
        github_profile: str | None,
        verification_code: str,
        verification_code_expiry: dt.datetime,
        conn: Connection | None = None,
    ) -> dict:
        """Create an unverified account with its first pending verification code.

        Args:
            user_id: New opaque user ID.
            email: Normalized email address.
            username: Unique username.
            name: Display name.
            password_hash: Bcrypt password hash.
            linkedin_profile: Optional LinkedIn URL.
            github_profile: Optional GitHub URL.
            verification_code: Six digit verification code.
            verification_code_expiry: When the code stops being valid.
            conn: Optional connection for transaction participation.

        Returns:
            The created account row.

        Raises:
            UniqueConstraintViolationError: If email or username already exists.
        """
        _conn = self._get_connection(conn)

        query = f"""
            INSERT INTO users.accounts (
                user_id, email, username, name, password_hash,
                linkedin_profile, github_profile,
                verification_code, verification_code_expiry, verification_code_purpose
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, 'email_verification')
            RETURNING {ACCOUNT_COLUMNS}
        """
        try:
            row = await _conn.fetchrow(
                query,
                user_id,
                email,
                username,
                name,
                password_hash,
                linkedin_profile,
                github_profile,
                verification_code,
                verification_code_expiry,
            )
        except asyncpg.IntegrityConstraintViolationError as e:
            raise self._translate_integrity_error(e, "users.accounts") from e
        return dict(row)

    async def set_pending_code(
        self,
        user_id: str,
        code: str,
        expires_at: dt.datetime,
        purpose: str,
        *,
        conn: Connection | None = None,
    ) -> None:
        """Store a new pending code, replacing whatever code was pending.

        Args:
            user_id: The user ID.
            code: Six digit code.
            expires_at: Code expiry.
            purpose: ``'email_verification'`` or ``'password_reset'``.
            conn: Optional connection for transaction participation.
        """
        _conn = self._get_connection(conn)

        await _conn.execute(
            """
            UPDATE users.accounts
            SET verification_code = $2,
                verification_code_expiry = $3,
                verification_code_purpose = $4,
                updated_at = now()
            WHERE user_id = $1
            """,
            user_id,
            code,
            expires_at,
            purpose,
        )

    async def mark_email_verified(
        self,
        user_id: str,
        *,
        conn: Connection | None = None,
    ) -> dict | None:
        """Mark the email as verified and clear the pending code.

        Args:
            user_id: The user ID.
            conn: Optional connection for transaction participation.

        Returns:
            The updated account row, or None if the account vanished.
        """
        _conn = self._get_connection(conn)

        row = await _conn.fetchrow(
            f"""
            UPDATE users.accounts
            SET is_email_verified = true,
                verification_code = NULL,
                verification_code_expiry = NULL,
                verification_code_purpose = NULL,
                updated_at = now()
            WHERE user_id = $1
            RETURNING {ACCOUNT_COLUMNS}
            """,
            user_id,
        )
        return dict(row) if row else None

    async def update_password(
        self,
        user_id: str,
        password_hash: str,
        *,
        conn: Connection | None = None,
    ) -> None:
        """Replace the password hash, clear the pending code and lift any lockout.

        Args:
            user_id: The user ID.
            password_hash: New bcrypt password hash.
            conn: Optional connection for transaction participation.
        """
        _conn = self._get_connection(conn)

        await _conn.execute(
            """
            UPDATE users.accounts
            SET password_hash = $2,
                password_changed_at = now(),
                verification_code = NULL,
                verification_code_expiry = NULL,
                verification_code_purpose = NULL,
                failed_login_attempts = 0,
                account_lock_until = NULL,
                updated_at = now()
            WHERE user_id = $1
            """,
            user_id,
            password_hash,
        )

    async def set_login_failures(
        self,
        user_id: str,
        attempts: int,
        lock_until: dt.datetime | None,
        *,
        conn: Connection | None = None,
    ) -> None:
        """Persist the failed-login counter and lock horizon.

        Args:
            user_id: The user ID.
            attempts: Consecutive failed attempts.
            lock_until: Lock horizon, or None when not locked.
            conn: Optional connection for transaction participation.
        """
        _conn = self._get_connection(conn)

        await _conn.execute(
            """
            UPDATE users.accounts
            SET failed_login_attempts = $2,
                account_lock_until = $3,
                updated_at = now()
            WHERE user_id = $1
            """,
            user_id,
            attempts,
            lock_until,
        )


async def provide_auth_repository(state: State) -> AuthRepository:
    """Litestar DI provider for AuthRepository.

    Args:
        state: Application state.

    Returns:
        AuthRepository instance.
    """
    return AuthRepository(state.db_pool)
