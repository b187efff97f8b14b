"""Repository for profile updates on ``users.accounts``."""

from __future__ import annotations

import asyncpg
from asyncpg import Connection
from litestar.datastructures import State

from repository.base import BaseRepository


class UsersRepository(BaseRepository):
    """Repository for users domain."""

    async def fetch_profile_names(
        self,
        user_id: str,
        *,
        conn: Connection | None = None,
    ) -> dict | None:
        """Fetch the editable name fields of an account.

        Args:
            user_id: The user ID.
            conn: Optional connection for transaction support.

        Returns:
            Dict with name, username and username_last_updated_at, or None.
        """
        _conn = self._get_connection(conn)
        query = """
            SELECT user_id, name, username, username_last_updated_at
            FROM users.accounts
            WHERE user_id = $1;
        """
        row = await _conn.fetchrow(query, user_id)
        return dict(row) if row else None

    async def check_username_taken(
        self,
        username: str,
        exclude_user_id: str,
        *,
        conn: Connection | None = None,
    ) -> bool:
        """Check whether another account already uses a username.

        Args:
            username: Username to check, case-insensitively.
            exclude_user_id: Account allowed to hold the name.
            conn: Optional connection for transaction support.

        Returns:
            True if another account holds the username.
        """
        _conn = self._get_connection(conn)
        query = """
            SELECT EXISTS(
                SELECT 1 FROM users.accounts
                WHERE lower(username) = lower($1) AND user_id <> $2
            );
        """
        return bool(await _conn.fetchval(query, username, exclude_user_id))

    async def update_user_names(  # noqa: PLR0913
        self,
        user_id: str,
        *,
        name: str | None = None,
        username: str | None = None,
        update_name: bool = False,
        update_username: bool = False,
        conn: Connection | None = None,
    ) -> dict | None:
        """Update display name and/or username.

        A username change also stamps ``username_last_updated_at``.

        Args:
            user_id: The user ID to update.
            name: New display name (only used if update_name=True).
            username: New username (only used if update_username=True).
            update_name: Whether to update the display name.
            update_username: Whether to update the username.
            conn: Optional connection for transaction support.

        Returns:
            The resulting name and username, or None if the account is gone.

        Raises:
            UniqueConstraintViolationError: If the username was taken concurrently.
        """
        _conn = self._get_connection(conn)
        query = """
            UPDATE users.accounts AS a
            SET
                name = CASE WHEN $2 THEN $3::text ELSE a.name END,
                username = CASE WHEN $4 THEN $5::text ELSE a.username END,
                username_last_updated_at = CASE WHEN $4 THEN now() ELSE a.username_last_updated_at END,
                updated_at = now()
            WHERE a.user_id = $1
            RETURNING a.name, a.username, a.username_last_updated_at;
        """
        try:
            row = await _conn.fetchrow(query, user_id, update_name, name, update_username, username)
        except asyncpg.IntegrityConstraintViolationError as e:
            raise self._translate_integrity_error(e, "users.accounts") from e
        return dict(row) if row else None


async def provide_users_repository(state: State) -> UsersRepository:
    """Litestar DI provider for repository.

    Args:
        state: Application state.

    Returns:
        New repository instance.
    """
    return UsersRepository(state.db_pool)
