"""Base repository class."""

from __future__ import annotations

import asyncpg
from asyncpg import Connection, Pool

from .exceptions import (
    ForeignKeyViolationError,
    RepositoryError,
    UniqueConstraintViolationError,
    extract_constraint_name,
)


class BaseRepository:
    """Base class for all repositories.

    Repositories handle data access and raise repository-specific exceptions.
    They accept an optional connection parameter for transaction participation.
    """

    def __init__(self, pool: Pool) -> None:
        """Initialize repository.

        Args:
            pool: AsyncPG connection pool.
        """
        self._pool = pool

    def _get_connection(self, conn: Connection | None = None) -> Connection | Pool:
        """Get connection for query execution.

        Args:
            conn: Optional connection from transaction context.

        Returns:
            Connection if provided (for transactions), otherwise pool.
        """
        return conn or self._pool

    @staticmethod
    def _translate_integrity_error(error: asyncpg.IntegrityConstraintViolationError, table: str) -> RepositoryError:
        """Map an asyncpg integrity error to the matching repository exception.

        Args:
            error: The asyncpg exception raised by the statement.
            table: Table the statement targeted.

        Returns:
            Repository exception to raise in its place.
        """
        constraint = extract_constraint_name(error) or "unknown"
        detail = getattr(error, "detail", None) or str(error)
        if isinstance(error, asyncpg.UniqueViolationError):
            return UniqueConstraintViolationError(constraint_name=constraint, table=table, detail=detail)
        if isinstance(error, asyncpg.ForeignKeyViolationError):
            return ForeignKeyViolationError(constraint_name=constraint, table=table, detail=detail)
        return RepositoryError(f"Integrity violation on table '{table}'", constraint_name=constraint, detail=detail)
