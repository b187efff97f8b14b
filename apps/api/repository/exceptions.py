"""Repository-layer exceptions.

Repositories raise these when a write breaks a database constraint. Services
translate them into auth results or domain exceptions; they never reach a
route handler directly.
"""

from __future__ import annotations


class RepositoryError(Exception):
    """Base exception for repository layer errors."""

    def __init__(self, message: str, **context: object) -> None:
        self.message = message
        self.context = context
        super().__init__(message)


class ConstraintViolationError(RepositoryError):
    """A named constraint rejected the write.

    Attributes:
        constraint_name: Constraint or index name as reported by Postgres.
        table: Schema-qualified table the statement targeted.
        detail: Postgres ``DETAIL`` text, if any.
    """

    kind = "Integrity"

    def __init__(self, constraint_name: str, table: str, detail: str | None = None) -> None:
        super().__init__(
            f"{self.kind} constraint '{constraint_name}' violated on table '{table}'",
            constraint_name=constraint_name,
            table=table,
            detail=detail,
        )
        self.constraint_name = constraint_name
        self.table = table
        self.detail = detail


class UniqueConstraintViolationError(ConstraintViolationError):
    """Duplicate email, username or comment id."""

    kind = "Unique"


class ForeignKeyViolationError(ConstraintViolationError):
    """A referenced blog, parent comment or account does not exist."""

    kind = "Foreign key"


def extract_constraint_name(error: Exception) -> str | None:
    """Constraint name carried by an asyncpg error, if any."""
    return getattr(error, "constraint_name", None)
