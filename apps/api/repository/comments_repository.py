"""Repository for blog comments."""

from __future__ import annotations

import asyncpg
from asyncpg import Connection
from litestar.datastructures import State

from repository.base import BaseRepository

COMMENT_COLUMNS = "id, blog_id, author_id, author_name, content, parent_comment_id, created_at"


class CommentsRepository(BaseRepository):
    """Repository for ``content.comments``."""

    async def check_blog_exists(
        self,
        blog_id: str,
        *,
        conn: Connection | None = None,
    ) -> bool:
        """Check whether a blog exists.

        Args:
            blog_id: The blog ID.
            conn: Optional connection for transaction support.

        Returns:
            True if the blog exists.
        """
        _conn = self._get_connection(conn)
        return bool(await _conn.fetchval("SELECT EXISTS(SELECT 1 FROM content.blogs WHERE id = $1);", blog_id))

    async def fetch_blog_comments(
        self,
        blog_id: str,
        *,
        conn: Connection | None = None,
    ) -> list[dict]:
        """Fetch every comment of a blog, oldest first.

        Args:
            blog_id: The blog ID.
            conn: Optional connection for transaction support.

        Returns:
            Flat list of comment rows.
        """
        _conn = self._get_connection(conn)
        query = f"""
            SELECT {COMMENT_COLUMNS}
            FROM content.comments
            WHERE blog_id = $1
            ORDER BY created_at, id;
        """
        rows = await _conn.fetch(query, blog_id)
        return [dict(row) for row in rows]

    async def fetch_comment(
        self,
        comment_id: str,
        *,
        conn: Connection | None = None,
    ) -> dict | None:
        _conn = self._get_connection(conn)
        row = await _conn.fetchrow(f"SELECT {COMMENT_COLUMNS} FROM content.comments WHERE id = $1;", comment_id)
        return dict(row) if row else None

    async def insert_comment(  # noqa: PLR0913
        self,
        *,
        comment_id: str,
        blog_id: str,
        author_id: str,
        author_name: str | None,
        content: str,
        parent_comment_id: str | None,
        conn: Connection | None = None,
    ) -> dict:
        """Insert a comment and bump the blog's comment counter.

        Args:
            comment_id: New comment ID.
            blog_id: Blog being commented on.
            author_id: Commenting user.
            author_name: Name shown with the comment.
            content: Comment body.
            parent_comment_id: Comment being replied to, if any.
            conn: Optional connection for transaction support.

        Returns:
            The inserted comment row.

        Raises:
            ForeignKeyViolationError: If the blog or parent comment vanished.
        """
        _conn = self._get_connection(conn)
        query = f"""
            WITH inserted AS (
                INSERT INTO content.comments (id, blog_id, author_id, author_name, content, parent_comment_id)
                VALUES ($1, $2, $3, $4, $5, $6)
                RETURNING {COMMENT_COLUMNS}
            ), bumped AS (
                UPDATE content.blogs
                SET comments_count = coalesce(comments_count, 0) + 1
                WHERE id = $2
            )
            SELECT * FROM inserted;
        """
        try:
            row = await _conn.fetchrow(query, comment_id, blog_id, author_id, author_name, content, parent_comment_id)
        except asyncpg.IntegrityConstraintViolationError as e:
            raise self._translate_integrity_error(e, "content.comments") from e
        return dict(row)


async def provide_comments_repository(state: State) -> CommentsRepository:
    """Litestar DI provider for repository."""
    return CommentsRepository(state.db_pool)
