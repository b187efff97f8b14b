"""Repository for dashboard aggregates over ``content.*``."""

from __future__ import annotations

from asyncpg import Connection
from litestar.datastructures import State

from repository.base import BaseRepository


class DashboardRepository(BaseRepository):
    """Repository for per-user content statistics."""

    async def fetch_blog_totals(
        self,
        author_id: str,
        *,
        conn: Connection | None = None,
    ) -> dict:
        """Count a user's blogs and sum their engagement counters.

        Missing counters count as zero.

        Args:
            author_id: The author's user ID.
            conn: Optional connection for transaction support.

        Returns:
            Dict with total, views, likes and comments.
        """
        _conn = self._get_connection(conn)
        query = """
            SELECT
                count(*) AS total,
                coalesce(sum(coalesce(views, 0)), 0) AS views,
                coalesce(sum(coalesce(likes, 0)), 0) AS likes,
                coalesce(sum(coalesce(comments_count, 0)), 0) AS comments
            FROM content.blogs
            WHERE author_id = $1;
        """
        row = await _conn.fetchrow(query, author_id)
        return dict(row)

    async def fetch_tool_totals(
        self,
        author_id: str,
        *,
        conn: Connection | None = None,
    ) -> dict:
        """Count a user's submitted tools and sum their views.

        Args:
            author_id: The submitter's user ID.
            conn: Optional connection for transaction support.

        Returns:
            Dict with total and views.
        """
        _conn = self._get_connection(conn)
        query = """
            SELECT
                count(*) AS total,
                coalesce(sum(coalesce(views, 0)), 0) AS views
            FROM content.tools
            WHERE author_id = $1;
        """
        row = await _conn.fetchrow(query, author_id)
        return dict(row)


async def provide_dashboard_repository(state: State) -> DashboardRepository:
    """Litestar DI provider for repository."""
    return DashboardRepository(state.db_pool)
