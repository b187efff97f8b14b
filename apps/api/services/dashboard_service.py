"""Dashboard statistics service."""

from __future__ import annotations

import logging

from aiarcade_sdk.dashboard import DashboardStats

from repository.dashboard_repository import DashboardRepository
from services.base import BaseService

log = logging.getLogger(__name__)


class DashboardService(BaseService):
    """Aggregates a user's blog and tool counters."""

    def __init__(self, dashboard_repo: DashboardRepository) -> None:
        super().__init__()
        self._dashboard_repo = dashboard_repo

    async def get_user_stats(self, user_id: str) -> DashboardStats:
        """Build dashboard statistics for a user.

        A user without content gets all zeros. Database errors propagate.

        Args:
            user_id: The user ID.

        Returns:
            DashboardStats for the user.
        """
        blogs = await self._dashboard_repo.fetch_blog_totals(user_id)
        tools = await self._dashboard_repo.fetch_tool_totals(user_id)
        return DashboardStats(
            total_blogs=int(blogs.get("total") or 0),
            total_tools=int(tools.get("total") or 0),
            total_blog_likes=int(blogs.get("likes") or 0),
            total_blog_comments=int(blogs.get("comments") or 0),
            total_blog_views=int(blogs.get("views") or 0),
            total_tool_views=int(tools.get("views") or 0),
        )


async def provide_dashboard_service(dashboard_repo: DashboardRepository) -> DashboardService:
    """Litestar DI provider for service."""
    return DashboardService(dashboard_repo)
