"""Dashboard statistics routes."""

from __future__ import annotations

import litestar
from aiarcade_sdk.dashboard import DashboardStats

from services.dashboard_service import DashboardService


class DashboardController(litestar.Controller):
    """Dashboard controller."""

    tags = ["Dashboard"]
    path = "/api/dashboard"

    @litestar.get(
        path="/{user_id:str}/stats",
        summary="Get Dashboard Stats",
        description="Blog and tool counts plus summed views, likes and comments for a user.",
    )
    async def get_stats(self, user_id: str, dashboard_service: DashboardService) -> DashboardStats:
        """Get dashboard statistics for a user.

        Args:
            user_id: The user ID.
            dashboard_service: Dashboard service.

        Returns:
            Aggregated statistics, zeros for a user without content.
        """
        return await dashboard_service.get_user_stats(user_id)
