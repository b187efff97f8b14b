"""Service layer for business logic."""

from services.auth_service import AuthService, provide_auth_service
from services.comments_service import CommentsService, provide_comments_service
from services.dashboard_service import DashboardService, provide_dashboard_service
from services.email_dispatcher import EmailDispatcher, provide_email_dispatcher
from services.users_service import UsersService, provide_users_service

__all__ = [
    "AuthService",
    "CommentsService",
    "DashboardService",
    "EmailDispatcher",
    "UsersService",
    "provide_auth_service",
    "provide_comments_service",
    "provide_dashboard_service",
    "provide_email_dispatcher",
    "provide_users_service",
]
