"""Repository layer for data access."""

from repository.auth_repository import AuthRepository, provide_auth_repository
from repository.comments_repository import CommentsRepository, provide_comments_repository
from repository.dashboard_repository import DashboardRepository, provide_dashboard_repository
from repository.users_repository import UsersRepository, provide_users_repository

__all__ = [
    "AuthRepository",
    "CommentsRepository",
    "DashboardRepository",
    "UsersRepository",
    "provide_auth_repository",
    "provide_comments_repository",
    "provide_dashboard_repository",
    "provide_users_repository",
]
