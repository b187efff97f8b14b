"""Shared fixtures for service unit tests.

Repositories are replaced by AsyncMock objects specced against the real
classes, so a misspelled repository call fails the test instead of silently
returning a mock.
"""

import pytest
from litestar.datastructures import State

from repository.auth_repository import AuthRepository
from repository.comments_repository import CommentsRepository
from repository.dashboard_repository import DashboardRepository
from repository.users_repository import UsersRepository


@pytest.fixture
def mock_state(mocker):
    """Mock Litestar State."""
    return mocker.Mock(spec=State)


# Repository Fixtures


@pytest.fixture
def mock_auth_repo(mocker):
    """Mock AuthRepository."""
    return mocker.AsyncMock(spec=AuthRepository)


@pytest.fixture
def mock_users_repo(mocker):
    """Mock UsersRepository."""
    return mocker.AsyncMock(spec=UsersRepository)


@pytest.fixture
def mock_dashboard_repo(mocker):
    """Mock DashboardRepository."""
    return mocker.AsyncMock(spec=DashboardRepository)


@pytest.fixture
def mock_comments_repo(mocker):
    """Mock CommentsRepository."""
    return mocker.AsyncMock(spec=CommentsRepository)
