from datetime import datetime, timedelta, timezone

import pytest
from litestar import Litestar
from litestar.di import Provide
from litestar.status_codes import (
    HTTP_200_OK,
    HTTP_201_CREATED,
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_429_TOO_MANY_REQUESTS,
    HTTP_500_INTERNAL_SERVER_ERROR,
)
from litestar.testing import AsyncTestClient

from repository.comments_repository import CommentsRepository
from repository.dashboard_repository import DashboardRepository
from repository.users_repository import UsersRepository

# ruff: noqa: D102, D103, ANN001, ANN201

CREATED = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def users_repo(mocker):
    return mocker.AsyncMock(spec=UsersRepository)


@pytest.fixture
def dashboard_repo(mocker):
    return mocker.AsyncMock(spec=DashboardRepository)


@pytest.fixture
def comments_repo(mocker):
    return mocker.AsyncMock(spec=CommentsRepository)


@pytest.fixture
def app_dependencies(auth_repo, users_repo, dashboard_repo, comments_repo):
    return {
        "auth_repo": Provide(lambda: auth_repo, sync_to_thread=False),
        "users_repo": Provide(lambda: users_repo, sync_to_thread=False),
        "dashboard_repo": Provide(lambda: dashboard_repo, sync_to_thread=False),
        "comments_repo": Provide(lambda: comments_repo, sync_to_thread=False),
    }


def _comment(comment_id, parent=None):
    return {
        "id": comment_id,
        "blog_id": "b1",
        "author_id": "u1",
        "author_name": "Alice",
        "content": "hi",
        "parent_comment_id": parent,
        "created_at": CREATED,
    }


@pytest.mark.domain_users
class TestUpdateUserEndpoint:
    async def test_update_name(self, test_client: AsyncTestClient[Litestar], users_repo):
        users_repo.fetch_profile_names.return_value = {
            "user_id": "u1",
            "name": "Alice",
            "username": "alice",
            "username_last_updated_at": None,
        }
        users_repo.update_user_names.return_value = {"name": "Alice B", "username": "alice"}

        response = await test_client.post("/api/update-user", json={"userId": "u1", "newName": "Alice B"})

        assert response.status_code == HTTP_200_OK
        data = response.json()
        assert data["success"] is True
        assert data["oldData"] == {"name": "Alice", "username": "alice"}
        assert data["newData"] == {"name": "Alice B", "username": "alice"}

    async def test_missing_user_id(self, test_client: AsyncTestClient[Litestar]):
        response = await test_client.post("/api/update-user", json={"newName": "x"})
        assert response.status_code == HTTP_400_BAD_REQUEST

    async def test_nothing_to_update(self, test_client: AsyncTestClient[Litestar]):
        response = await test_client.post("/api/update-user", json={"userId": "u1"})
        assert response.status_code == HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "No update data provided"

    async def test_unknown_user(self, test_client: AsyncTestClient[Litestar], users_repo):
        users_repo.fetch_profile_names.return_value = None
        response = await test_client.post("/api/update-user", json={"userId": "u1", "newName": "x"})
        assert response.status_code == HTTP_404_NOT_FOUND

    async def test_taken_username(self, test_client: AsyncTestClient[Litestar], users_repo):
        users_repo.fetch_profile_names.return_value = {
            "user_id": "u1",
            "name": "Alice",
            "username": "alice",
            "username_last_updated_at": None,
        }
        users_repo.check_username_taken.return_value = True

        response = await test_client.post("/api/update-user", json={"userId": "u1", "newUsername": "bob"})

        assert response.status_code == HTTP_409_CONFLICT

    async def test_cooldown(self, test_client: AsyncTestClient[Litestar], users_repo):
        users_repo.fetch_profile_names.return_value = {
            "user_id": "u1",
            "name": "Alice",
            "username": "alice",
            "username_last_updated_at": datetime.now(timezone.utc) - timedelta(days=1),
        }

        response = await test_client.post("/api/update-user", json={"userId": "u1", "newUsername": "alice2"})

        assert response.status_code == HTTP_429_TOO_MANY_REQUESTS
        assert "availableAt" in response.json()


@pytest.mark.domain_dashboard
class TestDashboardEndpoint:
    async def test_stats(self, test_client: AsyncTestClient[Litestar], dashboard_repo):
        dashboard_repo.fetch_blog_totals.return_value = {"total": 2, "views": 10, "likes": 3, "comments": 1}
        dashboard_repo.fetch_tool_totals.return_value = {"total": 1, "views": 7}

        response = await test_client.get("/api/dashboard/u1/stats")

        assert response.status_code == HTTP_200_OK
        assert response.json() == {
            "totalBlogs": 2,
            "totalTools": 1,
            "totalBlogLikes": 3,
            "totalBlogComments": 1,
            "totalBlogViews": 10,
            "totalToolViews": 7,
        }

    async def test_stats_store_failure(self, test_client: AsyncTestClient[Litestar], dashboard_repo):
        dashboard_repo.fetch_blog_totals.side_effect = OSError("down")

        response = await test_client.get("/api/dashboard/u1/stats")

        assert response.status_code == HTTP_500_INTERNAL_SERVER_ERROR


@pytest.mark.domain_comments
class TestCommentsEndpoints:
    async def test_get_thread(self, test_client: AsyncTestClient[Litestar], comments_repo):
        comments_repo.fetch_blog_comments.return_value = [_comment("a"), _comment("b", "a")]

        response = await test_client.get("/api/blogs/b1/comments")

        assert response.status_code == HTTP_200_OK
        data = response.json()
        assert data["total"] == 2
        assert data["comments"][0]["id"] == "a"
        assert data["comments"][0]["replies"][0]["parentCommentId"] == "a"

    async def test_post_comment(self, test_client: AsyncTestClient[Litestar], comments_repo):
        comments_repo.check_blog_exists.return_value = True
        comments_repo.insert_comment.return_value = _comment("new")

        response = await test_client.post("/api/blogs/b1/comments", json={"authorId": "u1", "content": "hi"})

        assert response.status_code == HTTP_201_CREATED
        assert response.json()["id"] == "new"

    async def test_post_reply_unknown_parent(self, test_client: AsyncTestClient[Litestar], comments_repo):
        comments_repo.check_blog_exists.return_value = True
        comments_repo.fetch_comment.return_value = None

        response = await test_client.post(
            "/api/blogs/b1/comments",
            json={"authorId": "u1", "content": "hi", "parentCommentId": "missing"},
        )

        assert response.status_code == HTTP_400_BAD_REQUEST
        assert response.json()["success"] is False

    async def test_post_unknown_blog(self, test_client: AsyncTestClient[Litestar], comments_repo):
        comments_repo.check_blog_exists.return_value = False

        response = await test_client.post("/api/blogs/b1/comments", json={"authorId": "u1", "content": "hi"})

        assert response.status_code == HTTP_404_NOT_FOUND

    async def test_post_invalid_body(self, test_client: AsyncTestClient[Litestar]):
        response = await test_client.post("/api/blogs/b1/comments", json={"content": "hi"})

        assert response.status_code == HTTP_400_BAD_REQUEST
        assert response.json()["success"] is False
