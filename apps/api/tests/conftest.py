"""Pytest configuration for API tests.

Route tests run the real Litestar app with the database-backed repository
swapped for an in-memory one and the email dispatcher swapped for a recorder,
so no Postgres or network access is needed.
"""

from __future__ import annotations

import datetime as dt
from typing import Any, AsyncIterator

import pytest
from faker import Faker
from litestar import Litestar
from litestar.datastructures import State
from litestar.di import Provide
from litestar.testing import AsyncTestClient

from app import create_app
from repository.auth_repository import AuthRepository
from repository.exceptions import UniqueConstraintViolationError
from services.auth_service import AuthService
from services.email_dispatcher import EmailDispatcher
from services.exceptions.email import EmailDeliveryError

fake = Faker()


def pytest_configure(config: Any) -> None:
    """Register custom markers for test organization."""
    config.addinivalue_line("markers", "domain_auth: Tests for auth domain")
    config.addinivalue_line("markers", "domain_users: Tests for users domain")
    config.addinivalue_line("markers", "domain_dashboard: Tests for dashboard domain")
    config.addinivalue_line("markers", "domain_comments: Tests for comments domain")


# ==============================================================================
# IN-MEMORY COLLABORATORS
# ==============================================================================


class InMemoryAuthRepository(AuthRepository):
    """Dict-backed stand-in for AuthRepository with the same method surface."""

    def __init__(self) -> None:
        self._pool = None
        self.accounts: dict[str, dict] = {}

    def _find(self, email: str) -> dict | None:
        for row in self.accounts.values():
            if row["email"].lower() == email.lower():
                return row
        return None

    def account(self, email: str) -> dict:
        """Live row for direct inspection or tampering in tests."""
        row = self._find(email)
        assert row is not None, f"no account for {email}"
        return row

    def expire_code(self, email: str) -> None:
        self.account(email)["verification_code_expiry"] = dt.datetime.now(dt.timezone.utc) - dt.timedelta(seconds=1)

    async def get_account_by_email(self, email: str, *, conn: Any = None) -> dict | None:
        row = self._find(email)
        return dict(row) if row else None

    async def get_account_by_user_id(self, user_id: str, *, conn: Any = None) -> dict | None:
        row = self.accounts.get(user_id)
        return dict(row) if row else None

    async def check_email_exists(self, email: str, *, conn: Any = None) -> bool:
        return self._find(email) is not None

    async def check_username_exists(self, username: str, *, conn: Any = None) -> bool:
        return any(row["username"].lower() == username.lower() for row in self.accounts.values())

    async def create_account(  # noqa: PLR0913
        self,
        *,
        user_id: str,
        email: str,
        username: str,
        name: str,
        password_hash: str,
        linkedin_profile: str | None,
        github_profile: str | None,
        verification_code: str,
        verification_code_expiry: dt.datetime,
        conn: Any = None,
    ) -> dict:
        if await self.check_email_exists(email):
            raise UniqueConstraintViolationError("accounts_email_key", "users.accounts")
        if await self.check_username_exists(username):
            raise UniqueConstraintViolationError("accounts_username_key", "users.accounts")
        row = {
            "user_id": user_id,
            "email": email,
            "username": username,
            "name": name,
            "password_hash": password_hash,
            "account_type": "user",
            "arcade_coins": 100,
            "linkedin_profile": linkedin_profile,
            "github_profile": github_profile,
            "image": None,
            "is_email_verified": False,
            "verification_code": verification_code,
            "verification_code_expiry": verification_code_expiry,
            "verification_code_purpose": "email_verification",
            "failed_login_attempts": 0,
            "account_lock_until": None,
            "username_last_updated_at": None,
        }
        self.accounts[user_id] = row
        return dict(row)

    async def set_pending_code(
        self, user_id: str, code: str, expires_at: dt.datetime, purpose: str, *, conn: Any = None
    ) -> None:
        self.accounts[user_id].update(
            verification_code=code,
            verification_code_expiry=expires_at,
            verification_code_purpose=purpose,
        )

    async def mark_email_verified(self, user_id: str, *, conn: Any = None) -> dict | None:
        row = self.accounts.get(user_id)
        if row is None:
            return None
        row.update(
            is_email_verified=True,
            verification_code=None,
            verification_code_expiry=None,
            verification_code_purpose=None,
        )
        return dict(row)

    async def update_password(self, user_id: str, password_hash: str, *, conn: Any = None) -> None:
        self.accounts[user_id].update(
            password_hash=password_hash,
            verification_code=None,
            verification_code_expiry=None,
            verification_code_purpose=None,
            failed_login_attempts=0,
            account_lock_until=None,
        )

    async def set_login_failures(
        self, user_id: str, attempts: int, lock_until: dt.datetime | None, *, conn: Any = None
    ) -> None:
        self.accounts[user_id].update(failed_login_attempts=attempts, account_lock_until=lock_until)


class RecordingEmailDispatcher(EmailDispatcher):
    """Records every email instead of sending it. Set ``fail`` to simulate outages."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []
        self.fail = False

    async def _record(self, kind: str, email: str, code: str) -> None:
        if self.fail:
            raise EmailDeliveryError("simulated")
        self.sent.append((kind, email, code))

    async def send_verification_code(self, email: str, user_name: str, code: str) -> None:
        await self._record("verification", email, code)

    async def send_password_reset_code(self, email: str, user_name: str, code: str) -> None:
        await self._record("password_reset", email, code)

    def last_code(self, email: str, kind: str = "verification") -> str:
        for sent_kind, sent_email, code in reversed(self.sent):
            if sent_kind == kind and sent_email == email:
                return code
        raise AssertionError(f"no {kind} email sent to {email}")


# ==============================================================================
# FIXTURES
# ==============================================================================


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch: pytest.MonkeyPatch) -> None:
    """Use the cheapest bcrypt cost so hashing does not dominate test time."""
    monkeypatch.setattr("services.auth_service.BCRYPT_ROUNDS", 4)


@pytest.fixture
def auth_repo() -> InMemoryAuthRepository:
    return InMemoryAuthRepository()


@pytest.fixture
def email_dispatcher() -> RecordingEmailDispatcher:
    return RecordingEmailDispatcher()


@pytest.fixture
def auth_service(auth_repo: InMemoryAuthRepository) -> AuthService:
    return AuthService(None, State(), auth_repo, lockout_enabled=True)  # type: ignore[arg-type]


@pytest.fixture
def credentials() -> dict[str, str]:
    """A valid, unique email/password/username triple."""
    return {
        "email": fake.unique.email(),
        "password": "secret123",
        "username": fake.unique.pystr(min_chars=6, max_chars=10),
    }


@pytest.fixture
def app_dependencies(auth_repo: InMemoryAuthRepository) -> dict[str, Provide]:
    """Dependency overrides passed to create_app; tests may add to it."""
    return {"auth_repo": Provide(lambda: auth_repo, sync_to_thread=False)}


@pytest.fixture
async def test_client(
    app_dependencies: dict[str, Provide],
    email_dispatcher: RecordingEmailDispatcher,
) -> AsyncIterator[AsyncTestClient[Litestar]]:
    """Create async test client running the app without a database."""
    app = create_app(dependencies=app_dependencies, email_dispatcher=email_dispatcher)  # type: ignore[arg-type]
    async with AsyncTestClient(app=app) as client:
        yield client
