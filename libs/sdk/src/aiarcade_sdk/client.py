"""Async HTTP client for the aiarcade auth API."""

from __future__ import annotations

import logging
from typing import Any

import httpx
import msgspec

from .auth import PublicUser
from .session import MemorySessionStore, SessionHolder

__all__ = ("AuthClient",)

log = logging.getLogger(__name__)


class AuthClient:
    """Thin wrapper over the ``/api/auth`` endpoints.

    The underlying ``httpx.AsyncClient`` keeps the session cookie. Successful
    login and verification responses are cached in ``holder``.
    """

    def __init__(
        self,
        base_url: str,
        holder: SessionHolder | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)
        self.holder = holder or SessionHolder(MemorySessionStore(), self.fetch_me)

    async def __aenter__(self) -> AuthClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _remember(self, body: dict[str, Any]) -> None:
        if body.get("success") and body.get("user"):
            self.holder.save(msgspec.convert(body["user"], PublicUser))

    async def register(
        self,
        email: str,
        password: str,
        username: str,
        *,
        linkedin_profile: str | None = None,
        github_profile: str | None = None,
    ) -> dict[str, Any]:
        payload = {"email": email, "password": password, "username": username}
        if linkedin_profile:
            payload["linkedinProfile"] = linkedin_profile
        if github_profile:
            payload["githubProfile"] = github_profile
        response = await self._http.post("/api/auth/register", json=payload)
        return response.json()

    async def login(self, email: str, password: str) -> dict[str, Any]:
        response = await self._http.post("/api/auth/login", json={"email": email, "password": password})
        body = response.json()
        self._remember(body)
        return body

    async def verify_email(self, email: str, code: str) -> dict[str, Any]:
        response = await self._http.post("/api/auth/verify-email", json={"email": email, "code": code})
        body = response.json()
        self._remember(body)
        return body

    async def resend_verification(self, email: str) -> dict[str, Any]:
        response = await self._http.put("/api/auth/verify-email", json={"email": email})
        return response.json()

    async def request_password_reset(self, email: str) -> dict[str, Any]:
        response = await self._http.post("/api/auth/reset-password", json={"email": email})
        return response.json()

    async def reset_password(self, email: str, code: str, new_password: str) -> dict[str, Any]:
        response = await self._http.put(
            "/api/auth/reset-password",
            json={"email": email, "code": code, "newPassword": new_password},
        )
        return response.json()

    async def fetch_me(self) -> PublicUser | None:
        """Fetch the authoritative profile for the current cookie session."""
        response = await self._http.get("/api/auth/me")
        response.raise_for_status()
        body = response.json()
        if not body.get("authenticated"):
            return None
        return msgspec.convert(body["user"], PublicUser)

    async def logout(self) -> None:
        try:
            await self._http.post("/api/auth/logout")
        finally:
            self.holder.clear()
