"""Email dispatch for verification and password-reset codes."""

from __future__ import annotations

import html
import logging
import os

import httpx
from litestar.datastructures import State

from .exceptions.email import EmailDeliveryError

log = logging.getLogger(__name__)

EMAIL_API_KEY = os.getenv("EMAIL_API_KEY")
EMAIL_API_URL = os.getenv("EMAIL_API_URL", "https://api.resend.com/emails")
EMAIL_FROM = os.getenv("EMAIL_FROM", "AI Arcade <noreply@aiarcade.app>")
EMAIL_TIMEOUT_SECONDS = float(os.getenv("EMAIL_TIMEOUT_SECONDS", "10"))


def _code_block(code: str) -> str:
    return (
        '<p style="font-size:28px;font-weight:bold;letter-spacing:6px;'
        f'font-family:monospace">{html.escape(code)}</p>'
    )


class EmailDispatcher:
    """Deliver a code to an address, or raise EmailDeliveryError.

    Talks to a Resend-compatible HTTP API. A missing API key counts as a
    delivery failure so callers fall back to showing the code.
    """

    def __init__(
        self,
        api_key: str | None = EMAIL_API_KEY,
        *,
        api_url: str = EMAIL_API_URL,
        sender: str = EMAIL_FROM,
        timeout: float = EMAIL_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._api_url = api_url
        self._sender = sender
        self._timeout = timeout
        self._transport = transport

    async def _send(self, to: str, subject: str, body: str) -> None:
        if not self._api_key:
            log.warning("EMAIL_API_KEY not configured, cannot send email")
            raise EmailDeliveryError("not_configured")

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.post(
                    self._api_url,
                    headers={
                        "Authorization": f"Bearer {self._api_key}",
                        "Content-Type": "application/json",
                    },
                    json={
                        "from": self._sender,
                        "to": [to],
                        "subject": subject,
                        "html": body,
                    },
                )
                response.raise_for_status()
            except httpx.HTTPError as exc:
                log.error("Failed to send email to %s: %s", to, exc)
                raise EmailDeliveryError(type(exc).__name__) from exc
        log.info("Email sent successfully to %s", to)

    async def send_verification_code(self, email: str, user_name: str, code: str) -> None:
        """Send the email verification code."""
        body = f"""
        <h1>Welcome to AI Arcade!</h1>
        <p>Hi {html.escape(user_name)},</p>
        <p>Use the code below to verify your email address:</p>
        {_code_block(code)}
        <p>This code will expire in 10 minutes.</p>
        """
        await self._send(email, "Verify your email", body)

    async def send_password_reset_code(self, email: str, user_name: str, code: str) -> None:
        """Send the password reset code."""
        body = f"""
        <h1>Reset Your Password</h1>
        <p>Hi {html.escape(user_name)},</p>
        <p>You requested to reset your password. Enter this code to continue:</p>
        {_code_block(code)}
        <p>This code will expire in 10 minutes.</p>
        <p>If you didn't request this, please ignore this email.</p>
        """
        await self._send(email, "Reset your password", body)


async def provide_email_dispatcher(state: State) -> EmailDispatcher:
    """Litestar DI provider for the app-wide EmailDispatcher.

    Args:
        state: Application state.

    Returns:
        EmailDispatcher stored on state at startup.
    """
    return state.email_dispatcher
