"""Tests for EmailDispatcher using httpx.MockTransport."""

import json

import httpx
import pytest

from services.email_dispatcher import EmailDispatcher
from services.exceptions.email import EmailDeliveryError


def _dispatcher(handler, api_key="test-key"):
    return EmailDispatcher(
        api_key,
        api_url="https://email.test/emails",
        sender="AI Arcade <noreply@test>",
        transport=httpx.MockTransport(handler),
    )


async def test_sends_verification_code():
    captured = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"id": "email_1"})

    await _dispatcher(handler).send_verification_code("alice@example.com", "alice", "123456")

    assert len(captured) == 1
    request = captured[0]
    assert request.headers["Authorization"] == "Bearer test-key"
    body = json.loads(request.content)
    assert body["to"] == ["alice@example.com"]
    assert body["from"] == "AI Arcade <noreply@test>"
    assert "123456" in body["html"]


async def test_escapes_user_name():
    captured = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(json.loads(request.content))
        return httpx.Response(200)

    await _dispatcher(handler).send_password_reset_code("a@example.com", "<b>x</b>", "654321")

    assert "<b>x</b>" not in captured[0]["html"]
    assert "&lt;b&gt;" in captured[0]["html"]


@pytest.mark.parametrize("status", [400, 500])
async def test_error_status_raises(status):
    dispatcher = _dispatcher(lambda request: httpx.Response(status))

    with pytest.raises(EmailDeliveryError):
        await dispatcher.send_password_reset_code("a@example.com", "a", "111111")


async def test_transport_error_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(EmailDeliveryError):
        await _dispatcher(handler).send_verification_code("a@example.com", "a", "111111")


async def test_missing_api_key_raises_without_request():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200)

    with pytest.raises(EmailDeliveryError) as exc_info:
        await _dispatcher(handler, api_key=None).send_verification_code("a@example.com", "a", "111111")

    assert exc_info.value.reason == "not_configured"
    assert calls == []
