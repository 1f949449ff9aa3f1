"""Unit tests for HttpEmailNotifier against a stubbed email API."""

import json

import httpx
import pytest

from rolo.adapter.email import HttpEmailNotifier
from rolo.config import NotificationSettings
from rolo.domain.error import DependencyFailureError
from rolo.domain.value import EmailAddress, InviteToken, Role


def notifier_for(handler, **settings) -> HttpEmailNotifier:
    return HttpEmailNotifier(
        NotificationSettings(api_key="re_test", **settings),
        frontend_url="https://rolo.app",
        transport=httpx.MockTransport(handler),
    )


class TestHttpEmailNotifier:
    @pytest.mark.asyncio
    async def test_posts_invite(self):
        captured = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json={"id": "email_1"})

        await notifier_for(handler).send_invite(
            EmailAddress("a@example.com"), "Test Corp", InviteToken("tok"), Role.ADMIN
        )

        request = captured[0]
        body = json.loads(request.content)
        assert str(request.url) == "https://api.resend.com/emails"
        assert request.headers["Authorization"] == "Bearer re_test"
        assert body["to"] == ["a@example.com"]
        assert body["subject"] == "You're invited to join Test Corp on Rolo"
        assert "https://rolo.app/invites/accept?token=tok" in body["html"]
        assert "Admin" in body["html"]

    @pytest.mark.asyncio
    async def test_server_error_is_retryable(self):
        def handler(request):
            return httpx.Response(502, text="bad gateway")

        with pytest.raises(DependencyFailureError) as exc_info:
            await notifier_for(handler).send_password_reset(
                EmailAddress("a@example.com"), "reset"
            )
        assert exc_info.value.retryable is True

    @pytest.mark.asyncio
    async def test_rejected_request_is_not_retryable(self):
        def handler(request):
            return httpx.Response(422, json={"message": "invalid from"})

        with pytest.raises(DependencyFailureError) as exc_info:
            await notifier_for(handler).send_password_reset(
                EmailAddress("a@example.com"), "reset"
            )
        assert exc_info.value.retryable is False

    @pytest.mark.asyncio
    async def test_disabled_skips_sending(self):
        def handler(request):
            raise AssertionError("no request expected")

        await notifier_for(handler, enabled=False).send_invite(
            EmailAddress("a@example.com"), "Test Corp", InviteToken("tok"), Role.VIEWER
        )
