"""Transactional email notifier.

Posts rendered messages to an HTTP email API (Resend-compatible payload).
"""

from dataclasses import dataclass, field
from urllib.parse import urlencode

import httpx
import logfire

from rolo.config import NotificationSettings
from rolo.domain.error import DependencyFailureError
from rolo.domain.service.notification_service import Notifier
from rolo.domain.value import EmailAddress, InviteToken, Role


def invite_link(frontend_url: str, token: InviteToken) -> str:
    """Deep link the invite email points at."""
    return f"{frontend_url.rstrip('/')}/invites/accept?{urlencode({'token': token.root})}"


def password_reset_link(frontend_url: str, token: str) -> str:
    return f"{frontend_url.rstrip('/')}/reset-password?{urlencode({'token': token})}"


def _render_invite(community_name: str, link: str, role: Role, expiry_days: int) -> tuple[str, str]:
    subject = f"You're invited to join {community_name} on Rolo"
    html = f"""
      <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        <h2 style="color: #333;">Community Invitation</h2>
        <p>You've been invited to join <strong>{community_name}</strong> on Rolo as
        <strong>{role.display_name}</strong>.</p>
        <a href="{link}" style="display: inline-block; padding: 12px 24px; background-color: #28a745; color: white; text-decoration: none; border-radius: 4px; margin: 20px 0;">Accept Invitation</a>
        <p>If the button doesn't work, copy and paste this link into your browser:</p>
        <p style="word-break: break-all; color: #666;">{link}</p>
        <p>This invitation will expire in {expiry_days} days.</p>
        <p>Best regards,<br>The Rolo Team</p>
      </div>
    """
    return subject, html


def _render_password_reset(link: str) -> tuple[str, str]:
    subject = "Reset Your Rolo Password"
    html = f"""
      <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        <h2 style="color: #333;">Password Reset Request</h2>
        <p>You requested a password reset for your Rolo account.</p>
        <a href="{link}" style="display: inline-block; padding: 12px 24px; background-color: #dc3545; color: white; text-decoration: none; border-radius: 4px; margin: 20px 0;">Reset Password</a>
        <p style="word-break: break-all; color: #666;">{link}</p>
        <p>If you didn't request this reset, please ignore this email.</p>
        <p>Best regards,<br>The Rolo Team</p>
      </div>
    """
    return subject, html


class HttpEmailNotifier(Notifier):
    """Notifier that posts to a transactional email HTTP API."""

    provider = "email"

    def __init__(
        self,
        settings: NotificationSettings,
        frontend_url: str,
        invite_expiry_days: int = 7,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize email notifier.

        Args:
            settings: Email API configuration
            frontend_url: Base URL used to build deep links
            invite_expiry_days: Expiry quoted in invite emails
            transport: httpx transport override, for tests
        """
        self.settings = settings
        self.frontend_url = frontend_url
        self.invite_expiry_days = invite_expiry_days
        self.transport = transport

    async def send_invite(
        self, email: EmailAddress, community_name: str, token: InviteToken, role: Role
    ) -> None:
        subject, html = _render_invite(
            community_name,
            invite_link(self.frontend_url, token),
            role,
            self.invite_expiry_days,
        )
        await self._send(email, subject, html)

    async def send_password_reset(self, email: EmailAddress, token: str) -> None:
        subject, html = _render_password_reset(
            password_reset_link(self.frontend_url, token)
        )
        await self._send(email, subject, html)

    async def _send(self, email: EmailAddress, subject: str, html: str) -> None:
        """Post one message.

        Raises:
            DependencyFailureError: If the API fails, rejects or times out
        """
        if not self.settings.enabled:
            logfire.info("Email delivery disabled, message skipped", subject=subject)
            return

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.timeout_seconds, transport=self.transport
            ) as client:
                response = await client.post(
                    self.settings.api_url,
                    headers={"Authorization": f"Bearer {self.settings.api_key}"},
                    json={
                        "from": self.settings.from_email,
                        "to": [email.root],
                        "subject": subject,
                        "html": html,
                    },
                )
        except httpx.HTTPError as e:
            logfire.error("Email API HTTP error", error=str(e))
            raise DependencyFailureError(self.provider, str(e))

        if response.status_code >= 400:
            logfire.error(
                "Email API request failed",
                status_code=response.status_code,
                error=response.text,
            )
            raise DependencyFailureError(
                self.provider,
                f"Email API returned {response.status_code}",
                retryable=response.status_code == 429 or response.status_code >= 500,
            )


@dataclass
class SentEmail:
    kind: str
    email: str
    subject: str
    link: str


@dataclass
class MockNotifier(Notifier):
    """Mock notifier for testing.

    Records messages instead of sending them. Addresses listed in
    ``failing_emails`` fail as if the provider were down.
    """

    frontend_url: str = "http://localhost:3000"
    failing_emails: set[str] = field(default_factory=set)
    sent: list[SentEmail] = field(default_factory=list)

    async def send_invite(
        self, email: EmailAddress, community_name: str, token: InviteToken, role: Role
    ) -> None:
        self._fail_if_configured(email)
        self.sent.append(
            SentEmail(
                kind="invite",
                email=email.root,
                subject=f"You're invited to join {community_name} on Rolo",
                link=invite_link(self.frontend_url, token),
            )
        )

    async def send_password_reset(self, email: EmailAddress, token: str) -> None:
        self._fail_if_configured(email)
        self.sent.append(
            SentEmail(
                kind="password_reset",
                email=email.root,
                subject="Reset Your Rolo Password",
                link=password_reset_link(self.frontend_url, token),
            )
        )

    def _fail_if_configured(self, email: EmailAddress) -> None:
        if email.root in self.failing_emails:
            raise DependencyFailureError("email", "Mock delivery failure")
