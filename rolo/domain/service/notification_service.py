"""Notification domain service."""

from abc import ABC, abstractmethod

import logfire

from rolo.domain.error import DependencyFailureError
from rolo.domain.model import Invite
from rolo.domain.value import EmailAddress, InviteToken, Role

from .base import Service


class Notifier(ABC):
    """Boundary to the email provider."""

    @abstractmethod
    async def send_invite(
        self, email: EmailAddress, community_name: str, token: InviteToken, role: Role
    ) -> None:
        """Send an invitation email carrying the accept deep link.

        Raises:
            DependencyFailureError: If the provider fails or times out
        """
        raise NotImplementedError

    @abstractmethod
    async def send_password_reset(self, email: EmailAddress, token: str) -> None:
        """Send a password reset email.

        Raises:
            DependencyFailureError: If the provider fails or times out
        """
        raise NotImplementedError


class NotificationService(Service):
    """Best-effort notifications.

    Failures are logged and reported as False; they never undo the grant or
    invite that triggered them.
    """

    def __init__(self, notifier: Notifier) -> None:
        self.notifier = notifier

    async def notify_invite(self, invite: Invite, community_name: str) -> bool:
        """Email an invite. Returns whether the email was handed to the provider."""
        with logfire.span(
            "notification_service.notify_invite",
            invite_id=str(invite.id),
            community_id=str(invite.community_id),
        ):
            try:
                await self.notifier.send_invite(
                    invite.email, community_name, invite.token, invite.role
                )
            except DependencyFailureError as e:
                logfire.warn(
                    "Invite email not sent",
                    invite_id=str(invite.id),
                    retryable=e.retryable,
                    error=str(e),
                )
                return False

            logfire.info("Invite email sent", invite_id=str(invite.id))
            return True

    async def notify_password_reset(self, email: EmailAddress, token: str) -> bool:
        """Email a password reset link issued by the identity provider."""
        try:
            await self.notifier.send_password_reset(email, token)
        except DependencyFailureError as e:
            logfire.warn("Password reset email not sent", error=str(e))
            return False
        return True
