"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from rolo.config import (
    AuthSettings,
    InvitationSettings,
    NotificationSettings,
    Settings,
    SubscriptionSettings,
)
from rolo.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    Sections are provided separately so services depend only on their own.
    """

    scope = Scope.APP

    @provide
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        return settings.auth

    @provide
    def provide_invitation_settings(self, settings: Settings) -> InvitationSettings:
        return settings.invitations

    @provide
    def provide_subscription_settings(
        self, settings: Settings
    ) -> SubscriptionSettings:
        return settings.subscriptions

    @provide
    def provide_notification_settings(
        self, settings: Settings
    ) -> NotificationSettings:
        return settings.notifications
