"""Email notification infrastructure providers."""

from dishka import Scope, provide

from rolo.adapter.email import HttpEmailNotifier
from rolo.config import Settings
from rolo.domain.service import Notifier
from rolo.util.di.base import ProviderBase
from rolo.util.error import ConfigurationError


class NotificationProvider(ProviderBase):
    """Notification component base."""

    __mock_component__ = "notification"


class ProdNotificationProvider(NotificationProvider):
    """Production notification provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_notifier(self, settings: Settings) -> Notifier:
        """Provide the transactional email notifier.

        Raises:
            ConfigurationError: If sending is enabled without an API key
        """
        if settings.notifications.enabled and not settings.notifications.api_key:
            raise ConfigurationError("NOTIFICATIONS__API_KEY must be set")
        return HttpEmailNotifier(
            settings=settings.notifications,
            frontend_url=settings.api.frontend_url,
            invite_expiry_days=settings.invitations.expiry_days,
        )
