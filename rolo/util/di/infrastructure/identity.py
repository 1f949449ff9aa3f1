"""Identity provider infrastructure providers."""

from dishka import Scope, provide

from rolo.adapter.identity import JWTIdentityVerifier, RemoteIdentityVerifier
from rolo.config import AuthSettings
from rolo.domain.service import IdentityVerifier
from rolo.util.di.base import ProviderBase
from rolo.util.error import ConfigurationError


class IdentityProvider(ProviderBase):
    """Identity component base."""

    __mock_component__ = "identity"


class ProdIdentityProvider(IdentityProvider):
    """Production identity provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_identity_verifier(self, settings: AuthSettings) -> IdentityVerifier:
        """Provide the credential verifier selected by ``auth.verifier``.

        Raises:
            ConfigurationError: If the selected verifier is not configured
        """
        if settings.verifier == "remote":
            if not settings.provider_url or not settings.provider_api_key:
                raise ConfigurationError(
                    "AUTH__PROVIDER_URL and AUTH__PROVIDER_API_KEY must be set"
                )
            return RemoteIdentityVerifier(settings)

        if not settings.jwt_secret:
            raise ConfigurationError("AUTH__JWT_SECRET must be set")
        return JWTIdentityVerifier(settings)
