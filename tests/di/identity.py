"""Mock identity providers for testing."""

from dishka import Scope, provide

from rolo.adapter.identity import MockIdentityVerifier
from rolo.domain.service import IdentityVerifier
from rolo.util.di.infrastructure.identity import IdentityProvider


class MockIdentityProvider(IdentityProvider):
    """Mock identity provider accepting ``mock:<user id>`` bearer tokens."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_identity_verifier(self) -> IdentityVerifier:
        """Provide mock identity verifier."""
        return MockIdentityVerifier()
