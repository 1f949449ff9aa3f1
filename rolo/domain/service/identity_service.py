"""Identity verification domain service."""

from abc import ABC, abstractmethod

import logfire

from rolo.domain.error import UnauthenticatedError
from rolo.domain.value import IdentityClaims

from .base import Service


class IdentityVerifier(ABC):
    """Boundary to the external identity provider.

    Implementations must treat every call independently; no session state is
    cached between calls.
    """

    @abstractmethod
    async def verify(self, credential: str) -> IdentityClaims:
        """Verify a bearer credential.

        Args:
            credential: Raw access token

        Returns:
            Claims of the authenticated principal

        Raises:
            UnauthenticatedError: If the credential is malformed, expired or rejected
            DependencyFailureError: If the provider could not be reached
        """
        raise NotImplementedError


class IdentityService(Service):
    """Resolves the Authorization header of a request into a user id."""

    def __init__(self, verifier: IdentityVerifier) -> None:
        """Initialize identity service.

        Args:
            verifier: Identity provider boundary
        """
        self.verifier = verifier

    @staticmethod
    def extract_bearer(authorization: str | None) -> str:
        """Extract the token from an ``Authorization: Bearer <token>`` header.

        Raises:
            UnauthenticatedError: If the header is missing or malformed
        """
        if not authorization:
            raise UnauthenticatedError("Access token required")

        scheme, _, token = authorization.strip().partition(" ")
        token = token.strip()
        if scheme.lower() != "bearer" or not token or " " in token:
            raise UnauthenticatedError("Invalid authorization header")
        return token

    async def authenticate(self, authorization: str | None) -> IdentityClaims:
        """Authenticate a request.

        Args:
            authorization: Raw Authorization header value

        Returns:
            Verified identity claims

        Raises:
            UnauthenticatedError: If the credential is missing or invalid
            DependencyFailureError: If the identity provider is unavailable
        """
        with logfire.span("identity_service.authenticate"):
            credential = self.extract_bearer(authorization)
            try:
                identity = await self.verifier.verify(credential)
            except UnauthenticatedError as e:
                logfire.info("Credential rejected", reason=e.reason, expired=e.expired)
                raise

            logfire.debug("Identity verified", user_id=str(identity.user_id))
            return identity
