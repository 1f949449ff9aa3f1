"""Identity verifier implementations.

Credentials are issued by the external identity provider. Verifiers turn a
bearer credential into IdentityClaims or raise UnauthenticatedError.
"""

from typing import Any
from uuid import UUID

import httpx
import logfire

from rolo.adapter.error import ProviderError, ProviderErrorCode
from rolo.adapter.identity.errors import provider_error_from_response
from rolo.config import AuthSettings
from rolo.domain.error import DependencyFailureError, UnauthenticatedError
from rolo.domain.service.identity_service import IdentityVerifier
from rolo.domain.value import IdentityClaims, UserId
from rolo.util.jwt import JWTError, verify_token

# Rejections the user can fix by signing in again
_REJECTION_MESSAGES: dict[ProviderErrorCode, str] = {
    ProviderErrorCode.INVALID_TOKEN: "Invalid token",
    ProviderErrorCode.TOKEN_EXPIRED: "Token expired",
    ProviderErrorCode.SESSION_NOT_FOUND: "Session not found",
    ProviderErrorCode.USER_NOT_FOUND: "User not found",
    ProviderErrorCode.USER_BANNED: "User is banned",
    ProviderErrorCode.EMAIL_NOT_CONFIRMED: "Email not verified",
}


def _user_id(subject: Any) -> UserId:
    try:
        return UserId(UUID(str(subject)))
    except ValueError:
        raise UnauthenticatedError("Invalid token subject")


class JWTIdentityVerifier(IdentityVerifier):
    """Verifies provider-issued JWTs locally with the shared secret."""

    def __init__(self, settings: AuthSettings) -> None:
        self.settings = settings

    async def verify(self, credential: str) -> IdentityClaims:
        try:
            payload = verify_token(credential, self.settings)
        except JWTError as e:
            raise UnauthenticatedError(str(e), expired=e.expired)

        return IdentityClaims(
            user_id=_user_id(payload.sub),
            email=payload.email,
            claims=payload.model_dump(mode="json", exclude={"sub", "email"}),
        )


class RemoteIdentityVerifier(IdentityVerifier):
    """Asks the identity provider's user endpoint to validate the token.

    Transport failures, 5xx and rate limiting are retried once, then raised as
    retryable DependencyFailureError. Rejections become UnauthenticatedError.
    """

    provider = "identity_provider"

    def __init__(
        self,
        settings: AuthSettings,
        max_attempts: int = 2,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.user_url = f"{settings.provider_url.rstrip('/')}/auth/v1/user"
        self.max_attempts = max_attempts
        self.transport = transport

    async def verify(self, credential: str) -> IdentityClaims:
        last_error: ProviderError | None = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                user = await self._fetch_user(credential)
            except ProviderError as e:
                if not e.retryable:
                    logfire.info("Identity provider rejected token", code=e.code.value)
                    raise UnauthenticatedError(
                        _REJECTION_MESSAGES.get(e.code, "Not authenticated"),
                        expired=e.code == ProviderErrorCode.TOKEN_EXPIRED,
                    )
                logfire.warn(
                    "Identity provider unavailable",
                    code=e.code.value,
                    attempt=attempt,
                    error=str(e),
                )
                last_error = e
                continue

            return IdentityClaims(
                user_id=_user_id(user.get("id")),
                email=user.get("email"),
                claims={
                    key: user[key]
                    for key in ("role", "aud", "email_confirmed_at")
                    if key in user
                },
            )

        raise DependencyFailureError(
            self.provider, str(last_error) if last_error else "unavailable"
        )

    async def _fetch_user(self, credential: str) -> dict[str, Any]:
        """Fetch the user for a bearer token.

        Raises:
            ProviderError: With a typed code for any failure
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.provider_timeout_seconds,
                transport=self.transport,
            ) as client:
                response = await client.get(
                    self.user_url,
                    headers={
                        "Authorization": f"Bearer {credential}",
                        "apikey": self.settings.provider_api_key,
                    },
                )
        except httpx.HTTPError as e:
            raise ProviderError(self.provider, ProviderErrorCode.UNAVAILABLE, str(e))

        if response.status_code != 200:
            raise provider_error_from_response(self.provider, response)

        try:
            user = response.json()
        except ValueError:
            user = None
        if not isinstance(user, dict):
            raise ProviderError(
                self.provider, ProviderErrorCode.UNAVAILABLE, "Malformed user payload"
            )
        return user


class MockIdentityVerifier(IdentityVerifier):
    """Mock verifier for testing.

    Accepts credentials of the form ``mock:<user uuid>`` and optionally
    ``mock:<user uuid>:<email>``. Anything else is rejected.
    """

    PREFIX = "mock:"

    async def verify(self, credential: str) -> IdentityClaims:
        if not credential.startswith(self.PREFIX):
            raise UnauthenticatedError("Invalid token")

        subject, _, email = credential[len(self.PREFIX) :].partition(":")
        return IdentityClaims(user_id=_user_id(subject), email=email or None)

    @classmethod
    def token_for(cls, user_id: UUID, email: str | None = None) -> str:
        return f"{cls.PREFIX}{user_id}:{email}" if email else f"{cls.PREFIX}{user_id}"
