"""Bearer authentication for routes."""

from rolo.domain.service import IdentityService


async def authenticate(
    identity_service: IdentityService, authorization: str | None
) -> str:
    """Resolve the Authorization header into the caller's user id.

    Raises:
        UnauthenticatedError: If the credential is missing or rejected
        DependencyFailureError: If the identity provider is unavailable
    """
    identity = await identity_service.authenticate(authorization)
    return str(identity.user_id)
