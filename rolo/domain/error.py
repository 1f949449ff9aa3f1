"""Domain layer errors.

Every error a caller can act on is a ``DomainError``. The interface layer maps
each subclass onto one HTTP status (see ``rolo.interface.error``).
"""

from collections.abc import Iterable


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Malformed input (short handle, missing field, malformed email)."""

    pass


class UnauthenticatedError(DomainError):
    """Raised when a credential is missing, malformed, expired or rejected."""

    def __init__(self, reason: str = "Not authenticated", expired: bool = False):
        self.reason = reason
        self.expired = expired
        super().__init__(reason)


class ForbiddenError(DomainError):
    """Raised when an authenticated user lacks the role or status for an action."""

    def __init__(
        self,
        user_id: str,
        community_id: str,
        required_roles: Iterable[str],
        current_role: str | None = None,
        current_status: str | None = None,
    ):
        self.user_id = user_id
        self.community_id = community_id
        self.required_roles = sorted(required_roles)
        self.current_role = current_role
        self.current_status = current_status
        super().__init__(
            f"User {user_id} requires one of {self.required_roles} "
            f"in community {community_id}"
        )


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class ConflictError(DomainError):
    """Raised on duplicates (collaborator pair, handle, pending invite)."""

    pass


class InvalidTransitionError(ConflictError):
    """Raised when a status or role transition is not allowed."""

    def __init__(self, resource: str, current: str, target: str):
        self.resource = resource
        self.current = current
        self.target = target
        super().__init__(f"Cannot move {resource} from {current} to {target}")


class SeatLimitExceededError(DomainError):
    """Raised when the community's plan has no free seat in the requested class."""

    def __init__(self, community_id: str, seat_class: str, limit: int, current: int):
        self.community_id = community_id
        self.seat_class = seat_class
        self.limit = limit
        self.current = current
        super().__init__(
            f"Community {community_id} has used {current} of {limit} {seat_class} seats"
        )


class DependencyFailureError(DomainError):
    """Raised when the store or an external provider failed or timed out."""

    def __init__(self, dependency: str, message: str, retryable: bool = True):
        self.dependency = dependency
        self.retryable = retryable
        super().__init__(f"{dependency}: {message}")


class InconsistencyError(DomainError):
    """Raised when a compound operation was only partially applied."""

    pass
