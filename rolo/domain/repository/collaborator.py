"""Collaborator repository interface (the role store)."""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from rolo.domain.model.collaborator import Collaborator
from rolo.domain.value import CollaboratorId, CollaboratorStatus, CommunityId, Role, UserId


class CollaboratorRepository(ABC):
    """Repository for Collaborator entity.

    Maps (user, community) to (role, status).
    """

    @abstractmethod
    async def find_by_user_and_community(
        self, user_id: UserId, community_id: CommunityId
    ) -> Collaborator | None:
        """Find the membership of a user in a community.

        Args:
            user_id: The user
            community_id: The community

        Returns:
            The collaborator if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_community(
        self, community_id: CommunityId, status: CollaboratorStatus | None = None
    ) -> list[Collaborator]:
        """List collaborators of a community, oldest first.

        Args:
            community_id: The community
            status: Optional status filter

        Returns:
            List of collaborators
        """
        pass

    @abstractmethod
    async def find_by_user(
        self, user_id: UserId, status: CollaboratorStatus | None = None
    ) -> list[Collaborator]:
        """List memberships of a user across communities."""
        pass

    @abstractmethod
    async def exists_approved_for_user(self, user_id: UserId) -> bool:
        """Check whether the user is approved in at least one community."""
        pass

    @abstractmethod
    async def count_approved(
        self, community_id: CommunityId, roles: Iterable[Role]
    ) -> int:
        """Count approved collaborators of a community holding one of the roles.

        Used for seat usage.
        """
        pass

    @abstractmethod
    async def save(self, collaborator: Collaborator) -> Collaborator:
        """Save a collaborator (create or update).

        Raises:
            IntegrityError: If a collaborator already exists for the (user, community) pair
        """
        pass

    @abstractmethod
    async def save_if_status(
        self, collaborator: Collaborator, expected: CollaboratorStatus
    ) -> Collaborator | None:
        """Overwrite an existing collaborator only while its stored status is expected.

        Args:
            collaborator: Updated collaborator
            expected: Status the stored row must still have

        Returns:
            The saved collaborator, or None if the row is gone or its status moved on
        """
        pass

    @abstractmethod
    async def delete(self, collaborator_id: CollaboratorId) -> bool:
        """Delete a collaborator. Returns True if one was deleted."""
        pass
