"""Community repository interface."""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from rolo.domain.model.community import Community
from rolo.domain.value import CommunityHandle, CommunityId


class CommunityRepository(ABC):
    """Repository for Community entity.

    Defines the contract for community persistence operations.
    Implementations live in the persistence layer.
    """

    @abstractmethod
    async def find_by_id(self, community_id: CommunityId) -> Community | None:
        """Find a community by ID.

        Args:
            community_id: The community's unique identifier

        Returns:
            The community if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_handle(self, handle: CommunityHandle) -> Community | None:
        """Find a community by handle, ignoring case.

        Args:
            handle: The community handle

        Returns:
            The community if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_ids(self, community_ids: Iterable[CommunityId]) -> list[Community]:
        """Load several communities at once.

        Args:
            community_ids: Community identifiers (unknown ids are skipped)

        Returns:
            Matching communities
        """
        pass

    @abstractmethod
    async def handle_exists(
        self, handle: CommunityHandle, exclude_id: CommunityId | None = None
    ) -> bool:
        """Check whether a handle is taken, ignoring case.

        Args:
            handle: Handle to check
            exclude_id: Community to ignore (used when a community keeps its handle)

        Returns:
            True if another community uses the handle
        """
        pass

    @abstractmethod
    async def save(self, community: Community) -> Community:
        """Save a community (create or update).

        Args:
            community: The community to save

        Returns:
            The saved community

        Raises:
            IntegrityError: If the handle is already taken
        """
        pass

    @abstractmethod
    async def delete(self, community_id: CommunityId) -> bool:
        """Delete a community with its collaborators, invites and subscription.

        Args:
            community_id: The community to delete

        Returns:
            True if a community was deleted
        """
        pass
