"""Invite repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime

from rolo.domain.model.invite import Invite
from rolo.domain.value import (
    CommunityId,
    EmailAddress,
    InviteId,
    InviteStatus,
    InviteToken,
    UserId,
)


class InviteRepository(ABC):
    """Repository for Invite entity.

    Defines the contract for invite persistence operations.
    Implementations live in the persistence layer.
    """

    @abstractmethod
    async def find_by_id(self, invite_id: InviteId) -> Invite | None:
        """Find an invite by ID.

        Args:
            invite_id: The invite's unique identifier

        Returns:
            The invite if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_token(self, token: InviteToken) -> Invite | None:
        """Find an invite by token.

        Used when a user opens the invite deep link.

        Args:
            token: The invite token

        Returns:
            The invite if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_community(
        self,
        community_id: CommunityId,
        status: InviteStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Invite]:
        """Find invites of a community, newest first.

        Args:
            community_id: The community
            status: Optional status filter
            limit: Maximum number of results
            offset: Number of results to skip

        Returns:
            List of invites
        """
        pass

    @abstractmethod
    async def exists_pending_for_email(
        self, community_id: CommunityId, email: EmailAddress, now: datetime
    ) -> bool:
        """Check if a pending, unexpired invite exists for the email.

        Used during invite creation to prevent duplicates.

        Args:
            community_id: The community
            email: Invitee email
            now: Current time, invites expiring at or before it are ignored

        Returns:
            True if such an invite exists
        """
        pass

    @abstractmethod
    async def save(self, invite: Invite) -> Invite:
        """Save an invite (create or update).

        Args:
            invite: The invite to save

        Returns:
            The saved invite

        Raises:
            IntegrityError: If the token is already used
        """
        pass

    @abstractmethod
    async def mark_accepted(
        self, invite_id: InviteId, user_id: UserId, accepted_at: datetime
    ) -> Invite | None:
        """Move a pending invite to accepted.

        The update only applies while the invite is still pending, so two
        concurrent acceptances cannot both succeed.

        Args:
            invite_id: The invite
            user_id: User redeeming the invite
            accepted_at: Acceptance time

        Returns:
            The accepted invite, or None if it was no longer pending
        """
        pass

    @abstractmethod
    async def expire_stale(self, now: datetime) -> int:
        """Mark pending invites whose expiry has passed as expired.

        Args:
            now: Current time

        Returns:
            Number of invites expired
        """
        pass
