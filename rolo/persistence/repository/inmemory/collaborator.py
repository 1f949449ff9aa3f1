"""In-memory collaborator repository for testing."""

from collections.abc import Iterable
from typing import Optional

from sqlalchemy.exc import IntegrityError

from rolo.domain.model import Collaborator
from rolo.domain.repository import CollaboratorRepository
from rolo.domain.value import (
    CollaboratorId,
    CollaboratorStatus,
    CommunityId,
    Role,
    UserId,
)

from .database import InMemoryDatabase


class InMemoryCollaboratorRepository(CollaboratorRepository):
    """In-memory implementation of CollaboratorRepository for testing."""

    def __init__(self, database: InMemoryDatabase) -> None:
        self.db = database

    async def find_by_user_and_community(
        self, user_id: UserId, community_id: CommunityId
    ) -> Optional[Collaborator]:
        for collaborator in self.db.collaborators.values():
            if (
                collaborator.user_id == user_id
                and collaborator.community_id == community_id
            ):
                return collaborator
        return None

    async def find_by_community(
        self, community_id: CommunityId, status: Optional[CollaboratorStatus] = None
    ) -> list[Collaborator]:
        matches = [
            c
            for c in self.db.collaborators.values()
            if c.community_id == community_id and (status is None or c.status == status)
        ]
        return sorted(matches, key=lambda c: c.created_at)

    async def find_by_user(
        self, user_id: UserId, status: Optional[CollaboratorStatus] = None
    ) -> list[Collaborator]:
        matches = [
            c
            for c in self.db.collaborators.values()
            if c.user_id == user_id and (status is None or c.status == status)
        ]
        return sorted(matches, key=lambda c: c.created_at)

    async def exists_approved_for_user(self, user_id: UserId) -> bool:
        return any(
            c.user_id == user_id and c.is_approved
            for c in self.db.collaborators.values()
        )

    async def count_approved(
        self, community_id: CommunityId, roles: Iterable[Role]
    ) -> int:
        role_set = set(roles)
        return sum(
            1
            for c in self.db.collaborators.values()
            if c.community_id == community_id and c.is_approved and c.role in role_set
        )

    async def save(self, collaborator: Collaborator) -> Collaborator:
        """Save a collaborator (create or update).

        Raises:
            IntegrityError: If the (user, community) pair already exists
        """
        existing = await self.find_by_user_and_community(
            collaborator.user_id, collaborator.community_id
        )
        if existing and existing.id != collaborator.id:
            raise IntegrityError("Duplicate collaborator", None, Exception())
        if collaborator.community_id not in self.db.communities:
            raise IntegrityError("Unknown community", None, Exception())

        self.db.put(self.db.collaborators, collaborator.id, collaborator)
        return collaborator

    async def save_if_status(
        self, collaborator: Collaborator, expected: CollaboratorStatus
    ) -> Optional[Collaborator]:
        stored = self.db.collaborators.get(collaborator.id)
        if not stored or stored.status != expected:
            return None

        self.db.put(self.db.collaborators, collaborator.id, collaborator)
        return collaborator

    async def delete(self, collaborator_id: CollaboratorId) -> bool:
        return self.db.remove(self.db.collaborators, collaborator_id)
