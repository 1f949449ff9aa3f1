"""In-memory community repository for testing."""

from collections.abc import Iterable
from typing import Optional

from sqlalchemy.exc import IntegrityError

from rolo.domain.model import Community
from rolo.domain.repository import CommunityRepository
from rolo.domain.value import CommunityHandle, CommunityId

from .database import InMemoryDatabase


class InMemoryCommunityRepository(CommunityRepository):
    """In-memory implementation of CommunityRepository for testing."""

    def __init__(self, database: InMemoryDatabase) -> None:
        self.db = database

    async def find_by_id(self, community_id: CommunityId) -> Optional[Community]:
        return self.db.communities.get(community_id)

    async def find_by_handle(self, handle: CommunityHandle) -> Optional[Community]:
        for community in self.db.communities.values():
            if community.handle.root.lower() == handle.root:
                return community
        return None

    async def find_by_ids(self, community_ids: Iterable[CommunityId]) -> list[Community]:
        return [
            self.db.communities[community_id]
            for community_id in dict.fromkeys(community_ids)
            if community_id in self.db.communities
        ]

    async def handle_exists(
        self, handle: CommunityHandle, exclude_id: Optional[CommunityId] = None
    ) -> bool:
        existing = await self.find_by_handle(handle)
        return existing is not None and existing.id != exclude_id

    async def save(self, community: Community) -> Community:
        """Save a community (create or update).

        Raises:
            IntegrityError: If another community uses the handle
        """
        if await self.handle_exists(community.handle, exclude_id=community.id):
            raise IntegrityError("Duplicate community handle", None, Exception())

        self.db.put(self.db.communities, community.id, community)
        return community

    async def delete(self, community_id: CommunityId) -> bool:
        """Delete a community and cascade to its rows."""
        if not self.db.remove(self.db.communities, community_id):
            return False

        for table in (self.db.collaborators, self.db.invites, self.db.subscriptions):
            for key, row in list(table.items()):
                if row.community_id == community_id:
                    self.db.remove(table, key)
        return True
