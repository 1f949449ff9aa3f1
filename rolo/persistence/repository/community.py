"""PostgreSQL implementation of Community repository."""

from collections.abc import Iterable
from typing import Optional

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rolo.domain.model import Community
from rolo.domain.repository import CommunityRepository
from rolo.domain.value import CommunityHandle, CommunityId
from rolo.persistence.mappers import community_to_dict, row_to_community
from rolo.persistence.tables import communities_table
from rolo.util.resilience import store_read, store_write


class PostgresCommunityRepository(CommunityRepository):
    """PostgreSQL implementation of CommunityRepository."""

    def __init__(self, session: AsyncSession, read_retries: int = 1) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
            read_retries: Retries for idempotent reads
        """
        self.session = session
        self.read_retries = read_retries

    @store_read
    async def find_by_id(self, community_id: CommunityId) -> Optional[Community]:
        stmt = select(communities_table).where(communities_table.c.id == community_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_community(dict(row)) if row else None

    @store_read
    async def find_by_handle(self, handle: CommunityHandle) -> Optional[Community]:
        """Find a community by handle, case-insensitively."""
        stmt = select(communities_table).where(
            func.lower(communities_table.c.handle) == handle.root
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_community(dict(row)) if row else None

    @store_read
    async def find_by_ids(self, community_ids: Iterable[CommunityId]) -> list[Community]:
        ids = list(community_ids)
        if not ids:
            return []
        stmt = select(communities_table).where(communities_table.c.id.in_(ids))
        result = await self.session.execute(stmt)
        return [row_to_community(dict(row)) for row in result.mappings().all()]

    @store_read
    async def handle_exists(
        self, handle: CommunityHandle, exclude_id: Optional[CommunityId] = None
    ) -> bool:
        stmt = select(communities_table.c.id).where(
            func.lower(communities_table.c.handle) == handle.root
        )
        if exclude_id is not None:
            stmt = stmt.where(communities_table.c.id != exclude_id)
        result = await self.session.execute(stmt)
        return result.first() is not None

    @store_write
    async def save(self, community: Community) -> Community:
        """Save a community (create or update).

        Raises:
            IntegrityError: If the handle is already used by another community
        """
        community_dict = community_to_dict(community)

        existing = await self.session.execute(
            select(communities_table.c.id).where(communities_table.c.id == community.id)
        )
        if existing.first():
            stmt = (
                update(communities_table)
                .where(communities_table.c.id == community.id)
                .values(**community_dict)
            )
        else:
            stmt = insert(communities_table).values(**community_dict)

        await self.session.execute(stmt)
        await self.session.flush()
        return community

    @store_write
    async def delete(self, community_id: CommunityId) -> bool:
        """Delete a community; collaborators, invites and subscription cascade."""
        stmt = delete(communities_table).where(communities_table.c.id == community_id)
        result = await self.session.execute(stmt)
        return result.rowcount > 0
