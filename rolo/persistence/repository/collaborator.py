"""PostgreSQL implementation of Collaborator repository."""

from collections.abc import Iterable
from typing import Optional

from sqlalchemy import and_, delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rolo.domain.model import Collaborator
from rolo.domain.repository import CollaboratorRepository
from rolo.domain.value import (
    CollaboratorId,
    CollaboratorStatus,
    CommunityId,
    Role,
    UserId,
)
from rolo.persistence.mappers import collaborator_to_dict, row_to_collaborator
from rolo.persistence.tables import collaborators_table
from rolo.util.resilience import store_read, store_write


class PostgresCollaboratorRepository(CollaboratorRepository):
    """PostgreSQL implementation of CollaboratorRepository."""

    def __init__(self, session: AsyncSession, read_retries: int = 1) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
            read_retries: Retries for idempotent reads
        """
        self.session = session
        self.read_retries = read_retries

    @store_read
    async def find_by_user_and_community(
        self, user_id: UserId, community_id: CommunityId
    ) -> Optional[Collaborator]:
        stmt = select(collaborators_table).where(
            and_(
                collaborators_table.c.user_id == user_id,
                collaborators_table.c.community_id == community_id,
            )
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_collaborator(dict(row)) if row else None

    @store_read
    async def find_by_community(
        self, community_id: CommunityId, status: Optional[CollaboratorStatus] = None
    ) -> list[Collaborator]:
        stmt = (
            select(collaborators_table)
            .where(collaborators_table.c.community_id == community_id)
            .order_by(collaborators_table.c.created_at)
        )
        if status:
            stmt = stmt.where(collaborators_table.c.status == status.value)

        result = await self.session.execute(stmt)
        return [row_to_collaborator(dict(row)) for row in result.mappings().all()]

    @store_read
    async def find_by_user(
        self, user_id: UserId, status: Optional[CollaboratorStatus] = None
    ) -> list[Collaborator]:
        stmt = (
            select(collaborators_table)
            .where(collaborators_table.c.user_id == user_id)
            .order_by(collaborators_table.c.created_at)
        )
        if status:
            stmt = stmt.where(collaborators_table.c.status == status.value)

        result = await self.session.execute(stmt)
        return [row_to_collaborator(dict(row)) for row in result.mappings().all()]

    @store_read
    async def exists_approved_for_user(self, user_id: UserId) -> bool:
        stmt = (
            select(collaborators_table.c.id)
            .where(
                and_(
                    collaborators_table.c.user_id == user_id,
                    collaborators_table.c.status == CollaboratorStatus.APPROVED.value,
                )
            )
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    @store_read
    async def count_approved(
        self, community_id: CommunityId, roles: Iterable[Role]
    ) -> int:
        stmt = (
            select(func.count())
            .select_from(collaborators_table)
            .where(
                and_(
                    collaborators_table.c.community_id == community_id,
                    collaborators_table.c.status == CollaboratorStatus.APPROVED.value,
                    collaborators_table.c.role.in_([role.value for role in roles]),
                )
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    @store_write
    async def save(self, collaborator: Collaborator) -> Collaborator:
        """Save a collaborator (create or update).

        Raises:
            IntegrityError: If the (user, community) pair already exists
        """
        collaborator_dict = collaborator_to_dict(collaborator)

        existing = await self.session.execute(
            select(collaborators_table.c.id).where(
                collaborators_table.c.id == collaborator.id
            )
        )
        if existing.first():
            stmt = (
                update(collaborators_table)
                .where(collaborators_table.c.id == collaborator.id)
                .values(**collaborator_dict)
            )
        else:
            stmt = insert(collaborators_table).values(**collaborator_dict)

        await self.session.execute(stmt)
        await self.session.flush()
        return collaborator

    @store_write
    async def save_if_status(
        self, collaborator: Collaborator, expected: CollaboratorStatus
    ) -> Optional[Collaborator]:
        """Conditionally update a collaborator.

        A concurrent transition holds the row lock; once it commits this
        UPDATE re-checks the status and matches nothing.
        """
        stmt = (
            update(collaborators_table)
            .where(
                and_(
                    collaborators_table.c.id == collaborator.id,
                    collaborators_table.c.status == expected.value,
                )
            )
            .values(**collaborator_to_dict(collaborator))
            .returning(*collaborators_table.c)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_collaborator(dict(row)) if row else None

    @store_write
    async def delete(self, collaborator_id: CollaboratorId) -> bool:
        stmt = delete(collaborators_table).where(
            collaborators_table.c.id == collaborator_id
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0
