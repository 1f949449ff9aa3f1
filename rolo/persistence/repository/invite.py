"""PostgreSQL implementation of Invite repository."""

from datetime import datetime
from typing import Optional

from sqlalchemy import and_, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rolo.domain.model import Invite
from rolo.domain.repository import InviteRepository
from rolo.domain.value import (
    CommunityId,
    EmailAddress,
    InviteId,
    InviteStatus,
    InviteToken,
    UserId,
)
from rolo.persistence.mappers import invite_to_dict, row_to_invite
from rolo.persistence.tables import invites_table
from rolo.util.resilience import store_read, store_write


class PostgresInviteRepository(InviteRepository):
    """PostgreSQL implementation of InviteRepository."""

    def __init__(self, session: AsyncSession, read_retries: int = 1) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
            read_retries: Retries for idempotent reads
        """
        self.session = session
        self.read_retries = read_retries

    @store_read
    async def find_by_id(self, invite_id: InviteId) -> Optional[Invite]:
        """Find an invite by ID.

        Args:
            invite_id: Invite ID to look up

        Returns:
            Invite if found, None otherwise
        """
        stmt = select(invites_table).where(invites_table.c.id == invite_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invite(dict(row)) if row else None

    @store_read
    async def find_by_token(self, token: InviteToken) -> Optional[Invite]:
        """Find an invite by its token.

        Args:
            token: Invite token to look up

        Returns:
            Invite if found, None otherwise
        """
        stmt = select(invites_table).where(invites_table.c.token == token.root)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invite(dict(row)) if row else None

    @store_read
    async def find_by_community(
        self,
        community_id: CommunityId,
        status: Optional[InviteStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Invite]:
        """Find invites of a community with pagination, newest first."""
        stmt = (
            select(invites_table)
            .where(invites_table.c.community_id == community_id)
            .order_by(invites_table.c.created_at.desc())
            .limit(limit)
            .offset(offset)
        )

        if status:
            stmt = stmt.where(invites_table.c.status == status.value)

        result = await self.session.execute(stmt)
        rows = result.mappings().all()
        return [row_to_invite(dict(row)) for row in rows]

    @store_read
    async def exists_pending_for_email(
        self, community_id: CommunityId, email: EmailAddress, now: datetime
    ) -> bool:
        """Check if a pending, unexpired invite exists for the email.

        Fast check without loading full invite data.
        """
        stmt = select(invites_table.c.id).where(
            and_(
                invites_table.c.community_id == community_id,
                invites_table.c.email == email.root,
                invites_table.c.status == InviteStatus.PENDING.value,
                invites_table.c.expires_at > now,
            )
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    @store_write
    async def save(self, invite: Invite) -> Invite:
        """Save an invite (create or update).

        Args:
            invite: Invite to save

        Returns:
            Saved invite
        """
        invite_dict = invite_to_dict(invite)

        existing = await self.session.execute(
            select(invites_table.c.id).where(invites_table.c.id == invite.id)
        )

        if existing.first():
            stmt = (
                update(invites_table)
                .where(invites_table.c.id == invite.id)
                .values(**invite_dict)
            )
        else:
            stmt = insert(invites_table).values(**invite_dict)

        await self.session.execute(stmt)
        await self.session.flush()
        return invite

    @store_write
    async def mark_accepted(
        self, invite_id: InviteId, user_id: UserId, accepted_at: datetime
    ) -> Optional[Invite]:
        """Conditionally accept a pending invite.

        The row lock taken by the UPDATE makes a concurrent second accept
        wait, then match nothing.
        """
        stmt = (
            update(invites_table)
            .where(
                and_(
                    invites_table.c.id == invite_id,
                    invites_table.c.status == InviteStatus.PENDING.value,
                )
            )
            .values(
                status=InviteStatus.ACCEPTED.value,
                accepted_at=accepted_at,
                accepted_by_user_id=user_id,
            )
            .returning(*invites_table.c)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invite(dict(row)) if row else None

    @store_write
    async def expire_stale(self, now: datetime) -> int:
        stmt = (
            update(invites_table)
            .where(
                and_(
                    invites_table.c.status == InviteStatus.PENDING.value,
                    invites_table.c.expires_at <= now,
                )
            )
            .values(status=InviteStatus.EXPIRED.value)
        )
        result = await self.session.execute(stmt)
        return result.rowcount
