"""PostgreSQL implementation of AuditLog repository."""

from datetime import datetime
from typing import Optional

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from rolo.domain.model import AuditLog
from rolo.domain.repository import AuditLogRepository
from rolo.domain.value import AuditAction, CommunityId
from rolo.persistence.mappers import audit_log_to_dict, row_to_audit_log
from rolo.persistence.tables import audit_logs_table
from rolo.util.resilience import store_read, store_write


class PostgresAuditLogRepository(AuditLogRepository):
    """PostgreSQL implementation of AuditLogRepository."""

    def __init__(self, session: AsyncSession, read_retries: int = 1) -> None:
        self.session = session
        self.read_retries = read_retries

    @store_write
    async def save(self, entry: AuditLog) -> AuditLog:
        await self.session.execute(
            insert(audit_logs_table).values(**audit_log_to_dict(entry))
        )
        await self.session.flush()
        return entry

    @store_read
    async def find_by_community(
        self,
        community_id: CommunityId,
        action: Optional[AuditAction] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[AuditLog]:
        stmt = (
            select(audit_logs_table)
            .where(audit_logs_table.c.community_id == community_id)
            .order_by(audit_logs_table.c.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        if action:
            stmt = stmt.where(audit_logs_table.c.action == action.value)
        if since:
            stmt = stmt.where(audit_logs_table.c.created_at >= since)
        if until:
            stmt = stmt.where(audit_logs_table.c.created_at < until)

        result = await self.session.execute(stmt)
        return [row_to_audit_log(dict(row)) for row in result.mappings().all()]

    @store_write
    async def delete_older_than(self, cutoff: datetime) -> int:
        stmt = delete(audit_logs_table).where(audit_logs_table.c.created_at < cutoff)
        result = await self.session.execute(stmt)
        return result.rowcount
