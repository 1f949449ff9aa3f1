"""In-memory audit log repository and sink for testing."""

from datetime import datetime
from typing import Optional

from rolo.domain.model import AuditLog
from rolo.domain.repository import AuditLogRepository, AuditSink
from rolo.domain.value import AuditAction, CommunityId

from .database import InMemoryDatabase


class InMemoryAuditLogRepository(AuditLogRepository):
    """In-memory implementation of AuditLogRepository for testing."""

    def __init__(self, database: InMemoryDatabase) -> None:
        self.db = database

    async def save(self, entry: AuditLog) -> AuditLog:
        self.db.put(self.db.audit_logs, entry.id, entry)
        return entry

    async def find_by_community(
        self,
        community_id: CommunityId,
        action: Optional[AuditAction] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[AuditLog]:
        matches = [
            entry
            for entry in self.db.audit_logs.values()
            if entry.community_id == community_id
            and (action is None or entry.action == action)
            and (since is None or entry.created_at >= since)
            and (until is None or entry.created_at < until)
        ]
        matches.sort(key=lambda e: e.created_at, reverse=True)
        return matches[offset : offset + limit]

    async def delete_older_than(self, cutoff: datetime) -> int:
        stale = [e.id for e in self.db.audit_logs.values() if e.created_at < cutoff]
        for entry_id in stale:
            self.db.remove(self.db.audit_logs, entry_id)
        return len(stale)


class InMemoryAuditSink(AuditSink):
    """Writes entries synchronously and outside any transaction journal."""

    def __init__(self, database: InMemoryDatabase) -> None:
        self.db = database

    def submit(self, entry: AuditLog) -> None:
        self.db.audit_logs[entry.id] = entry

    async def drain(self) -> None:
        return None
