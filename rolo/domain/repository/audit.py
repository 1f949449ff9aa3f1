"""Audit log interfaces.

AuditSink is the write side: it accepts entries without waiting and never
raises. AuditLogRepository is the query and retention side.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from rolo.domain.model.audit import AuditLog
from rolo.domain.value import AuditAction, CommunityId


class AuditSink(ABC):
    """Append-only, fire-and-forget destination for audit entries."""

    @abstractmethod
    def submit(self, entry: AuditLog) -> None:
        """Hand an entry to the sink.

        Must return immediately and must never raise; write failures are
        logged by the implementation.
        """
        pass

    @abstractmethod
    async def drain(self) -> None:
        """Wait until every submitted entry has been written or dropped."""
        pass


class AuditLogRepository(ABC):
    """Repository for reading and pruning audit logs."""

    @abstractmethod
    async def save(self, entry: AuditLog) -> AuditLog:
        pass

    @abstractmethod
    async def find_by_community(
        self,
        community_id: CommunityId,
        action: AuditAction | None = None,
        since: datetime | None = None,
        until: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[AuditLog]:
        """Find audit logs of a community, newest first.

        Args:
            community_id: The community
            action: Optional action filter
            since: Optional inclusive lower bound on created_at
            until: Optional exclusive upper bound on created_at
            limit: Maximum number of results
            offset: Number of results to skip

        Returns:
            List of audit logs
        """
        pass

    @abstractmethod
    async def delete_older_than(self, cutoff: datetime) -> int:
        """Delete entries created before the cutoff. Returns the count deleted."""
        pass
