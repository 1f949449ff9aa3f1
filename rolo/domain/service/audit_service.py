"""Audit domain service."""

from datetime import timedelta
from typing import Any
from uuid import uuid4

import logfire

from rolo.domain.model import AuditLog
from rolo.domain.repository import AuditLogRepository, AuditSink
from rolo.domain.value import AuditAction, AuditLogId, CommunityId, UserId
from rolo.util.clock import utcnow

from .base import Service


class AuditService(Service):
    """Writes audit records without ever failing the caller, and reads them back."""

    def __init__(
        self, audit_sink: AuditSink, audit_log_repository: AuditLogRepository
    ) -> None:
        self.audit_sink = audit_sink
        self.audit_log_repository = audit_log_repository

    def record(
        self,
        actor_id: UserId | None,
        action: AuditAction,
        table_name: str,
        community_id: CommunityId | None = None,
        record_id: Any = None,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> None:
        """Record a mutating decision, fire-and-forget.

        Never raises; failures are logged as warnings.
        """
        try:
            entry = AuditLog(
                id=AuditLogId(uuid4()),
                actor_id=actor_id,
                community_id=community_id,
                action=action,
                table_name=table_name,
                record_id=str(record_id) if record_id is not None else None,
                old_values=old_values,
                new_values=new_values,
                ip_address=ip_address,
                user_agent=user_agent,
                created_at=utcnow(),
            )
            self.audit_sink.submit(entry)
        except Exception as e:
            logfire.warn(
                "Audit record dropped",
                action=action.value,
                table_name=table_name,
                error=str(e),
            )

    async def list_for_community(
        self,
        community_id: CommunityId,
        action: AuditAction | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[AuditLog]:
        return await self.audit_log_repository.find_by_community(
            community_id, action=action, limit=limit, offset=offset
        )

    async def prune(self, older_than_days: int) -> int:
        """Delete audit logs older than the retention window.

        Args:
            older_than_days: Retention in days

        Returns:
            Number of entries deleted
        """
        with logfire.span("audit_service.prune", older_than_days=older_than_days):
            cutoff = utcnow() - timedelta(days=older_than_days)
            deleted = await self.audit_log_repository.delete_older_than(cutoff)
            logfire.info("Audit logs pruned", deleted=deleted, cutoff=cutoff.isoformat())
            return deleted
