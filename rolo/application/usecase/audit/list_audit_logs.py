"""List audit logs use case."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from rolo.application.usecase.base import BaseUseCase
from rolo.domain.service import MANAGER_ROLES, AccessControlService, AuditService
from rolo.domain.value import AuditAction, CommunityId, UserId


class AuditLogItem(BaseModel):
    """Audit log entry in responses."""

    audit_log_id: str
    actor_id: str | None  # None for system actions
    action: AuditAction
    table_name: str
    record_id: str | None = None
    old_values: dict[str, Any] | None = None
    new_values: dict[str, Any] | None = None
    created_at: datetime


class ListAuditLogsRequest(BaseModel):
    """List audit logs request."""

    user_id: str  # User ID from auth
    community_id: str
    action: AuditAction | None = None
    limit: int = Field(default=100, ge=1, le=500)
    offset: int = Field(default=0, ge=0)


class ListAuditLogsResponse(BaseModel):
    entries: list[AuditLogItem]
    total: int


class ListAuditLogsUseCase(BaseUseCase):
    """Use case for reading a community's audit trail (owner or admin)."""

    def __init__(
        self, access_control: AccessControlService, audit_service: AuditService
    ) -> None:
        self.access_control = access_control
        self.audit_service = audit_service

    async def execute(self, request: ListAuditLogsRequest) -> ListAuditLogsResponse:
        user_id = UserId(UUID(request.user_id))
        community_id = CommunityId(UUID(request.community_id))
        await self.access_control.authorize(user_id, community_id, MANAGER_ROLES)

        entries = await self.audit_service.list_for_community(
            community_id,
            action=request.action,
            limit=request.limit,
            offset=request.offset,
        )
        items = [
            AuditLogItem(
                audit_log_id=str(entry.id),
                actor_id=str(entry.actor_id) if entry.actor_id else None,
                action=entry.action,
                table_name=entry.table_name,
                record_id=entry.record_id,
                old_values=entry.old_values,
                new_values=entry.new_values,
                created_at=entry.created_at,
            )
            for entry in entries
        ]
        return ListAuditLogsResponse(entries=items, total=len(items))
