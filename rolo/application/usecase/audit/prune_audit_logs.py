"""Prune audit logs use case (scheduled job)."""

from pydantic import BaseModel, Field

from rolo.application.usecase.base import BaseUseCase
from rolo.config import Settings
from rolo.domain.service import AuditService


class PruneAuditLogsRequest(BaseModel):
    older_than_days: int | None = Field(default=None, ge=1)  # Defaults to retention


class PruneAuditLogsResponse(BaseModel):
    deleted: int


class PruneAuditLogsUseCase(BaseUseCase):
    """Delete audit entries older than the retention window."""

    def __init__(self, audit_service: AuditService, settings: Settings) -> None:
        self.audit_service = audit_service
        self.settings = settings

    async def execute(self, request: PruneAuditLogsRequest) -> PruneAuditLogsResponse:
        days = request.older_than_days or self.settings.audit.retention_days
        deleted = await self.audit_service.prune(days)
        return PruneAuditLogsResponse(deleted=deleted)
