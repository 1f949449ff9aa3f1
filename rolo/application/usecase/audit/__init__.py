"""Audit use cases."""

from rolo.application.usecase.audit.list_audit_logs import (
    AuditLogItem,
    ListAuditLogsRequest,
    ListAuditLogsResponse,
    ListAuditLogsUseCase,
)
from rolo.application.usecase.audit.prune_audit_logs import (
    PruneAuditLogsRequest,
    PruneAuditLogsResponse,
    PruneAuditLogsUseCase,
)

__all__ = [
    "AuditLogItem",
    "ListAuditLogsRequest",
    "ListAuditLogsResponse",
    "ListAuditLogsUseCase",
    "PruneAuditLogsRequest",
    "PruneAuditLogsResponse",
    "PruneAuditLogsUseCase",
]
