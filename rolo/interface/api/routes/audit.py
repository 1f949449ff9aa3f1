"""Audit log routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header, Query

from rolo.application.usecase.audit import (
    ListAuditLogsRequest,
    ListAuditLogsResponse,
    ListAuditLogsUseCase,
)
from rolo.domain.service import IdentityService
from rolo.domain.value import AuditAction
from rolo.interface.api.auth import authenticate

router = APIRouter(tags=["audit"], route_class=DishkaRoute)


@router.get("/communities/{community_id}/audit-logs", response_model=ListAuditLogsResponse)
async def list_audit_logs(
    community_id: UUID,
    list_audit_logs_use_case: FromDishka[ListAuditLogsUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
    action: AuditAction | None = Query(default=None),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
) -> ListAuditLogsResponse:
    """Read the community's audit trail, newest first (owner or admin)."""
    user_id = await authenticate(identity_service, authorization)
    return await list_audit_logs_use_case.execute(
        ListAuditLogsRequest(
            user_id=user_id,
            community_id=str(community_id),
            action=action,
            limit=limit,
            offset=offset,
        )
    )
