"""Expire stale invites use case (scheduled job)."""

from datetime import datetime

from pydantic import BaseModel

from rolo.application.usecase.base import BaseUseCase
from rolo.domain.service import InviteService


class ExpireInvitesRequest(BaseModel):
    now: datetime | None = None


class ExpireInvitesResponse(BaseModel):
    expired: int


class ExpireInvitesUseCase(BaseUseCase):
    """Mark pending invites past their expiry as expired."""

    def __init__(self, invite_service: InviteService) -> None:
        self.invite_service = invite_service

    async def execute(self, request: ExpireInvitesRequest) -> ExpireInvitesResponse:
        expired = await self.invite_service.expire_stale_invites(request.now)
        return ExpireInvitesResponse(expired=expired)
