"""Invite response item shared by the invite and community use cases."""

from datetime import datetime

from pydantic import BaseModel

from rolo.adapter.email import invite_link
from rolo.domain.model import Invite
from rolo.domain.value import InviteStatus, Role


class InviteItem(BaseModel):
    """Invite item in response."""

    invite_id: str
    community_id: str
    email: str
    role: Role
    status: InviteStatus
    invite_url: str  # Accept deep link with token
    invited_by: str
    created_at: datetime
    expires_at: datetime
    accepted_at: datetime | None = None
    email_sent: bool | None = None  # Only set right after sending

    @classmethod
    def from_invite(
        cls, invite: Invite, frontend_url: str, email_sent: bool | None = None
    ) -> "InviteItem":
        return cls(
            invite_id=str(invite.id),
            community_id=str(invite.community_id),
            email=invite.email.root,
            role=invite.role,
            status=invite.status,
            invite_url=invite_link(frontend_url, invite.token),
            invited_by=str(invite.invited_by),
            created_at=invite.created_at,
            expires_at=invite.expires_at,
            accepted_at=invite.accepted_at,
            email_sent=email_sent,
        )
