"""Collaborator response item shared by the collaborator use cases."""

from datetime import datetime

from pydantic import BaseModel

from rolo.domain.model import Collaborator
from rolo.domain.value import CollaboratorStatus, Role


class CollaboratorItem(BaseModel):
    """Collaborator in responses."""

    collaborator_id: str
    user_id: str
    community_id: str
    role: Role
    status: CollaboratorStatus
    invited_by: str | None = None
    joined_at: datetime | None = None
    created_at: datetime

    @classmethod
    def from_collaborator(cls, collaborator: Collaborator) -> "CollaboratorItem":
        return cls(
            collaborator_id=str(collaborator.id),
            user_id=str(collaborator.user_id),
            community_id=str(collaborator.community_id),
            role=collaborator.role,
            status=collaborator.status,
            invited_by=str(collaborator.invited_by) if collaborator.invited_by else None,
            joined_at=collaborator.joined_at,
            created_at=collaborator.created_at,
        )
