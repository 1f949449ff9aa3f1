"""Audit log entry."""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from rolo.domain.model.common import DomainModel
from rolo.domain.value import AuditAction, AuditLogId, CommunityId, UserId
from rolo.util.clock import utcnow


class AuditLog(DomainModel):
    """Append-only record of a mutating decision.

    actor_id is None for system actions such as the invite expiry sweep.
    """

    id: AuditLogId
    actor_id: Optional[UserId] = None
    community_id: Optional[CommunityId] = None
    action: AuditAction
    table_name: str
    record_id: Optional[str] = None
    old_values: Optional[dict[str, Any]] = None
    new_values: Optional[dict[str, Any]] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
