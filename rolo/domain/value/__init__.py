"""Domain value objects for Rolo."""

from rolo.domain.value.identifiers import (
    AuditLogId,
    CollaboratorId,
    CommunityId,
    InviteId,
    PlanId,
    SubscriptionId,
    UserId,
)
from rolo.domain.value.types import (
    AuditAction,
    BillingCycle,
    CollaboratorStatus,
    CommunityHandle,
    EmailAddress,
    IdentityClaims,
    InviteStatus,
    InviteToken,
    PhoneNumber,
    Role,
    SeatClass,
    SubscriptionStatus,
)

__all__ = [
    # Identifiers
    "UserId",
    "CommunityId",
    "CollaboratorId",
    "InviteId",
    "PlanId",
    "SubscriptionId",
    "AuditLogId",
    # Types
    "AuditAction",
    "BillingCycle",
    "CollaboratorStatus",
    "CommunityHandle",
    "EmailAddress",
    "IdentityClaims",
    "InviteStatus",
    "InviteToken",
    "PhoneNumber",
    "Role",
    "SeatClass",
    "SubscriptionStatus",
]
