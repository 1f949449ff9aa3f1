"""Domain model entities for Rolo."""

from rolo.domain.model.access import (
    AccessEvent,
    AccessEventKind,
    AccessState,
    Membership,
)
from rolo.domain.model.audit import AuditLog
from rolo.domain.model.collaborator import Collaborator, CollaboratorUpdate
from rolo.domain.model.community import Community, CommunityDetails, CommunityUpdate
from rolo.domain.model.invite import Invite, InviteValidity
from rolo.domain.model.subscription import (
    UNLIMITED,
    CommunitySubscription,
    SeatLimits,
    SubscriptionPlan,
    SubscriptionUsage,
)

__all__ = [
    "AccessEvent",
    "AccessEventKind",
    "AccessState",
    "AuditLog",
    "Collaborator",
    "CollaboratorUpdate",
    "Community",
    "CommunityDetails",
    "CommunityUpdate",
    "CommunitySubscription",
    "Invite",
    "InviteValidity",
    "Membership",
    "SeatLimits",
    "SubscriptionPlan",
    "SubscriptionUsage",
    "UNLIMITED",
]
