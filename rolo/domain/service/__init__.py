"""Domain services."""

from .access_service import ANY_ROLE, MANAGER_ROLES, OWNER_ONLY, AccessControlService
from .audit_service import AuditService
from .base import Service
from .collaborator_service import CollaboratorService
from .community_service import CommunityService
from .event_bus import AccessEventBus, AccessEventHandler
from .identity_service import IdentityService, IdentityVerifier
from .invite_service import InviteService
from .notification_service import NotificationService, Notifier
from .seat_service import SeatLimitService
from .subscription_service import STATUS_TRANSITIONS, SubscriptionService

__all__ = [
    "ANY_ROLE",
    "AccessControlService",
    "AccessEventBus",
    "AccessEventHandler",
    "AuditService",
    "CollaboratorService",
    "CommunityService",
    "IdentityService",
    "IdentityVerifier",
    "InviteService",
    "MANAGER_ROLES",
    "NotificationService",
    "Notifier",
    "OWNER_ONLY",
    "STATUS_TRANSITIONS",
    "SeatLimitService",
    "Service",
    "SubscriptionService",
]
