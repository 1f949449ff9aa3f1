"""Repository interfaces for the Rolo domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from rolo.domain.repository.audit import AuditLogRepository, AuditSink
from rolo.domain.repository.collaborator import CollaboratorRepository
from rolo.domain.repository.community import CommunityRepository
from rolo.domain.repository.invite import InviteRepository
from rolo.domain.repository.subscription import SubscriptionRepository
from rolo.domain.repository.transaction import TransactionManager

__all__ = [
    "AuditLogRepository",
    "AuditSink",
    "CollaboratorRepository",
    "CommunityRepository",
    "InviteRepository",
    "SubscriptionRepository",
    "TransactionManager",
]
