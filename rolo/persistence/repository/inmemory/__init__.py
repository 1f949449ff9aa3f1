"""In-memory repository implementations for testing."""

from .audit import InMemoryAuditLogRepository, InMemoryAuditSink
from .collaborator import InMemoryCollaboratorRepository
from .community import InMemoryCommunityRepository
from .database import InMemoryDatabase
from .invite import InMemoryInviteRepository
from .subscription import InMemorySubscriptionRepository
from .transaction import InMemoryTransactionManager

__all__ = [
    "InMemoryAuditLogRepository",
    "InMemoryAuditSink",
    "InMemoryCollaboratorRepository",
    "InMemoryCommunityRepository",
    "InMemoryDatabase",
    "InMemoryInviteRepository",
    "InMemorySubscriptionRepository",
    "InMemoryTransactionManager",
]
