"""PostgreSQL repository implementations."""

from rolo.persistence.repository.audit import PostgresAuditLogRepository
from rolo.persistence.repository.collaborator import PostgresCollaboratorRepository
from rolo.persistence.repository.community import PostgresCommunityRepository
from rolo.persistence.repository.invite import PostgresInviteRepository
from rolo.persistence.repository.subscription import PostgresSubscriptionRepository

__all__ = [
    "PostgresAuditLogRepository",
    "PostgresCollaboratorRepository",
    "PostgresCommunityRepository",
    "PostgresInviteRepository",
    "PostgresSubscriptionRepository",
]
