"""Strongly typed identifiers for Rolo domain entities.

Using NewType keeps community, collaborator and invite ids from being mixed up.
"""

from typing import NewType
from uuid import UUID

# Owned by the external identity provider; only ever referenced by id
UserId = NewType("UserId", UUID)

CommunityId = NewType("CommunityId", UUID)
CollaboratorId = NewType("CollaboratorId", UUID)
InviteId = NewType("InviteId", UUID)
PlanId = NewType("PlanId", UUID)
SubscriptionId = NewType("SubscriptionId", UUID)
AuditLogId = NewType("AuditLogId", UUID)
