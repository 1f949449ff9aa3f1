"""Record billing provider status use case."""

from uuid import UUID

from pydantic import BaseModel

from rolo.application.usecase.base import BaseUseCase
from rolo.application.usecase.subscription.common import SubscriptionItem
from rolo.domain.service import AuditService, SubscriptionService
from rolo.domain.value import AuditAction, CommunityId, SubscriptionStatus


class RecordStatusRequest(BaseModel):
    community_id: str
    status: SubscriptionStatus


class RecordStatusUseCase(BaseUseCase):
    """Apply a status reported by the billing provider.

    Runs as the system (no actor); the caller is responsible for verifying
    that the report really came from the provider.
    """

    def __init__(
        self, subscription_service: SubscriptionService, audit_service: AuditService
    ) -> None:
        self.subscription_service = subscription_service
        self.audit_service = audit_service

    async def execute(self, request: RecordStatusRequest) -> SubscriptionItem:
        community_id = CommunityId(UUID(request.community_id))
        previous = await self.subscription_service.require_subscription(community_id)
        subscription = await self.subscription_service.record_status(
            community_id, request.status
        )
        if subscription.status != previous.status:
            self.audit_service.record(
                None,
                AuditAction.SUBSCRIPTION_STATUS_CHANGED,
                "community_subscriptions",
                community_id=community_id,
                record_id=subscription.id,
                old_values={"status": previous.status.value},
                new_values={"status": subscription.status.value},
            )
        return SubscriptionItem.from_subscription(subscription)
