"""Subscription management use cases (owner only).

Payments happen at the billing provider; these record the outcome the owner
chose and audit it.
"""

from uuid import UUID

import logfire
from pydantic import BaseModel, Field

from rolo.application.usecase.base import BaseUseCase
from rolo.application.usecase.subscription.common import SubscriptionItem
from rolo.domain.model import CommunitySubscription
from rolo.domain.service import (
    OWNER_ONLY,
    AccessControlService,
    AuditService,
    SubscriptionService,
)
from rolo.domain.value import AuditAction, BillingCycle, CommunityId, UserId


class ChangePlanRequest(BaseModel):
    """Change plan request."""

    user_id: str  # User ID from auth
    community_id: str
    plan_name: str
    billing_cycle: BillingCycle = BillingCycle.MONTHLY


class SubscriptionActionRequest(BaseModel):
    """Cancel or reactivate request."""

    user_id: str
    community_id: str


class UpdatePaymentMethodRequest(BaseModel):
    user_id: str
    community_id: str
    payment_method_id: str = Field(min_length=1, max_length=255)


def _snapshot(subscription: CommunitySubscription | None) -> dict | None:
    if subscription is None:
        return None
    return subscription.model_dump(
        mode="json",
        include={"plan_id", "status", "billing_cycle", "cancel_at_period_end"},
    )


class _OwnerSubscriptionUseCase(BaseUseCase):
    def __init__(
        self,
        access_control: AccessControlService,
        subscription_service: SubscriptionService,
        audit_service: AuditService,
    ) -> None:
        self.access_control = access_control
        self.subscription_service = subscription_service
        self.audit_service = audit_service

    async def _authorize(self, user_id: str, community_id: str) -> tuple[UserId, CommunityId]:
        owner_id = UserId(UUID(user_id))
        cid = CommunityId(UUID(community_id))
        await self.access_control.authorize(owner_id, cid, OWNER_ONLY)
        return owner_id, cid

    def _audit(
        self,
        actor_id: UserId,
        action: AuditAction,
        old: CommunitySubscription | None,
        new: CommunitySubscription,
    ) -> None:
        self.audit_service.record(
            actor_id,
            action,
            "community_subscriptions",
            community_id=new.community_id,
            record_id=new.id,
            old_values=_snapshot(old),
            new_values=_snapshot(new),
        )


class ChangePlanUseCase(_OwnerSubscriptionUseCase):
    """Use case for switching a community to another plan."""

    async def execute(self, request: ChangePlanRequest) -> SubscriptionItem:
        """Execute change plan use case.

        Downgrades below current usage are accepted; existing members keep
        their seats but new grants are blocked until usage fits.

        Raises:
            ForbiddenError: If the caller is not the owner
            NotFoundError: If the plan does not exist
        """
        owner_id, community_id = await self._authorize(
            request.user_id, request.community_id
        )
        with logfire.span(
            "change_plan", community_id=str(community_id), plan=request.plan_name
        ):
            previous = await self.subscription_service.get_subscription(community_id)
            subscription = await self.subscription_service.change_plan(
                community_id, request.plan_name, request.billing_cycle
            )
            self._audit(owner_id, AuditAction.PLAN_CHANGED, previous, subscription)
            return SubscriptionItem.from_subscription(subscription)


class CancelSubscriptionUseCase(_OwnerSubscriptionUseCase):
    """Schedule cancellation at the end of the current period."""

    async def execute(self, request: SubscriptionActionRequest) -> SubscriptionItem:
        owner_id, community_id = await self._authorize(
            request.user_id, request.community_id
        )
        previous = await self.subscription_service.require_subscription(community_id)
        subscription = await self.subscription_service.cancel(community_id)
        if subscription != previous:
            self._audit(
                owner_id, AuditAction.SUBSCRIPTION_CANCELED, previous, subscription
            )
        return SubscriptionItem.from_subscription(subscription)


class ReactivateSubscriptionUseCase(_OwnerSubscriptionUseCase):
    """Undo a scheduled cancellation."""

    async def execute(self, request: SubscriptionActionRequest) -> SubscriptionItem:
        owner_id, community_id = await self._authorize(
            request.user_id, request.community_id
        )
        previous = await self.subscription_service.require_subscription(community_id)
        subscription = await self.subscription_service.reactivate(community_id)
        self._audit(
            owner_id, AuditAction.SUBSCRIPTION_REACTIVATED, previous, subscription
        )
        return SubscriptionItem.from_subscription(subscription)


class UpdatePaymentMethodUseCase(_OwnerSubscriptionUseCase):
    """Record the payment method id returned by the billing provider."""

    async def execute(self, request: UpdatePaymentMethodRequest) -> SubscriptionItem:
        owner_id, community_id = await self._authorize(
            request.user_id, request.community_id
        )
        previous = await self.subscription_service.require_subscription(community_id)
        subscription = await self.subscription_service.update_payment_method(
            community_id, request.payment_method_id
        )
        self._audit(
            owner_id, AuditAction.PAYMENT_METHOD_UPDATED, previous, subscription
        )
        return SubscriptionItem.from_subscription(subscription)
