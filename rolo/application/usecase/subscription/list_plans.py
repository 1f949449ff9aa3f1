"""List plans use case."""

from pydantic import BaseModel

from rolo.application.usecase.subscription.common import PlanItem
from rolo.domain.service import SubscriptionService


class ListPlansResponse(BaseModel):
    plans: list[PlanItem]


class ListPlansUseCase:
    """Use case for listing the active plans, cheapest first."""

    def __init__(self, subscription_service: SubscriptionService) -> None:
        self.subscription_service = subscription_service

    async def execute(self) -> ListPlansResponse:
        plans = await self.subscription_service.list_plans()
        return ListPlansResponse(plans=[PlanItem.from_plan(plan) for plan in plans])
