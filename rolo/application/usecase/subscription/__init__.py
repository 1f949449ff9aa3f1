"""Subscription use cases."""

from rolo.application.usecase.subscription.common import PlanItem, SubscriptionItem
from rolo.application.usecase.subscription.get_usage import (
    GetUsageRequest,
    GetUsageResponse,
    GetUsageUseCase,
)
from rolo.application.usecase.subscription.list_plans import (
    ListPlansResponse,
    ListPlansUseCase,
)
from rolo.application.usecase.subscription.manage_subscription import (
    CancelSubscriptionUseCase,
    ChangePlanRequest,
    ChangePlanUseCase,
    ReactivateSubscriptionUseCase,
    SubscriptionActionRequest,
    UpdatePaymentMethodRequest,
    UpdatePaymentMethodUseCase,
)
from rolo.application.usecase.subscription.record_status import (
    RecordStatusRequest,
    RecordStatusUseCase,
)

__all__ = [
    "CancelSubscriptionUseCase",
    "ChangePlanRequest",
    "ChangePlanUseCase",
    "GetUsageRequest",
    "GetUsageResponse",
    "GetUsageUseCase",
    "ListPlansResponse",
    "ListPlansUseCase",
    "PlanItem",
    "ReactivateSubscriptionUseCase",
    "RecordStatusRequest",
    "RecordStatusUseCase",
    "SubscriptionActionRequest",
    "SubscriptionItem",
    "UpdatePaymentMethodRequest",
    "UpdatePaymentMethodUseCase",
]
