"""구독 관련 스키마"""
from datetime import datetime
from typing import Optional
from pydantic import Field

from api.schemas.payment import CamelModel
from domain.enums import SubscriptionPlan


class SubscriptionResponse(CamelModel):
    status: str
    plan: Optional[str] = None
    auto_renew: bool = Field(False, alias="autoRenew")
    current_period_start: Optional[datetime] = Field(None, alias="currentPeriodStart")
    current_period_end: Optional[datetime] = Field(None, alias="currentPeriodEnd")
    next_billing_at: Optional[datetime] = Field(None, alias="nextBillingAt")


class StartSubscriptionRequest(CamelModel):
    plan: SubscriptionPlan = SubscriptionPlan.MONTH
    auto_renew: bool = Field(False, alias="autoRenew")


def to_subscription_response(sub) -> SubscriptionResponse:
    return SubscriptionResponse(
        status=sub.status.value, plan=sub.plan.value if sub.plan else None, auto_renew=sub.auto_renew,
        current_period_start=sub.current_period_start, current_period_end=sub.current_period_end,
        next_billing_at=sub.next_billing_at,
    )
