"""파트너 구독 값 객체와 기간 갱신 규칙"""
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional

from domain.enums import SubscriptionStatus, SubscriptionPlan

PERIOD_LENGTH = timedelta(days=30)


@dataclass(frozen=True)
class SubscriptionInfo:
    status: SubscriptionStatus = SubscriptionStatus.NONE
    plan: Optional[SubscriptionPlan] = None
    auto_renew: bool = False
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    next_billing_at: Optional[datetime] = None

    @classmethod
    def started(cls, plan: SubscriptionPlan, auto_renew: bool, now: datetime) -> "SubscriptionInfo":
        end = now + PERIOD_LENGTH
        return cls(status=SubscriptionStatus.ACTIVE, plan=plan, auto_renew=auto_renew,
                   current_period_start=now, current_period_end=end,
                   next_billing_at=end if auto_renew else None)

    def canceled(self) -> "SubscriptionInfo":
        return replace(self, status=SubscriptionStatus.CANCELED, auto_renew=False, next_billing_at=None)


def refresh_subscription(subscription: SubscriptionInfo, now: datetime) -> SubscriptionInfo:
    """만료된 활성 구독을 갱신하거나 만료 처리한다.

    아직 기간이 남아 있거나 활성 상태가 아니면 같은 객체를 그대로 돌려준다.
    반복 호출해도 경과하지 않은 기간을 다시 늘리지 않는다.
    """
    if subscription.status is not SubscriptionStatus.ACTIVE:
        return subscription
    end = subscription.current_period_end
    if end is None or end > now:
        return subscription

    if subscription.auto_renew:
        next_end = now + PERIOD_LENGTH
        return replace(subscription, status=SubscriptionStatus.ACTIVE,
                       current_period_start=now, current_period_end=next_end,
                       next_billing_at=next_end)

    return replace(subscription, status=SubscriptionStatus.EXPIRED, next_billing_at=None)
