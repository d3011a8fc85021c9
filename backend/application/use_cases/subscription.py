"""파트너 구독 유스케이스

구독 조회 시마다 기간 갱신을 시도한다 (별도 스케줄러 없음).
"""
from datetime import datetime
from typing import Callable

from loguru import logger

from application.ports.unit_of_work import UnitOfWork
from domain.entities.subscription import SubscriptionInfo, refresh_subscription
from domain.enums import SubscriptionPlan
from domain.exceptions import ConcurrentUpdateError


class GetSubscriptionUseCase:
    def __init__(self, uow_factory: Callable[[], UnitOfWork],
                 clock: Callable[[], datetime] = datetime.utcnow):
        self._uow_factory = uow_factory
        self._clock = clock

    async def execute(self, account_id: str) -> SubscriptionInfo:
        now = self._clock()
        async with self._uow_factory() as uow:
            account = await uow.accounts.get_or_create(account_id)
            current = account.subscription
            refreshed = refresh_subscription(current, now)
            if refreshed is current:
                await uow.commit()
                return current

            saved = await uow.accounts.save_subscription(
                account_id, refreshed, now, expected=current,
            )
            if not saved:
                # 다른 요청이 먼저 갱신함
                latest = await uow.accounts.get(account_id)
                return latest.subscription
            await uow.commit()

        logger.info(f"구독 갱신: {account_id} -> {refreshed.status.value} "
                    f"(until={refreshed.current_period_end})")
        return refreshed


class StartSubscriptionUseCase:
    def __init__(self, uow_factory: Callable[[], UnitOfWork],
                 clock: Callable[[], datetime] = datetime.utcnow):
        self._uow_factory = uow_factory
        self._clock = clock

    async def execute(self, account_id: str, plan: SubscriptionPlan, auto_renew: bool) -> SubscriptionInfo:
        now = self._clock()
        subscription = SubscriptionInfo.started(plan, auto_renew, now)
        async with self._uow_factory() as uow:
            await uow.accounts.get_or_create(account_id)
            await uow.accounts.save_subscription(account_id, subscription, now)
            await uow.commit()
        logger.info(f"구독 시작: {account_id} plan={plan.value} auto_renew={auto_renew}")
        return subscription


class CancelSubscriptionUseCase:
    def __init__(self, uow_factory: Callable[[], UnitOfWork],
                 clock: Callable[[], datetime] = datetime.utcnow):
        self._uow_factory = uow_factory
        self._clock = clock

    async def execute(self, account_id: str) -> SubscriptionInfo:
        now = self._clock()
        async with self._uow_factory() as uow:
            account = await uow.accounts.get_or_create(account_id)
            subscription = account.subscription.canceled()
            saved = await uow.accounts.save_subscription(
                account_id, subscription, now, expected=account.subscription,
            )
            if not saved:
                # 조회 후 갱신이 먼저 반영됨
                raise ConcurrentUpdateError(f"subscription:{account_id}")
            await uow.commit()
        logger.info(f"구독 해지: {account_id}")
        return subscription
