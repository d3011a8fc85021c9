"""미결제 주문 정리 유스케이스

생성 후 일정 시간이 지나도 READY로 남은 주문을 결제 확정 유스케이스를 통해
FAILED로 바꾼다. 만료 시간이 설정되지 않으면 아무것도 하지 않는다.
"""
from datetime import datetime, timedelta
from typing import Callable, Optional

from loguru import logger

from application.ports.unit_of_work import UnitOfWork
from application.use_cases.finalize_payment import FinalizePaymentUseCase, FinalizeInput
from domain.enums import OrderStatus

EXPIRED_DETAIL = "ORDER_EXPIRED"


class ReapStaleOrdersUseCase:
    def __init__(self, uow_factory: Callable[[], UnitOfWork], finalizer: FinalizePaymentUseCase,
                 expiry_minutes: Optional[int], clock: Callable[[], datetime] = datetime.utcnow):
        self._uow_factory = uow_factory
        self._finalizer = finalizer
        self._expiry_minutes = expiry_minutes
        self._clock = clock

    async def execute(self) -> int:
        if not self._expiry_minutes or self._expiry_minutes <= 0:
            return 0
        cutoff = self._clock() - timedelta(minutes=self._expiry_minutes)
        async with self._uow_factory() as uow:
            stale = await uow.orders.list_ready_before(cutoff)

        reaped = 0
        for order in stale:
            result = await self._finalizer.execute(FinalizeInput(
                order_id=order.order_id, next_status=OrderStatus.FAILED,
                gateway_provider=order.gateway_provider, status_detail=EXPIRED_DETAIL,
            ))
            if result.applied:
                reaped += 1
        if reaped:
            logger.info(f"미결제 주문 {reaped}건 만료 처리 (기준: {cutoff.isoformat()})")
        return reaped
