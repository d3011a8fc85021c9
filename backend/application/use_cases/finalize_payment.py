"""결제 확정 유스케이스

테스트 승인 API와 PG 웹훅이 모두 이 유스케이스 하나로 주문 상태를 바꾼다.
웹훅은 중복/순서 뒤바뀜이 있을 수 있으므로 이미 종료된 주문에 대한 호출은
아무것도 바꾸지 않고 성공으로 처리한다. 포인트 적립은 주문 1건당 정확히 1회다.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from loguru import logger

from application.ports.unit_of_work import UnitOfWork
from domain.billing import calc_billing
from domain.entities.ledger import PointLedgerEntryEntity
from domain.entities.payment_order import trim_status_detail
from domain.enums import OrderStatus
from domain.exceptions import OrderNotFoundError, InvalidStatusError

FINAL_STATUSES = (OrderStatus.PAID, OrderStatus.FAILED)


@dataclass
class FinalizeInput:
    order_id: str
    next_status: OrderStatus
    gateway_provider: Optional[str] = None
    status_detail: Optional[str] = None


@dataclass
class FinalizeResult:
    applied: bool
    current_status: OrderStatus
    message: str
    credited_points: int = 0


class FinalizePaymentUseCase:
    def __init__(self, uow_factory: Callable[[], UnitOfWork],
                 clock: Callable[[], datetime] = datetime.utcnow):
        self._uow_factory = uow_factory
        self._clock = clock

    async def execute(self, input: FinalizeInput) -> FinalizeResult:
        if input.next_status not in FINAL_STATUSES:
            raise InvalidStatusError(input.next_status.value)
        detail = trim_status_detail(input.status_detail)

        async with self._uow_factory() as uow:
            order = await uow.orders.get(input.order_id)
            if order is None:
                raise OrderNotFoundError(input.order_id)
            if not order.can_transition_to(input.next_status):
                return self._ignored(input, order.status)

            applied = await uow.orders.transition(
                input.order_id, input.next_status, input.gateway_provider, detail, self._clock(),
            )
            if not applied:
                current = await uow.orders.get(input.order_id)
                return self._ignored(input, current.status)

            credited_points = 0
            if input.next_status is OrderStatus.PAID:
                billing = calc_billing(order.amount)
                logger.debug(f"정산 계산: {input.order_id} {billing.to_dict()}")
                credited_points = billing.credited_points
                if credited_points > 0:
                    await uow.ledger.append(PointLedgerEntryEntity.charge(
                        account_id=order.account_id, points=credited_points,
                        order_id=order.order_id, amount_pay_krw=billing.amount_pay_krw,
                    ))
            await uow.commit()

        logger.info(f"결제 확정: {input.order_id} READY -> {input.next_status.value} "
                    f"(provider={input.gateway_provider}, points={credited_points})")
        return FinalizeResult(applied=True, current_status=input.next_status,
                              message="transition_applied", credited_points=credited_points)

    @staticmethod
    def _ignored(input: FinalizeInput, current: OrderStatus) -> FinalizeResult:
        logger.warning(f"결제 확정 무시: {input.order_id} {current.value} -> {input.next_status.value}")
        return FinalizeResult(applied=False, current_status=current, message="transition_ignored")
