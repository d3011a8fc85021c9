"""주문 조회 유스케이스 (소유자 전용)"""
from typing import Callable

from application.ports.unit_of_work import UnitOfWork
from domain.entities.payment_order import PaymentOrderEntity
from domain.exceptions import OrderNotFoundError


class GetOrderUseCase:
    def __init__(self, uow_factory: Callable[[], UnitOfWork]):
        self._uow_factory = uow_factory

    async def execute(self, order_id: str, account_id: str) -> PaymentOrderEntity:
        async with self._uow_factory() as uow:
            order = await uow.orders.get(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        order.ensure_owner(account_id)
        return order
