"""결제 주문 생성 유스케이스"""
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict

from application.ports.unit_of_work import UnitOfWork
from domain.entities.payment_order import PaymentOrderEntity, generate_order_id
from domain.enums import OrderStatus
from domain.exceptions import UnknownProductError


@dataclass
class CreateOrderInput:
    account_id: str
    product_id: str


@dataclass
class CreateOrderOutput:
    order_id: str
    amount: int


class CreateOrderUseCase:
    def __init__(self, uow_factory: Callable[[], UnitOfWork], price_table: Dict[str, int],
                 clock: Callable[[], datetime] = datetime.utcnow):
        self._uow_factory = uow_factory
        self._prices = price_table
        self._clock = clock

    async def execute(self, input: CreateOrderInput) -> CreateOrderOutput:
        amount = self._prices.get(input.product_id)
        if not amount:
            raise UnknownProductError(input.product_id)

        now = self._clock()
        order = PaymentOrderEntity(
            order_id=generate_order_id(now), account_id=input.account_id,
            product_id=input.product_id, amount=amount, status=OrderStatus.READY,
            created_at=now, updated_at=now,
        )
        async with self._uow_factory() as uow:
            await uow.accounts.get_or_create(input.account_id)
            await uow.orders.add(order)
            await uow.commit()
        return CreateOrderOutput(order_id=order.order_id, amount=amount)
