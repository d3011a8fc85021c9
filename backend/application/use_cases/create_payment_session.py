"""결제 세션 생성 유스케이스"""
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from application.ports.payment_gateway import PaymentGatewayPort
from application.ports.unit_of_work import UnitOfWork
from domain.exceptions import OrderNotFoundError, ConcurrentUpdateError


@dataclass
class CreateSessionInput:
    order_id: str
    account_id: str


@dataclass
class CreateSessionOutput:
    redirect_url: str
    gateway_tx_id: str


class CreatePaymentSessionUseCase:
    """READY 주문에 PG 거래 ID를 발급한다.

    주문 조회와 기록은 한 트랜잭션에서 이루어지며, 기록은 읽은 시점의
    상태/거래 ID를 조건으로 한다. 동시에 들어온 다른 세션 생성이나 결제
    확정이 먼저 반영됐다면 ConcurrentUpdateError로 실패한다.
    """

    def __init__(self, uow_factory: Callable[[], UnitOfWork], gateway: PaymentGatewayPort,
                 clock: Callable[[], datetime] = datetime.utcnow):
        self._uow_factory = uow_factory
        self._gateway = gateway
        self._clock = clock

    async def execute(self, input: CreateSessionInput) -> CreateSessionOutput:
        async with self._uow_factory() as uow:
            order = await uow.orders.get(input.order_id)
            if order is None:
                raise OrderNotFoundError(input.order_id)
            order.ensure_owner(input.account_id)
            order.ensure_ready()

            tx_id = self._gateway.new_transaction_id()
            opened = await uow.orders.open_session(
                input.order_id, expected_tx_id=order.gateway_tx_id,
                provider=self._gateway.provider, tx_id=tx_id, now=self._clock(),
            )
            if not opened:
                raise ConcurrentUpdateError(f"payment_order:{input.order_id}")
            await uow.commit()

        return CreateSessionOutput(
            redirect_url=self._gateway.build_redirect_url(input.order_id, tx_id),
            gateway_tx_id=tx_id,
        )
