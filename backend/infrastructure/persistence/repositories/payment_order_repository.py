"""결제 주문 Repository: 상태 변경은 조건부 UPDATE(compare-and-set)로만 수행"""
from datetime import datetime
from typing import Optional, List

from sqlalchemy import select, update, desc
from sqlalchemy.ext.asyncio import AsyncSession

from application.ports.payment_order_repository import PaymentOrderRepository
from domain.entities.payment_order import PaymentOrderEntity
from domain.enums import OrderStatus
from infrastructure.persistence.models.payment import PaymentOrder


def _to_entity(row: PaymentOrder) -> PaymentOrderEntity:
    return PaymentOrderEntity(
        order_id=row.order_id, account_id=row.account_id, product_id=row.product_id,
        amount=row.amount, status=row.status, gateway_provider=row.gateway_provider,
        gateway_tx_id=row.gateway_tx_id, status_detail=row.status_detail,
        created_at=row.created_at, updated_at=row.updated_at,
    )


class SqlAlchemyPaymentOrderRepository(PaymentOrderRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, order_id: str) -> Optional[PaymentOrderEntity]:
        result = await self._session.execute(
            select(PaymentOrder)
            .where(PaymentOrder.order_id == order_id)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return _to_entity(row) if row else None

    async def add(self, order: PaymentOrderEntity) -> None:
        self._session.add(PaymentOrder(
            order_id=order.order_id, account_id=order.account_id, product_id=order.product_id,
            amount=order.amount, status=order.status, gateway_provider=order.gateway_provider,
            gateway_tx_id=order.gateway_tx_id, status_detail=order.status_detail,
            created_at=order.created_at, updated_at=order.updated_at,
        ))
        await self._session.flush()

    async def open_session(self, order_id: str, expected_tx_id: Optional[str],
                           provider: str, tx_id: str, now: datetime) -> bool:
        stmt = update(PaymentOrder).where(
            PaymentOrder.order_id == order_id,
            PaymentOrder.status == OrderStatus.READY,
        )
        if expected_tx_id is None:
            stmt = stmt.where(PaymentOrder.gateway_tx_id.is_(None))
        else:
            stmt = stmt.where(PaymentOrder.gateway_tx_id == expected_tx_id)
        stmt = stmt.values(gateway_provider=provider, gateway_tx_id=tx_id, updated_at=now)
        result = await self._session.execute(stmt.execution_options(synchronize_session=False))
        return result.rowcount == 1

    async def transition(self, order_id: str, next_status: OrderStatus, provider: Optional[str],
                         status_detail: Optional[str], now: datetime) -> bool:
        stmt = (
            update(PaymentOrder)
            .where(PaymentOrder.order_id == order_id, PaymentOrder.status == OrderStatus.READY)
            .values(status=next_status, gateway_provider=provider,
                    status_detail=status_detail, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def list_by_status(self, status: Optional[OrderStatus] = None,
                             limit: int = 50) -> List[PaymentOrderEntity]:
        stmt = select(PaymentOrder).order_by(desc(PaymentOrder.created_at)).limit(limit)
        if status is not None:
            stmt = stmt.where(PaymentOrder.status == status)
        result = await self._session.execute(stmt)
        return [_to_entity(row) for row in result.scalars().all()]

    async def list_ready_before(self, created_before: datetime) -> List[PaymentOrderEntity]:
        result = await self._session.execute(
            select(PaymentOrder)
            .where(PaymentOrder.status == OrderStatus.READY, PaymentOrder.created_at < created_before)
            .order_by(PaymentOrder.created_at)
        )
        return [_to_entity(row) for row in result.scalars().all()]
