"""결제 주문 Repository 인터페이스"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, List
from domain.entities.payment_order import PaymentOrderEntity
from domain.enums import OrderStatus


class PaymentOrderRepository(ABC):
    @abstractmethod
    async def get(self, order_id: str) -> Optional[PaymentOrderEntity]: ...
    @abstractmethod
    async def add(self, order: PaymentOrderEntity) -> None: ...
    @abstractmethod
    async def open_session(self, order_id: str, expected_tx_id: Optional[str],
                           provider: str, tx_id: str, now: datetime) -> bool:
        """READY 상태이고 기존 tx_id가 expected_tx_id와 같을 때만 기록 (compare-and-set)"""
    @abstractmethod
    async def transition(self, order_id: str, next_status: OrderStatus, provider: Optional[str],
                         status_detail: Optional[str], now: datetime) -> bool:
        """READY → next_status 조건부 갱신. 반영되면 True"""
    @abstractmethod
    async def list_by_status(self, status: Optional[OrderStatus] = None,
                             limit: int = 50) -> List[PaymentOrderEntity]: ...
    @abstractmethod
    async def list_ready_before(self, created_before: datetime) -> List[PaymentOrderEntity]: ...
