"""결제 주문 도메인 엔티티"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from domain.enums import OrderStatus
from domain.exceptions import ForbiddenError, InvalidStatusError

MAX_STATUS_DETAIL = 200


def generate_order_id(now: Optional[datetime] = None) -> str:
    timestamp = (now or datetime.utcnow()).strftime("%Y%m%d%H%M%S")
    return f"ORD-{timestamp}-{uuid.uuid4().hex[:8]}"


def trim_status_detail(detail: Optional[str]) -> Optional[str]:
    """상태 메모 정규화: 공백 제거 후 최대 200자"""
    if not detail:
        return None
    cleaned = detail.strip()
    if not cleaned:
        return None
    if len(cleaned) > MAX_STATUS_DETAIL:
        return f"{cleaned[:MAX_STATUS_DETAIL]}..."
    return cleaned


@dataclass
class PaymentOrderEntity:
    """포인트 패키지 구매 시도 1건"""
    order_id: str
    account_id: str
    product_id: str
    amount: int
    status: OrderStatus = OrderStatus.READY
    gateway_provider: Optional[str] = None
    gateway_tx_id: Optional[str] = None
    status_detail: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def ensure_owner(self, account_id: str) -> None:
        if self.account_id != account_id:
            raise ForbiddenError()

    def ensure_ready(self) -> None:
        """결제 세션은 READY 상태에서만 생성 가능"""
        if self.status is not OrderStatus.READY:
            raise InvalidStatusError(self.status.value)

    def can_transition_to(self, next_status: OrderStatus) -> bool:
        return self.status is OrderStatus.READY and next_status in (OrderStatus.PAID, OrderStatus.FAILED)
