"""포인트 관련 스키마"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from api.schemas.payment import CamelModel


class BalanceResponse(BaseModel):
    balance: int


class LedgerItem(CamelModel):
    id: int
    amount: int
    type: str
    entry_type: str = Field(..., alias="entryType")
    delta_points: int = Field(..., alias="deltaPoints")
    balance_after: int = Field(..., alias="balanceAfter")
    reason: str
    order_id: Optional[str] = Field(None, alias="orderId")
    request_id: Optional[str] = Field(None, alias="requestId")
    amount_pay_krw: Optional[int] = Field(None, alias="amountPayKRW")
    created_at: Optional[datetime] = Field(None, alias="createdAt")


class QuoteDebitRequest(CamelModel):
    request_id: str = Field(..., min_length=1, alias="requestId")
    quote_price: int = Field(0, ge=0, alias="quotePrice")


class QuoteDebitResponse(CamelModel):
    success: bool = True
    points_deducted: int = Field(..., alias="pointsDeducted")
    balance_after: int = Field(..., alias="balanceAfter")


def to_ledger_item(entry) -> LedgerItem:
    return LedgerItem(
        id=entry.id, amount=entry.amount, type=entry.direction.value, entry_type=entry.entry_type.value,
        delta_points=entry.delta_points, balance_after=entry.balance_after, reason=entry.reason,
        order_id=entry.related_order_id, request_id=entry.request_id,
        amount_pay_krw=entry.amount_pay_krw, created_at=entry.created_at,
    )
