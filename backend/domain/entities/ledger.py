"""포인트 원장 도메인 엔티티"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from domain.enums import LedgerDirection, LedgerEntryType
from domain.exceptions import InvalidAmountError

POINT_CHARGE_REASON = "POINT_CHARGE"
QUOTE_DEBIT_REASON = "QUOTE_SUBMIT"


@dataclass
class PointLedgerEntryEntity:
    """원장 항목: 기록 후 수정/삭제 불가"""
    account_id: str
    amount: int
    direction: LedgerDirection
    reason: str
    entry_type: LedgerEntryType
    related_order_id: Optional[str] = None
    request_id: Optional[str] = None
    amount_pay_krw: Optional[int] = None
    balance_after: Optional[int] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if isinstance(self.amount, bool) or not isinstance(self.amount, int) or self.amount <= 0:
            raise InvalidAmountError(self.amount)

    @property
    def delta_points(self) -> int:
        return self.amount if self.direction is LedgerDirection.CREDIT else -self.amount

    @classmethod
    def charge(cls, account_id: str, points: int, order_id: str, amount_pay_krw: int) -> "PointLedgerEntryEntity":
        return cls(account_id=account_id, amount=points, direction=LedgerDirection.CREDIT,
                   reason=POINT_CHARGE_REASON, entry_type=LedgerEntryType.CREDIT_CHARGE,
                   related_order_id=order_id, amount_pay_krw=amount_pay_krw)

    @classmethod
    def quote_debit(cls, account_id: str, points: int, request_id: str) -> "PointLedgerEntryEntity":
        return cls(account_id=account_id, amount=points, direction=LedgerDirection.DEBIT,
                   reason=QUOTE_DEBIT_REASON, entry_type=LedgerEntryType.DEBIT_QUOTE,
                   request_id=request_id)

    @classmethod
    def bonus(cls, account_id: str, points: int, reason: str) -> "PointLedgerEntryEntity":
        return cls(account_id=account_id, amount=points, direction=LedgerDirection.CREDIT,
                   reason=reason, entry_type=LedgerEntryType.CREDIT_BONUS)
