"""포인트 충전 금액 계산

공급가(부가세 제외)를 받아 결제 금액과 적립 포인트를 계산한다.
입력은 모두 안전한 값으로 정규화되므로 예외를 던지지 않는다.
"""
import math
from dataclasses import dataclass, asdict
from decimal import Decimal, ROUND_HALF_UP

VAT_RATE = Decimal("0.10")
POINTS_PER_KRW = 100  # 100원당 1포인트
BONUS_RATE = Decimal("0.10")


@dataclass(frozen=True)
class BillingCalcResult:
    amount_supply_krw: int
    amount_pay_krw: int
    vat_rate: float
    base_points: int
    bonus_points: int
    credited_points: int

    def to_dict(self) -> dict:
        return asdict(self)


def _safe_supply(amount_supply_krw) -> int:
    try:
        value = float(amount_supply_krw or 0)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(value):
        return 0
    return max(0, math.floor(value))


def calc_billing(amount_supply_krw) -> BillingCalcResult:
    safe_supply = _safe_supply(amount_supply_krw)
    amount_pay = (Decimal(safe_supply) * (1 + VAT_RATE)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    amount_pay_krw = int(amount_pay)
    base_points = amount_pay_krw // POINTS_PER_KRW
    bonus_points = int(math.floor(Decimal(base_points) * BONUS_RATE))

    return BillingCalcResult(
        amount_supply_krw=safe_supply,
        amount_pay_krw=amount_pay_krw,
        vat_rate=float(VAT_RATE),
        base_points=base_points,
        bonus_points=bonus_points,
        credited_points=base_points + bonus_points,
    )
