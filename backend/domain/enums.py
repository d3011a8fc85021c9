"""도메인 열거형"""
import enum


class AccountRole(str, enum.Enum):
    CUSTOMER = "customer"
    PARTNER = "partner"
    ADMIN = "admin"


class OrderStatus(str, enum.Enum):
    READY = "READY"
    PAID = "PAID"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self is not OrderStatus.READY


class GatewayProvider(str, enum.Enum):
    STUB = "stub"
    TOSS = "toss"


class LedgerDirection(str, enum.Enum):
    CREDIT = "credit"
    DEBIT = "debit"


class LedgerEntryType(str, enum.Enum):
    CREDIT_CHARGE = "credit_charge"
    DEBIT_QUOTE = "debit_quote"
    CREDIT_BONUS = "credit_bonus"
    REFUND = "refund"


class SubscriptionStatus(str, enum.Enum):
    NONE = "none"
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELED = "canceled"


class SubscriptionPlan(str, enum.Enum):
    MONTH = "month"
    MONTH_AUTO = "month_auto"
