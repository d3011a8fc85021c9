"""
ORM 모델: 모든 모델을 re-export
"""
from infrastructure.persistence.database import Base
from infrastructure.persistence.models.account import Account
from infrastructure.persistence.models.payment import PaymentOrder
from infrastructure.persistence.models.point_ledger import PointLedgerEntry
from domain.enums import (
    AccountRole, OrderStatus, LedgerDirection, LedgerEntryType, SubscriptionStatus, SubscriptionPlan,
)
