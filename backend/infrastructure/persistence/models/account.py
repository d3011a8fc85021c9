"""계정(파트너) ORM 모델: 포인트 표시 캐시와 구독 정보를 포함"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum
from sqlalchemy.orm import relationship
from infrastructure.persistence.database import Base
from domain.enums import AccountRole, SubscriptionStatus, SubscriptionPlan


class Account(Base):
    __tablename__ = "accounts"
    id = Column(String(128), primary_key=True)
    role = Column(Enum(AccountRole), default=AccountRole.PARTNER, nullable=False)
    points_balance = Column(Integer, default=0, nullable=False)
    subscription_status = Column(Enum(SubscriptionStatus), default=SubscriptionStatus.NONE, nullable=False)
    subscription_plan = Column(Enum(SubscriptionPlan), nullable=True)
    auto_renew = Column(Boolean, default=False, nullable=False)
    current_period_start = Column(DateTime, nullable=True)
    current_period_end = Column(DateTime, nullable=True)
    next_billing_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    orders = relationship("PaymentOrder", back_populates="account")
    ledger_entries = relationship("PointLedgerEntry", back_populates="account")

    def __repr__(self):
        return f"<Account {self.id} - {self.points_balance}P>"
