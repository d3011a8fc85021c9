"""포인트 원장 ORM 모델 (append-only)"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from infrastructure.persistence.database import Base
from domain.enums import LedgerDirection, LedgerEntryType


class PointLedgerEntry(Base):
    __tablename__ = "point_ledger"
    __table_args__ = (
        UniqueConstraint("related_order_id", "reason", name="uq_point_ledger_order_reason"),
    )
    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(String(128), ForeignKey("accounts.id"), nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    direction = Column(Enum(LedgerDirection), nullable=False)
    reason = Column(String(50), nullable=False)
    entry_type = Column(Enum(LedgerEntryType), nullable=False)
    related_order_id = Column(String(64), nullable=True)
    request_id = Column(String(128), nullable=True)
    amount_pay_krw = Column(Integer, nullable=True)
    balance_after = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    account = relationship("Account", back_populates="ledger_entries")

    def __repr__(self):
        return f"<PointLedgerEntry {self.id} - {self.direction.value} {self.amount}P>"
