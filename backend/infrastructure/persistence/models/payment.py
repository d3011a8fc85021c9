"""결제 주문 ORM 모델"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from infrastructure.persistence.database import Base
from domain.enums import OrderStatus


class PaymentOrder(Base):
    __tablename__ = "payment_orders"
    order_id = Column(String(64), primary_key=True)
    account_id = Column(String(128), ForeignKey("accounts.id"), nullable=False, index=True)
    product_id = Column(String(50), nullable=False)
    amount = Column(Integer, nullable=False)
    status = Column(Enum(OrderStatus), default=OrderStatus.READY, nullable=False, index=True)
    gateway_provider = Column(String(20), nullable=True)
    gateway_tx_id = Column(String(64), nullable=True)
    status_detail = Column(String(210), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    account = relationship("Account", back_populates="orders")

    def __repr__(self):
        return f"<PaymentOrder {self.order_id} - {self.amount}원 {self.status.value}>"
