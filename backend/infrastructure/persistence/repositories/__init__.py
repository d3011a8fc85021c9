"""SQLAlchemy Repository 구현"""
from infrastructure.persistence.repositories.account_repository import SqlAlchemyAccountRepository
from infrastructure.persistence.repositories.payment_order_repository import SqlAlchemyPaymentOrderRepository
from infrastructure.persistence.repositories.point_ledger_repository import SqlAlchemyPointLedgerRepository
