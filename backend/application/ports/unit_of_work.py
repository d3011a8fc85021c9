"""트랜잭션 경계 인터페이스"""
from abc import ABC, abstractmethod

from application.ports.account_repository import AccountRepository
from application.ports.payment_order_repository import PaymentOrderRepository
from application.ports.point_ledger_repository import PointLedgerRepository


class UnitOfWork(ABC):
    """하나의 트랜잭션에 묶인 Repository 묶음.

    `async with uow:` 블록에서 commit 하지 않고 빠져나가면 롤백된다.
    """
    orders: PaymentOrderRepository
    ledger: PointLedgerRepository
    accounts: AccountRepository

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.rollback()

    @abstractmethod
    async def commit(self) -> None: ...
    @abstractmethod
    async def rollback(self) -> None: ...
