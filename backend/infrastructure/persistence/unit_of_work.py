"""SQLAlchemy 기반 Unit of Work

세션 수명주기와 commit/rollback을 한 곳에서 관리한다.
DB 잠금 충돌과 유니크 제약 위반은 재시도 가능한 ConcurrentUpdateError로 바꾼다.
"""
from typing import Callable, Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from application.ports.unit_of_work import UnitOfWork
from domain.exceptions import ConcurrentUpdateError
from infrastructure.persistence.database import async_session_factory
from infrastructure.persistence.repositories import (
    SqlAlchemyAccountRepository, SqlAlchemyPaymentOrderRepository, SqlAlchemyPointLedgerRepository,
)

_CONFLICT_MARKERS = ("locked", "deadlock", "could not serialize", "lock wait timeout")


def is_conflict_error(exc: BaseException) -> bool:
    if isinstance(exc, IntegrityError):
        return True
    if isinstance(exc, OperationalError):
        message = str(exc.orig or exc).lower()
        return any(marker in message for marker in _CONFLICT_MARKERS)
    return False


class SqlAlchemyUnitOfWork(UnitOfWork):
    def __init__(self, session_factory: Optional[Callable[[], AsyncSession]] = None):
        self._session_factory = session_factory or async_session_factory
        self.session: Optional[AsyncSession] = None

    async def __aenter__(self) -> "SqlAlchemyUnitOfWork":
        self.session = self._session_factory()
        self.orders = SqlAlchemyPaymentOrderRepository(self.session)
        self.ledger = SqlAlchemyPointLedgerRepository(self.session)
        self.accounts = SqlAlchemyAccountRepository(self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            await self.session.rollback()
        finally:
            await self.session.close()
        if exc is not None and is_conflict_error(exc):
            logger.warning(f"트랜잭션 충돌: {exc.__class__.__name__}")
            raise ConcurrentUpdateError("transaction") from exc

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except (IntegrityError, OperationalError) as e:
            if is_conflict_error(e):
                raise ConcurrentUpdateError("commit") from e
            raise

    async def rollback(self) -> None:
        await self.session.rollback()
