"""포인트 원장 유스케이스: 잔액 조회, 내역 조회, 견적 차감, 보너스 지급"""
from dataclasses import dataclass
from typing import Callable, List

from loguru import logger

from application.ports.unit_of_work import UnitOfWork
from domain.entities.ledger import PointLedgerEntryEntity
from domain.exceptions import InsufficientPointsError, InvalidAmountError


class GetBalanceUseCase:
    """잔액은 원장 합계가 유일한 기준이다"""

    def __init__(self, uow_factory: Callable[[], UnitOfWork]):
        self._uow_factory = uow_factory

    async def execute(self, account_id: str) -> int:
        async with self._uow_factory() as uow:
            return await uow.ledger.balance_of(account_id)


class ListLedgerUseCase:
    def __init__(self, uow_factory: Callable[[], UnitOfWork], page_size: int = 30):
        self._uow_factory = uow_factory
        self._page_size = page_size

    async def execute(self, account_id: str) -> List[PointLedgerEntryEntity]:
        async with self._uow_factory() as uow:
            return await uow.ledger.list_by_account(account_id, limit=self._page_size)


@dataclass
class QuoteDebitInput:
    account_id: str
    request_id: str
    quote_price: int = 0


@dataclass
class QuoteDebitOutput:
    points_deducted: int
    balance_after: int
    entry_id: int


class DebitPointsForQuoteUseCase:
    """견적 제출 시 고정 포인트 차감. 잔액 확인과 기록은 같은 트랜잭션"""

    def __init__(self, uow_factory: Callable[[], UnitOfWork], points_per_quote: int = 500):
        self._uow_factory = uow_factory
        self._points = points_per_quote

    async def execute(self, input: QuoteDebitInput) -> QuoteDebitOutput:
        async with self._uow_factory() as uow:
            entry = await uow.ledger.append(
                PointLedgerEntryEntity.quote_debit(input.account_id, self._points, input.request_id)
            )
            if entry.balance_after < 0:
                raise InsufficientPointsError(required=self._points,
                                              balance=entry.balance_after + self._points)
            await uow.commit()

        logger.info(f"견적 포인트 차감: {input.account_id} -{self._points}P "
                    f"(request={input.request_id}, quote_price={input.quote_price})")
        return QuoteDebitOutput(points_deducted=self._points, balance_after=entry.balance_after,
                                entry_id=entry.id)


class GrantBonusPointsUseCase:
    """관리자 보너스 포인트 지급"""

    def __init__(self, uow_factory: Callable[[], UnitOfWork]):
        self._uow_factory = uow_factory

    async def execute(self, account_id: str, points: int, reason: str = "ADMIN_BONUS") -> PointLedgerEntryEntity:
        if points <= 0:
            raise InvalidAmountError(points)
        async with self._uow_factory() as uow:
            entry = await uow.ledger.append(PointLedgerEntryEntity.bonus(account_id, points, reason))
            await uow.commit()
        logger.info(f"보너스 포인트 지급: {account_id} +{points}P ({reason})")
        return entry
