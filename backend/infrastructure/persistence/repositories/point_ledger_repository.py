"""포인트 원장 Repository"""
from datetime import datetime
from typing import List

from sqlalchemy import select, update, func, case, desc
from sqlalchemy.ext.asyncio import AsyncSession

from application.ports.point_ledger_repository import PointLedgerRepository
from domain.entities.ledger import PointLedgerEntryEntity
from domain.enums import AccountRole, LedgerDirection, SubscriptionStatus
from infrastructure.persistence.models.account import Account
from infrastructure.persistence.models.point_ledger import PointLedgerEntry


def _to_entity(row: PointLedgerEntry) -> PointLedgerEntryEntity:
    return PointLedgerEntryEntity(
        id=row.id, account_id=row.account_id, amount=row.amount, direction=row.direction,
        reason=row.reason, entry_type=row.entry_type, related_order_id=row.related_order_id,
        request_id=row.request_id, amount_pay_krw=row.amount_pay_krw,
        balance_after=row.balance_after, created_at=row.created_at,
    )


class SqlAlchemyPointLedgerRepository(PointLedgerRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def _lock_account(self, account_id: str, now: datetime) -> None:
        # 계정 행을 먼저 갱신해 같은 계정의 append를 직렬화한다
        result = await self._session.execute(
            update(Account).where(Account.id == account_id).values(updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self._session.add(Account(id=account_id, role=AccountRole.PARTNER, points_balance=0,
                                      subscription_status=SubscriptionStatus.NONE, auto_renew=False,
                                      created_at=now, updated_at=now))
            await self._session.flush()

    async def append(self, entry: PointLedgerEntryEntity) -> PointLedgerEntryEntity:
        now = entry.created_at or datetime.utcnow()
        await self._lock_account(entry.account_id, now)

        balance_after = await self.balance_of(entry.account_id) + entry.delta_points
        row = PointLedgerEntry(
            account_id=entry.account_id, amount=entry.amount, direction=entry.direction,
            reason=entry.reason, entry_type=entry.entry_type,
            related_order_id=entry.related_order_id, request_id=entry.request_id,
            amount_pay_krw=entry.amount_pay_krw, balance_after=balance_after, created_at=now,
        )
        self._session.add(row)
        await self._session.execute(
            update(Account).where(Account.id == entry.account_id).values(points_balance=balance_after)
            .execution_options(synchronize_session=False)
        )
        await self._session.flush()
        return _to_entity(row)

    async def balance_of(self, account_id: str) -> int:
        signed = case(
            (PointLedgerEntry.direction == LedgerDirection.DEBIT, -PointLedgerEntry.amount),
            else_=PointLedgerEntry.amount,
        )
        result = await self._session.execute(
            select(func.coalesce(func.sum(signed), 0)).where(PointLedgerEntry.account_id == account_id)
        )
        return int(result.scalar_one())

    async def list_by_account(self, account_id: str, limit: int = 30) -> List[PointLedgerEntryEntity]:
        result = await self._session.execute(
            select(PointLedgerEntry)
            .where(PointLedgerEntry.account_id == account_id)
            .order_by(desc(PointLedgerEntry.created_at), desc(PointLedgerEntry.id))
            .limit(limit)
        )
        return [_to_entity(row) for row in result.scalars().all()]
