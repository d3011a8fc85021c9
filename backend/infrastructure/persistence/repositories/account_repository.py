"""계정 Repository"""
from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from application.ports.account_repository import AccountRepository
from domain.entities.account import AccountEntity
from domain.entities.subscription import SubscriptionInfo
from domain.enums import AccountRole, SubscriptionStatus
from infrastructure.persistence.models.account import Account


def _to_entity(row: Account) -> AccountEntity:
    subscription = SubscriptionInfo(
        status=row.subscription_status, plan=row.subscription_plan, auto_renew=bool(row.auto_renew),
        current_period_start=row.current_period_start, current_period_end=row.current_period_end,
        next_billing_at=row.next_billing_at,
    )
    return AccountEntity(id=row.id, role=row.role, points_balance=row.points_balance,
                         subscription=subscription, created_at=row.created_at,
                         updated_at=row.updated_at)


class SqlAlchemyAccountRepository(AccountRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def _get_row(self, account_id: str) -> Optional[Account]:
        result = await self._session.execute(
            select(Account).where(Account.id == account_id).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get(self, account_id: str) -> Optional[AccountEntity]:
        row = await self._get_row(account_id)
        return _to_entity(row) if row else None

    async def get_or_create(self, account_id: str) -> AccountEntity:
        row = await self._get_row(account_id)
        if row is None:
            now = datetime.utcnow()
            row = Account(id=account_id, role=AccountRole.PARTNER, points_balance=0,
                          subscription_status=SubscriptionStatus.NONE, auto_renew=False,
                          created_at=now, updated_at=now)
            self._session.add(row)
            await self._session.flush()
        return _to_entity(row)

    async def save_subscription(self, account_id: str, subscription: SubscriptionInfo,
                                now: datetime, expected: Optional[SubscriptionInfo] = None) -> bool:
        stmt = update(Account).where(Account.id == account_id)
        if expected is not None:
            if expected.current_period_end is None:
                period_end_matches = Account.current_period_end.is_(None)
            else:
                period_end_matches = Account.current_period_end == expected.current_period_end
            stmt = stmt.where(
                Account.subscription_status == expected.status,
                Account.auto_renew == expected.auto_renew,
                period_end_matches,
            )
        result = await self._session.execute(
            stmt.values(
                subscription_status=subscription.status,
                subscription_plan=subscription.plan,
                auto_renew=subscription.auto_renew,
                current_period_start=subscription.current_period_start,
                current_period_end=subscription.current_period_end,
                next_billing_at=subscription.next_billing_at,
                updated_at=now,
            ).execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def set_role(self, account_id: str, role: AccountRole) -> bool:
        result = await self._session.execute(
            update(Account).where(Account.id == account_id).values(role=role, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
