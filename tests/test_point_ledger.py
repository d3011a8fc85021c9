"""포인트 원장: 잔액 = 원장 합계, balance_after, 견적 차감"""
import asyncio

import pytest

from application.use_cases.point_ledger import (
    GetBalanceUseCase, ListLedgerUseCase, DebitPointsForQuoteUseCase, QuoteDebitInput,
    GrantBonusPointsUseCase,
)
from domain.entities.ledger import PointLedgerEntryEntity
from domain.enums import LedgerDirection, LedgerEntryType
from domain.exceptions import InsufficientPointsError, InvalidAmountError, ConcurrentUpdateError
from conftest import PARTNER_ID


async def _account(uow_factory, account_id=PARTNER_ID):
    async with uow_factory() as uow:
        return await uow.accounts.get(account_id)


class TestLedgerAppend:
    @pytest.mark.asyncio
    async def test_balance_after_tracks_running_sum(self, uow_factory):
        grant = GrantBonusPointsUseCase(uow_factory)
        first = await grant.execute(PARTNER_ID, 1000)
        second = await grant.execute(PARTNER_ID, 250, "EVENT")

        assert first.balance_after == 1000
        assert second.balance_after == 1250
        assert await GetBalanceUseCase(uow_factory).execute(PARTNER_ID) == 1250

    @pytest.mark.asyncio
    async def test_refund_entry_is_stored_as_debit(self, uow_factory):
        await GrantBonusPointsUseCase(uow_factory).execute(PARTNER_ID, 1000)
        refund = PointLedgerEntryEntity(account_id=PARTNER_ID, amount=400, direction=LedgerDirection.DEBIT,
                                        reason="REFUND", entry_type=LedgerEntryType.REFUND,
                                        related_order_id="ord-refund")
        async with uow_factory() as uow:
            saved = await uow.ledger.append(refund)
            await uow.commit()

        assert saved.balance_after == 600
        entries = await ListLedgerUseCase(uow_factory).execute(PARTNER_ID)
        assert entries[0].entry_type is LedgerEntryType.REFUND
        assert entries[0].delta_points == -400

    @pytest.mark.asyncio
    async def test_append_creates_account_and_updates_display_balance(self, uow_factory):
        await GrantBonusPointsUseCase(uow_factory).execute("new-partner", 700)
        account = await _account(uow_factory, "new-partner")
        assert account is not None
        assert account.points_balance == 700

    @pytest.mark.asyncio
    async def test_balance_is_per_account(self, uow_factory):
        grant = GrantBonusPointsUseCase(uow_factory)
        await grant.execute("a", 100)
        await grant.execute("b", 300)
        balance = GetBalanceUseCase(uow_factory)
        assert await balance.execute("a") == 100
        assert await balance.execute("b") == 300
        assert await balance.execute("nobody") == 0

    @pytest.mark.asyncio
    async def test_grant_rejects_non_positive(self, uow_factory):
        with pytest.raises(InvalidAmountError):
            await GrantBonusPointsUseCase(uow_factory).execute(PARTNER_ID, 0)

    @pytest.mark.asyncio
    async def test_duplicate_charge_for_order_is_rejected(self, uow_factory):
        async with uow_factory() as uow:
            await uow.ledger.append(PointLedgerEntryEntity.charge(PARTNER_ID, 121, "ORD-1", 11000))
            await uow.commit()

        with pytest.raises(ConcurrentUpdateError):
            async with uow_factory() as uow:
                await uow.ledger.append(PointLedgerEntryEntity.charge(PARTNER_ID, 121, "ORD-1", 11000))
                await uow.commit()

        assert await GetBalanceUseCase(uow_factory).execute(PARTNER_ID) == 121

    @pytest.mark.asyncio
    async def test_uncommitted_append_is_discarded(self, uow_factory):
        async with uow_factory() as uow:
            await uow.ledger.append(PointLedgerEntryEntity.bonus(PARTNER_ID, 500, "ADMIN_BONUS"))
        assert await GetBalanceUseCase(uow_factory).execute(PARTNER_ID) == 0

    @pytest.mark.asyncio
    async def test_list_newest_first(self, uow_factory):
        grant = GrantBonusPointsUseCase(uow_factory)
        for points in (10, 20, 30):
            await grant.execute(PARTNER_ID, points)
        entries = await ListLedgerUseCase(uow_factory, page_size=2).execute(PARTNER_ID)
        assert [e.amount for e in entries] == [30, 20]

    @pytest.mark.asyncio
    async def test_concurrent_appends_keep_balance_consistent(self, uow_factory):
        grant = GrantBonusPointsUseCase(uow_factory)
        await grant.execute(PARTNER_ID, 1)

        results = await asyncio.gather(*(grant.execute(PARTNER_ID, 10) for _ in range(6)),
                                       return_exceptions=True)
        committed = [r for r in results if isinstance(r, PointLedgerEntryEntity)]
        for r in results:
            assert isinstance(r, (PointLedgerEntryEntity, ConcurrentUpdateError)), r

        balance = await GetBalanceUseCase(uow_factory).execute(PARTNER_ID)
        assert balance == 1 + 10 * len(committed)
        # 각 항목의 balance_after는 커밋 순서대로 겹치지 않는다
        assert sorted(e.balance_after for e in committed) == [1 + 10 * (i + 1) for i in range(len(committed))]
        assert (await _account(uow_factory)).points_balance == balance


class TestQuoteDebit:
    @pytest.mark.asyncio
    async def test_debit(self, uow_factory):
        await GrantBonusPointsUseCase(uow_factory).execute(PARTNER_ID, 1200)
        debit = DebitPointsForQuoteUseCase(uow_factory, points_per_quote=500)

        result = await debit.execute(QuoteDebitInput(PARTNER_ID, "req-1", quote_price=80000))

        assert result.points_deducted == 500
        assert result.balance_after == 700
        assert await GetBalanceUseCase(uow_factory).execute(PARTNER_ID) == 700
        entries = await ListLedgerUseCase(uow_factory).execute(PARTNER_ID)
        assert entries[0].request_id == "req-1"
        assert entries[0].delta_points == -500

    @pytest.mark.asyncio
    async def test_insufficient_points_writes_nothing(self, uow_factory):
        await GrantBonusPointsUseCase(uow_factory).execute(PARTNER_ID, 300)
        debit = DebitPointsForQuoteUseCase(uow_factory, points_per_quote=500)

        with pytest.raises(InsufficientPointsError) as exc_info:
            await debit.execute(QuoteDebitInput(PARTNER_ID, "req-1"))

        assert exc_info.value.balance == 300
        assert await GetBalanceUseCase(uow_factory).execute(PARTNER_ID) == 300
        assert len(await ListLedgerUseCase(uow_factory).execute(PARTNER_ID)) == 1
        assert (await _account(uow_factory)).points_balance == 300

    @pytest.mark.asyncio
    async def test_concurrent_debits_never_overdraw(self, uow_factory):
        await GrantBonusPointsUseCase(uow_factory).execute(PARTNER_ID, 1000)
        debit = DebitPointsForQuoteUseCase(uow_factory, points_per_quote=500)

        await asyncio.gather(
            *(debit.execute(QuoteDebitInput(PARTNER_ID, f"req-{i}")) for i in range(4)),
            return_exceptions=True,
        )

        assert await GetBalanceUseCase(uow_factory).execute(PARTNER_ID) >= 0
