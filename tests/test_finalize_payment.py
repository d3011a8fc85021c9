"""결제 확정: 멱등성, 종료 상태 불변, 포인트 1회 적립"""
import asyncio

import pytest

from application.use_cases.finalize_payment import FinalizePaymentUseCase, FinalizeInput, FinalizeResult
from application.use_cases.point_ledger import GetBalanceUseCase, ListLedgerUseCase
from domain.enums import OrderStatus, LedgerEntryType
from domain.exceptions import OrderNotFoundError, InvalidStatusError, ConcurrentUpdateError
from conftest import PARTNER_ID


async def _get_order(uow_factory, order_id):
    async with uow_factory() as uow:
        return await uow.orders.get(order_id)


async def _ledger(uow_factory, account_id=PARTNER_ID):
    return await ListLedgerUseCase(uow_factory, page_size=100).execute(account_id)


class TestFinalizePayment:
    @pytest.mark.asyncio
    async def test_paid_credits_points_once(self, uow_factory, create_order):
        order_id = await create_order()
        finalizer = FinalizePaymentUseCase(uow_factory)

        result = await finalizer.execute(FinalizeInput(order_id, OrderStatus.PAID, "stub", "TEST_PAID"))

        assert result.applied
        assert result.current_status is OrderStatus.PAID
        assert result.credited_points == 121
        order = await _get_order(uow_factory, order_id)
        assert order.status is OrderStatus.PAID
        assert order.gateway_provider == "stub"
        assert order.status_detail == "TEST_PAID"

        entries = await _ledger(uow_factory)
        assert len(entries) == 1
        assert entries[0].entry_type is LedgerEntryType.CREDIT_CHARGE
        assert entries[0].related_order_id == order_id
        assert entries[0].amount == 121
        assert entries[0].amount_pay_krw == 11000
        assert entries[0].balance_after == 121
        assert await GetBalanceUseCase(uow_factory).execute(PARTNER_ID) == 121

    @pytest.mark.asyncio
    async def test_duplicate_paid_is_noop(self, uow_factory, create_order):
        order_id = await create_order()
        finalizer = FinalizePaymentUseCase(uow_factory)
        await finalizer.execute(FinalizeInput(order_id, OrderStatus.PAID, "stub"))

        again = await finalizer.execute(FinalizeInput(order_id, OrderStatus.PAID, "toss", "DUP"))

        assert not again.applied
        assert again.message == "transition_ignored"
        assert again.current_status is OrderStatus.PAID
        order = await _get_order(uow_factory, order_id)
        assert order.gateway_provider == "stub"
        assert order.status_detail is None
        assert len(await _ledger(uow_factory)) == 1
        assert await GetBalanceUseCase(uow_factory).execute(PARTNER_ID) == 121

    @pytest.mark.asyncio
    async def test_failed_then_paid_keeps_failed(self, uow_factory, create_order):
        order_id = await create_order()
        finalizer = FinalizePaymentUseCase(uow_factory)

        failed = await finalizer.execute(FinalizeInput(order_id, OrderStatus.FAILED, "stub", "PAYMENT_FAILED"))
        late = await finalizer.execute(FinalizeInput(order_id, OrderStatus.PAID, "stub"))

        assert failed.applied
        assert failed.credited_points == 0
        assert not late.applied
        assert late.current_status is OrderStatus.FAILED
        assert (await _get_order(uow_factory, order_id)).status is OrderStatus.FAILED
        assert await _ledger(uow_factory) == []
        assert await GetBalanceUseCase(uow_factory).execute(PARTNER_ID) == 0

    @pytest.mark.asyncio
    async def test_unknown_order(self, uow_factory):
        with pytest.raises(OrderNotFoundError):
            await FinalizePaymentUseCase(uow_factory).execute(FinalizeInput("ORD-missing", OrderStatus.PAID))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [OrderStatus.READY, OrderStatus.CANCELLED])
    async def test_rejects_non_final_target(self, uow_factory, create_order, status):
        order_id = await create_order()
        with pytest.raises(InvalidStatusError):
            await FinalizePaymentUseCase(uow_factory).execute(FinalizeInput(order_id, status))
        assert (await _get_order(uow_factory, order_id)).status is OrderStatus.READY

    @pytest.mark.asyncio
    async def test_long_detail_is_trimmed(self, uow_factory, create_order):
        order_id = await create_order()
        await FinalizePaymentUseCase(uow_factory).execute(
            FinalizeInput(order_id, OrderStatus.FAILED, "stub", "e" * 300))
        order = await _get_order(uow_factory, order_id)
        assert order.status_detail == "e" * 200 + "..."

    @pytest.mark.asyncio
    async def test_credits_follow_order_amount(self, uow_factory, create_order):
        order_id = await create_order(product_id="POINT_50000")
        result = await FinalizePaymentUseCase(uow_factory).execute(FinalizeInput(order_id, OrderStatus.PAID))
        # 55000원 -> 550P + 55P
        assert result.credited_points == 605


class TestConcurrentFinalize:
    @pytest.mark.asyncio
    async def test_confirm_and_webhook_race(self, uow_factory, create_order):
        """테스트 승인과 웹훅이 동시에 와도 적립은 한 번"""
        order_id = await create_order()
        finalizer = FinalizePaymentUseCase(uow_factory)
        inputs = [FinalizeInput(order_id, OrderStatus.PAID, "stub", f"call-{i}") for i in range(5)]

        results = await asyncio.gather(*(finalizer.execute(i) for i in inputs), return_exceptions=True)

        for r in results:
            assert isinstance(r, (FinalizeResult, ConcurrentUpdateError)), r
        applied = [r for r in results if isinstance(r, FinalizeResult) and r.applied]
        assert len(applied) == 1

        entries = await _ledger(uow_factory)
        assert len(entries) == 1
        assert await GetBalanceUseCase(uow_factory).execute(PARTNER_ID) == 121

    @pytest.mark.asyncio
    async def test_paid_and_failed_race_has_single_winner(self, uow_factory, create_order):
        order_id = await create_order()
        finalizer = FinalizePaymentUseCase(uow_factory)

        results = await asyncio.gather(
            finalizer.execute(FinalizeInput(order_id, OrderStatus.PAID, "stub")),
            finalizer.execute(FinalizeInput(order_id, OrderStatus.FAILED, "stub", "PAYMENT_FAILED")),
            return_exceptions=True,
        )

        applied = [r for r in results if isinstance(r, FinalizeResult) and r.applied]
        assert len(applied) == 1
        final = (await _get_order(uow_factory, order_id)).status
        assert final is applied[0].current_status
        expected_balance = 121 if final is OrderStatus.PAID else 0
        assert await GetBalanceUseCase(uow_factory).execute(PARTNER_ID) == expected_balance
