"""결제 세션 생성: 소유자/상태 전제 조건과 동시 생성"""
import asyncio
from datetime import datetime
from urllib.parse import urlparse, parse_qs

import pytest

from application.use_cases.create_order import CreateOrderUseCase, CreateOrderInput
from application.use_cases.create_payment_session import (
    CreatePaymentSessionUseCase, CreateSessionInput, CreateSessionOutput,
)
from application.use_cases.finalize_payment import FinalizePaymentUseCase, FinalizeInput
from domain.enums import OrderStatus
from domain.exceptions import (
    OrderNotFoundError, ForbiddenError, InvalidStatusError, ConcurrentUpdateError, UnknownProductError,
)
from infrastructure.payment.mock_gateway import MockGateway
from conftest import PARTNER_ID, OTHER_PARTNER_ID


@pytest.fixture
def session_use_case(uow_factory):
    return CreatePaymentSessionUseCase(uow_factory, MockGateway("/pay/mock-pg"))


class TestCreateOrder:
    @pytest.mark.asyncio
    async def test_order_starts_ready(self, uow_factory, create_order):
        order_id = await create_order(product_id="POINT_30000")
        async with uow_factory() as uow:
            order = await uow.orders.get(order_id)
            account = await uow.accounts.get(PARTNER_ID)
        assert order.status is OrderStatus.READY
        assert order.amount == 30000
        assert order.gateway_tx_id is None
        assert account is not None

    @pytest.mark.asyncio
    async def test_unknown_product(self, uow_factory):
        use_case = CreateOrderUseCase(uow_factory, {"POINT_10000": 10000})
        with pytest.raises(UnknownProductError):
            await use_case.execute(CreateOrderInput(account_id=PARTNER_ID, product_id="POINT_1"))


class TestCreatePaymentSession:
    @pytest.mark.asyncio
    async def test_redirect_url_embeds_order_and_tx(self, uow_factory, create_order, session_use_case):
        order_id = await create_order()

        result = await session_use_case.execute(CreateSessionInput(order_id, PARTNER_ID))

        url = urlparse(result.redirect_url)
        query = parse_qs(url.query)
        assert url.path == "/pay/mock-pg"
        assert query["orderId"] == [order_id]
        assert query["tx"] == [result.gateway_tx_id]
        assert result.gateway_tx_id.startswith("stub_")
        async with uow_factory() as uow:
            order = await uow.orders.get(order_id)
        assert order.status is OrderStatus.READY
        assert order.gateway_provider == "stub"
        assert order.gateway_tx_id == result.gateway_tx_id

    @pytest.mark.asyncio
    async def test_session_can_be_reissued(self, uow_factory, create_order, session_use_case):
        order_id = await create_order()
        first = await session_use_case.execute(CreateSessionInput(order_id, PARTNER_ID))
        second = await session_use_case.execute(CreateSessionInput(order_id, PARTNER_ID))
        assert first.gateway_tx_id != second.gateway_tx_id
        async with uow_factory() as uow:
            assert (await uow.orders.get(order_id)).gateway_tx_id == second.gateway_tx_id

    @pytest.mark.asyncio
    async def test_missing_order(self, session_use_case):
        with pytest.raises(OrderNotFoundError):
            await session_use_case.execute(CreateSessionInput("ORD-none", PARTNER_ID))

    @pytest.mark.asyncio
    async def test_other_account(self, create_order, session_use_case):
        order_id = await create_order()
        with pytest.raises(ForbiddenError):
            await session_use_case.execute(CreateSessionInput(order_id, OTHER_PARTNER_ID))

    @pytest.mark.asyncio
    async def test_terminal_order_rejected(self, uow_factory, create_order, session_use_case):
        order_id = await create_order()
        await FinalizePaymentUseCase(uow_factory).execute(FinalizeInput(order_id, OrderStatus.PAID, "stub"))
        with pytest.raises(InvalidStatusError):
            await session_use_case.execute(CreateSessionInput(order_id, PARTNER_ID))


class TestSessionCompareAndSet:
    @pytest.mark.asyncio
    async def test_stale_expected_tx_loses(self, uow_factory, create_order):
        order_id = await create_order()
        now = datetime.utcnow()
        async with uow_factory() as uow:
            assert await uow.orders.open_session(order_id, None, "stub", "tx-a", now)
            await uow.commit()
        async with uow_factory() as uow:
            # 다른 요청이 이미 tx-a를 기록한 뒤 같은 전제(None)로 시도
            assert not await uow.orders.open_session(order_id, None, "stub", "tx-b", now)
        async with uow_factory() as uow:
            assert (await uow.orders.get(order_id)).gateway_tx_id == "tx-a"

    @pytest.mark.asyncio
    async def test_not_ready_loses(self, uow_factory, create_order):
        order_id = await create_order()
        await FinalizePaymentUseCase(uow_factory).execute(FinalizeInput(order_id, OrderStatus.FAILED))
        async with uow_factory() as uow:
            assert not await uow.orders.open_session(order_id, None, "stub", "tx-a", datetime.utcnow())

    @pytest.mark.asyncio
    async def test_concurrent_sessions(self, uow_factory, create_order, session_use_case):
        order_id = await create_order()

        results = await asyncio.gather(
            *(session_use_case.execute(CreateSessionInput(order_id, PARTNER_ID)) for _ in range(2)),
            return_exceptions=True,
        )

        for r in results:
            assert isinstance(r, (CreateSessionOutput, ConcurrentUpdateError)), r
        issued = [r.gateway_tx_id for r in results if isinstance(r, CreateSessionOutput)]
        assert len(issued) == 1
        async with uow_factory() as uow:
            stored = (await uow.orders.get(order_id)).gateway_tx_id
        assert stored in issued
