"""
테스트 공통 fixture

각 테스트는 tmp_path 아래 별도 SQLite 파일을 사용한다.
"""
from typing import Callable

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from config import settings
from application.use_cases.create_order import CreateOrderUseCase, CreateOrderInput
from domain.enums import AccountRole
from infrastructure.auth.jwt_service import create_access_token
from infrastructure.persistence.database import build_engine, build_session_factory, init_db
from infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork
from main import create_app

PARTNER_ID = "partner-uid-1"
OTHER_PARTNER_ID = "partner-uid-2"
ADMIN_ID = "admin-uid-1"


def _db_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'billing_test.db'}"


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = build_engine(_db_url(tmp_path))
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def uow_factory(engine) -> Callable[[], SqlAlchemyUnitOfWork]:
    session_factory = build_session_factory(engine)
    return lambda: SqlAlchemyUnitOfWork(session_factory)


@pytest.fixture
def create_order(uow_factory):
    """READY 주문을 만들고 order_id를 돌려주는 헬퍼"""
    use_case = CreateOrderUseCase(uow_factory, settings.PRODUCT_PRICES)

    async def _create(account_id: str = PARTNER_ID, product_id: str = "POINT_10000") -> str:
        result = await use_case.execute(CreateOrderInput(account_id=account_id, product_id=product_id))
        return result.order_id

    return _create


# ==================== API ====================

def auth_headers(account_id: str = PARTNER_ID) -> dict:
    token = create_access_token({"sub": account_id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(tmp_path):
    """테스트 전용 DB를 쓰는 앱. 엔진은 TestClient 이벤트 루프 안에서만 사용된다"""
    app = create_app(build_engine(_db_url(tmp_path)))
    with TestClient(app) as client:
        yield client


@pytest.fixture
def admin_headers(client) -> dict:
    async def _promote():
        async with client.app.state.uow_factory() as uow:
            await uow.accounts.get_or_create(ADMIN_ID)
            await uow.accounts.set_role(ADMIN_ID, AccountRole.ADMIN)
            await uow.commit()

    client.portal.call(_promote)
    return auth_headers(ADMIN_ID)
