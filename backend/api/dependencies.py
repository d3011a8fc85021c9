"""
FastAPI 의존성 주입 (Depends)

UoW 팩토리와 역할 조회기는 app.state에 하나씩 두고, 유스케이스는 요청마다 만든다.
"""
from typing import Callable

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from config import settings
from application.ports.unit_of_work import UnitOfWork
from application.use_cases.admin import ListOrdersUseCase, SetAccountRoleUseCase
from application.use_cases.create_order import CreateOrderUseCase
from application.use_cases.create_payment_session import CreatePaymentSessionUseCase
from application.use_cases.finalize_payment import FinalizePaymentUseCase
from application.use_cases.get_order import GetOrderUseCase
from application.use_cases.point_ledger import (
    GetBalanceUseCase, ListLedgerUseCase, DebitPointsForQuoteUseCase,
)
from application.use_cases.reap_stale_orders import ReapStaleOrdersUseCase
from application.use_cases.subscription import (
    GetSubscriptionUseCase, StartSubscriptionUseCase, CancelSubscriptionUseCase,
)
from domain.enums import AccountRole
from domain.exceptions import UnauthenticatedError, ForbiddenError
from infrastructure.auth.jwt_service import account_id_from_token
from infrastructure.auth.role_resolver import AccountRoleResolver
from infrastructure.payment.mock_gateway import MockGateway

security = HTTPBearer(auto_error=False)


def get_uow_factory(request: Request) -> Callable[[], UnitOfWork]:
    return request.app.state.uow_factory


def get_role_resolver(request: Request) -> AccountRoleResolver:
    return request.app.state.role_resolver


async def get_current_account_id(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> str:
    """Bearer 토큰의 sub를 계정 ID로 사용"""
    if credentials is None:
        raise UnauthenticatedError()
    account_id = account_id_from_token(credentials.credentials)
    if not account_id:
        raise UnauthenticatedError()
    return account_id


async def get_admin_account_id(
    account_id: str = Depends(get_current_account_id),
    resolver: AccountRoleResolver = Depends(get_role_resolver),
) -> str:
    """관리자 계정 확인"""
    role = await resolver.resolve(account_id)
    if role is not AccountRole.ADMIN:
        raise ForbiddenError("관리자 권한이 필요합니다.")
    return account_id


# ==================== 유스케이스 ====================

def get_finalizer(uow_factory=Depends(get_uow_factory)) -> FinalizePaymentUseCase:
    return FinalizePaymentUseCase(uow_factory)


def get_create_order(uow_factory=Depends(get_uow_factory)) -> CreateOrderUseCase:
    return CreateOrderUseCase(uow_factory, settings.PRODUCT_PRICES)


def get_order_query(uow_factory=Depends(get_uow_factory)) -> GetOrderUseCase:
    return GetOrderUseCase(uow_factory)


def get_create_session(uow_factory=Depends(get_uow_factory)) -> CreatePaymentSessionUseCase:
    return CreatePaymentSessionUseCase(uow_factory, MockGateway(settings.MOCK_PG_PATH))


def get_balance_query(uow_factory=Depends(get_uow_factory)) -> GetBalanceUseCase:
    return GetBalanceUseCase(uow_factory)


def get_ledger_query(uow_factory=Depends(get_uow_factory)) -> ListLedgerUseCase:
    return ListLedgerUseCase(uow_factory, page_size=settings.LEDGER_PAGE_SIZE)


def get_quote_debit(uow_factory=Depends(get_uow_factory)) -> DebitPointsForQuoteUseCase:
    return DebitPointsForQuoteUseCase(uow_factory, points_per_quote=settings.QUOTE_DEBIT_POINTS)


def get_subscription_query(uow_factory=Depends(get_uow_factory)) -> GetSubscriptionUseCase:
    return GetSubscriptionUseCase(uow_factory)


def get_start_subscription(uow_factory=Depends(get_uow_factory)) -> StartSubscriptionUseCase:
    return StartSubscriptionUseCase(uow_factory)


def get_cancel_subscription(uow_factory=Depends(get_uow_factory)) -> CancelSubscriptionUseCase:
    return CancelSubscriptionUseCase(uow_factory)


def get_reaper(uow_factory=Depends(get_uow_factory),
               finalizer: FinalizePaymentUseCase = Depends(get_finalizer)) -> ReapStaleOrdersUseCase:
    return ReapStaleOrdersUseCase(uow_factory, finalizer, settings.ORDER_EXPIRY_MINUTES)


def get_list_orders(uow_factory=Depends(get_uow_factory)) -> ListOrdersUseCase:
    return ListOrdersUseCase(uow_factory)


def get_set_role(uow_factory=Depends(get_uow_factory)) -> SetAccountRoleUseCase:
    return SetAccountRoleUseCase(uow_factory)
