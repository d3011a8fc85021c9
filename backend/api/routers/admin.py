"""관리자 라우터"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from application.use_cases.admin import ListOrdersUseCase, SetAccountRoleUseCase
from application.use_cases.reap_stale_orders import ReapStaleOrdersUseCase
from domain.enums import OrderStatus
from infrastructure.auth.role_resolver import AccountRoleResolver
from api.schemas.admin import OrderListResponse, ReapResponse, SetRoleRequest
from api.schemas.common import OkResponse
from api.schemas.payment import to_order_response
from api.dependencies import (
    get_admin_account_id, get_list_orders, get_reaper, get_set_role, get_role_resolver,
)

router = APIRouter(prefix="/api/admin", tags=["관리자"], dependencies=[Depends(get_admin_account_id)])


@router.get("/orders", response_model=OrderListResponse)
async def list_orders(status: Optional[OrderStatus] = Query(None),
                      limit: int = Query(50, ge=1, le=500),
                      use_case: ListOrdersUseCase = Depends(get_list_orders)):
    orders = await use_case.execute(status, limit=limit)
    items = [to_order_response(o) for o in orders]
    return OrderListResponse(items=items, total=len(items))


@router.post("/orders/reap", response_model=ReapResponse)
async def reap_orders(use_case: ReapStaleOrdersUseCase = Depends(get_reaper)):
    """ORDER_EXPIRY_MINUTES보다 오래된 READY 주문을 FAILED 처리"""
    return ReapResponse(reaped=await use_case.execute())


@router.put("/accounts/{account_id}/role", response_model=OkResponse)
async def set_account_role(account_id: str, request: SetRoleRequest,
                           use_case: SetAccountRoleUseCase = Depends(get_set_role),
                           resolver: AccountRoleResolver = Depends(get_role_resolver)):
    await use_case.execute(account_id, request.role)
    resolver.invalidate(account_id)
    return OkResponse()
