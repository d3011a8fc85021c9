"""파트너 구독 라우터"""
from fastapi import APIRouter, Depends
from loguru import logger

from application.use_cases.subscription import (
    GetSubscriptionUseCase, StartSubscriptionUseCase, CancelSubscriptionUseCase,
)
from api.schemas.subscription import (
    SubscriptionResponse, StartSubscriptionRequest, to_subscription_response,
)
from api.dependencies import (
    get_current_account_id, get_subscription_query, get_start_subscription, get_cancel_subscription,
)

router = APIRouter(prefix="/api/partner/subscription", tags=["구독"])


@router.get("", response_model=SubscriptionResponse)
async def get_subscription(account_id: str = Depends(get_current_account_id),
                           use_case: GetSubscriptionUseCase = Depends(get_subscription_query)):
    """조회 시 기간이 지났으면 자동 갱신 또는 만료 처리"""
    return to_subscription_response(await use_case.execute(account_id))


@router.post("", response_model=SubscriptionResponse)
async def start_subscription(request: StartSubscriptionRequest,
                             account_id: str = Depends(get_current_account_id),
                             use_case: StartSubscriptionUseCase = Depends(get_start_subscription)):
    subscription = await use_case.execute(account_id, request.plan, request.auto_renew)
    return to_subscription_response(subscription)


@router.delete("", response_model=SubscriptionResponse)
async def cancel_subscription(account_id: str = Depends(get_current_account_id),
                              use_case: CancelSubscriptionUseCase = Depends(get_cancel_subscription)):
    subscription = await use_case.execute(account_id)
    logger.info(f"구독 해지 요청: {account_id}")
    return to_subscription_response(subscription)
