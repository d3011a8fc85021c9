"""결제 라우터

주문 생성 → 결제 세션 → (테스트 승인 | PG 웹훅) → 결제 확정.
테스트 승인과 웹훅은 요청 해석만 다르고 상태 전이는 같은 유스케이스가 처리한다.
"""
from fastapi import APIRouter, Depends, HTTPException, Request, status
from loguru import logger
from pydantic import ValidationError

from config import settings
from application.use_cases.create_order import CreateOrderUseCase, CreateOrderInput
from application.use_cases.create_payment_session import CreatePaymentSessionUseCase, CreateSessionInput
from application.use_cases.finalize_payment import FinalizePaymentUseCase, FinalizeInput
from application.use_cases.get_order import GetOrderUseCase
from domain.enums import OrderStatus, GatewayProvider
from infrastructure.payment.mock_gateway import verify_signature
from api.schemas.common import OkResponse
from api.schemas.payment import (
    CreateOrderRequest, CreateOrderResponse, OrderResponse, to_order_response,
    CreateSessionRequest, CreateSessionResponse, ConfirmTestRequest, WebhookPayload,
)
from api.dependencies import (
    get_current_account_id, get_create_order, get_order_query, get_create_session, get_finalizer,
)

router = APIRouter(prefix="/api/pay", tags=["결제"])

SIGNATURE_HEADER = "X-PG-Signature"
TEST_PAID_DETAIL = "TEST_PAID"
TEST_FAILED_DETAIL = "TEST_FAILED"
WEBHOOK_FAILED_DETAIL = "PAYMENT_FAILED"


def _require_order_id(order_id: str) -> str:
    order_id = (order_id or "").strip()
    if not order_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="orderId가 필요합니다.")
    return order_id


@router.post("/orders", response_model=CreateOrderResponse)
async def create_order(request: CreateOrderRequest,
                       account_id: str = Depends(get_current_account_id),
                       use_case: CreateOrderUseCase = Depends(get_create_order)):
    result = await use_case.execute(CreateOrderInput(account_id=account_id,
                                                     product_id=request.product_id.strip()))
    logger.info(f"주문 생성: {result.order_id} ({account_id}, {request.product_id}, {result.amount}원)")
    return CreateOrderResponse(order_id=result.order_id)


@router.get("/orders/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str,
                    account_id: str = Depends(get_current_account_id),
                    use_case: GetOrderUseCase = Depends(get_order_query)):
    order = await use_case.execute(order_id, account_id)
    return to_order_response(order)


@router.post("/session", response_model=CreateSessionResponse)
async def create_session(request: CreateSessionRequest,
                         account_id: str = Depends(get_current_account_id),
                         use_case: CreatePaymentSessionUseCase = Depends(get_create_session)):
    order_id = _require_order_id(request.order_id)
    result = await use_case.execute(CreateSessionInput(order_id=order_id, account_id=account_id))
    logger.info(f"결제 세션 생성: {order_id} tx={result.gateway_tx_id}")
    return CreateSessionResponse(redirect_url=result.redirect_url)


@router.post("/confirm-test", response_model=OkResponse)
async def confirm_test(request: ConfirmTestRequest,
                       account_id: str = Depends(get_current_account_id),
                       order_query: GetOrderUseCase = Depends(get_order_query),
                       finalizer: FinalizePaymentUseCase = Depends(get_finalizer)):
    """모의 PG 화면에서 호출하는 테스트 승인 (운영 환경에서는 사용 불가)"""
    if settings.is_production:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN,
                            detail="운영 환경에서는 테스트 승인을 사용할 수 없습니다.")
    order_id = _require_order_id(request.order_id)
    await order_query.execute(order_id, account_id)

    failed = request.status == OrderStatus.FAILED.value
    await finalizer.execute(FinalizeInput(
        order_id=order_id,
        next_status=OrderStatus.FAILED if failed else OrderStatus.PAID,
        gateway_provider=GatewayProvider.STUB.value,
        status_detail=TEST_FAILED_DETAIL if failed else TEST_PAID_DETAIL,
    ))
    return OkResponse()


def _verify_webhook_signature(body: bytes, signature: str) -> None:
    secret = settings.PG_WEBHOOK_SECRET
    if secret:
        if not verify_signature(body, signature, secret):
            logger.warning("웹훅 서명 검증 실패")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="웹훅 서명이 올바르지 않습니다.")
        return
    if settings.webhook_signature_required:
        logger.error("PG_WEBHOOK_SECRET 미설정 상태에서 웹훅 수신: 거부")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="웹훅 서명이 필요합니다.")
    logger.warning("PG_WEBHOOK_SECRET 미설정: 서명 없이 웹훅 처리")


@router.post("/webhook", response_model=OkResponse)
async def payment_webhook(request: Request,
                          finalizer: FinalizePaymentUseCase = Depends(get_finalizer)):
    """PG 웹훅: 중복/재전송 가능, 서명은 원문 바이트 기준"""
    body = await request.body()
    _verify_webhook_signature(body, request.headers.get(SIGNATURE_HEADER, ""))
    try:
        payload = WebhookPayload.model_validate_json(body or b"{}")
    except ValidationError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="웹훅 본문이 올바르지 않습니다.")
    order_id = _require_order_id(payload.order_id)

    paid = payload.status == OrderStatus.PAID.value
    provider = GatewayProvider.TOSS if settings.PG_PROVIDER == GatewayProvider.TOSS.value else GatewayProvider.STUB
    result = await finalizer.execute(FinalizeInput(
        order_id=order_id,
        next_status=OrderStatus.PAID if paid else OrderStatus.FAILED,
        gateway_provider=provider.value,
        status_detail=None if paid else WEBHOOK_FAILED_DETAIL,
    ))
    logger.info(f"웹훅 처리: {order_id} status={payload.status} applied={result.applied}")
    return OkResponse()
