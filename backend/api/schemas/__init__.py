"""
API 스키마 re-export

사용법:
  from api.schemas import CreateOrderRequest, BalanceResponse
"""
from api.schemas.common import OkResponse
from api.schemas.payment import (
    CreateOrderRequest, CreateOrderResponse, OrderResponse,
    CreateSessionRequest, CreateSessionResponse, ConfirmTestRequest, WebhookPayload,
)
from api.schemas.points import BalanceResponse, LedgerItem, QuoteDebitRequest, QuoteDebitResponse
from api.schemas.subscription import SubscriptionResponse, StartSubscriptionRequest
from api.schemas.admin import OrderListResponse, ReapResponse, SetRoleRequest
