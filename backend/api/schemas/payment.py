"""결제 관련 스키마 (요청/응답 필드는 camelCase)"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class CamelModel(BaseModel):
    class Config:
        populate_by_name = True


class CreateOrderRequest(CamelModel):
    product_id: str = Field("", alias="productId")


class CreateOrderResponse(CamelModel):
    order_id: str = Field(..., alias="orderId")


class OrderResponse(CamelModel):
    order_id: str = Field(..., alias="orderId")
    account_id: str = Field(..., alias="uid")
    product_id: str = Field(..., alias="productId")
    amount: int
    status: str
    gateway_provider: Optional[str] = Field(None, alias="pgProvider")
    gateway_tx_id: Optional[str] = Field(None, alias="pgTxId")
    status_detail: Optional[str] = Field(None, alias="statusDetail")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")


class CreateSessionRequest(CamelModel):
    order_id: str = Field("", alias="orderId")


class CreateSessionResponse(CamelModel):
    redirect_url: str = Field(..., alias="redirectUrl")


class ConfirmTestRequest(CamelModel):
    order_id: str = Field("", alias="orderId")
    status: Optional[str] = "PAID"


class WebhookPayload(CamelModel):
    order_id: str = Field("", alias="orderId")
    status: Optional[str] = None


def to_order_response(order) -> OrderResponse:
    return OrderResponse(
        order_id=order.order_id, account_id=order.account_id, product_id=order.product_id,
        amount=order.amount, status=order.status.value, gateway_provider=order.gateway_provider,
        gateway_tx_id=order.gateway_tx_id, status_detail=order.status_detail,
        created_at=order.created_at, updated_at=order.updated_at,
    )
