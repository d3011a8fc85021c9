"""관리자 API 스키마"""
from typing import List
from pydantic import BaseModel

from api.schemas.payment import OrderResponse
from domain.enums import AccountRole


class OrderListResponse(BaseModel):
    items: List[OrderResponse]
    total: int


class ReapResponse(BaseModel):
    reaped: int


class SetRoleRequest(BaseModel):
    role: AccountRole
