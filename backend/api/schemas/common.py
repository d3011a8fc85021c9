"""공통 응답 스키마"""
from pydantic import BaseModel


class OkResponse(BaseModel):
    ok: bool = True
