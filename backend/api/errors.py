"""
예외 → HTTP 응답 매핑

응답 본문은 {"message": ...} 형태로 통일한다.
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from loguru import logger

from domain.exceptions import (
    DomainError, UnauthenticatedError, ForbiddenError, OrderNotFoundError, AccountNotFoundError,
    UnknownProductError, InvalidStatusError, InvalidAmountError, InsufficientPointsError,
    ConcurrentUpdateError,
)

STATUS_BY_ERROR = {
    UnauthenticatedError: status.HTTP_401_UNAUTHORIZED,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    OrderNotFoundError: status.HTTP_404_NOT_FOUND,
    AccountNotFoundError: status.HTTP_404_NOT_FOUND,
    UnknownProductError: status.HTTP_400_BAD_REQUEST,
    InvalidStatusError: status.HTTP_400_BAD_REQUEST,
    InvalidAmountError: status.HTTP_400_BAD_REQUEST,
    InsufficientPointsError: status.HTTP_400_BAD_REQUEST,
    ConcurrentUpdateError: status.HTTP_409_CONFLICT,
}

INTERNAL_ERROR_MESSAGE = "서버 내부 오류가 발생했습니다."


def error_response(status_code: int, message: str, details=None, headers=None) -> JSONResponse:
    content = {"message": message}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def domain_error_handler(request: Request, exc: DomainError):
    status_code = STATUS_BY_ERROR.get(type(exc), status.HTTP_400_BAD_REQUEST)
    logger.warning(f"{exc.__class__.__name__}: {exc} ({request.method} {request.url.path})")
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return error_response(status_code, str(exc), headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(f"HTTP {exc.status_code}: {exc.detail} ({request.method} {request.url.path})")
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [f"{'.'.join(map(str, e['loc']))}: {e['msg']}" for e in exc.errors()]
    logger.warning(f"요청 검증 실패: {errors} ({request.method} {request.url.path})")
    return error_response(status.HTTP_400_BAD_REQUEST, "요청 형식이 올바르지 않습니다.", details=errors)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"처리되지 않은 예외: {request.method} {request.url.path}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
