"""
파트너 포인트 결제 서비스 - FastAPI 메인 애플리케이션
"""
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine
from loguru import logger

from config import settings
from api.errors import register_exception_handlers
from api.routers import admin, health, payment, points, subscription
from infrastructure.auth.role_resolver import AccountRoleResolver
from infrastructure.persistence import database
from infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork

# 로깅 설정
os.makedirs(os.path.dirname(settings.LOG_FILE) or ".", exist_ok=True)
logger.add(
    settings.LOG_FILE,
    rotation="10 MB",
    retention="30 days",
    level=settings.LOG_LEVEL
)


def create_app(engine: Optional[AsyncEngine] = None) -> FastAPI:
    """앱 생성. 테스트에서는 별도 엔진을 넘긴다"""
    engine = engine or database.engine
    session_factory = database.build_session_factory(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("서비스 시작...")
        await database.init_db(engine)
        logger.info("데이터베이스 초기화 완료")
        if settings.PG_WEBHOOK_SECRET == "" and settings.webhook_signature_required:
            logger.error("PG_WEBHOOK_SECRET이 설정되지 않아 웹훅이 모두 거부됩니다.")

        yield

        logger.info("서비스 종료...")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="파트너 포인트 충전 결제 - 주문, 결제 확정, 포인트 원장, 구독",
        lifespan=lifespan
    )

    app.state.uow_factory = lambda: SqlAlchemyUnitOfWork(session_factory)
    app.state.role_resolver = AccountRoleResolver(app.state.uow_factory,
                                                  ttl_seconds=settings.ROLE_CACHE_TTL_SECONDS)

    # CORS 설정
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    for module in (health, payment, points, subscription, admin):
        app.include_router(module.router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
