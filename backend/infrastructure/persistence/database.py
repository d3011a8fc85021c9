"""
데이터베이스 연결 및 세션 관리

import 경로: from infrastructure.persistence.database import Base, get_db_session
"""
import os
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from contextlib import asynccontextmanager

from config import settings

Base = declarative_base()


def _ensure_sqlite_dir(url: str) -> None:
    prefix = "sqlite+aiosqlite:///"
    if url.startswith(prefix):
        directory = os.path.dirname(url[len(prefix):])
        if directory:
            os.makedirs(directory, exist_ok=True)


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """DB URL로 비동기 엔진 생성 (sqlite는 풀 옵션 제외)"""
    if url.startswith("sqlite"):
        _ensure_sqlite_dir(url)
        return create_async_engine(url, echo=echo, future=True)
    return create_async_engine(url, echo=echo, future=True, pool_size=5, max_overflow=10)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False
    )


engine = build_engine(settings.DB_URL, echo=settings.DEBUG)
async_session_factory = build_session_factory(engine)


async def init_db(bind: AsyncEngine = None):
    """데이터베이스 초기화"""
    import infrastructure.persistence.models  # noqa: F401  모델 등록

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def get_db_session():
    """컨텍스트 매니저 형태의 세션"""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
