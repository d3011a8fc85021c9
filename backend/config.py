"""
파트너 포인트 결제 서비스 설정
"""
from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # 앱 기본 설정
    APP_NAME: str = "파트너 포인트 결제 서비스"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"  # development | staging | production

    # 서버 설정
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # 데이터베이스 설정
    DB_URL: str = "sqlite+aiosqlite:///./data/billing.db"

    # JWT 검증 설정 (토큰 발급은 외부 인증 서비스 담당)
    SECRET_KEY: str = "your-super-secret-key-change-in-production-32chars"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 24시간

    # PG 설정
    PG_PROVIDER: str = "stub"  # stub | toss
    PG_WEBHOOK_SECRET: str = ""
    PG_WEBHOOK_REQUIRE_SIGNATURE: Optional[bool] = None  # None이면 운영 환경에서만 강제
    MOCK_PG_PATH: str = "/pay/mock-pg"

    # 상품 가격표 (공급가, 원)
    PRODUCT_PRICES: dict = {
        "POINT_10000": 10000,
        "POINT_30000": 30000,
        "POINT_50000": 50000,
    }

    # 포인트 정책
    QUOTE_DEBIT_POINTS: int = 500
    LEDGER_PAGE_SIZE: int = 30

    # 미결제 주문 정리 (None이면 비활성)
    ORDER_EXPIRY_MINUTES: Optional[int] = None

    # 역할 캐시
    ROLE_CACHE_TTL_SECONDS: int = 300

    # CORS 설정
    CORS_ORIGINS: list = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # 로깅 설정
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "./logs/app.log"

    class Config:
        env_file = ".env.backend"  # 백엔드 전용 환경 변수 파일
        case_sensitive = True
        env_file_encoding = "utf-8"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def webhook_signature_required(self) -> bool:
        if self.PG_WEBHOOK_REQUIRE_SIGNATURE is None:
            return self.is_production
        return self.PG_WEBHOOK_REQUIRE_SIGNATURE


@lru_cache()
def get_settings() -> Settings:
    """설정 싱글톤 반환"""
    return Settings()


# 설정 인스턴스
settings = get_settings()
