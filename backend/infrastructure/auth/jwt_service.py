"""JWT 토큰 처리: sub 클레임이 계정 uid"""
from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt

from config import settings


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """액세스 토큰 생성 (개발/테스트용: 운영 토큰은 인증 서비스가 발급)"""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({
        "exp": expire,
        "type": "access",
        "sub": str(to_encode.get("sub", ""))  # subject를 문자열로 변환
    })
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    """토큰 디코딩. 검증 실패 시 None"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


def account_id_from_token(token: str) -> Optional[str]:
    payload = decode_token(token)
    if payload is None or payload.get("type") != "access":
        return None
    subject = payload.get("sub")
    return str(subject) if subject else None
