"""모의 PG 어댑터: 세션 발급과 웹훅 서명 검증"""
import hashlib
import hmac
import time
import uuid
from typing import Optional
from urllib.parse import urlencode

from application.ports.payment_gateway import PaymentGatewayPort
from domain.enums import GatewayProvider
from config import settings


class MockGateway(PaymentGatewayPort):
    provider = GatewayProvider.STUB.value

    def __init__(self, checkout_path: Optional[str] = None):
        self.checkout_path = checkout_path or settings.MOCK_PG_PATH

    def new_transaction_id(self) -> str:
        return f"stub_{int(time.time() * 1000)}_{uuid.uuid4().hex[:6]}"

    def build_redirect_url(self, order_id: str, tx_id: str) -> str:
        return f"{self.checkout_path}?{urlencode({'orderId': order_id, 'tx': tx_id})}"


def sign_payload(payload: bytes, secret: str) -> str:
    return hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()


def verify_signature(payload: bytes, signature: str, secret: str) -> bool:
    if not secret or not signature:
        return False
    return hmac.compare_digest(sign_payload(payload, secret), signature.strip().lower())
