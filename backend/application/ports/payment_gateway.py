"""결제 게이트웨이 포트 인터페이스"""
from abc import ABC, abstractmethod


class PaymentGatewayPort(ABC):
    provider: str

    @abstractmethod
    def new_transaction_id(self) -> str: ...
    @abstractmethod
    def build_redirect_url(self, order_id: str, tx_id: str) -> str: ...
