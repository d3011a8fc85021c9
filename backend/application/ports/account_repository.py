"""계정 Repository 인터페이스"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from domain.entities.account import AccountEntity
from domain.entities.subscription import SubscriptionInfo
from domain.enums import AccountRole


class AccountRepository(ABC):
    @abstractmethod
    async def get(self, account_id: str) -> Optional[AccountEntity]: ...
    @abstractmethod
    async def get_or_create(self, account_id: str) -> AccountEntity: ...
    @abstractmethod
    async def save_subscription(self, account_id: str, subscription: SubscriptionInfo,
                                now: datetime, expected: Optional[SubscriptionInfo] = None) -> bool:
        """expected가 주어지면 저장된 상태, 자동갱신 여부, 종료일이 모두 같을 때만 기록"""
    @abstractmethod
    async def set_role(self, account_id: str, role: AccountRole) -> bool: ...
