"""계정(파트너) 도메인 엔티티"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from domain.entities.subscription import SubscriptionInfo
from domain.enums import AccountRole


@dataclass
class AccountEntity:
    """인증 서비스 uid로 식별되는 계정. points_balance는 화면 표시용 캐시"""
    id: str
    role: AccountRole = AccountRole.PARTNER
    points_balance: int = 0
    subscription: SubscriptionInfo = field(default_factory=SubscriptionInfo)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role is AccountRole.ADMIN
