"""계정 역할 조회 (TTL 캐시 사용)"""
from typing import Callable, Optional

from application.ports.unit_of_work import UnitOfWork
from domain.enums import AccountRole
from infrastructure.cache.ttl_cache import TTLCache


class AccountRoleResolver:
    def __init__(self, uow_factory: Callable[[], UnitOfWork], ttl_seconds: float,
                 cache: Optional[TTLCache] = None):
        self._uow_factory = uow_factory
        self.cache: TTLCache = cache if cache is not None else TTLCache(ttl_seconds)

    async def resolve(self, account_id: str) -> AccountRole:
        cached = self.cache.get(account_id)
        if cached is not None:
            return cached
        async with self._uow_factory() as uow:
            account = await uow.accounts.get(account_id)
        # 계정이 아직 없으면 파트너로 간주
        role = account.role if account else AccountRole.PARTNER
        self.cache.set(account_id, role)
        return role

    def invalidate(self, account_id: Optional[str] = None) -> None:
        self.cache.invalidate(account_id)
