"""포인트 원장 Repository 인터페이스"""
from abc import ABC, abstractmethod
from typing import List
from domain.entities.ledger import PointLedgerEntryEntity


class PointLedgerRepository(ABC):
    @abstractmethod
    async def append(self, entry: PointLedgerEntryEntity) -> PointLedgerEntryEntity:
        """항목 추가. balance_after는 같은 트랜잭션 안에서 실시간 합계로 계산"""
    @abstractmethod
    async def balance_of(self, account_id: str) -> int: ...
    @abstractmethod
    async def list_by_account(self, account_id: str, limit: int = 30) -> List[PointLedgerEntryEntity]: ...
