"""관리자 유스케이스: 주문 목록, 역할 변경"""
from typing import Callable, List, Optional

from loguru import logger

from application.ports.unit_of_work import UnitOfWork
from domain.entities.payment_order import PaymentOrderEntity
from domain.enums import AccountRole, OrderStatus
from domain.exceptions import AccountNotFoundError


class ListOrdersUseCase:
    def __init__(self, uow_factory: Callable[[], UnitOfWork]):
        self._uow_factory = uow_factory

    async def execute(self, status: Optional[OrderStatus] = None, limit: int = 50) -> List[PaymentOrderEntity]:
        async with self._uow_factory() as uow:
            return await uow.orders.list_by_status(status, limit=limit)


class SetAccountRoleUseCase:
    """역할 변경. 호출 측은 역할 캐시를 무효화해야 한다"""

    def __init__(self, uow_factory: Callable[[], UnitOfWork]):
        self._uow_factory = uow_factory

    async def execute(self, account_id: str, role: AccountRole) -> None:
        async with self._uow_factory() as uow:
            if not await uow.accounts.set_role(account_id, role):
                raise AccountNotFoundError(account_id)
            await uow.commit()
        logger.info(f"계정 역할 변경: {account_id} -> {role.value}")
