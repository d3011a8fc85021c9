"""도메인 예외"""


class DomainError(Exception):
    """도메인 레이어 기본 예외"""
    pass


class UnauthenticatedError(DomainError):
    def __init__(self):
        super().__init__("인증이 필요합니다.")


class ForbiddenError(DomainError):
    def __init__(self, message: str = "접근 권한이 없습니다."):
        super().__init__(message)


class OrderNotFoundError(DomainError):
    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__("주문을 찾을 수 없습니다.")


class AccountNotFoundError(DomainError):
    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__("계정 정보를 찾을 수 없습니다.")


class UnknownProductError(DomainError):
    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"알 수 없는 상품입니다: {product_id}")


class InvalidStatusError(DomainError):
    def __init__(self, status: str):
        self.status = status
        super().__init__("결제 가능한 상태가 아닙니다.")


class InvalidAmountError(DomainError):
    def __init__(self, amount):
        self.amount = amount
        super().__init__(f"포인트 금액이 올바르지 않습니다: {amount}")


class InsufficientPointsError(DomainError):
    def __init__(self, required: int, balance: int):
        self.required = required
        self.balance = balance
        super().__init__("포인트가 부족합니다.")


class ConcurrentUpdateError(DomainError):
    """동시 요청과 충돌해 반영되지 않음: 재시도 가능"""

    def __init__(self, resource: str):
        self.resource = resource
        super().__init__("다른 요청과 충돌했습니다. 잠시 후 다시 시도해주세요.")
