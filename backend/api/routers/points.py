"""포인트 라우터: 잔액, 원장 내역, 견적 제출 차감"""
from typing import List

from fastapi import APIRouter, Depends

from application.use_cases.point_ledger import (
    GetBalanceUseCase, ListLedgerUseCase, DebitPointsForQuoteUseCase, QuoteDebitInput,
)
from api.schemas.points import (
    BalanceResponse, LedgerItem, QuoteDebitRequest, QuoteDebitResponse, to_ledger_item,
)
from api.dependencies import get_current_account_id, get_balance_query, get_ledger_query, get_quote_debit

router = APIRouter(prefix="/api/points", tags=["포인트"])


@router.get("/balance", response_model=BalanceResponse)
async def get_balance(account_id: str = Depends(get_current_account_id),
                      use_case: GetBalanceUseCase = Depends(get_balance_query)):
    return BalanceResponse(balance=await use_case.execute(account_id))


@router.get("/ledger", response_model=List[LedgerItem])
async def get_ledger(account_id: str = Depends(get_current_account_id),
                     use_case: ListLedgerUseCase = Depends(get_ledger_query)):
    entries = await use_case.execute(account_id)
    return [to_ledger_item(e) for e in entries]


@router.post("/quote-debit", response_model=QuoteDebitResponse)
async def quote_debit(request: QuoteDebitRequest,
                      account_id: str = Depends(get_current_account_id),
                      use_case: DebitPointsForQuoteUseCase = Depends(get_quote_debit)):
    """견적 제출 시 포인트 차감: 잔액 부족이면 400"""
    result = await use_case.execute(QuoteDebitInput(
        account_id=account_id, request_id=request.request_id, quote_price=request.quote_price,
    ))
    return QuoteDebitResponse(points_deducted=result.points_deducted, balance_after=result.balance_after)
