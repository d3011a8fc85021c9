"""관리자 CLI 도구

사용법:
  [로컬]
    uv run python tools/admin.py stats                         서비스 현황 요약
    uv run python tools/admin.py orders                        최근 주문 목록
    uv run python tools/admin.py orders --status READY         상태별 필터
    uv run python tools/admin.py account <uid>                 계정 상세 (잔액, 구독, 원장)
    uv run python tools/admin.py account <uid> grant 1000      보너스 포인트 지급
    uv run python tools/admin.py account <uid> role admin      역할 변경
    uv run python tools/admin.py reap                          미결제 주문 만료 처리
    uv run python tools/admin.py reap --minutes 60             만료 기준 지정

  [K8s 운영환경]
    MSYS_NO_PATHCONV=1 kubectl -n app exec deploy/billing-service -- python /srv/backend/tools/admin.py stats
"""
import argparse
import asyncio
import os
import sys
from datetime import datetime, timedelta
from pathlib import Path

# DB 상대 경로가 올바르게 해석되도록 backend 디렉터리로 이동
BACKEND_DIR = Path(__file__).resolve().parent.parent
os.chdir(BACKEND_DIR)
sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import select, func

from config import settings
from application.use_cases.admin import ListOrdersUseCase, SetAccountRoleUseCase
from application.use_cases.finalize_payment import FinalizePaymentUseCase
from application.use_cases.point_ledger import GetBalanceUseCase, ListLedgerUseCase, GrantBonusPointsUseCase
from application.use_cases.reap_stale_orders import ReapStaleOrdersUseCase
from domain.billing import calc_billing
from domain.enums import AccountRole, OrderStatus
from domain.exceptions import DomainError
from infrastructure.persistence.database import get_db_session, init_db
from infrastructure.persistence.models import Account, PaymentOrder, PointLedgerEntry, LedgerDirection
from infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork


# ==================== 유틸 ====================

def fmt_date(dt) -> str:
    if not dt:
        return "-"
    return dt.strftime("%Y-%m-%d %H:%M")


def fmt_points(points: int) -> str:
    return f"{points:+,}P"


def print_table(headers: list, rows: list, col_widths: list = None):
    """간단한 테이블 출력"""
    if not col_widths:
        col_widths = [max(len(str(h)), max((len(str(r[i])) for r in rows), default=0)) + 2
                      for i, h in enumerate(headers)]

    header_line = "".join(str(h).ljust(w) for h, w in zip(headers, col_widths))
    print(header_line)
    print("-" * len(header_line))
    for row in rows:
        print("".join(str(c).ljust(w) for c, w in zip(row, col_widths)))


# ==================== 명령어 ====================

async def cmd_stats():
    """서비스 현황 요약"""
    async with get_db_session() as s:
        total_accounts = (await s.execute(select(func.count(Account.id)))).scalar()

        status_counts = {}
        for status in OrderStatus:
            cnt = (await s.execute(
                select(func.count(PaymentOrder.order_id)).where(PaymentOrder.status == status)
            )).scalar()
            status_counts[status.value] = cnt

        today = datetime.utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
        today_paid = (await s.execute(
            select(func.sum(PaymentOrder.amount)).where(
                PaymentOrder.status == OrderStatus.PAID,
                PaymentOrder.updated_at >= today
            )
        )).scalar() or 0
        total_paid = (await s.execute(
            select(func.sum(PaymentOrder.amount)).where(PaymentOrder.status == OrderStatus.PAID)
        )).scalar() or 0

        credited = (await s.execute(
            select(func.sum(PointLedgerEntry.amount)).where(PointLedgerEntry.direction == LedgerDirection.CREDIT)
        )).scalar() or 0
        debited = (await s.execute(
            select(func.sum(PointLedgerEntry.amount)).where(PointLedgerEntry.direction == LedgerDirection.DEBIT)
        )).scalar() or 0

    print("=== 서비스 현황 ===\n")

    print("[계정]")
    print(f"  전체: {total_accounts}개")

    print("\n[주문]")
    for status, cnt in status_counts.items():
        print(f"  {status}: {cnt}건")

    print("\n[결제 (공급가)]")
    print(f"  오늘: {today_paid:,}원")
    print(f"  전체: {total_paid:,}원")

    print("\n[포인트]")
    print(f"  적립: {credited:,}P")
    print(f"  차감: {debited:,}P")
    print(f"  유통: {credited - debited:,}P")


async def cmd_orders(status_filter: str = None, limit: int = 50):
    """최근 주문 목록"""
    status = None
    if status_filter:
        try:
            status = OrderStatus(status_filter.upper())
        except ValueError:
            print(f"잘못된 상태: {status_filter} (READY/PAID/FAILED/CANCELLED)")
            sys.exit(1)

    orders = await ListOrdersUseCase(SqlAlchemyUnitOfWork).execute(status, limit=limit)
    if not orders:
        print("주문이 없습니다.")
        return

    headers = ["주문번호", "계정", "상품", "금액", "상태", "PG", "메모", "생성일"]
    rows = []
    for o in orders:
        rows.append([
            o.order_id, o.account_id[:16], o.product_id, f"{o.amount:,}원",
            o.status.value, o.gateway_provider or "-", (o.status_detail or "-")[:20],
            fmt_date(o.created_at)
        ])
    print(f"주문 {len(rows)}건:\n")
    print_table(headers, rows)


async def cmd_account_detail(account_id: str):
    """계정 상세"""
    async with SqlAlchemyUnitOfWork() as uow:
        account = await uow.accounts.get(account_id)
    if not account:
        print(f"계정을 찾을 수 없습니다: {account_id}")
        sys.exit(1)

    balance = await GetBalanceUseCase(SqlAlchemyUnitOfWork).execute(account_id)
    entries = await ListLedgerUseCase(SqlAlchemyUnitOfWork, page_size=10).execute(account_id)
    sub = account.subscription

    print("=== 계정 상세 ===\n")
    print(f"  ID:      {account.id}")
    print(f"  역할:    {account.role.value}{' (관리자)' if account.is_admin else ''}")
    print(f"  생성일:  {fmt_date(account.created_at)}")

    print("\n[포인트]")
    print(f"  잔액(원장 합계): {balance:,}P")
    if account.points_balance != balance:
        print(f"  표시용 잔액 불일치: {account.points_balance:,}P")

    print("\n[구독]")
    print(f"  상태:    {sub.status.value}")
    print(f"  플랜:    {sub.plan.value if sub.plan else '-'} (자동갱신: {'예' if sub.auto_renew else '아니오'})")
    print(f"  기간:    {fmt_date(sub.current_period_start)} ~ {fmt_date(sub.current_period_end)}")

    if entries:
        print("\n[최근 원장]")
        for e in entries:
            ref = e.related_order_id or e.request_id or "-"
            print(f"  {fmt_date(e.created_at)}  {fmt_points(e.delta_points):>10}  "
                  f"{e.balance_after:>8,}P  {e.reason:<14}  {ref}")


async def cmd_account_grant(account_id: str, points_str: str, reason: str = None):
    """보너스 포인트 지급"""
    try:
        points = int(points_str)
    except ValueError:
        print(f"잘못된 포인트: {points_str}")
        sys.exit(1)

    try:
        entry = await GrantBonusPointsUseCase(SqlAlchemyUnitOfWork).execute(
            account_id, points, reason or "ADMIN_BONUS")
    except DomainError as e:
        print(f"지급 실패: {e}")
        sys.exit(1)
    print(f"{account_id}: {fmt_points(points)} 지급 완료 (잔액: {entry.balance_after:,}P)")


async def cmd_account_role(account_id: str, role_str: str):
    """역할 변경 (API 서버의 역할 캐시는 TTL 경과 후 반영)"""
    try:
        role = AccountRole(role_str)
    except ValueError:
        print(f"잘못된 역할: {role_str} (customer/partner/admin)")
        sys.exit(1)

    try:
        await SetAccountRoleUseCase(SqlAlchemyUnitOfWork).execute(account_id, role)
    except DomainError as e:
        print(f"변경 실패: {e}")
        sys.exit(1)
    print(f"{account_id}: 역할 -> {role.value}")


async def cmd_reap(minutes: int = None):
    """미결제 주문 만료 처리"""
    expiry = minutes or settings.ORDER_EXPIRY_MINUTES
    if not expiry:
        print("만료 기준이 없습니다. --minutes 또는 ORDER_EXPIRY_MINUTES를 지정해주세요.")
        sys.exit(1)

    finalizer = FinalizePaymentUseCase(SqlAlchemyUnitOfWork)
    reaped = await ReapStaleOrdersUseCase(SqlAlchemyUnitOfWork, finalizer, expiry).execute()
    cutoff = datetime.utcnow() - timedelta(minutes=expiry)
    print(f"만료 처리: {reaped}건 (기준: {fmt_date(cutoff)} 이전 생성)")


def cmd_quote(amount_str: str):
    """결제 금액 → 적립 포인트 계산"""
    result = calc_billing(amount_str)
    print(f"공급가:   {result.amount_supply_krw:,}원")
    print(f"결제금액: {result.amount_pay_krw:,}원 (VAT {result.vat_rate:.0%})")
    print(f"기본:     {result.base_points:,}P")
    print(f"보너스:   {result.bonus_points:,}P")
    print(f"적립:     {result.credited_points:,}P")


async def run(coro):
    await init_db()
    await coro


# ==================== 메인 ====================

def main():
    parser = argparse.ArgumentParser(
        description="파트너 포인트 결제 서비스 관리 CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
명령어:
  stats                                서비스 현황 요약
  orders [--status STATUS] [--limit N] 주문 목록
  account <uid>                        계정 상세
  account <uid> grant <N> [reason]     보너스 포인트 지급
  account <uid> role <role>            역할 변경 (customer|partner|admin)
  reap [--minutes N]                   미결제 주문 만료 처리
  quote <amount>                       결제 금액별 적립 포인트 계산
        """,
    )
    parser.add_argument("command", help="명령어")
    parser.add_argument("args", nargs="*", help="추가 인자")
    parser.add_argument("--status", help="주문 상태 필터 (orders 명령)")
    parser.add_argument("--limit", type=int, default=50, help="최대 조회 건수")
    parser.add_argument("--minutes", type=int, help="만료 기준 (분)")

    args = parser.parse_args()
    cmd = args.command

    if cmd == "stats":
        asyncio.run(run(cmd_stats()))

    elif cmd == "orders":
        asyncio.run(run(cmd_orders(args.status, args.limit)))

    elif cmd == "account":
        if not args.args:
            parser.error("계정 ID를 지정해주세요: admin.py account <uid>")
        account_id = args.args[0]
        if len(args.args) == 1:
            asyncio.run(run(cmd_account_detail(account_id)))
        elif args.args[1] == "grant":
            if len(args.args) < 3:
                parser.error("포인트를 지정해주세요: admin.py account <uid> grant <N> [reason]")
            reason = args.args[3] if len(args.args) > 3 else None
            asyncio.run(run(cmd_account_grant(account_id, args.args[2], reason)))
        elif args.args[1] == "role":
            if len(args.args) < 3:
                parser.error("역할을 지정해주세요: admin.py account <uid> role <customer|partner|admin>")
            asyncio.run(run(cmd_account_role(account_id, args.args[2])))
        else:
            parser.error(f"알 수 없는 하위 명령: {args.args[1]}")

    elif cmd == "reap":
        asyncio.run(run(cmd_reap(args.minutes)))

    elif cmd == "quote":
        if not args.args:
            parser.error("금액을 지정해주세요: admin.py quote <amount>")
        cmd_quote(args.args[0])

    else:
        parser.error(f"알 수 없는 명령: {cmd}")


if __name__ == "__main__":
    main()
