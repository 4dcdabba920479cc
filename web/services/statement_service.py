"""
재무제표 서비스

LedgerEngine 결과를 API 응답 스키마로 변환.
조회 기간(as_of / from_date / fy) 해석 포함.
"""

import logging
from datetime import date
from decimal import Decimal

from core.ledger.engine import LedgerEngine
from core.ledger.errors import StatementWarning
from core.ledger.models import AccountGroup
from core.ledger.rollup import GroupTotal
from core.ledger.tree import AccountTree
from core.utils.fiscal import financial_year_of, parse_date, parse_financial_year
from web.models.responses import (
    BalanceSheetResponse,
    ChartGroupResponse,
    ChartLedgerResponse,
    GroupNodeResponse,
    LedgerBalanceResponse,
    LedgerRowResponse,
    ProfitAndLossResponse,
    StatementTotalsResponse,
    TrialBalanceResponse,
    TrialBalanceRowResponse,
    WarningResponse,
)

logger = logging.getLogger(__name__)


class StatementService:
    """재무제표 조회 서비스

    Args:
        engine: Ledger 엔진
        fiscal_year_start_month: 회계연도 시작 월
    """

    def __init__(self, engine: LedgerEngine, fiscal_year_start_month: int = 4):
        self.engine = engine
        self.fiscal_year_start_month = fiscal_year_start_month

    def resolve_period(
        self,
        as_of: str | None = None,
        from_date: str | None = None,
        fy: str | None = None,
        today: date | None = None,
    ) -> tuple[date, date | None]:
        """조회 기간 해석

        - fy 지정: 회계연도 시작일 ~ 종료일
        - as_of 지정: 해당일 (from_date는 선택)
        - 둘 다 없음: 오늘

        Returns:
            (기준일, 기간 시작일)

        Raises:
            ValueError: 형식 오류, fy와 날짜 동시 지정, 시작일 > 기준일
        """
        if fy:
            if as_of or from_date:
                raise ValueError("fy는 as_of / from_date와 함께 사용할 수 없습니다")
            start, end = parse_financial_year(fy, self.fiscal_year_start_month)
            return end, start

        cutoff = parse_date(as_of) if as_of else (today or date.today())
        start = parse_date(from_date) if from_date else None
        if start is not None and start > cutoff:
            raise ValueError(f"from_date({start})가 as_of({cutoff})보다 늦습니다")
        return cutoff, start

    async def balance_sheet(self, cutoff: date) -> BalanceSheetResponse:
        """재무상태표"""
        sheet = await self.engine.get_balance_sheet(cutoff)
        totals = sheet.totals

        return BalanceSheetResponse(
            as_of=cutoff.isoformat(),
            financial_year=financial_year_of(cutoff, self.fiscal_year_start_month),
            assets=[_group_node(g) for g in sheet.assets],
            liabilities=[_group_node(g) for g in sheet.liabilities],
            equity=[_group_node(g) for g in sheet.equity],
            pnl=str(sheet.pnl),
            totals=StatementTotalsResponse(
                total_assets=str(totals.total_assets),
                total_liabilities=str(totals.total_liabilities),
                total_equity=str(totals.total_equity),
                total_liabilities_and_equity=str(totals.total_liabilities_and_equity),
                difference=str(totals.difference),
                identity_holds=totals.identity_holds,
            ),
            warnings=_warnings(sheet.warnings),
            warning_count=len(sheet.warnings),
        )

    async def profit_and_loss(
        self,
        cutoff: date,
        from_date: date | None = None,
    ) -> ProfitAndLossResponse:
        """손익계산서"""
        pnl = await self.engine.get_profit_and_loss(cutoff, from_date)

        return ProfitAndLossResponse(
            as_of=cutoff.isoformat(),
            from_date=from_date.isoformat() if from_date else None,
            income=[_group_node(g) for g in pnl.income],
            expense=[_group_node(g) for g in pnl.expense],
            total_income=str(pnl.total_income),
            total_expense=str(pnl.total_expense),
            direct_income=str(pnl.direct_income),
            net_profit=str(pnl.net_profit),
            warnings=_warnings(pnl.warnings),
            warning_count=len(pnl.warnings),
        )

    async def trial_balance(
        self,
        cutoff: date,
        from_date: date | None = None,
    ) -> TrialBalanceResponse:
        """시산표"""
        result = await self.engine.get_trial_balance(cutoff, from_date)

        return TrialBalanceResponse(
            as_of=cutoff.isoformat(),
            from_date=from_date.isoformat() if from_date else None,
            rows=[
                TrialBalanceRowResponse(
                    ledger_id=row.ledger.ledger_id,
                    name=row.ledger.name,
                    group_name=row.group_name,
                    nature=row.ledger.nature.value,
                    opening=str(row.opening),
                    debit=str(row.debit),
                    credit=str(row.credit),
                    closing=str(row.closing),
                    closing_debit=str(row.closing_debit),
                    closing_credit=str(row.closing_credit),
                )
                for row in result.rows
            ],
            total_debit=str(result.total_debit),
            total_credit=str(result.total_credit),
            is_balanced=result.is_balanced,
            warnings=_warnings(result.warnings),
        )

    async def chart(self) -> list[ChartGroupResponse]:
        """계정과목 트리"""
        tree = await self.engine.get_chart()
        return [_chart_node(tree, root) for root in tree.roots]

    async def ledger_balance(self, ledger_id: str, cutoff: date) -> LedgerBalanceResponse:
        """단일 Ledger 잔액"""
        view = await self.engine.get_ledger_balance(ledger_id, cutoff)

        return LedgerBalanceResponse(
            ledger_id=view.ledger.ledger_id,
            name=view.ledger.name,
            nature=view.ledger.nature.value,
            as_of=cutoff.isoformat(),
            balance=str(view.balance),
            amount=str(view.amount),
            warnings=_warnings(view.warnings),
        )


def _amount(value: Decimal | None) -> str | None:
    return str(value) if value is not None else None


def _warnings(warnings: list[StatementWarning]) -> list[WarningResponse]:
    return [
        WarningResponse(
            kind=w.kind.value,
            message=w.message,
            source=w.source,
            reference=w.reference,
            ledger_id=w.ledger_id,
            amount=_amount(w.amount),
            posted_on=w.posted_on.isoformat() if w.posted_on else None,
        )
        for w in warnings
    ]


def _group_node(root: GroupTotal) -> GroupNodeResponse:
    """GroupTotal 트리 → 응답 트리 (하위 노드부터 생성)"""
    built: dict[int, GroupNodeResponse] = {}
    for node in reversed(list(root.walk())):
        built[id(node)] = GroupNodeResponse(
            group_id=node.group.group_id,
            name=node.group.name,
            nature=node.group.nature.value,
            total=str(node.total),
            amount=str(node.amount),
            ledgers=[
                LedgerRowResponse(
                    ledger_id=lb.ledger.ledger_id,
                    name=lb.ledger.name,
                    nature=lb.ledger.nature.value,
                    balance=str(lb.balance),
                    amount=str(lb.amount),
                )
                for lb in node.ledgers
            ],
            children=[built[id(child)] for child in node.children],
        )
    return built[id(root)]


def _chart_node(tree: AccountTree, root: AccountGroup) -> ChartGroupResponse:
    """계정 트리 → 응답 트리 (하위 그룹부터 생성)"""
    built: dict[str, ChartGroupResponse] = {}
    for group in reversed(list(tree.iter_subtree(root.group_id))):
        built[group.group_id] = ChartGroupResponse(
            group_id=group.group_id,
            name=group.name,
            nature=group.nature.value,
            level=group.level,
            ledgers=[
                ChartLedgerResponse(
                    ledger_id=ledger.ledger_id,
                    name=ledger.name,
                    nature=ledger.nature.value,
                    normal_balance=ledger.normal_side.value,
                    is_stock_ledger=ledger.is_stock_ledger,
                    system_role=ledger.system_role.value if ledger.system_role else None,
                )
                for ledger in tree.ledgers_of(group.group_id)
            ],
            children=[built[child.group_id] for child in tree.children_of(group.group_id)],
        )
    return built[root.group_id]
