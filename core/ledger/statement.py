"""
재무제표 구성 (Statement Builder)

- 재무상태표: 자산 / 부채 / 자본 롤업 트리 + 당기순이익 + 합계
- 손익계산서: 수익 / 비용 롤업 트리 + 순이익

합계는 롤업 트리가 아닌 전체 잔액 맵을 성격별로 한 번 순회하여 계산.
각 Ledger는 성격에 따라 정확히 하나의 섹션에 속하며,
회계 항등식(자산 = 부채 + 자본)은 매 결과마다 검사하여 경고로 첨부.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from core.ledger.aggregator import BalanceResult
from core.ledger.errors import StatementWarning, identity_mismatch
from core.ledger.models import ZERO
from core.ledger.rollup import GroupTotal, RollupEngine, prune_sections
from core.ledger.tree import AccountTree
from core.ledger.types import Nature, WarningKind

logger = logging.getLogger(__name__)

DEFAULT_EPSILON = Decimal("0.01")


@dataclass(frozen=True)
class StatementTotals:
    """재무상태표 합계"""

    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    total_liabilities_and_equity: Decimal
    identity_holds: bool

    @property
    def difference(self) -> Decimal:
        """자산 - (부채 + 자본)"""
        return self.total_assets - self.total_liabilities_and_equity


@dataclass
class BalanceSheet:
    """재무상태표"""

    cutoff: date
    assets: list[GroupTotal]
    liabilities: list[GroupTotal]
    equity: list[GroupTotal]
    pnl: Decimal
    totals: StatementTotals
    warnings: list[StatementWarning] = field(default_factory=list)


@dataclass
class ProfitAndLoss:
    """손익계산서

    from_date가 있으면 기간 변동, 없으면 기준일까지 누적.
    """

    cutoff: date
    from_date: date | None
    income: list[GroupTotal]
    expense: list[GroupTotal]
    total_income: Decimal
    total_expense: Decimal
    direct_income: Decimal
    warnings: list[StatementWarning] = field(default_factory=list)

    @property
    def net_profit(self) -> Decimal:
        """순이익 (수익 - 비용)"""
        return self.total_income - self.total_expense


class StatementBuilder:
    """재무제표 구성기

    Args:
        tree: 계정 트리
        rollup: 롤업 엔진 (None이면 생성)
        epsilon: 항등식 허용 오차
    """

    def __init__(
        self,
        tree: AccountTree,
        rollup: RollupEngine | None = None,
        epsilon: Decimal = DEFAULT_EPSILON,
    ):
        self.tree = tree
        self.rollup = rollup or RollupEngine(tree)
        self.epsilon = epsilon

    # -------------------------------------------------------------------------
    # 합계
    # -------------------------------------------------------------------------

    def nature_totals(self, balances: Mapping[str, Decimal]) -> dict[Nature, Decimal]:
        """성격별 부호 잔액 합계 (단일 순회)"""
        totals = {nature: ZERO for nature in Nature}
        for ledger in self.tree.ledgers:
            totals[ledger.nature] += balances.get(ledger.ledger_id, ZERO)
        return totals

    def income_and_expense(
        self,
        balances: Mapping[str, Decimal],
        direct_income: Decimal = ZERO,
    ) -> tuple[Decimal, Decimal]:
        """수익 / 비용 합계

        수익 = Σ|min(0, 잔액)| (수익 Ledger, 대변 성격) + 직접 인식 수익
        비용 = Σ 잔액 (비용 Ledger, 차변 성격)
        """
        income = direct_income
        expense = ZERO
        for ledger in self.tree.ledgers:
            balance = balances.get(ledger.ledger_id, ZERO)
            if ledger.nature == Nature.INCOME:
                income += abs(min(ZERO, balance))
            elif ledger.nature == Nature.EXPENSE:
                expense += balance
        return income, expense

    def compute_pnl(
        self,
        balances: Mapping[str, Decimal],
        direct_income: Decimal = ZERO,
    ) -> Decimal:
        """당기순이익 (수익 - 비용)"""
        income, expense = self.income_and_expense(balances, direct_income)
        return income - expense

    def nature_mismatches(self) -> list[StatementWarning]:
        """루트 그룹과 성격이 다른 Ledger 경고

        합계는 Ledger 성격 기준, 트리 표시는 그룹 위치 기준이므로
        두 결과가 어긋나는 Ledger를 노출.
        """
        warnings: list[StatementWarning] = []
        for ledger in self.tree.ledgers:
            root = self.tree.root_of(ledger.group_id)
            if root is None or root.nature == ledger.nature:
                continue
            warnings.append(
                StatementWarning(
                    kind=WarningKind.NATURE_MISMATCH,
                    message=(
                        f"Ledger 성격 불일치: {ledger.name}({ledger.nature.value}) "
                        f"in {root.name}({root.nature.value})"
                    ),
                    ledger_id=ledger.ledger_id,
                    details={
                        "ledger_nature": ledger.nature.value,
                        "root_group_id": root.group_id,
                        "root_nature": root.nature.value,
                    },
                )
            )
        return warnings

    # -------------------------------------------------------------------------
    # 재무상태표
    # -------------------------------------------------------------------------

    def build_balance_sheet(self, result: BalanceResult) -> BalanceSheet:
        """재무상태표 구성

        당기순이익은 기준일까지 누적 손익 (항등식 성립 조건).

        Args:
            result: 잔액 집계 결과

        Returns:
            BalanceSheet
        """
        balances = result.balances
        totals_by_nature = self.nature_totals(balances)
        pnl = self.compute_pnl(balances, result.direct_income)

        total_assets = totals_by_nature[Nature.ASSET]
        total_liabilities = abs(totals_by_nature[Nature.LIABILITY])
        total_equity = abs(totals_by_nature[Nature.EQUITY]) + pnl
        total_le = total_liabilities + total_equity
        identity_holds = abs(total_assets - total_le) <= self.epsilon

        warnings = list(result.warnings)
        warnings.extend(self.nature_mismatches())

        if not identity_holds:
            warning = identity_mismatch(total_assets, total_le, self.epsilon)
            logger.warning(f"[{result.cutoff}] {warning.message}")
            warnings.append(warning)

        return BalanceSheet(
            cutoff=result.cutoff,
            assets=self._section(Nature.ASSET, balances),
            liabilities=self._section(Nature.LIABILITY, balances),
            equity=self._section(Nature.EQUITY, balances),
            pnl=pnl,
            totals=StatementTotals(
                total_assets=total_assets,
                total_liabilities=total_liabilities,
                total_equity=total_equity,
                total_liabilities_and_equity=total_le,
                identity_holds=identity_holds,
            ),
            warnings=warnings,
        )

    # -------------------------------------------------------------------------
    # 손익계산서
    # -------------------------------------------------------------------------

    def build_profit_and_loss(
        self,
        cutoff: date,
        balances: Mapping[str, Decimal],
        direct_income: Decimal = ZERO,
        from_date: date | None = None,
        warnings: list[StatementWarning] | None = None,
    ) -> ProfitAndLoss:
        """손익계산서 구성

        Args:
            cutoff: 기준일
            balances: Ledger별 부호 잔액 (기간 손익이면 기간 변동)
            direct_income: 직접 인식 수익
            from_date: 기간 시작일
            warnings: 집계 단계 경고

        Returns:
            ProfitAndLoss
        """
        total_income, total_expense = self.income_and_expense(balances, direct_income)
        return ProfitAndLoss(
            cutoff=cutoff,
            from_date=from_date,
            income=self._section(Nature.INCOME, balances),
            expense=self._section(Nature.EXPENSE, balances),
            total_income=total_income,
            total_expense=total_expense,
            direct_income=direct_income,
            warnings=list(warnings or []) + self.nature_mismatches(),
        )

    def _section(self, nature: Nature, balances: Mapping[str, Decimal]) -> list[GroupTotal]:
        return prune_sections(self.rollup.rollup_nature(nature, balances))
