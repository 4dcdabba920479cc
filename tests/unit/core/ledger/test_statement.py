"""재무제표 구성 테스트"""

from datetime import date
from decimal import Decimal

import pytest

from core.ledger.aggregator import BalanceResult
from core.ledger.errors import StatementWarning, unresolved_reference
from core.ledger.models import AccountGroup, LedgerAccount
from core.ledger.statement import StatementBuilder
from core.ledger.tree import AccountTree
from core.ledger.types import Nature, WarningKind

CUTOFF = date(2025, 3, 31)


def _result(balances: dict[str, str], direct_income: str = "0", **kwargs) -> BalanceResult:
    return BalanceResult(
        cutoff=CUTOFF,
        balances={k: Decimal(v) for k, v in balances.items()},
        direct_income=Decimal(direct_income),
        **kwargs,
    )


class TestBalanceSheet:
    """재무상태표 테스트"""
    
    def test_cash_capital_identity_exact(self, sample_tree: AccountTree) -> None:
        """Cash 1200 Dr / Capital 1200 Cr → 항등식 정확히 성립"""
        sheet = StatementBuilder(sample_tree).build_balance_sheet(
            _result({"cash": "1200", "capital": "-1200"})
        )
        totals = sheet.totals
        
        assert totals.total_assets == Decimal("1200")
        assert totals.total_liabilities == Decimal("0")
        assert totals.total_equity == Decimal("1200")
        assert totals.total_liabilities_and_equity == Decimal("1200")
        assert totals.difference == Decimal("0")
        assert totals.identity_holds is True
        assert sheet.pnl == Decimal("0")
        assert sheet.warnings == []
    
    def test_pnl_folded_into_equity(self, sample_tree: AccountTree) -> None:
        """수익 5000 / 비용 2000 → 순이익 3000을 자본에 가산"""
        sheet = StatementBuilder(sample_tree).build_balance_sheet(
            _result({
                "cash": "4000",
                "capital": "-1000",
                "sales-domestic": "-5000",
                "rent": "2000",
            })
        )
        
        assert sheet.pnl == Decimal("3000")
        assert sheet.totals.total_equity == Decimal("4000")
        assert sheet.totals.total_assets == Decimal("4000")
        assert sheet.totals.identity_holds is True
    
    def test_direct_income_counts_in_pnl(self, sample_tree: AccountTree) -> None:
        """직접 인식 수익은 순이익에 포함"""
        sheet = StatementBuilder(sample_tree).build_balance_sheet(
            _result({"acme": "500", "capital": "0"}, direct_income="500")
        )
        assert sheet.pnl == Decimal("500")
        assert sheet.totals.identity_holds is True
    
    def test_identity_mismatch_warning(self, sample_tree: AccountTree) -> None:
        """한쪽만 반영된 재고 → IDENTITY_MISMATCH 경고"""
        sheet = StatementBuilder(sample_tree).build_balance_sheet(
            _result({"cash": "1000", "stock-fg": "400", "capital": "-1000"})
        )
        
        assert sheet.totals.identity_holds is False
        warnings = [w for w in sheet.warnings if w.kind == WarningKind.IDENTITY_MISMATCH]
        assert len(warnings) == 1
        assert warnings[0].amount == Decimal("400")
    
    def test_within_epsilon_holds(self, sample_tree: AccountTree) -> None:
        """허용 오차 이내 차이는 성립"""
        sheet = StatementBuilder(sample_tree, epsilon=Decimal("0.01")).build_balance_sheet(
            _result({"cash": "1000.01", "capital": "-1000"})
        )
        assert sheet.totals.identity_holds is True
        assert sheet.totals.difference == Decimal("0.01")
    
    def test_aggregation_warnings_carried(self, sample_tree: AccountTree) -> None:
        """집계 단계 경고 유지"""
        warning = unresolved_reference("JOURNAL", "JV-9#0", "ghost", Decimal("10"))
        sheet = StatementBuilder(sample_tree).build_balance_sheet(
            _result({"cash": "0"}, warnings=[warning])
        )
        assert sheet.warnings == [warning]
    
    def test_sections_follow_tree(self, sample_tree: AccountTree) -> None:
        """섹션은 성격별 루트 그룹 트리"""
        sheet = StatementBuilder(sample_tree).build_balance_sheet(
            _result({"cash": "1200", "capital": "-1200"})
        )
        
        assert [g.group.group_id for g in sheet.assets] == ["assets"]
        assert sheet.assets[0].total == Decimal("1200")
        assert [g.group.group_id for g in sheet.equity] == ["equity"]
        # 자본은 대변 성격 → 표시 금액 양수
        assert sheet.equity[0].amount == Decimal("1200")


class TestNatureMismatch:
    """성격 불일치 경고 테스트"""
    
    def test_liability_under_asset_root(self) -> None:
        """자산 그룹 아래 부채 Ledger → 경고, 합계는 Ledger 성격 기준"""
        tree = AccountTree(
            [
                AccountGroup("assets", "Assets", Nature.ASSET),
                AccountGroup("equity", "Equity", Nature.EQUITY),
            ],
            [
                LedgerAccount("cash", "Cash", "assets", Nature.ASSET),
                LedgerAccount("loan", "Loan", "assets", Nature.LIABILITY),
                LedgerAccount("capital", "Capital", "equity", Nature.EQUITY),
            ],
        )
        sheet = StatementBuilder(tree).build_balance_sheet(
            _result({"cash": "1500", "loan": "-500", "capital": "-1000"})
        )
        
        mismatches = [w for w in sheet.warnings if w.kind == WarningKind.NATURE_MISMATCH]
        assert [w.ledger_id for w in mismatches] == ["loan"]
        assert mismatches[0].details["root_nature"] == "ASSET"
        assert sheet.totals.total_assets == Decimal("1500")
        assert sheet.totals.total_liabilities == Decimal("500")
        assert sheet.totals.identity_holds is True


class TestProfitAndLoss:
    """손익계산서 테스트"""
    
    def test_income_expense_totals(self, sample_tree: AccountTree) -> None:
        """수익 = |대변 잔액|, 비용 = 차변 잔액"""
        builder = StatementBuilder(sample_tree)
        pnl = builder.build_profit_and_loss(
            cutoff=CUTOFF,
            balances={"sales-domestic": Decimal("-5000"), "rent": Decimal("2000")},
        )
        
        assert pnl.total_income == Decimal("5000")
        assert pnl.total_expense == Decimal("2000")
        assert pnl.net_profit == Decimal("3000")
        assert [g.group.group_id for g in pnl.income] == ["income"]
        assert pnl.income[0].amount == Decimal("5000")
    
    def test_debit_balance_income_ignored(self, sample_tree: AccountTree) -> None:
        """차변 잔액 수익 Ledger는 수익 합계에서 제외"""
        income, expense = StatementBuilder(sample_tree).income_and_expense(
            {"sales-domestic": Decimal("100")}
        )
        assert income == Decimal("0")
        assert expense == Decimal("0")
    
    def test_loss(self, sample_tree: AccountTree) -> None:
        """비용 > 수익이면 음수 순이익"""
        pnl = StatementBuilder(sample_tree).compute_pnl(
            {"sales-domestic": Decimal("-100"), "rent": Decimal("250")}
        )
        assert pnl == Decimal("-150")
    
    @pytest.mark.parametrize("direct", ["0", "750"])
    def test_direct_income_added(self, sample_tree: AccountTree, direct: str) -> None:
        """직접 인식 수익 가산"""
        pnl = StatementBuilder(sample_tree).build_profit_and_loss(
            cutoff=CUTOFF,
            balances={},
            direct_income=Decimal(direct),
            from_date=date(2024, 4, 1),
        )
        assert pnl.total_income == Decimal(direct)
        assert pnl.direct_income == Decimal(direct)
        assert pnl.from_date == date(2024, 4, 1)
    
    def test_warnings_passed_through(self, sample_tree: AccountTree) -> None:
        """집계 경고 전달"""
        warning = StatementWarning(kind=WarningKind.UNBALANCED_TRANSACTION, message="x")
        pnl = StatementBuilder(sample_tree).build_profit_and_loss(
            cutoff=CUTOFF, balances={}, warnings=[warning]
        )
        assert pnl.warnings == [warning]


class TestDeepHierarchy:
    """깊은 계층 재무제표 테스트"""
    
    def test_balance_sheet_on_deep_chain(self) -> None:
        """5000단계 자산 체인도 재무상태표 구성"""
        depth = 5000
        groups = [AccountGroup("g0", "G0", Nature.ASSET), AccountGroup("eq", "Equity", Nature.EQUITY)]
        ledgers = [
            LedgerAccount("l0", "L0", "g0", Nature.ASSET),
            LedgerAccount("capital", "Capital", "eq", Nature.EQUITY),
        ]
        for i in range(1, depth):
            groups.append(AccountGroup(f"g{i}", f"G{i}", Nature.ASSET, f"g{i - 1}", level=i))
            ledgers.append(LedgerAccount(f"l{i}", f"L{i}", f"g{i}", Nature.ASSET))
        balances = {f"l{i}": "1" for i in range(depth)}
        balances["capital"] = str(-depth)
        
        sheet = StatementBuilder(AccountTree(groups, ledgers)).build_balance_sheet(_result(balances))
        
        assert sheet.totals.total_assets == Decimal(depth)
        assert sheet.totals.identity_holds is True
        assert [s.group.group_id for s in sheet.assets] == ["g0"]
        assert len(list(sheet.assets[0].walk())) == depth
