"""잔액 집계기 테스트"""

from datetime import date
from decimal import Decimal

from core.ledger.aggregator import BalanceAggregator, day_before
from core.ledger.models import JournalVoucher, SalesTransaction, StockValuation, VoucherLine
from core.ledger.sources import (
    InventoryValuationSource,
    InvoiceSource,
    JournalVoucherSource,
    LedgerResolver,
    OpeningBalanceSource,
)
from core.ledger.tree import AccountTree
from core.ledger.types import SourceName, SystemRole, WarningKind


def _voucher(voucher_id: str, on: date, *lines: tuple[str, str, str]) -> JournalVoucher:
    return JournalVoucher(
        voucher_id,
        on,
        "",
        tuple(VoucherLine(lid, Decimal(dr), Decimal(cr)) for lid, dr, cr in lines),
    )


def _aggregator(
    tree: AccountTree,
    vouchers: list[JournalVoucher] | None = None,
    sales: list[SalesTransaction] | None = None,
    stock: list[StockValuation] | None = None,
) -> BalanceAggregator:
    resolver = LedgerResolver(tree)
    sources = [
        JournalVoucherSource(tree, vouchers or []),
        InvoiceSource(tree, sales or [], resolver),
        InventoryValuationSource(tree, stock or [], resolver),
        OpeningBalanceSource(tree.ledgers),
    ]
    return BalanceAggregator(tree, sources)


class TestBalanceAggregator:
    """Ledger 잔액 집계 테스트"""
    
    def test_sources_folded_in_fixed_order(self, sample_tree: AccountTree) -> None:
        """입력 순서와 무관하게 Opening → Inventory → Invoice → Journal"""
        aggregator = _aggregator(sample_tree)
        assert [s.source_name for s in aggregator.sources] == [
            SourceName.OPENING.value,
            SourceName.INVENTORY.value,
            SourceName.INVOICE.value,
            SourceName.JOURNAL.value,
        ]
    
    def test_every_ledger_initialized(self, sample_tree: AccountTree) -> None:
        """거래 없는 Ledger도 0으로 포함"""
        result = _aggregator(sample_tree).compute_balances(date(2024, 4, 1))
        
        assert set(result.balances) == {l.ledger_id for l in sample_tree.ledgers}
        assert result.balance_of("rent") == Decimal("0")
        assert result.balance_of("cash") == Decimal("1000")
        assert result.balance_of("capital") == Decimal("-1000")
    
    def test_opening_plus_journal(self, sample_tree: AccountTree) -> None:
        """기초 잔액 + 전표"""
        vouchers = [_voucher("JV-1", date(2024, 5, 1), ("cash", "200", "0"), ("capital", "0", "200"))]
        result = _aggregator(sample_tree, vouchers).compute_balances(date(2024, 5, 1))
        
        assert result.balance_of("cash") == Decimal("1200")
        assert result.balance_of("capital") == Decimal("-1200")
        assert result.net == Decimal("0")
    
    def test_cutoff_monotonic(self, sample_tree: AccountTree) -> None:
        """기준일이 늦을수록 포함되는 전표가 늘어남"""
        vouchers = [
            _voucher("JV-1", date(2024, 5, 1), ("cash", "100", "0"), ("capital", "0", "100")),
            _voucher("JV-2", date(2024, 6, 1), ("cash", "50", "0"), ("capital", "0", "50")),
        ]
        aggregator = _aggregator(sample_tree, vouchers)
        
        assert aggregator.compute_balances(date(2024, 4, 30)).balance_of("cash") == Decimal("1000")
        assert aggregator.compute_balances(date(2024, 5, 1)).balance_of("cash") == Decimal("1100")
        assert aggregator.compute_balances(date(2024, 5, 31)).balance_of("cash") == Decimal("1100")
        assert aggregator.compute_balances(date(2024, 6, 1)).balance_of("cash") == Decimal("1150")
    
    def test_recompute_is_idempotent(self, sample_tree: AccountTree) -> None:
        """같은 입력으로 반복 계산해도 동일 결과"""
        vouchers = [_voucher("JV-1", date(2024, 5, 1), ("rent", "300", "0"), ("cash", "0", "300"))]
        aggregator = _aggregator(sample_tree, vouchers)
        
        first = aggregator.compute_balances(date(2024, 5, 31))
        second = aggregator.compute_balances(date(2024, 5, 31))
        
        assert first.balances == second.balances
        assert len(first.warnings) == len(second.warnings) == 0
    
    def test_unresolved_reference_excluded_with_one_warning(self, sample_tree: AccountTree) -> None:
        """미해결 참조는 금액 제외, 경고 정확히 1건"""
        vouchers = [_voucher("JV-1", date(2024, 5, 1), ("cash", "100", "0"), ("ghost", "0", "100"))]
        result = _aggregator(sample_tree, vouchers).compute_balances(date(2024, 5, 31))
        
        assert "ghost" not in result.balances
        assert result.balance_of("cash") == Decimal("1100")
        unresolved = [w for w in result.warnings if w.kind == WarningKind.UNRESOLVED_LEDGER_REFERENCE]
        assert len(unresolved) == 1
        assert unresolved[0].reference == "JV-1#1"
    
    def test_inventory_applies_at_any_cutoff(self, sample_tree: AccountTree) -> None:
        """재고 평가는 현재 스냅샷 (과거 기준일에도 동일)"""
        stock = [StockValuation("x", Decimal("400"), SystemRole.STOCK_FINISHED_GOODS)]
        aggregator = _aggregator(sample_tree, stock=stock)
        
        assert aggregator.compute_balances(date(2000, 1, 1)).balance_of("stock-fg") == Decimal("400")
        assert aggregator.compute_balances(date(2030, 1, 1)).balance_of("stock-fg") == Decimal("400")
    
    def test_contributions_recorded_per_source(self, sample_tree: AccountTree) -> None:
        """출처별 기여 결과 보존"""
        result = _aggregator(sample_tree).compute_balances(date(2024, 4, 1))
        assert [c.source for c in result.contributions] == [
            "OPENING", "INVENTORY", "INVOICE", "JOURNAL",
        ]
    
    def test_compute_movements(self, sample_tree: AccountTree) -> None:
        """기간 변동은 기초 잔액을 상쇄"""
        vouchers = [
            _voucher("JV-1", date(2024, 4, 15), ("rent", "100", "0"), ("cash", "0", "100")),
            _voucher("JV-2", date(2024, 5, 15), ("rent", "250", "0"), ("cash", "0", "250")),
        ]
        movements = _aggregator(sample_tree, vouchers).compute_movements(
            date(2024, 5, 31), date(2024, 5, 1)
        )
        
        assert movements["rent"] == Decimal("250")
        assert movements["cash"] == Decimal("-250")
        assert movements["capital"] == Decimal("0")


class TestDayBefore:
    """전일 계산 테스트"""
    
    def test_month_boundary(self) -> None:
        assert day_before(date(2024, 4, 1)) == date(2024, 3, 31)
    
    def test_leap_day(self) -> None:
        assert day_before(date(2024, 3, 1)) == date(2024, 2, 29)
