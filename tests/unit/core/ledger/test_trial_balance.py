"""시산표 테스트"""

from datetime import date
from decimal import Decimal

from core.ledger.models import JournalVoucher, StockValuation, VoucherLine
from core.ledger.sources import (
    InventoryValuationSource,
    InvoiceSource,
    JournalVoucherSource,
    LedgerResolver,
    OpeningBalanceSource,
)
from core.ledger.tree import AccountTree
from core.ledger.trial_balance import TrialBalanceBuilder, TrialBalanceRow
from core.ledger.types import SystemRole


VOUCHERS = [
    JournalVoucher(
        "JV-1", date(2024, 4, 15), "rent",
        (VoucherLine("rent", debit=Decimal("100")), VoucherLine("cash", credit=Decimal("100"))),
    ),
    JournalVoucher(
        "JV-2", date(2024, 5, 10), "capital",
        (VoucherLine("cash", debit=Decimal("200")), VoucherLine("capital", credit=Decimal("200"))),
    ),
]


def _builder(
    tree: AccountTree,
    stock: list[StockValuation] | None = None,
) -> TrialBalanceBuilder:
    resolver = LedgerResolver(tree)
    sources = [
        OpeningBalanceSource(tree.ledgers),
        InventoryValuationSource(tree, stock or [], resolver),
        InvoiceSource(tree, [], resolver),
        JournalVoucherSource(tree, VOUCHERS),
    ]
    return TrialBalanceBuilder(tree, sources, Decimal("0.01"))


def _row(rows: list[TrialBalanceRow], ledger_id: str) -> TrialBalanceRow:
    return next(row for row in rows if row.ledger.ledger_id == ledger_id)


class TestTrialBalanceRow:
    """시산표 행 테스트"""
    
    def test_closing_sides(self, sample_tree: AccountTree) -> None:
        """기말 잔액 부호에 따라 차변/대변 열 배치"""
        ledger = sample_tree.ledger("capital")
        row = TrialBalanceRow(ledger, "Capital Account", Decimal("-1000"), Decimal("0"), Decimal("200"))
        
        assert row.closing == Decimal("-1200")
        assert row.closing_debit == Decimal("0")
        assert row.closing_credit == Decimal("1200")
        assert row.is_zero is False


class TestTrialBalanceBuilder:
    """시산표 구성 테스트"""
    
    def test_cumulative_without_from_date(self, sample_tree: AccountTree) -> None:
        """기간 미지정: 기초 = 기초 잔액, 기간 = 기준일까지 전체 전표"""
        tb = _builder(sample_tree).build(date(2024, 5, 31))
        
        cash = _row(tb.rows, "cash")
        assert cash.opening == Decimal("1000")
        assert cash.debit == Decimal("200")
        assert cash.credit == Decimal("100")
        assert cash.closing == Decimal("1100")
        
        capital = _row(tb.rows, "capital")
        assert capital.opening == Decimal("-1000")
        assert capital.closing == Decimal("-1200")
        
        assert tb.total_debit == Decimal("1200")
        assert tb.total_credit == Decimal("1200")
        assert tb.is_balanced is True
    
    def test_period_with_from_date(self, sample_tree: AccountTree) -> None:
        """기간 지정: 기초 = 시작일 전일 잔액"""
        tb = _builder(sample_tree).build(date(2024, 5, 31), from_date=date(2024, 5, 1))
        
        cash = _row(tb.rows, "cash")
        assert cash.opening == Decimal("900")
        assert cash.debit == Decimal("200")
        assert cash.credit == Decimal("0")
        
        rent = _row(tb.rows, "rent")
        assert rent.opening == Decimal("100")
        assert rent.debit == Decimal("0")
        assert rent.closing == Decimal("100")
        
        assert tb.from_date == date(2024, 5, 1)
        assert tb.is_balanced is True
    
    def test_cutoff_excludes_later_vouchers(self, sample_tree: AccountTree) -> None:
        """기준일 이후 전표 제외"""
        tb = _builder(sample_tree).build(date(2024, 4, 30))
        assert _row(tb.rows, "cash").closing == Decimal("900")
        assert _row(tb.rows, "capital").closing == Decimal("-1000")
    
    def test_rows_in_tree_order(self, sample_tree: AccountTree) -> None:
        """루트 → 하위 그룹 전위 순회 순서"""
        tb = _builder(sample_tree).build(date(2024, 5, 31))
        assert [row.ledger.ledger_id for row in tb.rows] == [
            "cash", "stock-fg", "acme",
            "capital",
            "rent",
            "sales-domestic",
            "cgst", "igst", "sgst",
        ]
        assert _row(tb.rows, "acme").group_name == "Sundry Debtors"
    
    def test_inventory_makes_trial_balance_unbalanced(self, sample_tree: AccountTree) -> None:
        """한쪽만 반영되는 재고 평가 → 불일치"""
        stock = [StockValuation("x", Decimal("400"), SystemRole.STOCK_FINISHED_GOODS)]
        tb = _builder(sample_tree, stock).build(date(2024, 5, 31))
        
        assert _row(tb.rows, "stock-fg").opening == Decimal("400")
        assert tb.total_debit - tb.total_credit == Decimal("400")
        assert tb.is_balanced is False
