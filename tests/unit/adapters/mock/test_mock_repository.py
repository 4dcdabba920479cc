"""
Mock Ledger 저장소 테스트
"""

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from adapters.mock.repository import MockLedgerRepository, MockLedgerState
from core.ledger.models import JournalVoucher, SalesTransaction, StockValuation, VoucherLine


class TestMockLedgerRepository:
    """MockLedgerRepository 테스트"""
    
    @pytest.mark.asyncio
    async def test_chart_round_trip(self, mock_repository: MockLedgerRepository) -> None:
        """적재한 계정과목 반환"""
        groups = await mock_repository.list_account_groups()
        ledgers = await mock_repository.list_ledger_accounts()
        
        assert len(groups) == 12
        assert {l.ledger_id for l in ledgers} >= {"cash", "capital"}
    
    @pytest.mark.asyncio
    async def test_date_filter(self) -> None:
        """up_to 이후 전표 / 매출 제외"""
        repo = MockLedgerRepository()
        repo.add_vouchers(
            JournalVoucher("JV-1", date(2024, 5, 1), "", (VoucherLine("a", debit=Decimal("1")),)),
            JournalVoucher("JV-2", date(2024, 6, 1), "", (VoucherLine("a", debit=Decimal("1")),)),
        )
        repo.add_sales(
            SalesTransaction("INV-1", date(2024, 6, 2), "a", Decimal("1"), Decimal("1")),
        )
        
        vouchers = await repo.list_journal_vouchers(date(2024, 5, 31))
        
        assert [v.voucher_id for v in vouchers] == ["JV-1"]
        assert len(await repo.list_journal_vouchers()) == 2
        assert await repo.list_sales_transactions(date(2024, 6, 1)) == []
    
    @pytest.mark.asyncio
    async def test_returns_copies(self) -> None:
        """반환 목록 변경이 상태에 영향 없음"""
        repo = MockLedgerRepository()
        repo.add_stock(StockValuation("Stock", Decimal("1")))
        
        result = await repo.list_stock_valuations()
        result.clear()
        
        assert len(repo.state.stock) == 1
    
    @pytest.mark.asyncio
    async def test_fail_on(self) -> None:
        """조회 실패 주입"""
        repo = MockLedgerRepository()
        repo.fail_on("list_stock_valuations", ConnectionError("down"))
        
        with pytest.raises(ConnectionError):
            await repo.list_stock_valuations()
        assert repo.state.calls == ["list_stock_valuations"]
    
    @pytest.mark.asyncio
    async def test_delay(self) -> None:
        """조회 지연 주입"""
        repo = MockLedgerRepository()
        repo.delay("list_account_groups", 10.0)
        
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(repo.list_account_groups(), timeout=0.05)
    
    def test_shared_state(self) -> None:
        """상태 객체 주입"""
        state = MockLedgerState()
        repo = MockLedgerRepository(state)
        
        assert repo.state is state
