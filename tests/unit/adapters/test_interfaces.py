"""
Protocol 인터페이스 테스트

Protocol 타입 검증 및 구현 확인.
"""

from pathlib import Path

from adapters.db.sqlite_adapter import SQLiteAdapter
from adapters.interfaces import ILedgerRepository
from adapters.mock.repository import MockLedgerRepository
from core.ledger.store import LedgerStore


class TestILedgerRepository:
    """ILedgerRepository Protocol 테스트"""
    
    def test_mock_repository_implements_protocol(self) -> None:
        """Mock 저장소가 Protocol을 구현하는지 확인"""
        assert isinstance(MockLedgerRepository(), ILedgerRepository)
    
    def test_ledger_store_implements_protocol(self, tmp_path: Path) -> None:
        """SQLite 저장소가 Protocol을 구현하는지 확인"""
        store = LedgerStore(SQLiteAdapter(tmp_path / "test.db"))
        assert isinstance(store, ILedgerRepository)
    
    def test_protocol_has_required_methods(self) -> None:
        """Protocol에 필수 메서드가 정의되어 있는지 확인"""
        required_methods = [
            "list_account_groups",
            "list_ledger_accounts",
            "list_journal_vouchers",
            "list_sales_transactions",
            "list_stock_valuations",
        ]
        
        for method in required_methods:
            assert hasattr(ILedgerRepository, method), f"Missing method: {method}"
    
    def test_unrelated_object_rejected(self) -> None:
        """필수 메서드가 없는 객체는 Protocol 미준수"""
        assert not isinstance(object(), ILedgerRepository)
