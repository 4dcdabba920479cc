"""
SQLite 어댑터 테스트

SQLiteAdapter 및 관련 함수 테스트.
"""

import sqlite3
from pathlib import Path

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import (
    SQLiteAdapter,
    create_connection,
    get_db_path,
)
from core.constants import PROJECT_ROOT, Paths
from core.ledger.schema import init_ledger_schema


class TestGetDbPath:
    """get_db_path 테스트"""
    
    def test_default(self) -> None:
        """미지정 시 기본 경로"""
        assert get_db_path() == Paths.DEFAULT_DB
        assert get_db_path("") == Paths.DEFAULT_DB
    
    def test_relative_path(self) -> None:
        """상대 경로는 프로젝트 루트 기준"""
        path = get_db_path("data/other.db")
        
        assert path == PROJECT_ROOT / "data" / "other.db"
        assert isinstance(path, Path)
    
    def test_absolute_path(self, tmp_path: Path) -> None:
        """절대 경로는 그대로"""
        assert get_db_path(tmp_path / "x.db") == tmp_path / "x.db"


class TestCreateConnection:
    """create_connection 테스트"""
    
    @pytest.mark.asyncio
    async def test_create_connection(self, tmp_path: Path) -> None:
        """연결 생성"""
        db_path = tmp_path / "test.db"
        
        conn = await create_connection(db_path)
        
        assert conn is not None
        
        # WAL 모드 확인
        cursor = await conn.execute("PRAGMA journal_mode")
        row = await cursor.fetchone()
        assert row[0].upper() == "WAL"
        
        await conn.close()
    
    @pytest.mark.asyncio
    async def test_creates_parent_directory(self, tmp_path: Path) -> None:
        """부모 디렉토리 생성"""
        db_path = tmp_path / "subdir" / "test.db"
        
        conn = await create_connection(db_path)
        
        assert db_path.parent.exists()
        
        await conn.close()
    
    @pytest.mark.asyncio
    async def test_readonly_connection_rejects_writes(self, tmp_path: Path) -> None:
        """읽기 전용 연결은 쓰기 불가"""
        db_path = tmp_path / "ro.db"
        conn = await create_connection(db_path)
        await conn.execute("CREATE TABLE t (id INTEGER)")
        await conn.commit()
        await conn.close()
        
        ro = await create_connection(db_path, readonly=True)
        try:
            with pytest.raises(sqlite3.OperationalError):
                await ro.execute("INSERT INTO t (id) VALUES (1)")
        finally:
            await ro.close()
    
    @pytest.mark.asyncio
    async def test_readonly_missing_file(self, tmp_path: Path) -> None:
        """읽기 전용 연결은 DB 파일을 만들지 않음"""
        db_path = tmp_path / "missing.db"
        
        with pytest.raises(FileNotFoundError):
            await create_connection(db_path, readonly=True)
        
        assert not db_path.exists()


class TestSQLiteAdapter:
    """SQLiteAdapter 테스트"""
    
    @pytest_asyncio.fixture
    async def adapter(self, tmp_path: Path) -> SQLiteAdapter:
        """어댑터 픽스처"""
        db_path = tmp_path / "test.db"
        adapter = SQLiteAdapter(db_path)
        await adapter.connect()
        yield adapter
        await adapter.close()
    
    @pytest.mark.asyncio
    async def test_connect_and_close(self, tmp_path: Path) -> None:
        """연결 및 종료"""
        adapter = SQLiteAdapter(tmp_path / "test.db")
        
        assert adapter.is_connected is False
        
        await adapter.connect()
        assert adapter.is_connected is True
        
        await adapter.close()
        assert adapter.is_connected is False
    
    @pytest.mark.asyncio
    async def test_execute_without_connection(self, tmp_path: Path) -> None:
        """연결 전 실행 시 에러"""
        adapter = SQLiteAdapter(tmp_path / "test.db")
        
        with pytest.raises(RuntimeError, match="Not connected"):
            await adapter.execute("SELECT 1")
    
    @pytest.mark.asyncio
    async def test_fetchall(self, adapter: SQLiteAdapter) -> None:
        """전체 조회 (list 반환)"""
        await adapter.execute("CREATE TABLE items (value TEXT)")
        await adapter.executemany(
            "INSERT INTO items (value) VALUES (?)",
            [("A",), ("B",), ("C",)],
        )
        await adapter.commit()
        
        rows = await adapter.fetchall("SELECT value FROM items ORDER BY value")
        
        assert isinstance(rows, list)
        assert [row[0] for row in rows] == ["A", "B", "C"]
    
    @pytest.mark.asyncio
    async def test_transaction_rollback(self, adapter: SQLiteAdapter) -> None:
        """트랜잭션 롤백"""
        await adapter.execute("CREATE TABLE tx_test (id INTEGER)")
        await adapter.commit()
        
        with pytest.raises(ValueError):
            async with adapter.transaction() as conn:
                await conn.execute("INSERT INTO tx_test (id) VALUES (1)")
                raise ValueError("의도적 에러")
        
        rows = await adapter.fetchall("SELECT id FROM tx_test")
        assert len(rows) == 0
    
    @pytest.mark.asyncio
    async def test_transaction_commit(self, adapter: SQLiteAdapter) -> None:
        """트랜잭션 정상 종료 시 커밋"""
        await adapter.execute("CREATE TABLE tx_test (id INTEGER)")
        
        async with adapter.transaction() as conn:
            await conn.execute("INSERT INTO tx_test (id) VALUES (1)")
        
        assert await adapter.fetchone("SELECT COUNT(*) FROM tx_test") == (1,)
    
    @pytest.mark.asyncio
    async def test_readonly_transaction_refused(self, tmp_path: Path) -> None:
        """읽기 전용 어댑터는 쓰기 트랜잭션 거부"""
        db_path = tmp_path / "ro.db"
        async with SQLiteAdapter(db_path) as db:
            await db.execute("CREATE TABLE t (id INTEGER)")
            await db.commit()
        
        async with SQLiteAdapter(db_path, readonly=True) as db:
            assert await db.table_exists("t") is True
            with pytest.raises(RuntimeError, match="읽기 전용"):
                async with db.transaction():
                    pass
    
    @pytest.mark.asyncio
    async def test_context_manager(self, tmp_path: Path) -> None:
        """컨텍스트 매니저"""
        async with SQLiteAdapter(tmp_path / "ctx_test.db") as adapter:
            assert adapter.is_connected is True
        
        assert adapter.is_connected is False


class TestInitLedgerSchema:
    """init_ledger_schema 테스트"""
    
    @pytest.mark.asyncio
    async def test_creates_tables(self, tmp_path: Path) -> None:
        """스키마 초기화 - 테이블 생성"""
        async with SQLiteAdapter(tmp_path / "schema_test.db") as adapter:
            await init_ledger_schema(adapter)
            
            for table in (
                "coa_group",
                "coa_ledger",
                "journal_voucher",
                "journal_voucher_line",
                "sales_transaction",
                "stock_item",
            ):
                assert await adapter.table_exists(table) is True, table
    
    @pytest.mark.asyncio
    async def test_idempotent(self, tmp_path: Path) -> None:
        """스키마 초기화 멱등성 (여러 번 실행 가능)"""
        async with SQLiteAdapter(tmp_path / "idempotent_test.db") as adapter:
            await init_ledger_schema(adapter)
            await init_ledger_schema(adapter)
            
            assert await adapter.table_exists("coa_ledger") is True
