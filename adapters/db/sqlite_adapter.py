"""
SQLite 어댑터

Ledger 저장소용 aiosqlite 연결 관리.
- 쓰기 연결(seed 스크립트, 스키마 초기화): WAL 모드
- 읽기 연결(Web 재무제표 조회): mode=ro + query_only

WAL 모드이므로 적재 중에도 Web 조회가 마지막 커밋 시점을 읽을 수 있음.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import aiosqlite

from core.constants import PROJECT_ROOT, Paths

logger = logging.getLogger(__name__)

BUSY_TIMEOUT_MS = 30000


def get_db_path(database: Path | str | None = None) -> Path:
    """settings.yaml의 database 값을 DB 파일 경로로 변환

    비어 있으면 data/ledger.db, 상대 경로는 프로젝트 루트 기준.
    """
    if database is None or str(database) == "":
        return Paths.DEFAULT_DB

    path = Path(database)
    return path if path.is_absolute() else PROJECT_ROOT / path


async def create_connection(
    db_path: Path | str,
    readonly: bool = False,
) -> aiosqlite.Connection:
    """aiosqlite 연결 생성

    Args:
        db_path: DB 파일 경로
        readonly: 읽기 전용 연결 여부

    Raises:
        FileNotFoundError: 읽기 전용인데 DB 파일이 없는 경우
    """
    path = Path(db_path)

    if readonly:
        if not path.exists():
            raise FileNotFoundError(f"DB 파일이 없습니다 (스키마 초기화 필요): {path}")
        conn = await aiosqlite.connect(f"file:{path.as_posix()}?mode=ro", uri=True)
        await conn.execute("PRAGMA query_only=ON")
    else:
        path.parent.mkdir(parents=True, exist_ok=True)
        conn = await aiosqlite.connect(str(path))
        await conn.execute("PRAGMA journal_mode=WAL")

    await conn.execute(f"PRAGMA busy_timeout={BUSY_TIMEOUT_MS}")
    await conn.execute("PRAGMA foreign_keys=ON")

    logger.debug(f"SQLite 연결: {path} ({'readonly' if readonly else 'read-write'})")
    return conn


class SQLiteAdapter:
    """SQLite 연결 래퍼

    사용 예시:
    ```python
    async with SQLiteAdapter(db_path) as db:
        await init_ledger_schema(db)
        await LedgerStore(db).save_voucher(voucher)

    async with SQLiteAdapter(db_path, readonly=True) as db:
        sheet = await LedgerEngine(LedgerStore(db)).get_balance_sheet(cutoff)
    ```

    Args:
        db_path: DB 파일 경로
        readonly: 읽기 전용 여부
    """

    def __init__(self, db_path: Path | str, readonly: bool = False):
        self.db_path = Path(db_path)
        self.readonly = readonly
        self._conn: aiosqlite.Connection | None = None

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    async def connect(self) -> None:
        if self._conn is None:
            self._conn = await create_connection(self.db_path, self.readonly)

    async def close(self) -> None:
        if self._conn is None:
            return
        await self._conn.close()
        self._conn = None
        logger.debug(f"SQLite 연결 종료: {self.db_path}")

    def _require_connection(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("Not connected to database")
        return self._conn

    # -------------------------------------------------------------------------
    # 쿼리
    # -------------------------------------------------------------------------

    async def execute(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> aiosqlite.Cursor:
        return await self._require_connection().execute(sql, parameters or ())

    async def executemany(
        self,
        sql: str,
        parameters: list[tuple[Any, ...]],
    ) -> aiosqlite.Cursor:
        return await self._require_connection().executemany(sql, parameters)

    async def fetchone(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> tuple[Any, ...] | None:
        cursor = await self.execute(sql, parameters)
        return await cursor.fetchone()

    async def fetchall(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[tuple[Any, ...]]:
        cursor = await self.execute(sql, parameters)
        return list(await cursor.fetchall())

    async def table_exists(self, table_name: str) -> bool:
        row = await self.fetchone(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?",
            (table_name,),
        )
        return row is not None

    # -------------------------------------------------------------------------
    # 트랜잭션
    # -------------------------------------------------------------------------

    async def commit(self) -> None:
        if self._conn is not None:
            await self._conn.commit()

    async def rollback(self) -> None:
        if self._conn is not None:
            await self._conn.rollback()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """쓰기 트랜잭션 (정상 종료 시 커밋, 예외 시 롤백 후 재발생)

        Raises:
            RuntimeError: 읽기 전용 연결
        """
        if self.readonly:
            raise RuntimeError(f"읽기 전용 연결에서는 쓰기 트랜잭션 불가: {self.db_path}")
        conn = self._require_connection()
        try:
            yield conn
        except Exception:
            await conn.rollback()
            raise
        await conn.commit()

    async def __aenter__(self) -> "SQLiteAdapter":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
