"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
테스트에서는 get_ledger_engine을 Mock 저장소 기반 엔진으로 교체.
"""

from typing import AsyncGenerator

from fastapi import Depends

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings, get_settings
from core.ledger.engine import LedgerEngine
from core.ledger.errors import SourceUnavailable
from core.ledger.store import LedgerStore
from web.services.statement_service import StatementService


def get_app_settings() -> Settings:
    """애플리케이션 설정 반환"""
    return get_settings()


async def get_db() -> AsyncGenerator[SQLiteAdapter, None]:
    """DB 세션 반환 (읽기 전용)
    
    엔진은 저장소를 읽기만 하므로 Web은 항상 readonly 연결 사용.
    """
    settings = get_settings()
    db = SQLiteAdapter(settings.db_path, readonly=True)
    try:
        await db.connect()
    except FileNotFoundError as e:
        raise SourceUnavailable("database", str(e)) from e
    try:
        yield db
    finally:
        await db.close()


def get_repository(db: SQLiteAdapter = Depends(get_db)) -> LedgerStore:
    """Ledger 저장소 반환"""
    return LedgerStore(db)


def get_ledger_engine(
    repository: LedgerStore = Depends(get_repository),
    settings: Settings = Depends(get_app_settings),
) -> LedgerEngine:
    """요청 단위 Ledger 엔진 반환"""
    return LedgerEngine(
        repository,
        identity_epsilon=settings.identity_epsilon,
        source_timeout_sec=settings.source_timeout_sec,
        role_labels=settings.role_labels,
    )


def get_statement_service(
    engine: LedgerEngine = Depends(get_ledger_engine),
    settings: Settings = Depends(get_app_settings),
) -> StatementService:
    """재무제표 서비스 반환"""
    return StatementService(engine, settings.fiscal_year_start_month)
