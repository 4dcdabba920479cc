"""
FastAPI 애플리케이션

라우터 등록, 예외 → HTTP 상태 매핑 및 앱 설정.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config.loader import get_settings
from core.ledger.errors import (
    ConfigurationError,
    LedgerNotFound,
    SourceUnavailable,
    StatementFailed,
)
from core.logging import setup_logging

# 로깅 설정 (콘솔 + 파일)
setup_logging("web")

from web.routes import health, ledger, statements
from web.routes.health import API_VERSION

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 생명주기 관리"""
    from adapters.db.sqlite_adapter import SQLiteAdapter
    from core.ledger.schema import init_ledger_schema
    
    settings = get_settings()
    
    # 시작 시 - DB 스키마 자동 초기화 (읽기 전용 연결 전에 파일/테이블 생성)
    async with SQLiteAdapter(settings.db_path) as db:
        await init_ledger_schema(db)
    logger.info(f"Web: DB 준비 완료 ({settings.db_path})")
    
    yield


app = FastAPI(
    title="Ledger Statements API",
    description="계정과목 집계 및 재무제표(재무상태표 / 손익계산서 / 시산표) API",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS 설정 (개발용)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =========================================================================
# 예외 처리
# =========================================================================

@app.exception_handler(SourceUnavailable)
async def source_unavailable_handler(request: Request, exc: SourceUnavailable) -> JSONResponse:
    """저장소 조회 실패 → 503 (호출자 재시도)"""
    return JSONResponse(
        status_code=503,
        content={"detail": str(exc), "source": exc.source},
    )


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    """계정 트리 구성 오류 → 500"""
    return JSONResponse(
        status_code=500,
        content={"detail": f"계정과목 구성 오류: {exc}"},
    )


@app.exception_handler(StatementFailed)
async def statement_failed_handler(request: Request, exc: StatementFailed) -> JSONResponse:
    """재무제표 계산 실패 → 500"""
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc), "statement": exc.statement, "state": exc.state},
    )


@app.exception_handler(LedgerNotFound)
async def ledger_not_found_handler(request: Request, exc: LedgerNotFound) -> JSONResponse:
    """존재하지 않는 Ledger → 404"""
    return JSONResponse(
        status_code=404,
        content={"detail": str(exc), "ledger_id": exc.ledger_id},
    )


# =========================================================================
# API 라우터 등록
# =========================================================================

app.include_router(health.router)
app.include_router(statements.router)
app.include_router(ledger.router)
