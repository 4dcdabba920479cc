"""
재무제표 API 라우트

- GET /api/statements/balance-sheet    재무상태표
- GET /api/statements/profit-and-loss  손익계산서
- GET /api/statements/trial-balance    시산표

기간 지정: as_of (YYYY-MM-DD) [+ from_date] 또는 fy (예: FY 2024-25)
"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from web.dependencies import get_statement_service
from web.models.responses import (
    BalanceSheetResponse,
    ProfitAndLossResponse,
    TrialBalanceResponse,
)
from web.services.statement_service import StatementService

router = APIRouter(prefix="/api/statements", tags=["Statements"])


def _period(
    service: StatementService,
    as_of: str | None,
    from_date: str | None,
    fy: str | None,
) -> tuple[date, date | None]:
    try:
        return service.resolve_period(as_of=as_of, from_date=from_date, fy=fy)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


@router.get("/balance-sheet", response_model=BalanceSheetResponse)
async def get_balance_sheet(
    as_of: str | None = Query(default=None, description="기준일 (YYYY-MM-DD, 기본: 오늘)"),
    fy: str | None = Query(default=None, description="회계연도 (예: FY 2024-25, 종료일 기준)"),
    service: StatementService = Depends(get_statement_service),
):
    """재무상태표 조회
    
    자산 / 부채 / 자본 트리 + 누적 당기순이익 + 항등식 검사 결과
    """
    cutoff, _ = _period(service, as_of, None, fy)
    return await service.balance_sheet(cutoff)


@router.get("/profit-and-loss", response_model=ProfitAndLossResponse)
async def get_profit_and_loss(
    as_of: str | None = Query(default=None, description="기준일 (YYYY-MM-DD, 기본: 오늘)"),
    from_date: str | None = Query(default=None, description="기간 시작일 (없으면 누적)"),
    fy: str | None = Query(default=None, description="회계연도 (예: FY 2024-25)"),
    service: StatementService = Depends(get_statement_service),
):
    """손익계산서 조회"""
    cutoff, start = _period(service, as_of, from_date, fy)
    return await service.profit_and_loss(cutoff, start)


@router.get("/trial-balance", response_model=TrialBalanceResponse)
async def get_trial_balance(
    as_of: str | None = Query(default=None, description="기준일 (YYYY-MM-DD, 기본: 오늘)"),
    from_date: str | None = Query(default=None, description="기간 시작일"),
    fy: str | None = Query(default=None, description="회계연도 (예: FY 2024-25)"),
    service: StatementService = Depends(get_statement_service),
):
    """시산표 조회"""
    cutoff, start = _period(service, as_of, from_date, fy)
    return await service.trial_balance(cutoff, start)
