"""
계정과목 API 라우트

- GET /api/ledger/groups                          계정과목 트리
- GET /api/ledger/accounts/{ledger_id}/balance    단일 Ledger 잔액
"""

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from web.dependencies import get_statement_service
from web.models.responses import ChartGroupResponse, LedgerBalanceResponse
from web.services.statement_service import StatementService

router = APIRouter(prefix="/api/ledger", tags=["Ledger"])


@router.get("/groups", response_model=list[ChartGroupResponse])
async def get_groups(
    service: StatementService = Depends(get_statement_service),
):
    """계정과목 트리 (그룹 + 직속 Ledger)"""
    return await service.chart()


@router.get("/accounts/{ledger_id}/balance", response_model=LedgerBalanceResponse)
async def get_ledger_balance(
    ledger_id: str = Path(..., description="Ledger ID"),
    as_of: str | None = Query(default=None, description="기준일 (YYYY-MM-DD, 기본: 오늘)"),
    service: StatementService = Depends(get_statement_service),
):
    """단일 Ledger 잔액 조회"""
    try:
        cutoff, _ = service.resolve_period(as_of=as_of)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return await service.ledger_balance(ledger_id, cutoff)
