"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.responses import (
    BalanceSheetResponse,
    ChartGroupResponse,
    ChartLedgerResponse,
    GroupNodeResponse,
    HealthResponse,
    LedgerBalanceResponse,
    LedgerRowResponse,
    ProfitAndLossResponse,
    StatementTotalsResponse,
    TrialBalanceResponse,
    TrialBalanceRowResponse,
    WarningResponse,
)

__all__ = [
    "HealthResponse",
    "WarningResponse",
    "LedgerRowResponse",
    "GroupNodeResponse",
    "StatementTotalsResponse",
    "BalanceSheetResponse",
    "ProfitAndLossResponse",
    "TrialBalanceRowResponse",
    "TrialBalanceResponse",
    "ChartLedgerResponse",
    "ChartGroupResponse",
    "LedgerBalanceResponse",
]
