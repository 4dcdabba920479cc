"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화.
금액은 Decimal 정밀도 보존을 위해 문자열로 전달.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """헬스 체크 응답"""
    
    status: str = Field(default="ok", description="서비스 상태")
    version: str = Field(..., description="API 버전")
    database: str = Field(..., description="DB 파일 경로")
    database_exists: bool = Field(default=False, description="DB 파일 존재 여부")


class WarningResponse(BaseModel):
    """데이터 품질 경고"""
    
    kind: str = Field(..., description="경고 종류 (UNRESOLVED_LEDGER_REFERENCE 등)")
    message: str = Field(..., description="경고 메시지")
    source: str | None = Field(default=None, description="거래 출처 (JOURNAL/INVOICE 등)")
    reference: str | None = Field(default=None, description="원본 레코드 식별자")
    ledger_id: str | None = Field(default=None, description="관련 Ledger ID 또는 이름")
    amount: str | None = Field(default=None, description="관련 금액")
    posted_on: str | None = Field(default=None, description="원본 레코드 일자 (YYYY-MM-DD)")


# =========================================================================
# 재무제표 트리
# =========================================================================


class LedgerRowResponse(BaseModel):
    """Ledger 잔액 행"""
    
    ledger_id: str = Field(..., description="Ledger ID")
    name: str = Field(..., description="Ledger 이름")
    nature: str = Field(..., description="계정 성격")
    balance: str = Field(..., description="부호 잔액 (차변 +, 대변 -)")
    amount: str = Field(..., description="정상 잔액 방향 기준 표시 금액")


class GroupNodeResponse(BaseModel):
    """그룹 롤업 노드"""
    
    group_id: str = Field(..., description="그룹 ID")
    name: str = Field(..., description="그룹 이름")
    nature: str = Field(..., description="계정 성격")
    total: str = Field(..., description="부호 합계 (차변 +, 대변 -)")
    amount: str = Field(..., description="정상 잔액 방향 기준 표시 금액")
    ledgers: list[LedgerRowResponse] = Field(default_factory=list, description="직속 Ledger")
    children: list[GroupNodeResponse] = Field(default_factory=list, description="하위 그룹")


class StatementTotalsResponse(BaseModel):
    """재무상태표 합계"""
    
    total_assets: str = Field(..., description="자산 합계")
    total_liabilities: str = Field(..., description="부채 합계")
    total_equity: str = Field(..., description="자본 합계 (당기순이익 포함)")
    total_liabilities_and_equity: str = Field(..., description="부채 + 자본")
    difference: str = Field(..., description="자산 - (부채 + 자본)")
    identity_holds: bool = Field(..., description="회계 항등식 성립 여부")


class BalanceSheetResponse(BaseModel):
    """재무상태표 응답"""
    
    as_of: str = Field(..., description="기준일")
    financial_year: str = Field(..., description="기준일이 속한 회계연도")
    assets: list[GroupNodeResponse] = Field(default_factory=list, description="자산")
    liabilities: list[GroupNodeResponse] = Field(default_factory=list, description="부채")
    equity: list[GroupNodeResponse] = Field(default_factory=list, description="자본")
    pnl: str = Field(..., description="기준일까지 누적 당기순이익")
    totals: StatementTotalsResponse = Field(..., description="합계")
    warnings: list[WarningResponse] = Field(default_factory=list, description="데이터 품질 경고")
    warning_count: int = Field(default=0, description="경고 수")


class ProfitAndLossResponse(BaseModel):
    """손익계산서 응답"""
    
    as_of: str = Field(..., description="기준일")
    from_date: str | None = Field(default=None, description="기간 시작일 (없으면 누적)")
    income: list[GroupNodeResponse] = Field(default_factory=list, description="수익")
    expense: list[GroupNodeResponse] = Field(default_factory=list, description="비용")
    total_income: str = Field(..., description="수익 합계")
    total_expense: str = Field(..., description="비용 합계")
    direct_income: str = Field(..., description="Ledger 미경유 직접 인식 수익")
    net_profit: str = Field(..., description="순이익")
    warnings: list[WarningResponse] = Field(default_factory=list, description="데이터 품질 경고")
    warning_count: int = Field(default=0, description="경고 수")


# =========================================================================
# 시산표
# =========================================================================


class TrialBalanceRowResponse(BaseModel):
    """시산표 행"""
    
    ledger_id: str = Field(..., description="Ledger ID")
    name: str = Field(..., description="Ledger 이름")
    group_name: str = Field(..., description="소속 그룹 이름")
    nature: str = Field(..., description="계정 성격")
    opening: str = Field(..., description="기초 잔액 (차변 +, 대변 -)")
    debit: str = Field(..., description="기간 차변")
    credit: str = Field(..., description="기간 대변")
    closing: str = Field(..., description="기말 잔액 (차변 +, 대변 -)")
    closing_debit: str = Field(..., description="기말 차변 잔액")
    closing_credit: str = Field(..., description="기말 대변 잔액")


class TrialBalanceResponse(BaseModel):
    """시산표 응답"""
    
    as_of: str = Field(..., description="기준일")
    from_date: str | None = Field(default=None, description="기간 시작일")
    rows: list[TrialBalanceRowResponse] = Field(default_factory=list, description="행 목록")
    total_debit: str = Field(..., description="기말 차변 합계")
    total_credit: str = Field(..., description="기말 대변 합계")
    is_balanced: bool = Field(..., description="차대 일치 여부")
    warnings: list[WarningResponse] = Field(default_factory=list, description="데이터 품질 경고")


# =========================================================================
# 계정과목
# =========================================================================


class ChartLedgerResponse(BaseModel):
    """계정과목 Ledger"""
    
    ledger_id: str = Field(..., description="Ledger ID")
    name: str = Field(..., description="Ledger 이름")
    nature: str = Field(..., description="계정 성격")
    normal_balance: str = Field(..., description="정상 잔액 방향 (DEBIT/CREDIT)")
    is_stock_ledger: bool = Field(default=False, description="재고 Ledger 여부")
    system_role: str | None = Field(default=None, description="시스템 역할 태그")


class ChartGroupResponse(BaseModel):
    """계정과목 그룹 노드"""
    
    group_id: str = Field(..., description="그룹 ID")
    name: str = Field(..., description="그룹 이름")
    nature: str = Field(..., description="계정 성격")
    level: int = Field(default=0, description="깊이")
    ledgers: list[ChartLedgerResponse] = Field(default_factory=list, description="직속 Ledger")
    children: list[ChartGroupResponse] = Field(default_factory=list, description="하위 그룹")


class LedgerBalanceResponse(BaseModel):
    """단일 Ledger 잔액 응답"""
    
    ledger_id: str = Field(..., description="Ledger ID")
    name: str = Field(..., description="Ledger 이름")
    nature: str = Field(..., description="계정 성격")
    as_of: str = Field(..., description="기준일")
    balance: str = Field(..., description="부호 잔액 (차변 +, 대변 -)")
    amount: str = Field(..., description="정상 잔액 방향 기준 표시 금액")
    warnings: list[WarningResponse] = Field(default_factory=list, description="관련 경고")


GroupNodeResponse.model_rebuild()
ChartGroupResponse.model_rebuild()
