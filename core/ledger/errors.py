"""
Ledger 엔진 오류 및 경고

- 예외: 계산을 중단시키는 치명적 오류 (구성 오류, 저장소 조회 실패)
- 경고: 결과와 함께 누적되어 반환되는 데이터 품질 문제
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from core.ledger.types import WarningKind


class LedgerError(Exception):
    """Ledger 엔진 오류 베이스"""

    pass


class ConfigurationError(LedgerError):
    """계정 트리 구성 오류

    존재하지 않는 상위 그룹 참조, 순환 참조, ID 중복 등.
    재시도 없이 생성 단계에서 중단.
    """

    pass


class SourceUnavailable(LedgerError):
    """협력 저장소 조회 실패

    해당 재무제표 요청 전체를 실패 처리. 0으로 간주하지 않음.
    """

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source


class StatementFailed(LedgerError):
    """재무제표 계산 실패 (부분 결과 없음)"""

    def __init__(self, statement: str, cause: Exception, state: str | None = None):
        super().__init__(f"{statement} 계산 실패: {cause}")
        self.statement = statement
        self.cause = cause
        self.state = state


@dataclass(frozen=True)
class StatementWarning:
    """데이터 품질 경고

    결과에 첨부되어 운영자가 데이터를 수정할 수 있도록 노출.
    """

    kind: WarningKind
    message: str
    source: str | None = None
    reference: str | None = None
    ledger_id: str | None = None
    amount: Decimal | None = None
    posted_on: date | None = None  # 원본 레코드 일자 (None: 일자 없는 기초 잔액 / 재고)
    details: dict[str, Any] = field(default_factory=dict)


def unresolved_reference(
    source: str,
    reference: str,
    target: str,
    amount: Decimal | None = None,
    posted_on: date | None = None,
) -> StatementWarning:
    """미해결 Ledger 참조 경고 생성

    Args:
        source: 거래 출처 (JOURNAL, INVOICE 등)
        reference: 원본 레코드 식별자 (전표 ID 등)
        target: 찾지 못한 Ledger ID 또는 이름/역할
        amount: 누락된 금액
        posted_on: 원본 레코드 일자
    """
    return StatementWarning(
        kind=WarningKind.UNRESOLVED_LEDGER_REFERENCE,
        message=f"Ledger 참조 해결 실패: {target} ({source} {reference})",
        source=source,
        reference=reference,
        ledger_id=target,
        amount=amount,
        posted_on=posted_on,
    )


def identity_mismatch(
    total_assets: Decimal,
    total_liabilities_and_equity: Decimal,
    epsilon: Decimal,
) -> StatementWarning:
    """회계 항등식 불일치 경고 생성"""
    difference = total_assets - total_liabilities_and_equity
    return StatementWarning(
        kind=WarningKind.IDENTITY_MISMATCH,
        message=(
            f"자산({total_assets}) != 부채+자본({total_liabilities_and_equity}), "
            f"차이 {difference}"
        ),
        amount=difference,
        details={
            "total_assets": str(total_assets),
            "total_liabilities_and_equity": str(total_liabilities_and_equity),
            "epsilon": str(epsilon),
        },
    )


class LedgerNotFound(LedgerError):
    """존재하지 않는 Ledger 조회"""

    def __init__(self, ledger_id: str):
        super().__init__(f"Ledger를 찾을 수 없습니다: {ledger_id}")
        self.ledger_id = ledger_id
