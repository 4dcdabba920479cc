"""
복식부기 타입 정의

계정 성격(Nature), 차변/대변, 시스템 역할 등 Ledger 엔진에서 사용하는 Enum 정의
"""

from enum import Enum


class BalanceSide(str, Enum):
    """잔액 방향 (차변/대변)"""

    DEBIT = "DEBIT"  # 차변 (자산 증가, 비용 증가)
    CREDIT = "CREDIT"  # 대변 (부채/자본 증가, 수익 증가)


class Nature(str, Enum):
    """계정 성격

    복식부기의 5대 계정 유형.
    재무제표 섹션 배치와 정상 잔액 방향을 결정.
    """

    ASSET = "ASSET"  # 자산
    LIABILITY = "LIABILITY"  # 부채
    EQUITY = "EQUITY"  # 자본
    INCOME = "INCOME"  # 수익
    EXPENSE = "EXPENSE"  # 비용

    @property
    def normal_side(self) -> BalanceSide:
        """정상 잔액 방향

        자산/비용은 차변, 부채/자본/수익은 대변.
        """
        if self in (Nature.ASSET, Nature.EXPENSE):
            return BalanceSide.DEBIT
        return BalanceSide.CREDIT

    @property
    def is_balance_sheet(self) -> bool:
        """재무상태표 계정 여부 (수익/비용은 손익계산서)"""
        return self in (Nature.ASSET, Nature.LIABILITY, Nature.EQUITY)


class SystemRole(str, Enum):
    """시스템 역할 태그

    잘 알려진 Ledger를 이름 대신 안정적인 키로 찾기 위한 태그.
    Ledger당 최대 하나, 역할당 Ledger 하나.
    """

    # 매출 세금 (GST)
    OUTPUT_GST_CGST = "OUTPUT_GST_CGST"
    OUTPUT_GST_SGST = "OUTPUT_GST_SGST"
    OUTPUT_GST_IGST = "OUTPUT_GST_IGST"

    # 매출
    SALES_DOMESTIC = "SALES_DOMESTIC"

    # 재고 (Stock-in-Hand)
    STOCK_FINISHED_GOODS = "STOCK_FINISHED_GOODS"
    STOCK_SPARES = "STOCK_SPARES"
    STOCK_RAW_MATERIAL = "STOCK_RAW_MATERIAL"
    STOCK_WORK_IN_PROGRESS = "STOCK_WORK_IN_PROGRESS"


class WarningKind(str, Enum):
    """데이터 품질 경고 종류

    결과와 함께 반환되며 계산을 중단시키지 않음.
    """

    UNRESOLVED_LEDGER_REFERENCE = "UNRESOLVED_LEDGER_REFERENCE"
    IDENTITY_MISMATCH = "IDENTITY_MISMATCH"
    UNBALANCED_TRANSACTION = "UNBALANCED_TRANSACTION"
    NATURE_MISMATCH = "NATURE_MISMATCH"
    NOT_A_STOCK_LEDGER = "NOT_A_STOCK_LEDGER"


class SourceName(str, Enum):
    """거래 출처 이름 (폴딩 순서대로 정의)"""

    OPENING = "OPENING"
    INVENTORY = "INVENTORY"
    INVOICE = "INVOICE"
    JOURNAL = "JOURNAL"


# 폴딩 순서 고정 (결과에는 영향 없음, 디버깅/로그 결정성 용도)
SOURCE_ORDER: list[SourceName] = [
    SourceName.OPENING,
    SourceName.INVENTORY,
    SourceName.INVOICE,
    SourceName.JOURNAL,
]


# 역할별 기본 Ledger 이름 후보 (role 태그가 없는 데이터용 Fallback)
DEFAULT_ROLE_LABELS: dict[SystemRole, tuple[str, ...]] = {
    SystemRole.OUTPUT_GST_CGST: ("Output GST – CGST", "Output CGST"),
    SystemRole.OUTPUT_GST_SGST: ("Output GST – SGST", "Output SGST"),
    SystemRole.OUTPUT_GST_IGST: ("Output GST – IGST", "Output IGST"),
    SystemRole.SALES_DOMESTIC: ("Sales – Domestic", "Domestic Sales"),
    SystemRole.STOCK_FINISHED_GOODS: ("Stock-in-Hand – Finished Goods",),
    SystemRole.STOCK_SPARES: ("Stock-in-Hand – Spares",),
    SystemRole.STOCK_RAW_MATERIAL: ("Stock-in-Hand – Raw Material",),
    SystemRole.STOCK_WORK_IN_PROGRESS: ("Stock-in-Hand – Work-in-Progress",),
}
