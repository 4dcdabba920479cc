"""
Ledger 데이터 모델

계정 그룹, Ledger 계정, 분개 전표, 매출 거래, 재고 평가 등
엔진이 읽기 전용으로 소비하는 레코드 정의.

금액은 반드시 Decimal, 날짜는 date 사용.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from core.ledger.types import BalanceSide, Nature, SystemRole

ZERO = Decimal("0")


@dataclass(frozen=True)
class AccountGroup:
    """계정 그룹 (계정과목 분류 트리의 노드)

    parent_id가 None이면 루트 그룹.
    """

    group_id: str
    name: str
    nature: Nature
    parent_id: str | None = None
    level: int = 0
    sort_order: int = 0
    allow_ledger_posting: bool = True

    @property
    def is_root(self) -> bool:
        """루트 그룹 여부"""
        return self.parent_id is None


@dataclass(frozen=True)
class OpeningBalance:
    """기초 잔액 (고정 기준일 기준)"""

    amount: Decimal
    side: BalanceSide
    as_of: date | None = None

    @property
    def signed(self) -> Decimal:
        """차변(+) / 대변(-) 부호 금액"""
        if self.side == BalanceSide.DEBIT:
            return self.amount
        return -self.amount


@dataclass(frozen=True)
class LedgerAccount:
    """Ledger 계정 (전기 대상 말단 계정)"""

    ledger_id: str
    name: str
    group_id: str
    nature: Nature
    normal_balance: BalanceSide | None = None
    opening_balance: OpeningBalance | None = None
    is_stock_ledger: bool = False
    system_role: SystemRole | None = None

    @property
    def normal_side(self) -> BalanceSide:
        """정상 잔액 방향 (미지정 시 Nature 기준)"""
        return self.normal_balance or self.nature.normal_side

    def natural_amount(self, balance: Decimal) -> Decimal:
        """차변(+) 부호 잔액을 정상 잔액 방향 부호로 변환

        대변 성격 계정은 부호 반전 (예: 자본 -1200 → 1200)
        """
        if self.normal_side == BalanceSide.CREDIT:
            return -balance
        return balance


@dataclass(frozen=True)
class VoucherLine:
    """분개 전표 항목 (차변 또는 대변 중 하나)"""

    ledger_id: str
    debit: Decimal = ZERO
    credit: Decimal = ZERO

    @property
    def signed(self) -> Decimal:
        """차변 - 대변"""
        return self.debit - self.credit


@dataclass(frozen=True)
class JournalVoucher:
    """분개 전표

    생성 후 변경 불가. 정정은 반대 분개 전표로 처리.
    """

    voucher_id: str
    voucher_date: date
    narration: str = ""
    lines: tuple[VoucherLine, ...] = ()

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit for line in self.lines), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit for line in self.lines), ZERO)

    def is_balanced(self) -> bool:
        """차변 합계 == 대변 합계"""
        return self.total_debit == self.total_credit


@dataclass(frozen=True)
class SalesTransaction:
    """매출 거래 (외부 입력, 읽기 전용)

    주 내 거래는 CGST + SGST, 주 간 거래는 IGST.
    """

    transaction_id: str
    transaction_date: date
    customer_ledger_id: str | None
    taxable_amount: Decimal
    grand_total: Decimal
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO

    @property
    def tax_total(self) -> Decimal:
        return self.cgst + self.sgst + self.igst

    def is_balanced(self) -> bool:
        """합계 == 과세금액 + 세금"""
        return self.grand_total == self.taxable_amount + self.tax_total


@dataclass(frozen=True)
class StockValuation:
    """재고 평가 (외부 파생 데이터)

    value = 수량 × 단가. 현재 스냅샷만 제공 (과거 시점 재현 불가).
    """

    ledger_label: str
    value: Decimal
    system_role: SystemRole | None = None
    item_id: str | None = None

    @classmethod
    def from_item(
        cls,
        ledger_label: str,
        quantity: Decimal,
        unit_cost: Decimal,
        system_role: SystemRole | None = None,
        item_id: str | None = None,
    ) -> "StockValuation":
        """재고 품목으로부터 평가액 생성"""
        return cls(
            ledger_label=ledger_label,
            value=quantity * unit_cost,
            system_role=system_role,
            item_id=item_id,
        )


@dataclass(frozen=True)
class Posting:
    """잔액 변동 단위

    posted_on이 None이면 기준일과 무관하게 항상 적용 (기초 잔액, 재고 스냅샷).
    """

    ledger_id: str
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    posted_on: date | None = None
    source: str = ""
    reference: str = ""

    @property
    def signed(self) -> Decimal:
        """차변 - 대변"""
        return self.debit - self.credit

    def applies_at(self, cutoff: date) -> bool:
        """기준일 포함 여부"""
        return self.posted_on is None or self.posted_on <= cutoff


@dataclass(frozen=True)
class LedgerSnapshot:
    """협력 저장소에서 한 시점에 읽어온 데이터 묶음 (불변)"""

    groups: tuple[AccountGroup, ...] = ()
    ledgers: tuple[LedgerAccount, ...] = ()
    vouchers: tuple[JournalVoucher, ...] = ()
    sales: tuple[SalesTransaction, ...] = ()
    stock: tuple[StockValuation, ...] = field(default_factory=tuple)
