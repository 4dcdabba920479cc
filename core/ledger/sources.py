"""
거래 출처 (Transaction Source)

각 출처는 Ledger별 부호 금액 변동(차변 - 대변)을 산출.
- OpeningBalanceSource: 기초 잔액 (기준일 무관)
- InventoryValuationSource: 재고 평가액 (현재 스냅샷, 기준일 무관)
- InvoiceSource: 매출 거래 (매출채권 차변, 세금/매출 대변)
- JournalVoucherSource: 분개 전표

부호 규칙: 모든 금액은 "차변 - 대변" 형식으로 저장되며 수집 시 한 번만 정규화.
해결되지 않는 Ledger 참조는 오류가 아닌 경고로 누적하고 해당 금액은 제외.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from core.ledger.errors import StatementWarning, unresolved_reference
from core.ledger.models import (
    ZERO,
    JournalVoucher,
    LedgerAccount,
    Posting,
    SalesTransaction,
    StockValuation,
)
from core.ledger.tree import AccountTree
from core.ledger.types import (
    DEFAULT_ROLE_LABELS,
    SourceName,
    SystemRole,
    WarningKind,
)

logger = logging.getLogger(__name__)


@dataclass
class SourceContribution:
    """출처별 기여 결과"""

    source: str
    amounts: dict[str, Decimal] = field(default_factory=dict)
    warnings: list[StatementWarning] = field(default_factory=list)
    posting_count: int = 0

    @property
    def total(self) -> Decimal:
        """전체 부호 합계 (균형 출처는 0)"""
        return sum(self.amounts.values(), ZERO)


class LedgerResolver:
    """잘 알려진 Ledger 해결기

    1순위: system_role 태그 직접 조회
    2순위: 이름 후보 정규화 비교 (Fallback, 해결 시 INFO 로그)

    Args:
        tree: 계정 트리
        role_labels: 역할별 이름 후보 (None이면 기본값)
    """

    def __init__(
        self,
        tree: AccountTree,
        role_labels: Mapping[SystemRole, Iterable[str]] | None = None,
    ):
        self.tree = tree
        labels = role_labels if role_labels is not None else DEFAULT_ROLE_LABELS
        self._role_labels: dict[SystemRole, tuple[str, ...]] = {
            role: tuple(names) for role, names in labels.items()
        }
        self._cache: dict[tuple[SystemRole | None, tuple[str, ...]], LedgerAccount | None] = {}

    def resolve(
        self,
        role: SystemRole | None = None,
        labels: Iterable[str] = (),
    ) -> LedgerAccount | None:
        """역할/이름으로 Ledger 해결

        Args:
            role: 시스템 역할
            labels: 추가 이름 후보 (역할 기본 후보보다 우선)

        Returns:
            Ledger 또는 None
        """
        extra = tuple(labels)
        key = (role, extra)
        if key in self._cache:
            return self._cache[key]

        ledger: LedgerAccount | None = None
        if role is not None:
            ledger = self.tree.resolve_ledger_by_role(role)

        if ledger is None:
            candidates = extra + (self._role_labels.get(role, ()) if role else ())
            ledger = self.tree.resolve_ledger_by_label(candidates)
            if ledger is not None and role is not None:
                logger.info(
                    f"역할 {role.value}을 이름 매칭으로 해결: {ledger.name} "
                    f"(system_role 태그 지정 권장)"
                )

        self._cache[key] = ledger
        return ledger


class TransactionSource(ABC):
    """거래 출처 베이스 클래스

    하위 클래스는 _collect()에서 Posting과 경고를 생성.
    기준일 필터링과 Ledger별 폴딩은 공통 처리.
    """

    @property
    @abstractmethod
    def source_name(self) -> str:
        """출처 이름 (로깅 및 경고용)"""
        ...

    @abstractmethod
    def _collect(self, cutoff: date | None) -> tuple[list[Posting], list[StatementWarning]]:
        """기준일까지의 Posting과 경고 생성

        Args:
            cutoff: 기준일 (None이면 전체)
        """
        ...

    def postings(self, cutoff: date | None = None) -> list[Posting]:
        """기준일에 적용되는 Posting 목록"""
        postings, _ = self._collect(cutoff)
        if cutoff is None:
            return postings
        return [p for p in postings if p.applies_at(cutoff)]

    def contributions(self, cutoff: date) -> SourceContribution:
        """기준일 기준 Ledger별 부호 금액 변동

        Args:
            cutoff: 기준일 (포함)

        Returns:
            SourceContribution (금액 맵 + 경고)
        """
        postings, warnings = self._collect(cutoff)
        result = SourceContribution(source=self.source_name, warnings=list(warnings))

        for posting in postings:
            if not posting.applies_at(cutoff):
                continue
            result.amounts[posting.ledger_id] = (
                result.amounts.get(posting.ledger_id, ZERO) + posting.signed
            )
            result.posting_count += 1

        for warning in warnings:
            logger.warning(f"[{self.source_name}] {warning.message}")

        return result

    def direct_income(self, cutoff: date, from_date: date | None = None) -> Decimal:
        """Ledger를 거치지 않고 손익에 직접 인식되는 수익 (기본: 없음)"""
        return ZERO


class OpeningBalanceSource(TransactionSource):
    """기초 잔액 출처

    차변 기초 잔액은 +, 대변 기초 잔액은 -. 기준일과 무관하게 항상 적용.
    """

    def __init__(self, ledgers: Iterable[LedgerAccount]):
        self.ledgers = list(ledgers)

    @property
    def source_name(self) -> str:
        return SourceName.OPENING.value

    def _collect(self, cutoff: date | None) -> tuple[list[Posting], list[StatementWarning]]:
        postings: list[Posting] = []
        for ledger in self.ledgers:
            opening = ledger.opening_balance
            if opening is None or opening.amount == ZERO:
                continue
            signed = opening.signed
            postings.append(
                Posting(
                    ledger_id=ledger.ledger_id,
                    debit=signed if signed > ZERO else ZERO,
                    credit=-signed if signed < ZERO else ZERO,
                    posted_on=None,
                    source=self.source_name,
                    reference=f"opening:{ledger.ledger_id}",
                )
            )
        return postings, []


class InventoryValuationSource(TransactionSource):
    """재고 평가 출처

    재고 Ledger별 Σ(수량 × 단가)를 한 번에 반영.
    현재 스냅샷만 사용하므로 과거 기준일에도 동일 금액 (알려진 제약).

    Args:
        tree: 계정 트리
        valuations: 재고 평가 목록
        resolver: Ledger 해결기
    """

    def __init__(
        self,
        tree: AccountTree,
        valuations: Iterable[StockValuation],
        resolver: LedgerResolver,
    ):
        self.tree = tree
        self.valuations = list(valuations)
        self.resolver = resolver

    @property
    def source_name(self) -> str:
        return SourceName.INVENTORY.value

    def _collect(self, cutoff: date | None) -> tuple[list[Posting], list[StatementWarning]]:
        warnings: list[StatementWarning] = []
        per_ledger: dict[str, Decimal] = {}

        for valuation in self.valuations:
            reference = valuation.item_id or valuation.ledger_label
            ledger = self.resolver.resolve(valuation.system_role, (valuation.ledger_label,))

            if ledger is None:
                target = (
                    valuation.system_role.value
                    if valuation.system_role
                    else valuation.ledger_label
                )
                warnings.append(
                    unresolved_reference(self.source_name, reference, target, valuation.value)
                )
                continue

            if not ledger.is_stock_ledger:
                warnings.append(
                    StatementWarning(
                        kind=WarningKind.NOT_A_STOCK_LEDGER,
                        message=f"재고 평가 대상이 재고 Ledger가 아님: {ledger.name}",
                        source=self.source_name,
                        reference=reference,
                        ledger_id=ledger.ledger_id,
                        amount=valuation.value,
                    )
                )
                continue

            per_ledger[ledger.ledger_id] = per_ledger.get(ledger.ledger_id, ZERO) + valuation.value

        postings = [
            Posting(
                ledger_id=ledger_id,
                debit=value if value > ZERO else ZERO,
                credit=-value if value < ZERO else ZERO,
                posted_on=None,
                source=self.source_name,
                reference=f"stock:{ledger_id}",
            )
            for ledger_id, value in sorted(per_ledger.items())
            if value != ZERO
        ]
        return postings, warnings


# 매출 거래 세금 구성요소 → 시스템 역할
_TAX_ROLES: tuple[tuple[str, SystemRole], ...] = (
    ("cgst", SystemRole.OUTPUT_GST_CGST),
    ("sgst", SystemRole.OUTPUT_GST_SGST),
    ("igst", SystemRole.OUTPUT_GST_IGST),
)


class InvoiceSource(TransactionSource):
    """매출 거래 출처

    - 매출채권(고객 Ledger): 합계 금액 차변
    - 세금 Ledger: 세금 대변
    - 매출 Ledger: 과세금액 대변

    매출 Ledger를 해결하지 못한 거래의 과세금액은 direct_income으로
    손익에 직접 인식 (Ledger 경유와 중복되지 않음).

    Args:
        tree: 계정 트리
        transactions: 매출 거래 목록
        resolver: Ledger 해결기
    """

    def __init__(
        self,
        tree: AccountTree,
        transactions: Iterable[SalesTransaction],
        resolver: LedgerResolver,
    ):
        self.tree = tree
        self.transactions = sorted(
            transactions, key=lambda t: (t.transaction_date, t.transaction_id)
        )
        self.resolver = resolver

    @property
    def source_name(self) -> str:
        return SourceName.INVOICE.value

    def _in_range(
        self,
        txn: SalesTransaction,
        cutoff: date | None,
        from_date: date | None = None,
    ) -> bool:
        if cutoff is not None and txn.transaction_date > cutoff:
            return False
        if from_date is not None and txn.transaction_date < from_date:
            return False
        return True

    def _collect(self, cutoff: date | None) -> tuple[list[Posting], list[StatementWarning]]:
        postings: list[Posting] = []
        warnings: list[StatementWarning] = []

        for txn in self.transactions:
            if not self._in_range(txn, cutoff):
                continue
            ref = txn.transaction_id

            def post(ledger_id: str, debit: Decimal = ZERO, credit: Decimal = ZERO) -> None:
                postings.append(
                    Posting(
                        ledger_id=ledger_id,
                        debit=debit,
                        credit=credit,
                        posted_on=txn.transaction_date,
                        source=self.source_name,
                        reference=ref,
                    )
                )

            # 매출채권
            if txn.customer_ledger_id and self.tree.has_ledger(txn.customer_ledger_id):
                post(txn.customer_ledger_id, debit=txn.grand_total)
            else:
                warnings.append(
                    unresolved_reference(
                        self.source_name,
                        ref,
                        txn.customer_ledger_id or "<customer ledger 없음>",
                        txn.grand_total,
                        posted_on=txn.transaction_date,
                    )
                )

            # 세금
            for attr, role in _TAX_ROLES:
                amount: Decimal = getattr(txn, attr)
                if amount == ZERO:
                    continue
                ledger = self.resolver.resolve(role)
                if ledger is None:
                    warnings.append(
                        unresolved_reference(
                            self.source_name, ref, role.value, amount,
                            posted_on=txn.transaction_date,
                        )
                    )
                    continue
                post(ledger.ledger_id, credit=amount)

            # 매출
            if txn.taxable_amount != ZERO:
                sales_ledger = self.resolver.resolve(SystemRole.SALES_DOMESTIC)
                if sales_ledger is None:
                    warnings.append(
                        unresolved_reference(
                            self.source_name,
                            ref,
                            SystemRole.SALES_DOMESTIC.value,
                            txn.taxable_amount,
                            posted_on=txn.transaction_date,
                        )
                    )
                else:
                    post(sales_ledger.ledger_id, credit=txn.taxable_amount)

            if not txn.is_balanced():
                warnings.append(
                    StatementWarning(
                        kind=WarningKind.UNBALANCED_TRANSACTION,
                        message=(
                            f"매출 거래 불균형: 합계 {txn.grand_total} != "
                            f"과세금액 {txn.taxable_amount} + 세금 {txn.tax_total}"
                        ),
                        source=self.source_name,
                        reference=ref,
                        amount=txn.grand_total - txn.taxable_amount - txn.tax_total,
                        posted_on=txn.transaction_date,
                    )
                )

        return postings, warnings

    def direct_income(self, cutoff: date, from_date: date | None = None) -> Decimal:
        """매출 Ledger 미해결 시 과세금액 직접 인식

        매출 Ledger가 해결되면 수익은 Ledger 잔액으로만 집계되므로 0.
        """
        if self.resolver.resolve(SystemRole.SALES_DOMESTIC) is not None:
            return ZERO
        return sum(
            (
                txn.taxable_amount
                for txn in self.transactions
                if self._in_range(txn, cutoff, from_date)
            ),
            ZERO,
        )


class JournalVoucherSource(TransactionSource):
    """분개 전표 출처

    기준일 이하 전표의 각 항목을 +차변 -대변으로 반영.
    알 수 없는 Ledger를 참조하는 항목은 제외하고 경고 1건 기록.

    Args:
        tree: 계정 트리
        vouchers: 분개 전표 목록
    """

    def __init__(self, tree: AccountTree, vouchers: Iterable[JournalVoucher]):
        self.tree = tree
        self.vouchers = sorted(vouchers, key=lambda v: (v.voucher_date, v.voucher_id))

    @property
    def source_name(self) -> str:
        return SourceName.JOURNAL.value

    def _collect(self, cutoff: date | None) -> tuple[list[Posting], list[StatementWarning]]:
        postings: list[Posting] = []
        warnings: list[StatementWarning] = []

        for voucher in self.vouchers:
            if cutoff is not None and voucher.voucher_date > cutoff:
                continue

            for index, line in enumerate(voucher.lines):
                reference = f"{voucher.voucher_id}#{index}"
                if not self.tree.has_ledger(line.ledger_id):
                    warnings.append(
                        unresolved_reference(
                            self.source_name, reference, line.ledger_id, line.signed,
                            posted_on=voucher.voucher_date,
                        )
                    )
                    continue
                postings.append(
                    Posting(
                        ledger_id=line.ledger_id,
                        debit=line.debit,
                        credit=line.credit,
                        posted_on=voucher.voucher_date,
                        source=self.source_name,
                        reference=reference,
                    )
                )

            if not voucher.is_balanced():
                warnings.append(
                    StatementWarning(
                        kind=WarningKind.UNBALANCED_TRANSACTION,
                        message=(
                            f"전표 불균형: 차변 {voucher.total_debit} != 대변 {voucher.total_credit}"
                        ),
                        source=self.source_name,
                        reference=voucher.voucher_id,
                        amount=voucher.total_debit - voucher.total_credit,
                        posted_on=voucher.voucher_date,
                    )
                )

        return postings, warnings
