"""
시산표 (Trial Balance)

Ledger별 기초 / 기간 차변 / 기간 대변 / 기말 잔액.
기말 = 기초 + 차변 - 대변 이며, 기말 차변 합계와 대변 합계가 일치해야 함.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from core.ledger.aggregator import BalanceAggregator, day_before
from core.ledger.errors import StatementWarning
from core.ledger.models import ZERO, LedgerAccount
from core.ledger.sources import TransactionSource
from core.ledger.tree import AccountTree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrialBalanceRow:
    """시산표 행"""

    ledger: LedgerAccount
    group_name: str
    opening: Decimal
    debit: Decimal
    credit: Decimal

    @property
    def closing(self) -> Decimal:
        """기말 잔액 (차변 + / 대변 -)"""
        return self.opening + self.debit - self.credit

    @property
    def closing_debit(self) -> Decimal:
        return self.closing if self.closing > ZERO else ZERO

    @property
    def closing_credit(self) -> Decimal:
        return -self.closing if self.closing < ZERO else ZERO

    @property
    def is_zero(self) -> bool:
        """변동 및 잔액 없음"""
        return self.opening == ZERO and self.debit == ZERO and self.credit == ZERO


@dataclass
class TrialBalance:
    """시산표"""

    cutoff: date
    from_date: date | None
    rows: list[TrialBalanceRow]
    epsilon: Decimal
    warnings: list[StatementWarning] = field(default_factory=list)

    @property
    def total_debit(self) -> Decimal:
        return sum((row.closing_debit for row in self.rows), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((row.closing_credit for row in self.rows), ZERO)

    @property
    def is_balanced(self) -> bool:
        return abs(self.total_debit - self.total_credit) <= self.epsilon


class TrialBalanceBuilder:
    """시산표 구성기

    Args:
        tree: 계정 트리
        sources: 거래 출처 목록
        epsilon: 차대 일치 허용 오차
    """

    def __init__(
        self,
        tree: AccountTree,
        sources: Iterable[TransactionSource],
        epsilon: Decimal = Decimal("0.01"),
    ):
        self.tree = tree
        self.aggregator = BalanceAggregator(tree, sources)
        self.epsilon = epsilon

    def build(self, cutoff: date, from_date: date | None = None) -> TrialBalance:
        """시산표 구성

        from_date 없음: 기초 = 날짜 없는 Posting (기초 잔액, 재고 스냅샷),
                        기간 = 기준일까지 전체 날짜 있는 Posting
        from_date 있음: 기초 = from_date 전일 잔액,
                        기간 = from_date ~ cutoff 날짜 있는 Posting

        Args:
            cutoff: 기준일 (포함)
            from_date: 기간 시작일 (포함)

        Returns:
            TrialBalance
        """
        opening: dict[str, Decimal] = {ledger.ledger_id: ZERO for ledger in self.tree.ledgers}
        debits = dict.fromkeys(opening, ZERO)
        credits = dict.fromkeys(opening, ZERO)

        if from_date is not None:
            opening.update(self.aggregator.compute_balances(day_before(from_date)).balances)

        for source in self.aggregator.sources:
            for posting in source.postings(cutoff):
                if posting.ledger_id not in opening:
                    continue
                if posting.posted_on is None:
                    if from_date is None:
                        opening[posting.ledger_id] += posting.signed
                    continue
                if from_date is not None and posting.posted_on < from_date:
                    continue
                debits[posting.ledger_id] += posting.debit
                credits[posting.ledger_id] += posting.credit

        closing = self.aggregator.compute_balances(cutoff)

        rows: list[TrialBalanceRow] = []
        for root in self.tree.roots:
            for group in self.tree.iter_subtree(root.group_id):
                for ledger in self.tree.ledgers_of(group.group_id):
                    rows.append(
                        TrialBalanceRow(
                            ledger=ledger,
                            group_name=group.name,
                            opening=opening[ledger.ledger_id],
                            debit=debits[ledger.ledger_id],
                            credit=credits[ledger.ledger_id],
                        )
                    )

        result = TrialBalance(
            cutoff=cutoff,
            from_date=from_date,
            rows=rows,
            epsilon=self.epsilon,
            warnings=list(closing.warnings),
        )

        if not result.is_balanced:
            logger.warning(
                f"[{cutoff}] 시산표 불일치: 차변 {result.total_debit} != 대변 {result.total_credit}"
            )

        return result
