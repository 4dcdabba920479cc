"""
잔액 집계기 (Balance Aggregator)

계정 트리 + 모든 거래 출처의 기여분을 합산하여
기준일 기준 Ledger별 부호 잔액(차변 +, 대변 -)을 산출.

매 호출마다 전체 재계산 (입력은 읽기 전용 스냅샷).
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal

from core.ledger.errors import StatementWarning
from core.ledger.models import ZERO
from core.ledger.sources import SourceContribution, TransactionSource
from core.ledger.tree import AccountTree
from core.ledger.types import SOURCE_ORDER

logger = logging.getLogger(__name__)


@dataclass
class BalanceResult:
    """잔액 집계 결과"""

    cutoff: date
    balances: dict[str, Decimal]
    warnings: list[StatementWarning] = field(default_factory=list)
    contributions: list[SourceContribution] = field(default_factory=list)
    direct_income: Decimal = ZERO

    def balance_of(self, ledger_id: str) -> Decimal:
        """Ledger 잔액 (없으면 0)"""
        return self.balances.get(ledger_id, ZERO)

    @property
    def net(self) -> Decimal:
        """전체 잔액 합계 (균형 잡힌 데이터면 0)"""
        return sum(self.balances.values(), ZERO)


class BalanceAggregator:
    """Ledger 잔액 집계기

    폴딩 순서 고정: Opening → Inventory → Invoice → Journal.
    순서는 결과에 영향 없음 (덧셈 교환법칙).

    Args:
        tree: 계정 트리
        sources: 거래 출처 목록
    """

    def __init__(self, tree: AccountTree, sources: Iterable[TransactionSource]):
        self.tree = tree
        self.sources = _ordered(sources)

    def compute_balances(self, cutoff: date) -> BalanceResult:
        """기준일 기준 Ledger별 잔액 계산

        모든 Ledger를 0으로 초기화한 뒤 출처별 기여분을 합산.

        Args:
            cutoff: 기준일 (포함)

        Returns:
            BalanceResult
        """
        balances: dict[str, Decimal] = {ledger.ledger_id: ZERO for ledger in self.tree.ledgers}
        result = BalanceResult(cutoff=cutoff, balances=balances)

        for source in self.sources:
            contribution = source.contributions(cutoff)
            for ledger_id, amount in contribution.amounts.items():
                if ledger_id not in balances:
                    # 출처가 트리 기준으로 해결하므로 도달하지 않음
                    logger.error(f"[{contribution.source}] 트리에 없는 Ledger 기여 무시: {ledger_id}")
                    continue
                balances[ledger_id] += amount

            result.contributions.append(contribution)
            result.warnings.extend(contribution.warnings)
            result.direct_income += source.direct_income(cutoff)

            logger.debug(
                f"[{contribution.source}] 기여 반영: posting {contribution.posting_count}건, "
                f"합계 {contribution.total}, 경고 {len(contribution.warnings)}건"
            )

        return result

    def compute_movements(self, cutoff: date, from_date: date) -> dict[str, Decimal]:
        """기간 변동 (from_date ~ cutoff)

        기준일 무관 Posting(기초 잔액, 재고)은 양쪽에서 상쇄.
        """
        closing = self.compute_balances(cutoff).balances
        opening = self.compute_balances(day_before(from_date)).balances
        return {
            ledger_id: closing[ledger_id] - opening.get(ledger_id, ZERO)
            for ledger_id in closing
        }

    def period_direct_income(self, cutoff: date, from_date: date | None = None) -> Decimal:
        """기간 내 직접 인식 수익 합계"""
        return sum(
            (source.direct_income(cutoff, from_date) for source in self.sources),
            ZERO,
        )


def _ordered(sources: Iterable[TransactionSource]) -> list[TransactionSource]:
    order = {name.value: index for index, name in enumerate(SOURCE_ORDER)}
    return sorted(sources, key=lambda s: order.get(s.source_name, len(order)))


def day_before(value: date) -> date:
    """전일"""
    return value - timedelta(days=1)
