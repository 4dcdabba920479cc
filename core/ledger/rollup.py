"""
롤업 엔진 (Rollup Engine)

그룹 합계 = 직속 Ledger 잔액 합 + 하위 그룹 롤업 합계 (후위 순회).
깊이 제한 없이 동작하도록 명시적 스택 사용.
"""

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from decimal import Decimal

from core.ledger.models import ZERO, AccountGroup, LedgerAccount
from core.ledger.tree import AccountTree
from core.ledger.types import BalanceSide, Nature

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerBalance:
    """Ledger 잔액 행"""

    ledger: LedgerAccount
    balance: Decimal  # 차변 + / 대변 -

    @property
    def amount(self) -> Decimal:
        """정상 잔액 방향 기준 표시 금액"""
        return self.ledger.natural_amount(self.balance)


@dataclass(frozen=True)
class GroupTotal:
    """그룹 롤업 결과 노드"""

    group: AccountGroup
    ledgers: tuple[LedgerBalance, ...] = ()
    children: tuple["GroupTotal", ...] = ()
    total: Decimal = ZERO  # 차변 + / 대변 -

    @property
    def amount(self) -> Decimal:
        """그룹 성격 기준 표시 금액 (대변 성격은 부호 반전)"""
        if self.group.nature.normal_side == BalanceSide.CREDIT:
            return -self.total
        return self.total

    @property
    def is_empty(self) -> bool:
        """표시 생략 대상 (합계 0, Ledger 없음, 하위 그룹 없음)"""
        return self.total == ZERO and not self.ledgers and not self.children

    def walk(self) -> Iterator["GroupTotal"]:
        """전위 순회 (명시적 스택)"""
        stack: list[GroupTotal] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def pruned(self) -> "GroupTotal | None":
        """빈 하위 트리를 제거한 표시용 사본

        합계는 변경하지 않음 (빈 하위 트리의 합계는 0).
        전위 순회 역순으로 처리하여 하위 노드를 먼저 정리.
        """
        kept: dict[int, GroupTotal | None] = {}
        for node in reversed(list(self.walk())):
            copy = GroupTotal(
                group=node.group,
                ledgers=node.ledgers,
                children=tuple(
                    child for child in (kept[id(c)] for c in node.children) if child is not None
                ),
                total=node.total,
            )
            kept[id(node)] = None if copy.is_empty else copy
        return kept[id(self)]

    def leaf_total(self) -> Decimal:
        """하위 전체 Ledger 잔액 합 (검증용)"""
        return sum((lb.balance for node in self.walk() for lb in node.ledgers), ZERO)


class RollupEngine:
    """그룹 롤업 엔진

    Args:
        tree: 계정 트리
    """

    def __init__(self, tree: AccountTree):
        self.tree = tree

    def rollup(self, group: AccountGroup, balances: Mapping[str, Decimal]) -> GroupTotal:
        """그룹 하위 트리 롤업

        전위 순회 결과를 역순으로 처리하면 모든 하위 그룹이
        상위 그룹보다 먼저 계산됨 (후위 순회와 동일).

        Args:
            group: 시작 그룹
            balances: Ledger별 부호 잔액

        Returns:
            GroupTotal 트리
        """
        nodes = list(self.tree.iter_subtree(group.group_id))
        totals: dict[str, GroupTotal] = {}

        for node in reversed(nodes):
            ledgers = tuple(
                LedgerBalance(ledger=ledger, balance=balances.get(ledger.ledger_id, ZERO))
                for ledger in self.tree.ledgers_of(node.group_id)
            )
            children = tuple(totals[child.group_id] for child in self.tree.children_of(node.group_id))
            total = sum((lb.balance for lb in ledgers), ZERO) + sum(
                (child.total for child in children), ZERO
            )
            totals[node.group_id] = GroupTotal(
                group=node,
                ledgers=ledgers,
                children=children,
                total=total,
            )

        return totals[group.group_id]

    def rollup_nature(self, nature: Nature, balances: Mapping[str, Decimal]) -> list[GroupTotal]:
        """특정 성격의 루트 그룹별 롤업

        루트 그룹(parent 없음)만 진입점으로 사용 (하위 그룹 전체 포함).
        """
        return [self.rollup(root, balances) for root in self.tree.groups_by_nature(nature)]


def section_total(sections: list[GroupTotal]) -> Decimal:
    """섹션 합계 (차변 + / 대변 -)"""
    return sum((section.total for section in sections), ZERO)


def prune_sections(sections: list[GroupTotal]) -> list[GroupTotal]:
    """표시용 섹션 목록 (빈 하위 트리 제거)"""
    return [node for node in (s.pruned() for s in sections) if node is not None]
