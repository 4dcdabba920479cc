"""
계정 트리 (Chart of Accounts)

평면 그룹 목록(parent 포인터)으로부터 계층 트리를 구성하고 검증.
인덱스(arena) 구성 → 상위 링크 해결 → 순환 검사 순서로 진행하며,
검증 실패 시 트리 탐색 API를 노출하기 전에 ConfigurationError 발생.
"""

import logging
import re
from collections.abc import Iterable, Iterator

from core.ledger.errors import ConfigurationError
from core.ledger.models import AccountGroup, LedgerAccount
from core.ledger.types import Nature, SystemRole

logger = logging.getLogger(__name__)


_NON_WORD = re.compile(r"[\W_]+", re.UNICODE)


def normalize_label(label: str) -> str:
    """Ledger 이름 정규화

    대소문자, 구두점(en/em dash 포함), 공백 차이를 제거.

    Example:
        >>> normalize_label("Output GST – CGST")
        'output gst cgst'
    """
    return _NON_WORD.sub(" ", label.casefold()).strip()


class AccountTree:
    """계정 그룹 트리 + Ledger 인덱스

    생성 시 전체 검증을 수행하며 이후 불변.

    Args:
        groups: 계정 그룹 목록
        ledgers: Ledger 계정 목록

    Raises:
        ConfigurationError: ID 중복, 존재하지 않는 상위 그룹/소속 그룹, 순환 참조
    """

    def __init__(
        self,
        groups: Iterable[AccountGroup],
        ledgers: Iterable[LedgerAccount],
    ):
        self._groups: dict[str, AccountGroup] = {}
        self._ledgers: dict[str, LedgerAccount] = {}
        self._children: dict[str, list[AccountGroup]] = {}
        self._group_ledgers: dict[str, list[LedgerAccount]] = {}
        self._roots: list[AccountGroup] = []
        self._roles: dict[SystemRole, LedgerAccount] = {}
        self._labels: dict[str, list[LedgerAccount]] = {}
        self._root_of: dict[str, AccountGroup] = {}

        self._index_groups(groups)
        self._link_parents()
        self._check_cycles()
        self._index_ledgers(ledgers)

        logger.debug(
            f"계정 트리 구성 완료: 그룹 {len(self._groups)}개, Ledger {len(self._ledgers)}개"
        )

    # -------------------------------------------------------------------------
    # 구성
    # -------------------------------------------------------------------------

    def _index_groups(self, groups: Iterable[AccountGroup]) -> None:
        for group in groups:
            if group.group_id in self._groups:
                raise ConfigurationError(f"그룹 ID 중복: {group.group_id}")
            self._groups[group.group_id] = group
            self._children[group.group_id] = []
            self._group_ledgers[group.group_id] = []

    def _link_parents(self) -> None:
        for group in self._groups.values():
            if group.parent_id is None:
                self._roots.append(group)
                continue
            if group.parent_id == group.group_id:
                raise ConfigurationError(f"그룹이 자기 자신을 상위로 참조: {group.group_id}")
            if group.parent_id not in self._groups:
                raise ConfigurationError(
                    f"존재하지 않는 상위 그룹 참조: {group.group_id} → {group.parent_id}"
                )
            self._children[group.parent_id].append(group)

        for children in self._children.values():
            children.sort(key=_group_sort_key)
        self._roots.sort(key=_group_sort_key)

    def _check_cycles(self) -> None:
        """모든 루트에서 방문 집합 탐색

        상위 링크가 모두 해결된 상태에서 루트로부터 도달할 수 없는 그룹은
        순환 고리에 속함.
        """
        visited: set[str] = set()

        for root in self._roots:
            stack = [root]
            while stack:
                group = stack.pop()
                if group.group_id in visited:
                    raise ConfigurationError(f"그룹 순환 참조 감지: {group.group_id}")
                visited.add(group.group_id)
                self._root_of[group.group_id] = root
                stack.extend(self._children[group.group_id])

        unreachable = sorted(set(self._groups) - visited)
        if unreachable:
            raise ConfigurationError(f"그룹 순환 참조 감지: {', '.join(unreachable)}")

    def _index_ledgers(self, ledgers: Iterable[LedgerAccount]) -> None:
        for ledger in ledgers:
            if ledger.ledger_id in self._ledgers:
                raise ConfigurationError(f"Ledger ID 중복: {ledger.ledger_id}")
            if ledger.group_id not in self._groups:
                raise ConfigurationError(
                    f"존재하지 않는 그룹에 속한 Ledger: {ledger.ledger_id} → {ledger.group_id}"
                )
            if ledger.system_role is not None:
                existing = self._roles.get(ledger.system_role)
                if existing is not None:
                    raise ConfigurationError(
                        f"시스템 역할 중복: {ledger.system_role.value} "
                        f"({existing.ledger_id}, {ledger.ledger_id})"
                    )
                self._roles[ledger.system_role] = ledger

            self._ledgers[ledger.ledger_id] = ledger
            self._group_ledgers[ledger.group_id].append(ledger)
            self._labels.setdefault(normalize_label(ledger.name), []).append(ledger)

        for group_ledgers in self._group_ledgers.values():
            group_ledgers.sort(key=lambda l: (l.name, l.ledger_id))

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------

    @property
    def groups(self) -> list[AccountGroup]:
        """전체 그룹 목록"""
        return list(self._groups.values())

    @property
    def ledgers(self) -> list[LedgerAccount]:
        """전체 Ledger 목록"""
        return list(self._ledgers.values())

    @property
    def roots(self) -> list[AccountGroup]:
        """루트 그룹 목록 (정렬됨)"""
        return list(self._roots)

    def group(self, group_id: str) -> AccountGroup | None:
        return self._groups.get(group_id)

    def ledger(self, ledger_id: str) -> LedgerAccount | None:
        return self._ledgers.get(ledger_id)

    def has_ledger(self, ledger_id: str) -> bool:
        return ledger_id in self._ledgers

    def groups_by_nature(self, nature: Nature) -> list[AccountGroup]:
        """특정 성격의 루트 그룹 목록 (재무제표 섹션 구분용)"""
        return [g for g in self._roots if g.nature == nature]

    def children_of(self, group_id: str) -> list[AccountGroup]:
        """직속 하위 그룹 목록"""
        return list(self._children.get(group_id, []))

    def ledgers_of(self, group_id: str) -> list[LedgerAccount]:
        """그룹 직속 Ledger 목록"""
        return list(self._group_ledgers.get(group_id, []))

    def ledgers_by_nature(self, nature: Nature) -> list[LedgerAccount]:
        """특정 성격의 Ledger 목록 (트리 위치와 무관)"""
        return [l for l in self._ledgers.values() if l.nature == nature]

    def root_of(self, group_id: str) -> AccountGroup | None:
        """그룹이 속한 루트 그룹"""
        return self._root_of.get(group_id)

    def iter_subtree(self, group_id: str) -> Iterator[AccountGroup]:
        """그룹과 모든 하위 그룹 (전위 순회)"""
        group = self._groups.get(group_id)
        if group is None:
            return
        stack = [group]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(self._children[current.group_id]))

    def ledgers_under(self, group_id: str) -> list[LedgerAccount]:
        """그룹 하위 전체 Ledger"""
        result: list[LedgerAccount] = []
        for group in self.iter_subtree(group_id):
            result.extend(self._group_ledgers[group.group_id])
        return result

    # -------------------------------------------------------------------------
    # Ledger 해결
    # -------------------------------------------------------------------------

    def resolve_ledger_by_role(self, role: SystemRole) -> LedgerAccount | None:
        """시스템 역할 태그로 Ledger 조회 (직접 조회)"""
        return self._roles.get(role)

    def resolve_ledger_by_label(self, candidates: Iterable[str]) -> LedgerAccount | None:
        """이름 후보로 Ledger 조회 (Fallback)

        정규화된 이름으로 비교. 찾지 못하면 None 반환 (오류 아님).
        호출자가 누락을 로그/경고로 남겨야 함.

        Args:
            candidates: 이름 후보 목록 (앞쪽 우선)

        Returns:
            Ledger 또는 None
        """
        for candidate in candidates:
            matches = self._labels.get(normalize_label(candidate))
            if not matches:
                continue
            if len(matches) > 1:
                logger.warning(
                    f"이름 '{candidate}'에 해당하는 Ledger가 여러 개: "
                    f"{[m.ledger_id for m in matches]}, 첫 번째 사용"
                )
            return matches[0]
        return None


def _group_sort_key(group: AccountGroup) -> tuple[int, str, str]:
    return (group.sort_order, group.name, group.group_id)
