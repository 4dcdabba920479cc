"""
재무제표 요청 상태 머신

요청 하나당 REQUESTED → COMPUTING → READY | FAILED 단방향 전이.
종료 상태에서는 더 이상 전이하지 않으며 재시도는 새 요청으로 처리.
"""

import logging
import time
from enum import Enum

logger = logging.getLogger(__name__)


class StateMachineError(Exception):
    """허용되지 않은 상태 전이"""
    pass


class StatementState(str, Enum):
    """재무제표 요청 상태"""
    REQUESTED = "REQUESTED"
    COMPUTING = "COMPUTING"  # 저장소 조회 + 집계
    READY = "READY"
    FAILED = "FAILED"  # 부분 결과 없음


def _value(state: str | Enum) -> str:
    return state.value if isinstance(state, Enum) else state


class StateMachine:
    """전이 표 기반 상태 머신

    Args:
        initial_state: 초기 상태
        transitions: {현재 상태: [허용 다음 상태]}
        name: 로그 표시 이름
    """

    def __init__(
        self,
        initial_state: str | Enum,
        transitions: dict[str, list[str]],
        name: str = "StateMachine",
    ):
        self._state = _value(initial_state)
        self._transitions = transitions
        self._name = name
        self._history: list[tuple[str, str]] = []
        self._entered_at = time.monotonic()

    @property
    def state(self) -> str:
        return self._state

    @property
    def history(self) -> list[tuple[str, str]]:
        """(이전 상태, 다음 상태) 목록 사본"""
        return list(self._history)

    @property
    def seconds_in_state(self) -> float:
        """현재 상태 진입 후 경과 시간"""
        return time.monotonic() - self._entered_at

    def can_transition(self, to_state: str | Enum) -> bool:
        return _value(to_state) in self._transitions.get(self._state, [])

    def transition(self, to_state: str | Enum) -> str:
        """상태 전이

        Raises:
            StateMachineError: 전이 표에 없는 전이
        """
        target = _value(to_state)
        if not self.can_transition(target):
            raise StateMachineError(
                f"{self._name}: Cannot transition from {self._state} to {target}. "
                f"Allowed: {self._transitions.get(self._state, [])}"
            )

        previous = self._state
        elapsed = self.seconds_in_state
        self._state = target
        self._history.append((previous, target))
        self._entered_at = time.monotonic()

        logger.debug(f"{self._name}: {previous} → {target} ({elapsed:.3f}s in {previous})")
        return target


class StatementStateMachine(StateMachine):
    """재무제표 요청 상태 머신

    Args:
        statement: 재무제표 이름 (balance_sheet 등)
        initial_state: 초기 상태
    """

    TRANSITIONS: dict[str, list[str]] = {
        StatementState.REQUESTED.value: [StatementState.COMPUTING.value],
        StatementState.COMPUTING.value: [StatementState.READY.value, StatementState.FAILED.value],
    }

    def __init__(
        self,
        statement: str = "statement",
        initial_state: str | StatementState = StatementState.REQUESTED,
    ):
        super().__init__(
            initial_state=initial_state,
            transitions=self.TRANSITIONS,
            name=f"StatementStateMachine[{statement}]",
        )
        self.statement = statement

    @property
    def is_terminal(self) -> bool:
        return self._state in (StatementState.READY.value, StatementState.FAILED.value)

    @property
    def is_ready(self) -> bool:
        return self._state == StatementState.READY.value
