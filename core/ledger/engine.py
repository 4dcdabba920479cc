"""
Ledger 엔진

협력 저장소 조회 → 계정 트리 구성 → 잔액 집계 → 롤업 → 재무제표.

- 저장소 조회는 동시에 수행 (asyncio task), 하나라도 실패/시간 초과 시 전체 실패
- 집계는 불변 스냅샷 위에서 순차 수행 (공유 상태 변경 없음)
- 요청마다 REQUESTED → COMPUTING → READY | FAILED 상태 전이

사용 예시:
```python
engine = LedgerEngine(LedgerStore(db))
sheet = await engine.get_balance_sheet(date(2025, 3, 31))
if not sheet.totals.identity_holds:
    ...
```
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any, TypeVar

from core.constants import Defaults
from core.domain.state_machines import StatementState, StatementStateMachine
from core.ledger.aggregator import BalanceAggregator, day_before
from core.ledger.errors import (
    ConfigurationError,
    LedgerNotFound,
    SourceUnavailable,
    StatementFailed,
    StatementWarning,
)
from core.ledger.models import LedgerAccount, LedgerSnapshot
from core.ledger.rollup import RollupEngine
from core.ledger.sources import (
    InventoryValuationSource,
    InvoiceSource,
    JournalVoucherSource,
    LedgerResolver,
    OpeningBalanceSource,
    TransactionSource,
)
from core.ledger.statement import BalanceSheet, ProfitAndLoss, StatementBuilder
from core.ledger.tree import AccountTree
from core.ledger.trial_balance import TrialBalance, TrialBalanceBuilder
from core.ledger.types import SystemRole

if TYPE_CHECKING:
    from adapters.interfaces import ILedgerRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class LedgerPipeline:
    """스냅샷으로 구성한 계산 파이프라인"""

    snapshot: LedgerSnapshot
    tree: AccountTree
    sources: list[TransactionSource]
    aggregator: BalanceAggregator
    statements: StatementBuilder


@dataclass(frozen=True)
class LedgerBalanceView:
    """단일 Ledger 잔액"""

    ledger: LedgerAccount
    cutoff: date
    balance: Decimal
    warnings: list[StatementWarning] = field(default_factory=list)

    @property
    def amount(self) -> Decimal:
        """정상 잔액 방향 기준 표시 금액"""
        return self.ledger.natural_amount(self.balance)


class LedgerEngine:
    """재무제표 엔진

    Args:
        repository: Ledger 저장소 (읽기 전용으로만 사용)
        identity_epsilon: 회계 항등식 허용 오차
        source_timeout_sec: 저장소 조회 전체 제한 시간
        role_labels: 역할별 이름 후보 (None이면 기본값)
    """

    def __init__(
        self,
        repository: ILedgerRepository,
        identity_epsilon: Decimal = Defaults.IDENTITY_EPSILON,
        source_timeout_sec: float = Defaults.SOURCE_TIMEOUT_SEC,
        role_labels: Mapping[SystemRole, Iterable[str]] | None = None,
    ):
        self.repository = repository
        self.identity_epsilon = identity_epsilon
        self.source_timeout_sec = source_timeout_sec
        self.role_labels = role_labels
        self.last_run: StatementStateMachine | None = None

    # -------------------------------------------------------------------------
    # 저장소 조회
    # -------------------------------------------------------------------------

    async def load_snapshot(self, cutoff: date | None = None) -> LedgerSnapshot:
        """협력 저장소 동시 조회

        Args:
            cutoff: 거래 조회 기준일 (None이면 전체)

        Returns:
            LedgerSnapshot

        Raises:
            SourceUnavailable: 조회 실패 또는 시간 초과 (나머지 조회는 취소)
        """
        results = await self._fetch_all(
            {
                "list_account_groups": self.repository.list_account_groups(),
                "list_ledger_accounts": self.repository.list_ledger_accounts(),
                "list_journal_vouchers": self.repository.list_journal_vouchers(cutoff),
                "list_sales_transactions": self.repository.list_sales_transactions(cutoff),
                "list_stock_valuations": self.repository.list_stock_valuations(),
            }
        )
        return LedgerSnapshot(
            groups=tuple(results["list_account_groups"]),
            ledgers=tuple(results["list_ledger_accounts"]),
            vouchers=tuple(results["list_journal_vouchers"]),
            sales=tuple(results["list_sales_transactions"]),
            stock=tuple(results["list_stock_valuations"]),
        )

    async def _fetch_all(self, reads: dict[str, Awaitable[Any]]) -> dict[str, Any]:
        tasks: dict[asyncio.Task[Any], str] = {
            asyncio.ensure_future(read): name for name, read in reads.items()
        }
        order = list(reads)

        try:
            done, pending = await asyncio.wait(
                tasks,
                timeout=self.source_timeout_sec,
                return_when=asyncio.FIRST_EXCEPTION,
            )
        except asyncio.CancelledError:
            await _cancel_all(tasks)
            raise

        failed = [task for task in done if task.cancelled() or task.exception() is not None]

        if failed:
            await _cancel_all(pending)
            task = min(failed, key=lambda t: order.index(tasks[t]))
            name = tasks[task]
            cause: BaseException = (
                asyncio.CancelledError() if task.cancelled() else task.exception()  # type: ignore[assignment]
            )
            logger.error(f"저장소 조회 실패: {name}: {cause!r}")
            raise SourceUnavailable(name, repr(cause)) from cause

        if pending:
            await _cancel_all(pending)
            name = min((tasks[t] for t in pending), key=order.index)
            logger.error(f"저장소 조회 시간 초과 ({self.source_timeout_sec}초): {name}")
            raise SourceUnavailable(name, f"{self.source_timeout_sec}초 내 응답 없음")

        return {tasks[task]: task.result() for task in done}

    # -------------------------------------------------------------------------
    # 파이프라인 구성
    # -------------------------------------------------------------------------

    def build(self, snapshot: LedgerSnapshot) -> LedgerPipeline:
        """스냅샷으로 계정 트리와 거래 출처 구성

        Raises:
            ConfigurationError: 계정 트리 검증 실패
        """
        tree = AccountTree(snapshot.groups, snapshot.ledgers)
        resolver = LedgerResolver(tree, self.role_labels)
        sources: list[TransactionSource] = [
            OpeningBalanceSource(tree.ledgers),
            InventoryValuationSource(tree, snapshot.stock, resolver),
            InvoiceSource(tree, snapshot.sales, resolver),
            JournalVoucherSource(tree, snapshot.vouchers),
        ]
        return LedgerPipeline(
            snapshot=snapshot,
            tree=tree,
            sources=sources,
            aggregator=BalanceAggregator(tree, sources),
            statements=StatementBuilder(tree, RollupEngine(tree), self.identity_epsilon),
        )

    # -------------------------------------------------------------------------
    # 재무제표
    # -------------------------------------------------------------------------

    async def get_balance_sheet(self, cutoff: date) -> BalanceSheet:
        """재무상태표 (기준일 기준)"""

        def compute(pipeline: LedgerPipeline) -> BalanceSheet:
            result = pipeline.aggregator.compute_balances(cutoff)
            return pipeline.statements.build_balance_sheet(result)

        return await self._run("balance_sheet", cutoff, compute)

    async def get_profit_and_loss(
        self,
        cutoff: date,
        from_date: date | None = None,
    ) -> ProfitAndLoss:
        """손익계산서

        Args:
            cutoff: 기준일 (포함)
            from_date: 기간 시작일 (포함, None이면 기준일까지 누적)
        """
        if from_date is not None and from_date > cutoff:
            raise ValueError(f"from_date({from_date})가 기준일({cutoff})보다 늦습니다")

        def compute(pipeline: LedgerPipeline) -> ProfitAndLoss:
            closing = pipeline.aggregator.compute_balances(cutoff)
            warnings = closing.warnings
            if from_date is None:
                balances = closing.balances
                direct_income = closing.direct_income
            else:
                # 기간 이전 레코드 경고 제외 (일자 없는 기초 잔액 / 재고 경고는 유지)
                warnings = [
                    w for w in closing.warnings if w.posted_on is None or w.posted_on >= from_date
                ]
                opening = pipeline.aggregator.compute_balances(day_before(from_date))
                balances = {
                    ledger_id: amount - opening.balance_of(ledger_id)
                    for ledger_id, amount in closing.balances.items()
                }
                direct_income = pipeline.aggregator.period_direct_income(cutoff, from_date)
            return pipeline.statements.build_profit_and_loss(
                cutoff=cutoff,
                balances=balances,
                direct_income=direct_income,
                from_date=from_date,
                warnings=warnings,
            )

        return await self._run("profit_and_loss", cutoff, compute)

    async def get_trial_balance(
        self,
        cutoff: date,
        from_date: date | None = None,
    ) -> TrialBalance:
        """시산표"""
        if from_date is not None and from_date > cutoff:
            raise ValueError(f"from_date({from_date})가 기준일({cutoff})보다 늦습니다")

        def compute(pipeline: LedgerPipeline) -> TrialBalance:
            builder = TrialBalanceBuilder(pipeline.tree, pipeline.sources, self.identity_epsilon)
            return builder.build(cutoff, from_date)

        return await self._run("trial_balance", cutoff, compute)

    async def get_ledger_balance(self, ledger_id: str, cutoff: date) -> LedgerBalanceView:
        """단일 Ledger 잔액

        Raises:
            LedgerNotFound: 존재하지 않는 Ledger
        """

        def compute(pipeline: LedgerPipeline) -> LedgerBalanceView:
            ledger = pipeline.tree.ledger(ledger_id)
            if ledger is None:
                raise LedgerNotFound(ledger_id)
            result = pipeline.aggregator.compute_balances(cutoff)
            return LedgerBalanceView(
                ledger=ledger,
                cutoff=cutoff,
                balance=result.balance_of(ledger_id),
                warnings=[w for w in result.warnings if w.ledger_id in (None, ledger_id)],
            )

        return await self._run("ledger_balance", cutoff, compute)

    async def get_chart(self) -> AccountTree:
        """계정과목 트리 (거래 조회 없음)

        Raises:
            SourceUnavailable: 조회 실패
            ConfigurationError: 계정 트리 검증 실패
        """
        results = await self._fetch_all(
            {
                "list_account_groups": self.repository.list_account_groups(),
                "list_ledger_accounts": self.repository.list_ledger_accounts(),
            }
        )
        return AccountTree(results["list_account_groups"], results["list_ledger_accounts"])

    async def _run(
        self,
        statement: str,
        cutoff: date,
        compute: Callable[[LedgerPipeline], T],
    ) -> T:
        """상태 전이와 함께 계산 수행

        부분 결과는 반환하지 않음. 구성 오류 / 조회 실패 / 미존재 Ledger는
        그대로 전파하고, 그 외 오류는 StatementFailed로 감쌈.
        """
        machine = StatementStateMachine(statement)
        self.last_run = machine
        machine.transition(StatementState.COMPUTING)
        logger.debug(f"[{statement}] 계산 시작: 기준일 {cutoff}")

        try:
            snapshot = await self.load_snapshot(cutoff)
            result = compute(self.build(snapshot))
        except asyncio.CancelledError:
            machine.transition(StatementState.FAILED)
            logger.info(f"[{statement}] 요청 취소")
            raise
        except (ConfigurationError, SourceUnavailable, LedgerNotFound) as e:
            machine.transition(StatementState.FAILED)
            logger.error(f"[{statement}] 계산 실패: {e}")
            raise
        except Exception as e:
            machine.transition(StatementState.FAILED)
            logger.exception(f"[{statement}] 계산 중 예외")
            raise StatementFailed(statement, e, machine.state) from e

        elapsed = machine.seconds_in_state
        machine.transition(StatementState.READY)
        logger.debug(f"[{statement}] 계산 완료: 기준일 {cutoff} ({elapsed:.3f}초)")
        return result


async def _cancel_all(tasks: Iterable[asyncio.Task[Any]]) -> None:
    """남은 조회 취소 후 종료 대기"""
    pending = [task for task in tasks if not task.done()]
    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
