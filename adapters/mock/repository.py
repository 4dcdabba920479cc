"""
Mock Ledger 저장소

테스트용 메모리 내 저장소.
ILedgerRepository Protocol 준수, 조회 실패 / 지연 주입 지원.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import date

from core.ledger.models import (
    AccountGroup,
    JournalVoucher,
    LedgerAccount,
    SalesTransaction,
    StockValuation,
)


@dataclass
class MockLedgerState:
    """Mock 상태 (메모리 내 저장)"""
    
    groups: list[AccountGroup] = field(default_factory=list)
    ledgers: list[LedgerAccount] = field(default_factory=list)
    vouchers: list[JournalVoucher] = field(default_factory=list)
    sales: list[SalesTransaction] = field(default_factory=list)
    stock: list[StockValuation] = field(default_factory=list)
    
    # 시뮬레이션 옵션 (메서드 이름 → 예외 / 지연 초)
    failures: dict[str, Exception] = field(default_factory=dict)
    delays: dict[str, float] = field(default_factory=dict)
    
    # 호출 기록 (메서드 이름 목록)
    calls: list[str] = field(default_factory=list)


class MockLedgerRepository:
    """Mock Ledger 저장소
    
    사용 예시:
    ```python
    repo = MockLedgerRepository()
    repo.add_groups(assets, current_assets)
    repo.add_ledgers(cash)
    
    # 조회 실패 시뮬레이션
    repo.fail_on("list_sales_transactions", ConnectionError("down"))
    
    # 지연 시뮬레이션 (timeout 테스트)
    repo.delay("list_stock_valuations", 5.0)
    ```
    """
    
    def __init__(self, state: MockLedgerState | None = None):
        self.state = state or MockLedgerState()
    
    # -------------------------------------------------------------------------
    # 데이터 설정
    # -------------------------------------------------------------------------
    
    def add_groups(self, *groups: AccountGroup) -> None:
        self.state.groups.extend(groups)
    
    def add_ledgers(self, *ledgers: LedgerAccount) -> None:
        self.state.ledgers.extend(ledgers)
    
    def add_vouchers(self, *vouchers: JournalVoucher) -> None:
        self.state.vouchers.extend(vouchers)
    
    def add_sales(self, *transactions: SalesTransaction) -> None:
        self.state.sales.extend(transactions)
    
    def add_stock(self, *valuations: StockValuation) -> None:
        self.state.stock.extend(valuations)
    
    def fail_on(self, method: str, error: Exception) -> None:
        """다음 조회부터 예외 발생"""
        self.state.failures[method] = error
    
    def delay(self, method: str, seconds: float) -> None:
        """조회 응답 지연"""
        self.state.delays[method] = seconds
    
    async def _enter(self, method: str) -> None:
        self.state.calls.append(method)
        seconds = self.state.delays.get(method)
        if seconds:
            await asyncio.sleep(seconds)
        error = self.state.failures.get(method)
        if error is not None:
            raise error
    
    # -------------------------------------------------------------------------
    # ILedgerRepository
    # -------------------------------------------------------------------------
    
    async def list_account_groups(self) -> list[AccountGroup]:
        await self._enter("list_account_groups")
        return list(self.state.groups)
    
    async def list_ledger_accounts(self) -> list[LedgerAccount]:
        await self._enter("list_ledger_accounts")
        return list(self.state.ledgers)
    
    async def list_journal_vouchers(self, up_to: date | None = None) -> list[JournalVoucher]:
        await self._enter("list_journal_vouchers")
        return [v for v in self.state.vouchers if up_to is None or v.voucher_date <= up_to]
    
    async def list_sales_transactions(self, up_to: date | None = None) -> list[SalesTransaction]:
        await self._enter("list_sales_transactions")
        return [t for t in self.state.sales if up_to is None or t.transaction_date <= up_to]
    
    async def list_stock_valuations(self) -> list[StockValuation]:
        await self._enter("list_stock_valuations")
        return list(self.state.stock)
