"""
Ledger 집계 엔진

계정과목 트리 + 복식부기 거래(기초 잔액, 재고 평가, 매출, 분개 전표)를
기준일 기준으로 집계하여 재무상태표 / 손익계산서 / 시산표를 생성.

사용 예시:
```python
from core.ledger import LedgerEngine, LedgerStore

async with SQLiteAdapter(db_path, readonly=True) as db:
    engine = LedgerEngine(LedgerStore(db))

    # 재무상태표
    sheet = await engine.get_balance_sheet(date(2025, 3, 31))
    print(sheet.totals.total_assets, sheet.totals.identity_holds)

    # 기간 손익계산서
    pnl = await engine.get_profit_and_loss(date(2025, 3, 31), from_date=date(2024, 4, 1))
    print(pnl.net_profit)
```
"""

from core.ledger.aggregator import BalanceAggregator, BalanceResult
from core.ledger.engine import LedgerBalanceView, LedgerEngine, LedgerPipeline
from core.ledger.errors import (
    ConfigurationError,
    LedgerError,
    LedgerNotFound,
    SourceUnavailable,
    StatementFailed,
    StatementWarning,
)
from core.ledger.models import (
    AccountGroup,
    JournalVoucher,
    LedgerAccount,
    LedgerSnapshot,
    OpeningBalance,
    Posting,
    SalesTransaction,
    StockValuation,
    VoucherLine,
)
from core.ledger.rollup import GroupTotal, LedgerBalance, RollupEngine
from core.ledger.sources import (
    InventoryValuationSource,
    InvoiceSource,
    JournalVoucherSource,
    LedgerResolver,
    OpeningBalanceSource,
    SourceContribution,
    TransactionSource,
)
from core.ledger.statement import BalanceSheet, ProfitAndLoss, StatementBuilder, StatementTotals
from core.ledger.store import LedgerStore
from core.ledger.tree import AccountTree, normalize_label
from core.ledger.trial_balance import TrialBalance, TrialBalanceBuilder, TrialBalanceRow
from core.ledger.types import BalanceSide, Nature, SourceName, SystemRole, WarningKind

__all__ = [
    # 엔진
    "LedgerEngine",
    "LedgerPipeline",
    "LedgerBalanceView",
    "LedgerStore",
    # 구성 요소
    "AccountTree",
    "normalize_label",
    "BalanceAggregator",
    "BalanceResult",
    "RollupEngine",
    "GroupTotal",
    "LedgerBalance",
    "StatementBuilder",
    "BalanceSheet",
    "ProfitAndLoss",
    "StatementTotals",
    "TrialBalanceBuilder",
    "TrialBalance",
    "TrialBalanceRow",
    # 거래 출처
    "TransactionSource",
    "SourceContribution",
    "LedgerResolver",
    "OpeningBalanceSource",
    "InventoryValuationSource",
    "InvoiceSource",
    "JournalVoucherSource",
    # 모델
    "AccountGroup",
    "LedgerAccount",
    "OpeningBalance",
    "JournalVoucher",
    "VoucherLine",
    "SalesTransaction",
    "StockValuation",
    "Posting",
    "LedgerSnapshot",
    # 오류 / 경고
    "LedgerError",
    "ConfigurationError",
    "SourceUnavailable",
    "StatementFailed",
    "LedgerNotFound",
    "StatementWarning",
    # Enum
    "Nature",
    "BalanceSide",
    "SystemRole",
    "WarningKind",
    "SourceName",
]
