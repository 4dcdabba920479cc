"""
pytest 공통 fixture 정의

계정과목 샘플, 설정 파일, Mock 저장소
"""

import tempfile
from decimal import Decimal
from pathlib import Path

import pytest

from adapters.mock.repository import MockLedgerRepository
from core.config.loader import Settings
from core.ledger.models import AccountGroup, LedgerAccount, OpeningBalance
from core.ledger.tree import AccountTree
from core.ledger.types import BalanceSide, Nature, SystemRole


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_settings_file(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성"""
    content = f"""# 테스트용 settings.yaml
database: "{(temp_dir / 'test_ledger.db').as_posix()}"

ledger:
  identity_epsilon: "0.01"
  source_timeout_sec: 5
  fiscal_year_start_month: 4
  role_labels:
    SALES_DOMESTIC: ["Revenue – Local"]
"""
    path = temp_dir / "settings.yaml"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def reset_settings():
    """Settings 싱글턴 초기화 (테스트 전후)"""
    Settings.reset()
    yield
    Settings.reset()


@pytest.fixture
def sample_groups() -> list[AccountGroup]:
    """샘플 계정 그룹 (루트 5개 + 하위 그룹)"""
    return [
        AccountGroup("assets", "Assets", Nature.ASSET),
        AccountGroup("current-assets", "Current Assets", Nature.ASSET, "assets", level=1),
        AccountGroup("debtors", "Sundry Debtors", Nature.ASSET, "current-assets", level=2),
        AccountGroup("stock", "Stock-in-Hand", Nature.ASSET, "current-assets", level=2),
        AccountGroup("liabilities", "Liabilities", Nature.LIABILITY),
        AccountGroup("taxes", "Duties & Taxes", Nature.LIABILITY, "liabilities", level=1),
        AccountGroup("equity", "Equity", Nature.EQUITY),
        AccountGroup("capital", "Capital Account", Nature.EQUITY, "equity", level=1),
        AccountGroup("income", "Income", Nature.INCOME),
        AccountGroup("sales", "Sales Accounts", Nature.INCOME, "income", level=1),
        AccountGroup("expenses", "Expenses", Nature.EXPENSE),
        AccountGroup("indirect", "Indirect Expenses", Nature.EXPENSE, "expenses", level=1),
    ]


@pytest.fixture
def sample_ledgers() -> list[LedgerAccount]:
    """샘플 Ledger (Cash 1000 Dr / Capital 1000 Cr 기초 잔액)"""
    return [
        LedgerAccount(
            "cash", "Cash", "current-assets", Nature.ASSET,
            opening_balance=OpeningBalance(Decimal("1000"), BalanceSide.DEBIT),
        ),
        LedgerAccount("acme", "Acme Traders", "debtors", Nature.ASSET),
        LedgerAccount(
            "stock-fg", "Stock-in-Hand – Finished Goods", "stock", Nature.ASSET,
            is_stock_ledger=True, system_role=SystemRole.STOCK_FINISHED_GOODS,
        ),
        LedgerAccount("cgst", "Output GST – CGST", "taxes", Nature.LIABILITY,
                      system_role=SystemRole.OUTPUT_GST_CGST),
        LedgerAccount("sgst", "Output GST – SGST", "taxes", Nature.LIABILITY,
                      system_role=SystemRole.OUTPUT_GST_SGST),
        LedgerAccount("igst", "Output GST – IGST", "taxes", Nature.LIABILITY,
                      system_role=SystemRole.OUTPUT_GST_IGST),
        LedgerAccount(
            "capital", "Capital", "capital", Nature.EQUITY,
            opening_balance=OpeningBalance(Decimal("1000"), BalanceSide.CREDIT),
        ),
        LedgerAccount("sales-domestic", "Sales – Domestic", "sales", Nature.INCOME,
                      system_role=SystemRole.SALES_DOMESTIC),
        LedgerAccount("rent", "Office Rent", "indirect", Nature.EXPENSE),
    ]


@pytest.fixture
def sample_tree(sample_groups: list[AccountGroup], sample_ledgers: list[LedgerAccount]) -> AccountTree:
    """샘플 계정 트리"""
    return AccountTree(sample_groups, sample_ledgers)


@pytest.fixture
def mock_repository(
    sample_groups: list[AccountGroup],
    sample_ledgers: list[LedgerAccount],
) -> MockLedgerRepository:
    """샘플 계정과목이 적재된 Mock 저장소"""
    repo = MockLedgerRepository()
    repo.add_groups(*sample_groups)
    repo.add_ledgers(*sample_ledgers)
    return repo
