"""재무제표 서비스 테스트"""

from datetime import date
from decimal import Decimal

import pytest

from adapters.mock.repository import MockLedgerRepository
from core.ledger.engine import LedgerEngine
from core.ledger.models import AccountGroup, LedgerAccount, OpeningBalance
from core.ledger.types import BalanceSide, Nature
from web.services.statement_service import StatementService

DEPTH = 5000


def _deep_repository() -> MockLedgerRepository:
    """5000단계 자산 체인 + 자본 루트"""
    repo = MockLedgerRepository()
    repo.add_groups(
        AccountGroup("g0", "G0", Nature.ASSET),
        *(AccountGroup(f"g{i}", f"G{i}", Nature.ASSET, f"g{i - 1}", level=i) for i in range(1, DEPTH)),
        AccountGroup("eq", "Equity", Nature.EQUITY),
    )
    repo.add_ledgers(
        LedgerAccount(
            "bottom", "Bottom Cash", f"g{DEPTH - 1}", Nature.ASSET,
            opening_balance=OpeningBalance(amount=Decimal("10"), side=BalanceSide.DEBIT),
        ),
        LedgerAccount(
            "capital", "Capital", "eq", Nature.EQUITY,
            opening_balance=OpeningBalance(amount=Decimal("10"), side=BalanceSide.CREDIT),
        ),
    )
    return repo


def _depth(node) -> int:
    count = 0
    while node is not None:
        count += 1
        node = node.children[0] if node.children else None
    return count


class TestDeepHierarchyResponses:
    """깊은 계층 응답 변환 테스트"""

    @pytest.mark.asyncio
    async def test_balance_sheet_response(self) -> None:
        """깊은 체인도 응답 트리로 변환"""
        service = StatementService(LedgerEngine(_deep_repository()))

        response = await service.balance_sheet(date(2025, 3, 31))

        assert response.totals.identity_holds is True
        assert response.totals.total_assets == "10"
        assert _depth(response.assets[0]) == DEPTH

    @pytest.mark.asyncio
    async def test_chart_response(self) -> None:
        """깊은 체인도 계정과목 트리로 변환"""
        service = StatementService(LedgerEngine(_deep_repository()))

        chart = await service.chart()

        assert [root.group_id for root in chart] == ["eq", "g0"]
        assert _depth(chart[1]) == DEPTH
        assert chart[0].ledgers[0].ledger_id == "capital"
