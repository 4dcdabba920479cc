"""
Ledger 저장소

계정과목 / 분개 전표 / 매출 거래 / 재고 품목 SQLite 저장 및 조회.
ILedgerRepository 구현 (엔진은 list_* 조회만 사용).
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.ledger.models import (
    AccountGroup,
    JournalVoucher,
    LedgerAccount,
    OpeningBalance,
    SalesTransaction,
    StockValuation,
    VoucherLine,
)
from core.ledger.types import BalanceSide, Nature, SystemRole

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


class LedgerStore:
    """Ledger 저장소

    save_* 메서드는 데이터 적재(seed, 테스트)용.

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    # -------------------------------------------------------------------------
    # 조회 (ILedgerRepository)
    # -------------------------------------------------------------------------

    async def list_account_groups(self) -> list[AccountGroup]:
        """전체 계정 그룹 목록"""
        rows = await self.db.fetchall(
            """
            SELECT group_id, name, nature, parent_id, level, sort_order, allow_ledger_posting
            FROM coa_group
            ORDER BY level, sort_order, group_id
            """
        )
        return [
            AccountGroup(
                group_id=row[0],
                name=row[1],
                nature=Nature(row[2]),
                parent_id=row[3],
                level=row[4],
                sort_order=row[5],
                allow_ledger_posting=bool(row[6]),
            )
            for row in rows
        ]

    async def list_ledger_accounts(self) -> list[LedgerAccount]:
        """전체 Ledger 계정 목록 (기초 잔액 포함)"""
        rows = await self.db.fetchall(
            """
            SELECT ledger_id, name, group_id, nature, normal_balance,
                   opening_amount, opening_side, opening_as_of,
                   is_stock_ledger, system_role
            FROM coa_ledger
            ORDER BY ledger_id
            """
        )
        return [_row_to_ledger(row) for row in rows]

    async def list_journal_vouchers(self, up_to: date | None = None) -> list[JournalVoucher]:
        """분개 전표 목록 (항목 포함)

        Args:
            up_to: 기준일 (포함, None이면 전체)
        """
        where, params = _date_filter("v.voucher_date", up_to)
        rows = await self.db.fetchall(
            f"""
            SELECT v.voucher_id, v.voucher_date, v.narration,
                   l.ledger_id, l.debit, l.credit
            FROM journal_voucher v
            LEFT JOIN journal_voucher_line l ON l.voucher_id = v.voucher_id
            {where}
            ORDER BY v.voucher_date, v.voucher_id, l.line_order
            """,
            params,
        )

        headers: dict[str, tuple[date, str]] = {}
        lines: dict[str, list[VoucherLine]] = defaultdict(list)
        for row in rows:
            voucher_id = row[0]
            headers.setdefault(voucher_id, (date.fromisoformat(row[1]), row[2]))
            if row[3] is not None:
                lines[voucher_id].append(
                    VoucherLine(
                        ledger_id=row[3],
                        debit=Decimal(row[4]),
                        credit=Decimal(row[5]),
                    )
                )

        return [
            JournalVoucher(
                voucher_id=voucher_id,
                voucher_date=voucher_date,
                narration=narration,
                lines=tuple(lines[voucher_id]),
            )
            for voucher_id, (voucher_date, narration) in headers.items()
        ]

    async def list_sales_transactions(self, up_to: date | None = None) -> list[SalesTransaction]:
        """매출 거래 목록

        Args:
            up_to: 기준일 (포함, None이면 전체)
        """
        where, params = _date_filter("transaction_date", up_to)
        rows = await self.db.fetchall(
            f"""
            SELECT transaction_id, transaction_date, customer_ledger_id,
                   taxable_amount, grand_total, cgst, sgst, igst
            FROM sales_transaction
            {where}
            ORDER BY transaction_date, transaction_id
            """,
            params,
        )
        return [
            SalesTransaction(
                transaction_id=row[0],
                transaction_date=date.fromisoformat(row[1]),
                customer_ledger_id=row[2],
                taxable_amount=Decimal(row[3]),
                grand_total=Decimal(row[4]),
                cgst=Decimal(row[5]),
                sgst=Decimal(row[6]),
                igst=Decimal(row[7]),
            )
            for row in rows
        ]

    async def list_stock_valuations(self) -> list[StockValuation]:
        """재고 평가 목록 (품목별 수량 × 단가)"""
        rows = await self.db.fetchall(
            """
            SELECT item_id, ledger_label, system_role, quantity, unit_cost
            FROM stock_item
            ORDER BY item_id
            """
        )
        return [
            StockValuation.from_item(
                ledger_label=row[1],
                quantity=Decimal(row[3]),
                unit_cost=Decimal(row[4]),
                system_role=SystemRole(row[2]) if row[2] else None,
                item_id=row[0],
            )
            for row in rows
        ]

    async def get_ledger(self, ledger_id: str) -> LedgerAccount | None:
        """단일 Ledger 조회"""
        row = await self.db.fetchone(
            """
            SELECT ledger_id, name, group_id, nature, normal_balance,
                   opening_amount, opening_side, opening_as_of,
                   is_stock_ledger, system_role
            FROM coa_ledger
            WHERE ledger_id = ?
            """,
            (ledger_id,),
        )
        return _row_to_ledger(row) if row else None

    # -------------------------------------------------------------------------
    # 저장 (데이터 적재용)
    # -------------------------------------------------------------------------

    async def save_group(self, group: AccountGroup) -> None:
        """계정 그룹 저장 (존재 시 갱신)"""
        await self.db.execute(
            """
            INSERT OR REPLACE INTO coa_group (
                group_id, name, nature, parent_id, level, sort_order, allow_ledger_posting
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                group.group_id,
                group.name,
                group.nature.value,
                group.parent_id,
                group.level,
                group.sort_order,
                1 if group.allow_ledger_posting else 0,
            ),
        )
        await self.db.commit()

    async def save_ledger(self, ledger: LedgerAccount) -> None:
        """Ledger 계정 저장 (존재 시 갱신, 기초 잔액 정정 포함)"""
        opening = ledger.opening_balance
        await self.db.execute(
            """
            INSERT OR REPLACE INTO coa_ledger (
                ledger_id, name, group_id, nature, normal_balance,
                opening_amount, opening_side, opening_as_of,
                is_stock_ledger, system_role
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                ledger.ledger_id,
                ledger.name,
                ledger.group_id,
                ledger.nature.value,
                ledger.normal_balance.value if ledger.normal_balance else None,
                str(opening.amount) if opening else "0",
                opening.side.value if opening else BalanceSide.DEBIT.value,
                opening.as_of.isoformat() if opening and opening.as_of else None,
                1 if ledger.is_stock_ledger else 0,
                ledger.system_role.value if ledger.system_role else None,
            ),
        )
        await self.db.commit()

    async def save_voucher(self, voucher: JournalVoucher) -> str:
        """분개 전표 저장

        전표는 생성 후 변경되지 않으므로 동일 ID 재저장 시 IntegrityError.
        차대 불균형 전표도 저장 (엔진이 경고로 보고).

        Returns:
            저장된 voucher_id
        """
        async with self.db.transaction():
            await self.db.execute(
                """
                INSERT INTO journal_voucher (voucher_id, voucher_date, narration)
                VALUES (?, ?, ?)
                """,
                (voucher.voucher_id, voucher.voucher_date.isoformat(), voucher.narration),
            )
            for i, line in enumerate(voucher.lines):
                await self.db.execute(
                    """
                    INSERT INTO journal_voucher_line (
                        voucher_id, line_order, ledger_id, debit, credit
                    ) VALUES (?, ?, ?, ?, ?)
                    """,
                    (voucher.voucher_id, i, line.ledger_id, str(line.debit), str(line.credit)),
                )

        if not voucher.is_balanced():
            logger.warning(
                f"불균형 전표 저장: {voucher.voucher_id} "
                f"(차변 {voucher.total_debit}, 대변 {voucher.total_credit})"
            )
        else:
            logger.debug(f"Saved journal voucher: {voucher.voucher_id}")
        return voucher.voucher_id

    async def save_sales_transaction(self, txn: SalesTransaction) -> None:
        """매출 거래 저장"""
        await self.db.execute(
            """
            INSERT OR REPLACE INTO sales_transaction (
                transaction_id, transaction_date, customer_ledger_id,
                taxable_amount, grand_total, cgst, sgst, igst
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                txn.transaction_id,
                txn.transaction_date.isoformat(),
                txn.customer_ledger_id,
                str(txn.taxable_amount),
                str(txn.grand_total),
                str(txn.cgst),
                str(txn.sgst),
                str(txn.igst),
            ),
        )
        await self.db.commit()

    async def save_stock_item(
        self,
        item_id: str,
        name: str,
        ledger_label: str,
        quantity: Decimal,
        unit_cost: Decimal,
        system_role: SystemRole | None = None,
    ) -> None:
        """재고 품목 저장 (현재 수량 / 단가 스냅샷)"""
        await self.db.execute(
            """
            INSERT OR REPLACE INTO stock_item (
                item_id, name, ledger_label, system_role, quantity, unit_cost
            ) VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                item_id,
                name,
                ledger_label,
                system_role.value if system_role else None,
                str(quantity),
                str(unit_cost),
            ),
        )
        await self.db.commit()


def _date_filter(column: str, up_to: date | None) -> tuple[str, tuple[Any, ...] | None]:
    if up_to is None:
        return "", None
    return f"WHERE {column} <= ?", (up_to.isoformat(),)


def _row_to_ledger(row: tuple[Any, ...]) -> LedgerAccount:
    opening_amount = Decimal(row[5])
    opening = None
    if opening_amount != 0:
        opening = OpeningBalance(
            amount=opening_amount,
            side=BalanceSide(row[6]),
            as_of=date.fromisoformat(row[7]) if row[7] else None,
        )
    return LedgerAccount(
        ledger_id=row[0],
        name=row[1],
        group_id=row[2],
        nature=Nature(row[3]),
        normal_balance=BalanceSide(row[4]) if row[4] else None,
        opening_balance=opening,
        is_stock_ledger=bool(row[8]),
        system_role=SystemRole(row[9]) if row[9] else None,
    )
