#!/usr/bin/env python3
"""
데모 계정과목 / 거래 적재 스크립트

흐름:
1. settings.yaml 로드 (DB 경로)
2. Ledger 스키마 생성
3. 루트 그룹 5개(자산/부채/자본/수익/비용) + 하위 그룹 + 역할 Ledger 적재
4. 기초 잔액, 분개 전표, 매출 거래, 재고 품목 적재
5. 재무상태표 계산 및 합계 출력

재고 평가는 대응 분개 없이 자산에만 반영되므로 항등식 차이가 경고로 표시됨.

실행 방법:
    python scripts/seed_demo.py [--reset] [--as-of 2025-03-31]
"""

import argparse
import asyncio
import logging
from datetime import date
from decimal import Decimal

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import get_settings
from core.ledger import (
    AccountGroup,
    BalanceSide,
    JournalVoucher,
    LedgerAccount,
    LedgerEngine,
    LedgerStore,
    Nature,
    OpeningBalance,
    SalesTransaction,
    SystemRole,
    VoucherLine,
)
from core.ledger.schema import init_ledger_schema
from core.logging import setup_logging
from core.utils.fiscal import parse_date

logger = logging.getLogger(__name__)

OPENING_DATE = date(2024, 4, 1)


def demo_groups() -> list[AccountGroup]:
    """데모 계정 그룹"""
    return [
        AccountGroup("G-ASSETS", "Assets", Nature.ASSET, sort_order=1),
        AccountGroup("G-LIAB", "Liabilities", Nature.LIABILITY, sort_order=2),
        AccountGroup("G-EQUITY", "Equity", Nature.EQUITY, sort_order=3),
        AccountGroup("G-INCOME", "Income", Nature.INCOME, sort_order=4),
        AccountGroup("G-EXPENSE", "Expenses", Nature.EXPENSE, sort_order=5),
        AccountGroup("G-CA", "Current Assets", Nature.ASSET, "G-ASSETS", level=1, sort_order=1),
        AccountGroup("G-FA", "Fixed Assets", Nature.ASSET, "G-ASSETS", level=1, sort_order=2),
        AccountGroup("G-STOCK", "Stock-in-Hand", Nature.ASSET, "G-CA", level=2, sort_order=3),
        AccountGroup("G-DEBTORS", "Sundry Debtors", Nature.ASSET, "G-CA", level=2, sort_order=2),
        AccountGroup("G-TAX", "Duties & Taxes", Nature.LIABILITY, "G-LIAB", level=1),
        AccountGroup("G-CREDITORS", "Sundry Creditors", Nature.LIABILITY, "G-LIAB", level=1),
        AccountGroup("G-CAPITAL", "Capital Account", Nature.EQUITY, "G-EQUITY", level=1),
        AccountGroup("G-SALES", "Sales Accounts", Nature.INCOME, "G-INCOME", level=1),
        AccountGroup("G-DIRECT", "Direct Expenses", Nature.EXPENSE, "G-EXPENSE", level=1),
        AccountGroup("G-INDIRECT", "Indirect Expenses", Nature.EXPENSE, "G-EXPENSE", level=1),
    ]


def demo_ledgers() -> list[LedgerAccount]:
    """데모 Ledger 계정 (기초 잔액 포함)"""

    def opening(amount: str, side: BalanceSide) -> OpeningBalance:
        return OpeningBalance(Decimal(amount), side, OPENING_DATE)

    return [
        LedgerAccount("L-CASH", "Cash", "G-CA", Nature.ASSET,
                      opening_balance=opening("50000", BalanceSide.DEBIT)),
        LedgerAccount("L-BANK", "HDFC Bank", "G-CA", Nature.ASSET),
        LedgerAccount("L-ACME", "Acme Traders", "G-DEBTORS", Nature.ASSET),
        LedgerAccount("L-GLOBEX", "Globex Industries", "G-DEBTORS", Nature.ASSET),
        LedgerAccount("L-MACHINERY", "Plant & Machinery", "G-FA", Nature.ASSET,
                      opening_balance=opening("150000", BalanceSide.DEBIT)),
        LedgerAccount("L-STOCK-FG", "Stock-in-Hand – Finished Goods", "G-STOCK", Nature.ASSET,
                      is_stock_ledger=True, system_role=SystemRole.STOCK_FINISHED_GOODS),
        LedgerAccount("L-STOCK-RM", "Stock-in-Hand – Raw Material", "G-STOCK", Nature.ASSET,
                      is_stock_ledger=True, system_role=SystemRole.STOCK_RAW_MATERIAL),
        LedgerAccount("L-CGST", "Output GST – CGST", "G-TAX", Nature.LIABILITY,
                      system_role=SystemRole.OUTPUT_GST_CGST),
        LedgerAccount("L-SGST", "Output GST – SGST", "G-TAX", Nature.LIABILITY,
                      system_role=SystemRole.OUTPUT_GST_SGST),
        LedgerAccount("L-IGST", "Output GST – IGST", "G-TAX", Nature.LIABILITY,
                      system_role=SystemRole.OUTPUT_GST_IGST),
        LedgerAccount("L-SUPPLIER", "Steel Suppliers Ltd", "G-CREDITORS", Nature.LIABILITY),
        LedgerAccount("L-CAPITAL", "Capital", "G-CAPITAL", Nature.EQUITY,
                      opening_balance=opening("200000", BalanceSide.CREDIT)),
        LedgerAccount("L-SALES", "Sales – Domestic", "G-SALES", Nature.INCOME,
                      system_role=SystemRole.SALES_DOMESTIC),
        LedgerAccount("L-PURCHASES", "Purchases", "G-DIRECT", Nature.EXPENSE),
        LedgerAccount("L-RENT", "Office Rent", "G-INDIRECT", Nature.EXPENSE),
        LedgerAccount("L-SALARY", "Salaries", "G-INDIRECT", Nature.EXPENSE),
    ]


def demo_vouchers() -> list[JournalVoucher]:
    """데모 분개 전표"""
    return [
        JournalVoucher(
            "JV-0001", date(2024, 5, 5), "May office rent",
            (VoucherLine("L-RENT", debit=Decimal("12000")),
             VoucherLine("L-CASH", credit=Decimal("12000"))),
        ),
        JournalVoucher(
            "JV-0002", date(2024, 6, 12), "Raw material purchase on credit",
            (VoucherLine("L-PURCHASES", debit=Decimal("30000")),
             VoucherLine("L-SUPPLIER", credit=Decimal("30000"))),
        ),
        JournalVoucher(
            "JV-0003", date(2024, 7, 1), "June salaries",
            (VoucherLine("L-SALARY", debit=Decimal("25000")),
             VoucherLine("L-BANK", credit=Decimal("25000"))),
        ),
        JournalVoucher(
            "JV-0004", date(2024, 8, 20), "Receipt from Acme",
            (VoucherLine("L-BANK", debit=Decimal("118000")),
             VoucherLine("L-ACME", credit=Decimal("118000"))),
        ),
    ]


def demo_sales() -> list[SalesTransaction]:
    """데모 매출 거래 (주 내: CGST+SGST, 주 간: IGST)"""
    return [
        SalesTransaction(
            "INV-0001", date(2024, 7, 15), "L-ACME",
            taxable_amount=Decimal("100000"), grand_total=Decimal("118000"),
            cgst=Decimal("9000"), sgst=Decimal("9000"),
        ),
        SalesTransaction(
            "INV-0002", date(2024, 9, 3), "L-GLOBEX",
            taxable_amount=Decimal("50000"), grand_total=Decimal("59000"),
            igst=Decimal("9000"),
        ),
    ]


async def main(reset: bool, as_of: date) -> None:
    """데모 데이터 적재"""
    settings = get_settings()
    db_path = settings.db_path

    if reset and db_path.exists():
        db_path.unlink()
        logger.info(f"기존 DB 삭제: {db_path}")

    logger.info(f"데모 데이터 적재 시작: {db_path}")

    async with SQLiteAdapter(db_path) as db:
        await init_ledger_schema(db)
        store = LedgerStore(db)

        for group in demo_groups():
            await store.save_group(group)
        for ledger in demo_ledgers():
            await store.save_ledger(ledger)

        existing = {v.voucher_id for v in await store.list_journal_vouchers()}
        for voucher in demo_vouchers():
            if voucher.voucher_id not in existing:
                await store.save_voucher(voucher)

        for txn in demo_sales():
            await store.save_sales_transaction(txn)

        await store.save_stock_item(
            "ITEM-FG-01", "Gear Assembly", "Stock-in-Hand – Finished Goods",
            Decimal("100"), Decimal("250"), SystemRole.STOCK_FINISHED_GOODS,
        )
        await store.save_stock_item(
            "ITEM-RM-01", "Steel Rod", "Stock-in-Hand – Raw Material",
            Decimal("500"), Decimal("20"),
        )

        engine = LedgerEngine(
            store,
            identity_epsilon=settings.identity_epsilon,
            source_timeout_sec=settings.source_timeout_sec,
            role_labels=settings.role_labels,
        )
        sheet = await engine.get_balance_sheet(as_of)

    totals = sheet.totals
    logger.info(f"재무상태표 ({as_of})")
    logger.info(f"  - 자산: {totals.total_assets}")
    logger.info(f"  - 부채: {totals.total_liabilities}")
    logger.info(f"  - 자본: {totals.total_equity} (당기순이익 {sheet.pnl})")
    logger.info(f"  - 항등식: {'성립 ✓' if totals.identity_holds else f'불일치 (차이 {totals.difference})'}")
    for warning in sheet.warnings:
        logger.info(f"  - 경고 [{warning.kind.value}] {warning.message}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="데모 계정과목 및 거래 적재"
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="기존 DB 파일 삭제 후 적재",
    )
    parser.add_argument(
        "--as-of",
        default="2025-03-31",
        help="요약 출력 기준일 (기본: 2025-03-31)",
    )
    args = parser.parse_args()

    setup_logging("seed")
    asyncio.run(main(args.reset, parse_date(args.as_of)))
