"""
Ledger 스키마 초기화

Web 시작 시 / seed 스크립트에서 자동으로 계정과목 및 거래 테이블 생성.
CREATE IF NOT EXISTS 패턴으로 안전하게 동작.

금액은 Decimal 정밀도 보존을 위해 TEXT로 저장.
그룹 상위 참조와 전표 항목의 Ledger 참조에는 외래 키를 걸지 않음
(검증은 AccountTree 구성 단계와 경고로 처리).
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


async def init_ledger_schema(db: "SQLiteAdapter") -> None:
    """Ledger 스키마 초기화
    
    이미 존재하는 경우 안전하게 건너뜀 (IF NOT EXISTS).
    
    Args:
        db: SQLiteAdapter 인스턴스
    """
    await _create_chart_tables(db)
    await _create_transaction_tables(db)
    await _create_indexes(db)
    await db.commit()
    logger.info("Ledger 스키마 초기화 완료")


async def _create_chart_tables(db: "SQLiteAdapter") -> None:
    """계정과목 테이블 생성"""
    
    # coa_group 테이블 (계정 그룹)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS coa_group (
            group_id             TEXT PRIMARY KEY,
            name                 TEXT NOT NULL,
            nature               TEXT NOT NULL,
            parent_id            TEXT,
            level                INTEGER NOT NULL DEFAULT 0,
            sort_order           INTEGER NOT NULL DEFAULT 0,
            allow_ledger_posting INTEGER NOT NULL DEFAULT 1,
            created_at           TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)
    
    # coa_ledger 테이블 (Ledger 계정 + 기초 잔액)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS coa_ledger (
            ledger_id        TEXT PRIMARY KEY,
            name             TEXT NOT NULL,
            group_id         TEXT NOT NULL,
            nature           TEXT NOT NULL,
            normal_balance   TEXT,
            opening_amount   TEXT NOT NULL DEFAULT '0',
            opening_side     TEXT NOT NULL DEFAULT 'DEBIT',
            opening_as_of    TEXT,
            is_stock_ledger  INTEGER NOT NULL DEFAULT 0,
            system_role      TEXT UNIQUE,
            created_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)


async def _create_transaction_tables(db: "SQLiteAdapter") -> None:
    """거래 테이블 생성"""
    
    # journal_voucher 테이블 (분개 전표 헤더)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS journal_voucher (
            voucher_id       TEXT PRIMARY KEY,
            voucher_date     TEXT NOT NULL,
            narration        TEXT NOT NULL DEFAULT '',
            created_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)
    
    # journal_voucher_line 테이블 (분개 전표 항목)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS journal_voucher_line (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            voucher_id       TEXT NOT NULL REFERENCES journal_voucher(voucher_id),
            line_order       INTEGER NOT NULL,
            ledger_id        TEXT NOT NULL,
            debit            TEXT NOT NULL DEFAULT '0',
            credit           TEXT NOT NULL DEFAULT '0',
            UNIQUE(voucher_id, line_order)
        )
    """)
    
    # sales_transaction 테이블 (매출 거래, 외부 입력)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS sales_transaction (
            transaction_id     TEXT PRIMARY KEY,
            transaction_date   TEXT NOT NULL,
            customer_ledger_id TEXT,
            taxable_amount     TEXT NOT NULL,
            grand_total        TEXT NOT NULL,
            cgst               TEXT NOT NULL DEFAULT '0',
            sgst               TEXT NOT NULL DEFAULT '0',
            igst               TEXT NOT NULL DEFAULT '0'
        )
    """)
    
    # stock_item 테이블 (재고 품목 현재 스냅샷)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS stock_item (
            item_id          TEXT PRIMARY KEY,
            name             TEXT NOT NULL,
            ledger_label     TEXT NOT NULL,
            system_role      TEXT,
            quantity         TEXT NOT NULL DEFAULT '0',
            unit_cost        TEXT NOT NULL DEFAULT '0'
        )
    """)


async def _create_indexes(db: "SQLiteAdapter") -> None:
    """인덱스 생성"""
    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_journal_voucher_date
        ON journal_voucher(voucher_date)
    """)
    
    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_sales_transaction_date
        ON sales_transaction(transaction_date)
    """)
