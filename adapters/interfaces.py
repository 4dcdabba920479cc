"""
어댑터 인터페이스 정의

Protocol 기반으로 정의하여 의존성 주입 및 Mock 교체 가능.
모든 구현체는 이 Protocol을 준수해야 함.
"""

from datetime import date
from typing import Protocol, runtime_checkable

from core.ledger.models import (
    AccountGroup,
    JournalVoucher,
    LedgerAccount,
    SalesTransaction,
    StockValuation,
)


@runtime_checkable
class ILedgerRepository(Protocol):
    """Ledger 데이터 저장소 인터페이스 (읽기 전용)
    
    엔진은 이 인터페이스로만 협력 저장소를 조회하며 변경하지 않음.
    금액은 반드시 Decimal 타입 사용.
    """
    
    # -------------------------------------------------------------------------
    # 계정과목
    # -------------------------------------------------------------------------
    
    async def list_account_groups(self) -> list[AccountGroup]:
        """전체 계정 그룹 목록"""
        ...
    
    async def list_ledger_accounts(self) -> list[LedgerAccount]:
        """전체 Ledger 계정 목록 (기초 잔액 포함)"""
        ...
    
    # -------------------------------------------------------------------------
    # 거래
    # -------------------------------------------------------------------------
    
    async def list_journal_vouchers(self, up_to: date | None = None) -> list[JournalVoucher]:
        """분개 전표 목록
        
        Args:
            up_to: 기준일 (포함, None이면 전체)
        """
        ...
    
    async def list_sales_transactions(self, up_to: date | None = None) -> list[SalesTransaction]:
        """매출 거래 목록
        
        Args:
            up_to: 기준일 (포함, None이면 전체)
        """
        ...
    
    # -------------------------------------------------------------------------
    # 재고
    # -------------------------------------------------------------------------
    
    async def list_stock_valuations(self) -> list[StockValuation]:
        """재고 평가 목록 (현재 스냅샷)"""
        ...
