"""
유틸리티 패키지

날짜 파싱, 회계연도 계산 등 공통 유틸리티
"""

from core.utils.fiscal import (
    financial_year_of,
    fiscal_year_range,
    parse_date,
    parse_financial_year,
)

__all__ = [
    "parse_date",
    "parse_financial_year",
    "financial_year_of",
    "fiscal_year_range",
]
