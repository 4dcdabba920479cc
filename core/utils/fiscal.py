"""
날짜 / 회계연도 유틸리티

회계연도 표기: "FY 2024-25" (시작 월 기본 4월 → 2024-04-01 ~ 2025-03-31)
"""

import re
from datetime import date, timedelta

from core.constants import Defaults


_FY_PATTERN = re.compile(r"^\s*(?:FY\s*)?(\d{4})(?:\s*[-/–]\s*(\d{2}|\d{4}))?\s*$", re.IGNORECASE)


def parse_date(value: str) -> date:
    """ISO 형식(YYYY-MM-DD) 날짜 파싱

    Raises:
        ValueError: 형식이 잘못된 경우
    """
    try:
        return date.fromisoformat(value.strip())
    except (AttributeError, ValueError) as e:
        raise ValueError(f"날짜 형식이 잘못되었습니다 (YYYY-MM-DD): {value!r}") from e


def fiscal_year_range(
    start_year: int,
    start_month: int = Defaults.FISCAL_YEAR_START_MONTH,
) -> tuple[date, date]:
    """회계연도 시작일 ~ 종료일"""
    start = date(start_year, start_month, 1)
    if start_month == 1:
        end = date(start_year, 12, 31)
    else:
        end = date(start_year + 1, start_month, 1) - timedelta(days=1)
    return start, end


def parse_financial_year(
    label: str,
    start_month: int = Defaults.FISCAL_YEAR_START_MONTH,
) -> tuple[date, date]:
    """회계연도 표기 파싱

    Example:
        >>> parse_financial_year("FY 2024-25")
        (datetime.date(2024, 4, 1), datetime.date(2025, 3, 31))

    Args:
        label: "FY 2024-25", "2024-25", "2024-2025" 형식
        start_month: 회계연도 시작 월

    Returns:
        (시작일, 종료일)

    Raises:
        ValueError: 형식이 잘못되었거나 연도가 연속되지 않는 경우
    """
    match = _FY_PATTERN.match(label or "")
    if match is None:
        raise ValueError(f"회계연도 형식이 잘못되었습니다 (예: FY 2024-25): {label!r}")

    start_year = int(match.group(1))
    end_part = match.group(2)
    if end_part is None:
        # 역년 회계연도만 단일 연도 표기 허용 ("FY 2024")
        if start_month != 1:
            raise ValueError(f"회계연도 형식이 잘못되었습니다 (예: FY 2024-25): {label!r}")
        return fiscal_year_range(start_year, start_month)

    end_year = int(end_part) if len(end_part) == 4 else (start_year // 100) * 100 + int(end_part)
    if len(end_part) == 2 and end_year < start_year:
        end_year += 100

    expected_end = start_year if start_month == 1 else start_year + 1
    if end_year != expected_end:
        raise ValueError(f"회계연도 연도가 연속되지 않습니다: {label!r}")

    return fiscal_year_range(start_year, start_month)


def financial_year_of(
    value: date,
    start_month: int = Defaults.FISCAL_YEAR_START_MONTH,
) -> str:
    """날짜가 속한 회계연도 표기

    Example:
        >>> financial_year_of(date(2025, 2, 10))
        'FY 2024-25'
    """
    start_year = value.year if value.month >= start_month else value.year - 1
    if start_month == 1:
        return f"FY {start_year}"
    return f"FY {start_year}-{(start_year + 1) % 100:02d}"
