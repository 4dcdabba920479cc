"""
고정 상수

settings.yaml로 덮어쓸 수 있는 기본값과 프로젝트 경로.
경로는 모두 pathlib.Path.
"""

from decimal import Decimal
from pathlib import Path


# core/constants.py 기준 두 단계 위
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """settings.yaml 미지정 시 기본값"""

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000

    LOG_LEVEL: str = "INFO"

    # 자산 - (부채 + 자본) 허용 오차
    IDENTITY_EPSILON: Decimal = Decimal("0.01")

    # 저장소 조회 전체 제한 시간
    SOURCE_TIMEOUT_SEC: float = 30.0

    # 4월 시작 (FY 2024-25 = 2024-04-01 ~ 2025-03-31)
    FISCAL_YEAR_START_MONTH: int = 4


class Paths:
    """프로젝트 경로"""

    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"

    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"
    DEFAULT_DB: Path = DATA_DIR / "ledger.db"
