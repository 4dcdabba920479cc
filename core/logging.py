"""
로깅 설정

Web 서버와 적재 스크립트가 공유하는 로거 구성.
프로세스마다 logs/<process>/<process>.log 파일에 기록하고 자정마다 교체.

사용법:
    from core.logging import setup_logging
    setup_logging("web")
    setup_logging("seed", console_level="DEBUG")
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from core.constants import Defaults, Paths


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_BACKUP_COUNT = 7  # 일 단위 보관 개수

# WARNING 이상만 남길 외부 로거
NOISY_LOGGERS = (
    "aiosqlite",       # 쿼리마다 executing/completed
    "uvicorn.access",  # 요청마다 access 로그
    "httpcore",
    "httpx",           # TestClient 요청
    "asyncio",
)


def get_log_file_path(process_name: str, logs_dir: Path | None = None) -> Path:
    """프로세스 로그 파일 경로"""
    root = logs_dir if logs_dir is not None else Paths.LOGS_DIR
    return root / process_name / f"{process_name}.log"


def _level(value: int | str) -> int:
    if isinstance(value, int):
        return value
    level = logging.getLevelName(value.upper())
    if not isinstance(level, int):
        raise ValueError(f"알 수 없는 로그 레벨: {value!r}")
    return level


def _file_handler(log_file: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = TimedRotatingFileHandler(
        filename=log_file,
        when="midnight",
        backupCount=LOG_FILE_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.suffix = "%Y-%m-%d"  # seed.log.2025-03-31
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    process_name: str,
    console_level: int | str = Defaults.LOG_LEVEL,
    file_level: int | str = Defaults.LOG_LEVEL,
    logs_dir: Path | None = None,
) -> logging.Logger:
    """루트 로거 구성 (콘솔 + 일 단위 파일)

    다시 호출하면 기존 핸들러를 닫고 교체.

    Args:
        process_name: 프로세스 이름 ("web", "seed")
        console_level: 콘솔 레벨 (이름 또는 숫자)
        file_level: 파일 레벨 (이름 또는 숫자)
        logs_dir: 로그 루트 디렉토리 (None이면 logs/)

    Returns:
        루트 Logger
    """
    log_file = get_log_file_path(process_name, logs_dir)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(_level(console_level))
    console.setFormatter(formatter)
    root.addHandler(console)
    root.addHandler(_file_handler(log_file, _level(file_level), formatter))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root.info(f"[{process_name}] 로깅 시작: {log_file}")
    return root
