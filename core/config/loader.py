"""
설정 로더

settings.yaml 로드 및 Ledger 엔진 설정 생성
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from core.constants import Defaults, Paths
from core.ledger.types import DEFAULT_ROLE_LABELS, SystemRole


@dataclass(frozen=True)
class LedgerConfig:
    """Ledger 엔진 설정 (settings.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    database: str = ""
    identity_epsilon: Decimal = Defaults.IDENTITY_EPSILON
    source_timeout_sec: float = Defaults.SOURCE_TIMEOUT_SEC
    fiscal_year_start_month: int = Defaults.FISCAL_YEAR_START_MONTH
    role_labels: dict[SystemRole, tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_ROLE_LABELS)
    )


class ConfigLoadError(Exception):
    """설정 로드 실패 예외"""

    pass


def load_config(path: Path | None = None) -> LedgerConfig:
    """settings.yaml 파일 로드

    지정되지 않은 항목은 기본값 사용.

    Args:
        path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        LedgerConfig 인스턴스

    Raises:
        ConfigLoadError: 파일이 없거나 형식/값이 잘못된 경우
    """
    if path is None:
        path = Paths.SETTINGS_FILE

    if not path.exists():
        raise ConfigLoadError(f"settings.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigLoadError("settings.yaml 최상위는 mapping이어야 합니다")

    ledger = data.get("ledger", {}) or {}
    if not isinstance(ledger, dict):
        raise ConfigLoadError("settings.yaml의 'ledger' 섹션은 mapping이어야 합니다")

    return LedgerConfig(
        database=str(data.get("database") or ""),
        identity_epsilon=_parse_epsilon(ledger.get("identity_epsilon")),
        source_timeout_sec=_parse_timeout(ledger.get("source_timeout_sec")),
        fiscal_year_start_month=_parse_month(ledger.get("fiscal_year_start_month")),
        role_labels=_parse_role_labels(ledger.get("role_labels")),
    )


def _parse_epsilon(value: Any) -> Decimal:
    if value is None:
        return Defaults.IDENTITY_EPSILON
    try:
        epsilon = Decimal(str(value))
    except InvalidOperation as e:
        raise ConfigLoadError(f"identity_epsilon이 숫자가 아닙니다: {value!r}") from e
    if epsilon < 0:
        raise ConfigLoadError(f"identity_epsilon은 0 이상이어야 합니다: {value}")
    return epsilon


def _parse_timeout(value: Any) -> float:
    if value is None:
        return Defaults.SOURCE_TIMEOUT_SEC
    try:
        timeout = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigLoadError(f"source_timeout_sec이 숫자가 아닙니다: {value!r}") from e
    if timeout <= 0:
        raise ConfigLoadError(f"source_timeout_sec은 0보다 커야 합니다: {value}")
    return timeout


def _parse_month(value: Any) -> int:
    if value is None:
        return Defaults.FISCAL_YEAR_START_MONTH
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 12:
        raise ConfigLoadError(f"fiscal_year_start_month는 1~12 정수여야 합니다: {value!r}")
    return value


def _parse_role_labels(value: Any) -> dict[SystemRole, tuple[str, ...]]:
    """역할별 이름 후보 (설정값이 기본값보다 우선)"""
    labels = dict(DEFAULT_ROLE_LABELS)
    if value is None:
        return labels
    if not isinstance(value, dict):
        raise ConfigLoadError("role_labels는 mapping이어야 합니다")

    for role_name, names in value.items():
        try:
            role = SystemRole(str(role_name).upper())
        except ValueError as e:
            valid_roles = [r.value for r in SystemRole]
            raise ConfigLoadError(
                f"알 수 없는 역할입니다: '{role_name}'. 유효한 값: {valid_roles}"
            ) from e
        if isinstance(names, str):
            names = [names]
        if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
            raise ConfigLoadError(f"role_labels.{role_name}은 문자열 목록이어야 합니다")
        labels[role] = tuple(names) + tuple(
            n for n in DEFAULT_ROLE_LABELS.get(role, ()) if n not in names
        )
    return labels


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    settings.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _config: LedgerConfig | None = None

    def __new__(cls, config_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, config_path: Path | None = None) -> None:
        if self._config is None:
            self._config = load_config(config_path)

    @property
    def config(self) -> LedgerConfig:
        """로드된 설정"""
        assert self._config is not None
        return self._config

    @property
    def db_path(self) -> Path:
        """DB 경로 (상대 경로는 프로젝트 루트 기준)"""
        from adapters.db.sqlite_adapter import get_db_path

        return get_db_path(self.config.database)

    @property
    def identity_epsilon(self) -> Decimal:
        return self.config.identity_epsilon

    @property
    def source_timeout_sec(self) -> float:
        return self.config.source_timeout_sec

    @property
    def fiscal_year_start_month(self) -> int:
        return self.config.fiscal_year_start_month

    @property
    def role_labels(self) -> dict[SystemRole, tuple[str, ...]]:
        return self.config.role_labels

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._config = None


def get_settings(config_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        config_path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(config_path)
