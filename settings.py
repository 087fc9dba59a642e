from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_API_KEY_ENV = "GEMINI_API_KEY"
_MODEL_ENV = "ADVISORY_MODEL"
_TIMEOUT_ENV = "ADVISORY_TIMEOUT_SECONDS"
_CLIMATE_LABEL_ENV = "CLIMATE_LABEL"
_REFRESH_ENV = "SENSOR_REFRESH_SECONDS"
_HISTORY_SIZE_ENV = "SENSOR_HISTORY_SIZE"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_CLIMATE_LABEL = "hot and humid"


@dataclass(frozen=True)
class Settings:
    advisory_api_key: Optional[str]
    advisory_model: str
    advisory_timeout: float
    climate_label: str
    sensor_refresh_seconds: float
    sensor_history_size: int
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        advisory_api_key=_read_optional_env(_API_KEY_ENV, None),
        advisory_model=_read_str_env(_MODEL_ENV, DEFAULT_MODEL),
        advisory_timeout=_read_positive_float(_TIMEOUT_ENV, 20.0),
        climate_label=_read_str_env(_CLIMATE_LABEL_ENV, DEFAULT_CLIMATE_LABEL),
        sensor_refresh_seconds=_read_positive_float(_REFRESH_ENV, 5.0),
        sensor_history_size=_read_positive_int(_HISTORY_SIZE_ENV, 60),
        log_level=_read_log_level("INFO"),
    )
