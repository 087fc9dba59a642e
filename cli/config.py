from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_TIMEOUT = 30.0

_BASE_URL_ENV = "API_BASE_URL"
_POLL_INTERVAL_ENV = "CLI_POLL_INTERVAL"
_TIMEOUT_ENV = "CLI_POLL_TIMEOUT"
_CLIMATE_LABEL_ENV = "CLI_CLIMATE_LABEL"


@dataclass(frozen=True)
class CLIConfig:
    base_url: str = DEFAULT_BASE_URL
    poll_interval: float = DEFAULT_POLL_INTERVAL
    poll_timeout: float = DEFAULT_TIMEOUT
    climate_label: Optional[str] = None


def _read_float(name: str, default: float) -> float:
    candidate = (os.getenv(name) or "").strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def load_config(
    base_url: Optional[str] = None,
    poll_interval: Optional[float] = None,
    poll_timeout: Optional[float] = None,
    climate_label: Optional[str] = None,
) -> CLIConfig:
    """Merge explicit options over environment variables over defaults.

    An unset climate label lets the server apply its own configured default.
    """
    url = base_url or os.getenv(_BASE_URL_ENV) or DEFAULT_BASE_URL
    if poll_interval is None:
        poll_interval = _read_float(_POLL_INTERVAL_ENV, DEFAULT_POLL_INTERVAL)
    if poll_timeout is None:
        poll_timeout = _read_float(_TIMEOUT_ENV, DEFAULT_TIMEOUT)
    label = climate_label or (os.getenv(_CLIMATE_LABEL_ENV) or "").strip() or None
    return CLIConfig(
        base_url=url.rstrip("/"),
        poll_interval=poll_interval,
        poll_timeout=poll_timeout,
        climate_label=label,
    )
