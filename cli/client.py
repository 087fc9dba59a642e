from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the compost monitor service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=30.0)

    def close(self) -> None:
        self._client.close()

    def get_sensors(self) -> Dict[str, Any]:
        return self._get("/sensors")

    def list_entries(self) -> List[Dict[str, Any]]:
        return self._get("/waste-logs")

    def get_summary(self) -> Dict[str, Any]:
        return self._get("/waste-logs/summary")

    def get_analysis(self) -> Dict[str, Any]:
        return self._get("/analysis")

    def log_waste(self, category: str, weight_kg: float, notes: Optional[str] = None) -> Dict[str, Any]:
        body: Dict[str, Any] = {"category": category, "weight_kg": weight_kg}
        if notes:
            body["notes"] = notes
        try:
            response = self._client.post("/waste-logs", json=body)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.json()

    def request_analysis(self, climate_label: Optional[str] = None) -> Dict[str, Any]:
        params = {"climate_label": climate_label} if climate_label else None
        try:
            response = self._client.post("/analysis", params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.json()

    def wait_for_analysis(self, after_generation: int, interval: float, timeout: float) -> Dict[str, Any]:
        """Poll until a result newer than ``after_generation`` is accepted."""
        deadline = time.monotonic() + timeout
        last_payload: Dict[str, Any] | None = None
        while time.monotonic() <= deadline:
            last_payload = self.get_analysis()
            if last_payload.get("generation", 0) > after_generation:
                return last_payload
            time.sleep(interval)
        typer.secho(
            (
                "Timed out waiting for the advisory analysis. "
                f"Last generation: {last_payload.get('generation') if last_payload else 'unknown'}"
            ),
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)

    def _get(self, path: str) -> Any:
        try:
            response = self._client.get(path)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: Any = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
