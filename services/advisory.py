"""Client for the external advisory (language model) service."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional, Protocol, Sequence

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import ValidationError as PydanticValidationError

from app.schemas import AdvisoryResult, AdvisoryStatus
from models.records import SensorSnapshot, WasteLogEntry
from services.errors import AdvisoryError, EmptyResponseError, SchemaError, TransportError
from services.prompt import AdvisoryRequest, build_prompt
from settings import DEFAULT_CLIMATE_LABEL, DEFAULT_MODEL

logger = logging.getLogger(__name__)

FALLBACK_RESULT = AdvisoryResult.model_validate(
    {
        "status": AdvisoryStatus.warning,
        "summary": "Failed to reach AI, using basic local analysis.",
        "actionItems": [
            "Check internet connection",
            "Check humidity manually",
            "Turn the compost",
        ],
        "climateNote": "Climate data unavailable.",
        "estimatedCompletion": "Unknown",
    }
)


def fallback_result() -> AdvisoryResult:
    return FALLBACK_RESULT.model_copy(deep=True)


class AdvisoryTransport(Protocol):
    """Sends a request to the advisory service and returns the raw body."""

    async def generate(self, request: AdvisoryRequest) -> Optional[str]:
        ...


class GeminiTransport:
    """Transport backed by the Google Gen AI SDK's async client."""

    def __init__(self, api_key: Optional[str], client: Any = None) -> None:
        self._api_key = api_key
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            if not self._api_key:
                raise TransportError("No API key configured for the advisory service.")
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    async def generate(self, request: AdvisoryRequest) -> Optional[str]:
        client = self._get_client()
        try:
            response = await client.aio.models.generate_content(
                model=request.model,
                contents=request.prompt,
                config=types.GenerateContentConfig(
                    response_mime_type=request.response_mime_type,
                ),
            )
        except genai_errors.APIError as exc:
            raise TransportError(f"Advisory service rejected the request: {exc}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"Advisory service unreachable: {exc}") from exc
        return response.text


@dataclass(frozen=True)
class AdvisoryOutcome:
    """Result of one analysis plus the failure kind when the fallback was used."""

    result: AdvisoryResult
    error_kind: Optional[str] = None

    @property
    def used_fallback(self) -> bool:
        return self.error_kind is not None


def parse_result(text: Optional[str]) -> AdvisoryResult:
    if text is None or not text.strip():
        raise EmptyResponseError("No response from the advisory service.")
    try:
        return AdvisoryResult.model_validate_json(text)
    except PydanticValidationError as exc:
        raise SchemaError(f"Advisory response does not match the result schema: {exc}") from exc


class AdvisoryClient:
    """Builds, sends and parses one advisory request per call, without retries."""

    def __init__(
        self,
        transport: AdvisoryTransport,
        model: str = DEFAULT_MODEL,
        timeout: float = 20.0,
    ) -> None:
        self.transport = transport
        self.model = model
        self.timeout = timeout

    async def analyze(
        self,
        snapshot: SensorSnapshot,
        log: Sequence[WasteLogEntry],
        climate_label: str = DEFAULT_CLIMATE_LABEL,
    ) -> AdvisoryResult:
        """Always resolves: on any failure the fixed fallback result is returned."""
        outcome = await self.analyze_outcome(snapshot, log, climate_label)
        return outcome.result

    async def analyze_outcome(
        self,
        snapshot: SensorSnapshot,
        log: Sequence[WasteLogEntry],
        climate_label: str = DEFAULT_CLIMATE_LABEL,
        generation: Optional[int] = None,
    ) -> AdvisoryOutcome:
        request = build_prompt(snapshot, log, climate_label, model=self.model)
        start_time = time.perf_counter()
        try:
            result = await self.request(request)
        except AdvisoryError as exc:
            logger.warning(
                "Advisory analysis failed, using fallback result",
                extra={
                    "error_kind": exc.kind,
                    "generation": generation,
                    "model": self.model,
                    "reason": str(exc),
                },
            )
            return AdvisoryOutcome(result=fallback_result(), error_kind=exc.kind)

        logger.info(
            "Advisory analysis completed",
            extra={
                "generation": generation,
                "model": self.model,
                "status": result.status.value,
                "latency_ms": int((time.perf_counter() - start_time) * 1000),
            },
        )
        return AdvisoryOutcome(result=result)

    async def request(self, request: AdvisoryRequest) -> AdvisoryResult:
        """Send ``request`` and parse the body, raising a tagged ``AdvisoryError``."""
        try:
            text = await asyncio.wait_for(self.transport.generate(request), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            raise TransportError(f"Advisory request timed out after {self.timeout}s.") from exc
        except AdvisoryError:
            raise
        except Exception as exc:  # noqa: BLE001 - any transport failure maps to the fallback
            raise TransportError(f"Advisory transport failed: {exc}") from exc
        return parse_result(text)
