"""Tests for the advisory client and its fallback behaviour."""

from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, List, Optional

import httpx
import pytest

from app.schemas import AdvisoryResult, AdvisoryStatus
from models.records import SensorSnapshot, WasteCategory, WasteLogEntry
from services.advisory import FALLBACK_RESULT, AdvisoryClient, GeminiTransport, parse_result
from services.errors import EmptyResponseError, SchemaError, TransportError
from services.prompt import AdvisoryRequest

EXPECTED_FALLBACK = {
    "status": "Warning",
    "summary": "Failed to reach AI, using basic local analysis.",
    "actionItems": ["Check internet connection", "Check humidity manually", "Turn the compost"],
    "climateNote": "Climate data unavailable.",
    "estimatedCompletion": "Unknown",
}

GOOD_BODY = {
    "status": "Optimal",
    "summary": "Thermophilic phase is healthy.",
    "actionItems": ["Keep turning every 3 days", "Add dry leaves if wet"],
    "climateNote": "Cover the bin during afternoon rain.",
    "estimatedCompletion": "2 more weeks",
}


class FakeTransport:
    def __init__(self, body: Optional[str] = None, error: Optional[BaseException] = None) -> None:
        self.body = body
        self.error = error
        self.requests: List[AdvisoryRequest] = []

    async def generate(self, request: AdvisoryRequest) -> Optional[str]:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.body


class SlowTransport:
    async def generate(self, request: AdvisoryRequest) -> Optional[str]:
        await asyncio.sleep(1)
        return json.dumps(GOOD_BODY)


def _snapshot() -> SensorSnapshot:
    return SensorSnapshot(
        temperature=45.0,
        humidity=58.0,
        ph_level=6.6,
        methane=160.0,
        captured_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


def _analyze(client: AdvisoryClient, log: Optional[list] = None) -> AdvisoryResult:
    return asyncio.run(client.analyze(_snapshot(), log or [], "hot and humid"))


def _dump(result: AdvisoryResult) -> dict:
    return result.model_dump(by_alias=True, mode="json")


def test_transport_failure_resolves_with_fallback() -> None:
    client = AdvisoryClient(FakeTransport(error=TransportError("quota exceeded")))

    result = _analyze(client)

    assert _dump(result) == EXPECTED_FALLBACK


def test_unexpected_transport_exception_resolves_with_fallback() -> None:
    client = AdvisoryClient(FakeTransport(error=ConnectionResetError("reset by peer")))

    assert _dump(_analyze(client)) == EXPECTED_FALLBACK


def test_malformed_body_resolves_with_same_fallback() -> None:
    transport_failure = _analyze(AdvisoryClient(FakeTransport(error=TransportError("down"))))
    malformed = _analyze(AdvisoryClient(FakeTransport(body="The compost looks fine to me!")))

    assert malformed == transport_failure
    assert _dump(malformed) == EXPECTED_FALLBACK


@pytest.mark.parametrize("body", [None, "", "   \n"])
def test_empty_body_resolves_with_fallback(body: Optional[str]) -> None:
    client = AdvisoryClient(FakeTransport(body=body))

    assert _dump(_analyze(client)) == EXPECTED_FALLBACK


@pytest.mark.parametrize(
    "payload",
    [
        {**GOOD_BODY, "status": "Fine"},
        {key: value for key, value in GOOD_BODY.items() if key != "climateNote"},
        {**GOOD_BODY, "actionItems": "Turn the compost"},
        [GOOD_BODY],
        {
            "status": "Optimal",
            "summary": "Thermophilic phase is healthy.",
            "action_items": ["Keep turning every 3 days"],
            "climate_note": "Cover the bin during afternoon rain.",
            "estimated_completion": "2 more weeks",
        },
    ],
)
def test_body_not_matching_schema_resolves_with_fallback(payload: Any) -> None:
    client = AdvisoryClient(FakeTransport(body=json.dumps(payload)))

    assert _dump(_analyze(client)) == EXPECTED_FALLBACK


def test_well_formed_body_round_trips() -> None:
    transport = FakeTransport(body=json.dumps(GOOD_BODY))
    client = AdvisoryClient(transport, model="gemini-test")

    result = _analyze(client)

    assert _dump(result) == GOOD_BODY
    assert result.status is AdvisoryStatus.optimal
    assert len(transport.requests) == 1
    assert transport.requests[0].model == "gemini-test"


def test_prompt_includes_latest_entry() -> None:
    transport = FakeTransport(body=json.dumps(GOOD_BODY))
    log = [WasteLogEntry(id="1", category=WasteCategory.vegetable, weight_kg=1.5, logged_at="01/01/2024")]

    _analyze(AdvisoryClient(transport), log)

    assert "Vegetables (1.5 kg)" in transport.requests[0].prompt


def test_timeout_counts_as_transport_failure() -> None:
    client = AdvisoryClient(SlowTransport(), timeout=0.01)

    outcome = asyncio.run(client.analyze_outcome(_snapshot(), [], "hot and humid"))

    assert outcome.used_fallback
    assert outcome.error_kind == "transport"
    assert _dump(outcome.result) == EXPECTED_FALLBACK


@pytest.mark.parametrize(
    ("transport", "kind"),
    [
        (FakeTransport(error=TransportError("down")), "transport"),
        (FakeTransport(body=""), "empty_response"),
        (FakeTransport(body="{not json"), "schema"),
        (FakeTransport(body=json.dumps(GOOD_BODY)), None),
    ],
)
def test_outcome_tags_failure_kind(transport: FakeTransport, kind: Optional[str]) -> None:
    outcome = asyncio.run(AdvisoryClient(transport).analyze_outcome(_snapshot(), [], "hot and humid"))

    assert outcome.error_kind == kind
    assert outcome.used_fallback is (kind is not None)


def test_failure_is_logged_with_kind(caplog: pytest.LogCaptureFixture) -> None:
    client = AdvisoryClient(FakeTransport(body="nope"))

    with caplog.at_level("WARNING", logger="services.advisory"):
        _analyze(client)

    records = [record for record in caplog.records if record.name == "services.advisory"]
    assert records
    assert records[0].error_kind == "schema"


def test_fallback_is_a_fresh_copy() -> None:
    client = AdvisoryClient(FakeTransport(error=TransportError("down")))

    result = _analyze(client)
    result.action_items.append("Mutated")

    assert FALLBACK_RESULT.action_items == EXPECTED_FALLBACK["actionItems"]


def test_parse_result_raises_tagged_errors() -> None:
    with pytest.raises(EmptyResponseError):
        parse_result("")
    with pytest.raises(SchemaError):
        parse_result("[]")


def test_parse_result_requires_wire_field_names() -> None:
    snake_case = {
        "status": "Warning",
        "summary": "Too wet.",
        "action_items": ["Add dry leaves"],
        "climate_note": "Rain expected.",
        "estimated_completion": "3 weeks",
    }

    with pytest.raises(SchemaError):
        parse_result(json.dumps(snake_case))
    assert _dump(parse_result(json.dumps(GOOD_BODY))) == GOOD_BODY


def test_gemini_transport_without_api_key_falls_back() -> None:
    client = AdvisoryClient(GeminiTransport(api_key=None))

    outcome = asyncio.run(client.analyze_outcome(_snapshot(), [], "hot and humid"))

    assert outcome.error_kind == "transport"
    assert _dump(outcome.result) == EXPECTED_FALLBACK


def _fake_genai_client(generate_content) -> SimpleNamespace:
    return SimpleNamespace(aio=SimpleNamespace(models=SimpleNamespace(generate_content=generate_content)))


def test_gemini_transport_requests_json_output() -> None:
    calls: list[dict] = []

    async def generate_content(**kwargs: Any) -> SimpleNamespace:
        calls.append(kwargs)
        return SimpleNamespace(text=json.dumps(GOOD_BODY))

    transport = GeminiTransport(api_key="unused", client=_fake_genai_client(generate_content))
    request = AdvisoryRequest(model="gemini-2.5-flash", prompt="analyse")

    body = asyncio.run(transport.generate(request))

    assert json.loads(body) == GOOD_BODY
    assert calls[0]["model"] == "gemini-2.5-flash"
    assert calls[0]["contents"] == "analyse"
    assert calls[0]["config"].response_mime_type == "application/json"


def test_gemini_transport_maps_network_errors() -> None:
    async def generate_content(**kwargs: Any) -> SimpleNamespace:
        raise httpx.ConnectError("connection refused")

    transport = GeminiTransport(api_key="unused", client=_fake_genai_client(generate_content))

    with pytest.raises(TransportError):
        asyncio.run(transport.generate(AdvisoryRequest(model="m", prompt="p")))
