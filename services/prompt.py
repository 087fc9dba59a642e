"""Builds the instruction sent to the advisory service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from models.records import SensorSnapshot, WasteLogEntry
from services.sensors import OPTIMAL_RANGES
from settings import DEFAULT_CLIMATE_LABEL, DEFAULT_MODEL

JSON_MIME_TYPE = "application/json"
NO_DATA_MARKER = "no data yet"

RESULT_FIELDS = ("status", "summary", "actionItems", "climateNote", "estimatedCompletion")

_OUTPUT_SCHEMA = """{
  "status": "Optimal" | "Warning" | "Critical",
  "summary": "Short summary of the compost condition (max 20 words).",
  "actionItems": ["Step 1", "Step 2", "Step 3"],
  "climateNote": "Specific climate-adaptation advice for the current weather.",
  "estimatedCompletion": "Estimated time until harvest (e.g. 2 more weeks)"
}"""


@dataclass(frozen=True)
class AdvisoryRequest:
    model: str
    prompt: str
    response_mime_type: str = JSON_MIME_TYPE


def _range(name: str) -> str:
    low, high = OPTIMAL_RANGES[name]
    return f"{low:g}-{high:g}"


def describe_latest_entry(log: Sequence[WasteLogEntry]) -> str:
    if not log:
        return NO_DATA_MARKER
    latest = log[0]
    return f"{latest.category.label} ({latest.weight_kg:g} kg)"


def build_prompt(
    snapshot: SensorSnapshot,
    log: Sequence[WasteLogEntry],
    climate_label: str = DEFAULT_CLIMATE_LABEL,
    model: str = DEFAULT_MODEL,
) -> AdvisoryRequest:
    """Embed the current readings, climate and latest waste entry in an instruction.

    ``log`` is newest-first, so only its head is described.
    """
    prompt = f"""You are the expert advisor of a smart organic composting appliance.
Analyse the condition of the compost using the sensor data and the waste log.

Current sensor data:
- Temperature: {snapshot.temperature}°C (optimal: {_range("temperature")}°C for the thermophilic phase)
- Humidity: {snapshot.humidity}% (optimal: {_range("humidity")}%)
- pH: {snapshot.ph_level} (optimal: {_range("ph_level")})
- Methane: {snapshot.methane} ppm

Outside weather/climate: {climate_label or DEFAULT_CLIMATE_LABEL}

Latest waste added: {describe_latest_entry(log)}

Return the analysis as raw JSON only, with no markdown code block and no surrounding text, using exactly this format:
{_OUTPUT_SCHEMA}
"""
    return AdvisoryRequest(model=model, prompt=prompt)
