"""Pydantic schemas for the advisory wire contract and the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.records import WasteCategory


class AdvisoryStatus(str, Enum):
    """Overall compost condition reported by the advisory service."""

    optimal = "Optimal"
    warning = "Warning"
    critical = "Critical"


class AdvisoryResult(BaseModel):
    """Structured status and action plan returned by the advisory service.

    Field aliases are the wire names the service is asked to produce; only
    those names are accepted on input.
    """

    model_config = ConfigDict(frozen=True)

    status: AdvisoryStatus
    summary: str
    action_items: List[str] = Field(..., alias="actionItems")
    climate_note: str = Field(..., alias="climateNote")
    estimated_completion: str = Field(..., alias="estimatedCompletion")


class SensorChannel(BaseModel):
    name: str
    value: float
    unit: str
    optimal_min: float
    optimal_max: float
    optimal: bool


class SensorSnapshotResponse(BaseModel):
    """Current readings plus the per-channel comfort annotation."""

    temperature: float
    humidity: float
    ph_level: float
    methane: float
    captured_at: datetime
    channels: List[SensorChannel] = Field(default_factory=list)


class SensorReadingPoint(BaseModel):
    temperature: float
    humidity: float
    ph_level: float
    methane: float
    captured_at: datetime


class WasteEntryCreate(BaseModel):
    """Payload for logging a new waste entry."""

    category: WasteCategory
    weight_kg: float = Field(..., description="Estimated weight in kilograms.")
    notes: Optional[str] = Field(default=None, max_length=500)


class WasteEntry(BaseModel):
    id: str
    category: WasteCategory
    weight_kg: float
    logged_at: str
    notes: Optional[str] = None


class WasteEntryCreated(BaseModel):
    entry: WasteEntry
    message: str


class WasteSummaryResponse(BaseModel):
    """Waste distribution across categories."""

    entry_count: int = Field(..., ge=0)
    total_weight_kg: float = Field(..., ge=0)
    per_category_weight: Dict[WasteCategory, float] = Field(default_factory=dict)
    per_category_count: Dict[WasteCategory, int] = Field(default_factory=dict)
    per_category_share: Dict[WasteCategory, float] = Field(
        default_factory=dict, description="Fraction of the total weight per category."
    )


class AnalysisStateResponse(BaseModel):
    """Latest advisory result and whether a request is outstanding."""

    result: Optional[AdvisoryResult] = None
    in_progress: bool
    generation: int = Field(..., ge=0)
    updated_at: Optional[datetime] = None
    used_fallback: bool = False


class AnalysisAccepted(BaseModel):
    detail: str
    climate_label: str
