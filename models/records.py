"""Domain models shared across services."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from services.errors import ValidationError


class WasteCategory(str, Enum):
    """Kinds of organic waste a user can log."""

    vegetable = "vegetable"
    fruit = "fruit"
    dry_leaves = "dry_leaves"
    paper_cardboard = "paper_cardboard"
    egg_shell = "egg_shell"
    other = "other"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    WasteCategory.vegetable: "Vegetables",
    WasteCategory.fruit: "Fruit",
    WasteCategory.dry_leaves: "Dry leaves",
    WasteCategory.paper_cardboard: "Paper/Cardboard",
    WasteCategory.egg_shell: "Egg shells",
    WasteCategory.other: "Other",
}


@dataclass(frozen=True, slots=True)
class SensorSnapshot:
    """One reading of every sensor channel at a point in time."""

    temperature: float
    humidity: float
    ph_level: float
    methane: float
    captured_at: datetime

    def __post_init__(self) -> None:
        for name in ("temperature", "humidity", "ph_level", "methane"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValidationError(f"Sensor reading {name!r} must be a number.")
            if not math.isfinite(value):
                raise ValidationError(f"Sensor reading {name!r} must be a finite number.")


@dataclass(frozen=True, slots=True)
class WasteLogEntry:
    """A single user-submitted waste entry."""

    id: str
    category: WasteCategory
    weight_kg: float
    logged_at: str
    notes: Optional[str] = None
