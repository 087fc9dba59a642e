from __future__ import annotations

import math
from datetime import date
from threading import Lock
from typing import Callable, List, Optional
from uuid import uuid4

from models.records import WasteCategory, WasteLogEntry
from services.errors import ValidationError

DATE_LABEL_FORMAT = "%d/%m/%Y"


class WasteLogStore:
    """Append-only, newest-first record of waste entries kept in memory."""

    def __init__(self, today: Optional[Callable[[], date]] = None) -> None:
        self._entries: List[WasteLogEntry] = []
        self._today = today or date.today
        self._lock = Lock()

    def append_entry(
        self,
        category: WasteCategory | str,
        weight_kg: float,
        notes: Optional[str] = None,
    ) -> WasteLogEntry:
        """Validate and record a new entry at the head of the log."""
        try:
            category = WasteCategory(category)
        except ValueError as exc:
            raise ValidationError(f"Unknown waste category {category!r}.") from exc

        if isinstance(weight_kg, bool) or not isinstance(weight_kg, (int, float)):
            raise ValidationError("Weight must be a number.")
        if not math.isfinite(weight_kg) or weight_kg <= 0:
            raise ValidationError("Weight must be a positive number of kilograms.")

        cleaned_notes = notes.strip() if notes else None
        entry = WasteLogEntry(
            id=str(uuid4()),
            category=category,
            weight_kg=float(weight_kg),
            logged_at=self._today().strftime(DATE_LABEL_FORMAT),
            notes=cleaned_notes or None,
        )
        with self._lock:
            self._entries.insert(0, entry)
        return entry

    def entries(self) -> list[WasteLogEntry]:
        """Return all entries, newest first."""

        with self._lock:
            return list(self._entries)

    def latest(self) -> Optional[WasteLogEntry]:
        with self._lock:
            return self._entries[0] if self._entries else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
