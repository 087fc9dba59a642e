"""Aggregation logic for the waste log."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable

from models.records import WasteCategory, WasteLogEntry


@dataclass
class WasteSummary:
    """Totals for a batch of waste entries."""

    entry_count: int = 0
    total_weight_kg: float = 0.0
    per_category_weight: Dict[WasteCategory, float] = field(default_factory=dict)
    per_category_count: Dict[WasteCategory, int] = field(default_factory=dict)

    def share(self, category: WasteCategory) -> float:
        """Fraction of the total weight contributed by ``category``."""
        if not self.total_weight_kg:
            return 0.0
        return self.per_category_weight.get(category, 0.0) / self.total_weight_kg


class WasteAggregator:
    """Pure aggregation component that can be unit tested in isolation."""

    def summarize(self, entries: Iterable[WasteLogEntry]) -> WasteSummary:
        summary = WasteSummary()

        for entry in entries:
            summary.entry_count += 1
            summary.total_weight_kg += entry.weight_kg
            summary.per_category_weight[entry.category] = (
                summary.per_category_weight.get(entry.category, 0.0) + entry.weight_kg
            )
            summary.per_category_count[entry.category] = (
                summary.per_category_count.get(entry.category, 0) + 1
            )

        return summary
