"""Application state and the commands exposed to the presentation layer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from datastore.sensor_state import SensorState
from datastore.waste_log import WasteLogStore
from models.records import SensorSnapshot, WasteCategory, WasteLogEntry
from services.advisory import AdvisoryClient, AdvisoryOutcome, GeminiTransport
from services.aggregator import WasteAggregator, WasteSummary
from services.analysis import AnalysisState, AnalysisStateCache
from services.sensors import ChannelReading, SensorRefresher, channel_readings, generate_snapshot
from settings import DEFAULT_CLIMATE_LABEL, get_settings

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Session state owned by one controller."""

    sensors: SensorState
    waste_log: WasteLogStore
    analysis: AnalysisStateCache


class CompostController:
    """Coordinates sensor state, the waste log and advisory analysis."""

    def __init__(
        self,
        state: AppState,
        advisory: AdvisoryClient,
        aggregator: Optional[WasteAggregator] = None,
        climate_label: str = DEFAULT_CLIMATE_LABEL,
        refresh_interval: float = 5.0,
    ) -> None:
        self.state = state
        self.advisory = advisory
        self.aggregator = aggregator or WasteAggregator()
        self.climate_label = climate_label
        self.refresher = SensorRefresher(state.sensors, interval=refresh_interval)

    def current_snapshot(self) -> SensorSnapshot:
        return self.state.sensors.current

    def snapshot_history(self) -> list[SensorSnapshot]:
        return self.state.sensors.history()

    def channel_readings(self) -> list[ChannelReading]:
        return channel_readings(self.current_snapshot())

    def refresh_snapshot(self) -> SensorSnapshot:
        return self.refresher.tick()

    def entries(self) -> list[WasteLogEntry]:
        return self.state.waste_log.entries()

    def waste_summary(self) -> WasteSummary:
        return self.aggregator.summarize(self.entries())

    def analysis_state(self) -> AnalysisState:
        return self.state.analysis.state()

    def append_entry(
        self,
        category: WasteCategory | str,
        weight_kg: float,
        notes: Optional[str] = None,
    ) -> WasteLogEntry:
        entry = self.state.waste_log.append_entry(category, weight_kg, notes=notes)
        logger.info(
            "Waste entry recorded",
            extra={
                "entry_id": entry.id,
                "category": entry.category.value,
                "weight_kg": entry.weight_kg,
            },
        )
        return entry

    async def refresh_analysis(self, climate_label: Optional[str] = None) -> AnalysisState:
        """Run one advisory request against the current snapshot and log head."""
        cache = self.state.analysis
        generation = cache.begin()
        outcome: Optional[AdvisoryOutcome] = None
        try:
            outcome = await self.advisory.analyze_outcome(
                self.current_snapshot(),
                self.entries(),
                climate_label or self.climate_label,
                generation=generation,
            )
        finally:
            if outcome is None:
                cache.abandon(generation)
        cache.complete(generation, outcome.result, used_fallback=outcome.used_fallback)
        return cache.state()

    async def ensure_analysis(self) -> AnalysisState:
        """Analyse once when no result exists yet and nothing is in flight."""
        current = self.analysis_state()
        if current.result is not None or current.in_progress:
            return current
        return await self.refresh_analysis()

    async def shutdown(self) -> None:
        await self.refresher.stop()


@lru_cache
def build_default_controller() -> CompostController:
    """Factory that wires the controller from settings."""
    settings = get_settings()
    state = AppState(
        sensors=SensorState(generate_snapshot(), history_size=settings.sensor_history_size),
        waste_log=WasteLogStore(),
        analysis=AnalysisStateCache(),
    )
    advisory = AdvisoryClient(
        transport=GeminiTransport(api_key=settings.advisory_api_key),
        model=settings.advisory_model,
        timeout=settings.advisory_timeout,
    )
    return CompostController(
        state=state,
        advisory=advisory,
        climate_label=settings.climate_label,
        refresh_interval=settings.sensor_refresh_seconds,
    )
