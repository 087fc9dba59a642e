"""Synthetic sensor readings and the timer that keeps them fresh."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, Tuple

from datastore.sensor_state import SensorState
from models.records import SensorSnapshot

logger = logging.getLogger(__name__)

# Simulation parameters: plausible thermophilic compost values with jitter.
SYNTHETIC_RANGES: Dict[str, Tuple[float, float]] = {
    "temperature": (42.0, 47.0),
    "humidity": (55.0, 65.0),
    "ph_level": (6.25, 6.75),
    "methane": (150.0, 170.0),
}

OPTIMAL_RANGES: Dict[str, Tuple[float, float]] = {
    "temperature": (40.0, 60.0),
    "humidity": (40.0, 60.0),
    "ph_level": (6.0, 7.5),
    "methane": (0.0, 200.0),
}

_CHANNEL_UNITS = {
    "temperature": "°C",
    "humidity": "%",
    "ph_level": "pH",
    "methane": "ppm",
}


@dataclass(frozen=True)
class ChannelReading:
    """A single channel of a snapshot annotated with its comfort range."""

    name: str
    value: float
    unit: str
    optimal_min: float
    optimal_max: float

    @property
    def optimal(self) -> bool:
        return self.optimal_min <= self.value <= self.optimal_max


def generate_snapshot(
    rng: Optional[random.Random] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> SensorSnapshot:
    source = rng or random
    now = clock() if clock else datetime.now(timezone.utc)
    values = {name: source.uniform(low, high) for name, (low, high) in SYNTHETIC_RANGES.items()}
    return SensorSnapshot(captured_at=now, **values)


def channel_readings(snapshot: SensorSnapshot) -> list[ChannelReading]:
    readings = []
    for name, (low, high) in OPTIMAL_RANGES.items():
        readings.append(
            ChannelReading(
                name=name,
                value=getattr(snapshot, name),
                unit=_CHANNEL_UNITS[name],
                optimal_min=low,
                optimal_max=high,
            )
        )
    return readings


class SensorRefresher:
    """Replaces the stored snapshot on a fixed cadence inside the event loop."""

    def __init__(
        self,
        state: SensorState,
        interval: float = 5.0,
        generator: Callable[[], SensorSnapshot] = generate_snapshot,
    ) -> None:
        if interval <= 0:
            raise ValueError("Refresh interval must be positive.")
        self.state = state
        self.interval = interval
        self._generator = generator
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def tick(self) -> SensorSnapshot:
        snapshot = self._generator()
        self.state.replace(snapshot)
        return snapshot

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info("Sensor refresher started (interval=%ss)", self.interval)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Sensor refresher stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.tick()
