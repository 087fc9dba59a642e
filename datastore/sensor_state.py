from __future__ import annotations

from collections import deque
from threading import Lock
from typing import Deque

from models.records import SensorSnapshot


class SensorState:
    """Current sensor snapshot plus a bounded window of recent ones."""

    def __init__(self, initial: SensorSnapshot, history_size: int = 60) -> None:
        if history_size <= 0:
            raise ValueError("history_size must be positive.")
        self._current = initial
        self._history: Deque[SensorSnapshot] = deque([initial], maxlen=history_size)
        self._lock = Lock()

    @property
    def current(self) -> SensorSnapshot:
        with self._lock:
            return self._current

    def replace(self, snapshot: SensorSnapshot) -> None:
        with self._lock:
            self._current = snapshot
            self._history.append(snapshot)

    def history(self) -> list[SensorSnapshot]:
        """Snapshots oldest first, ending with the current one."""

        with self._lock:
            return list(self._history)
