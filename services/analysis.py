"""Holds the latest advisory result for readers of the application state."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from threading import Lock
from typing import Optional

from app.schemas import AdvisoryResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisState:
    result: Optional[AdvisoryResult]
    in_progress: bool
    generation: int
    updated_at: Optional[datetime] = None
    used_fallback: bool = False


class AnalysisStateCache:
    """Single-slot cache with request sequencing.

    Every request takes a monotonically increasing generation from ``begin``.
    ``complete`` keeps a result only when its generation is at least the last
    accepted one, so a slow response never overwrites a newer answer.
    """

    def __init__(self) -> None:
        self._result: Optional[AdvisoryResult] = None
        self._used_fallback = False
        self._updated_at: Optional[datetime] = None
        self._issued = 0
        self._accepted = 0
        self._outstanding = 0
        self._lock = Lock()

    def begin(self) -> int:
        with self._lock:
            self._issued += 1
            self._outstanding += 1
            return self._issued

    def complete(
        self,
        generation: int,
        result: AdvisoryResult,
        used_fallback: bool = False,
    ) -> bool:
        with self._lock:
            self._outstanding = max(self._outstanding - 1, 0)
            if generation < self._accepted:
                logger.info(
                    "Discarding stale advisory result",
                    extra={"generation": generation, "reason": f"newer generation {self._accepted} accepted"},
                )
                return False
            self._result = result
            self._used_fallback = used_fallback
            self._accepted = generation
            self._updated_at = datetime.now(timezone.utc)
            return True

    def abandon(self, generation: int) -> None:
        """Release a request that finished without producing any result."""
        with self._lock:
            self._outstanding = max(self._outstanding - 1, 0)
        logger.info("Advisory request abandoned", extra={"generation": generation})

    def state(self) -> AnalysisState:
        with self._lock:
            return AnalysisState(
                result=self._result,
                in_progress=self._outstanding > 0,
                generation=self._accepted,
                updated_at=self._updated_at,
                used_fallback=self._used_fallback,
            )
