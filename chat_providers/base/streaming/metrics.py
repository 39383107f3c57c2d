"""Per-request stream metrics."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class StreamMetrics:
    """Timing and count of deltas emitted for one request.

    ``emitted`` counts deltas handed to the caller; times are milliseconds
    relative to ``started``.
    """

    started: float = field(default_factory=time.perf_counter)
    emitted: int = 0
    time_to_first_delta_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None

    def record_delta(self) -> bool:
        """Count one emitted delta; returns True for the first one."""
        self.emitted += 1
        if self.time_to_first_delta_ms is None:
            self.time_to_first_delta_ms = (time.perf_counter() - self.started) * 1000.0
            return True
        return False

    def finish(self) -> float:
        self.total_duration_ms = (time.perf_counter() - self.started) * 1000.0
        return self.total_duration_ms


__all__ = ["StreamMetrics"]
