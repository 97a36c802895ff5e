from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    def monotonic(self) -> float: ...


class PerfCounterClock:
    """Default high-resolution monotonic clock."""

    def monotonic(self) -> float:
        return time.perf_counter()
