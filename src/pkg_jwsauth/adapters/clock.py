from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import timedelta


class SystemClock:
    """Wall clock, truncated to whole seconds like the `iat`/`exp` claims."""

    def now(self) -> int:
        return int(time.time())


@dataclass(slots=True)
class FixedClock:
    """
    Manually driven clock for tests and offline tooling.
    """
    timestamp: int

    def now(self) -> int:
        return self.timestamp

    def advance(self, delta: timedelta | int) -> None:
        if isinstance(delta, timedelta):
            delta = int(delta.total_seconds())
        self.timestamp += delta
