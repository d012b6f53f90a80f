from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Optional

from ...domain.constants import RefreshState
from ...domain.ports import Clock
from ...domain.value_objects import is_timestamp


@dataclass(slots=True)
class RefreshPolicy:
    """
    Decides whether an (expired) token may be silently renewed.

    Renewal is measured from the original issue time: a token is
    refreshable while `iat >= now - refresh_window` (inclusive). Without a
    configured window, or without a usable `iat`, nothing is refreshable.
    """
    clock: Clock
    refresh_window: Optional[timedelta] = None

    def evaluate(self, issued_at: Any, now: Optional[int] = None) -> RefreshState:
        if not self.refresh_window or not is_timestamp(issued_at):
            return RefreshState.NOT_REFRESHABLE

        now = self.clock.now() if now is None else now
        earliest_refreshable = now - int(self.refresh_window.total_seconds())

        if issued_at >= earliest_refreshable:
            return RefreshState.REFRESHABLE
        return RefreshState.REFRESH_EXPIRED

    def is_refreshable(self, issued_at: Any, now: Optional[int] = None) -> bool:
        return self.evaluate(issued_at, now) is RefreshState.REFRESHABLE
