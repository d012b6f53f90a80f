from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Mapping, Optional

from ...domain.constants import EXPIRATION_CLAIM, ISSUED_AT_CLAIM
from ...domain.ports import Clock
from ...domain.value_objects import is_timestamp


@dataclass(slots=True)
class ClaimsPolicy:
    """
    Stamps and evaluates the time-based claims (`iat`, `exp`).

    Every method takes an optional `now` so that callers evaluating several
    claims for one request can read the clock exactly once.
    """
    clock: Clock

    def with_expiration(
            self,
            payload: Mapping[str, Any],
            validity: Optional[timedelta],
            now: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Return a copy of `payload` with `exp = now + validity` (if any)."""
        result = dict(payload)
        if not validity:
            return result

        now = self.clock.now() if now is None else now
        result[EXPIRATION_CLAIM] = now + int(validity.total_seconds())
        return result

    def with_issued_at(
            self,
            payload: Mapping[str, Any],
            now: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Return a copy of `payload` with `iat = now`, unless it already has one."""
        result = dict(payload)
        if ISSUED_AT_CLAIM not in result:
            result[ISSUED_AT_CLAIM] = self.clock.now() if now is None else now
        return result

    def is_expired(self, payload: Mapping[str, Any], now: Optional[int] = None) -> bool:
        """
        True iff the payload carries `exp` and it lies in the past.

        A present but non-numeric `exp` counts as expired: the issuer
        asked for an expiry we cannot evaluate.
        """
        if EXPIRATION_CLAIM not in payload:
            return False

        exp = payload[EXPIRATION_CLAIM]
        if not is_timestamp(exp):
            return True

        now = self.clock.now() if now is None else now
        return exp < now
