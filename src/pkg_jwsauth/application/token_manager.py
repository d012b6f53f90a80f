from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Mapping, Optional

from ..domain.constants import DEFAULT_ALGORITHM, ISSUED_AT_CLAIM, RESERVED_CLAIMS
from ..domain.entities import Token
from ..domain.ports import KeyProvider, TokenCodec
from .policies.claims import ClaimsPolicy


@dataclass(slots=True)
class TokenManager:
    """
    Pre-configured interface for generating and verifying tokens with a
    fixed algorithm, key pair and validity period.

    Two levels of checking are offered on purpose:
      - `verify`:   signature only (used when refreshing expired tokens)
      - `is_valid`: signature AND not expired (used for authentication)
    """

    codec: TokenCodec
    key_provider: KeyProvider
    claims_policy: ClaimsPolicy
    algorithm: str = DEFAULT_ALGORITHM
    validity: Optional[timedelta] = None

    def load(self, token: str) -> Token:
        """Decode a token string. Raises MalformedTokenError."""
        return self.codec.decode(token)

    def verify(self, token: Token) -> bool:
        return self.codec.verify(token, self.key_provider.get_public_key(), self.algorithm)

    def is_valid(self, token: Token, now: Optional[int] = None) -> bool:
        if not self.verify(token):
            return False
        return not self.claims_policy.is_expired(token.payload, now)

    def new_token(
            self,
            claims: Mapping[str, Any],
            issued_at: Optional[int] = None,
            now: Optional[int] = None,
    ) -> str:
        """
        Sign `claims` with `iat` and `exp` stamped.

        Any `iat`/`exp` in `claims` is discarded. `issued_at` carries the
        original issue time over when re-issuing; otherwise `iat = now`.
        """
        now = self.claims_policy.clock.now() if now is None else now

        payload: dict[str, Any] = {
            k: v for k, v in claims.items() if k not in RESERVED_CLAIMS
        }
        if issued_at is not None:
            payload[ISSUED_AT_CLAIM] = issued_at

        payload = self.claims_policy.with_issued_at(payload, now)
        payload = self.claims_policy.with_expiration(payload, self.validity, now)

        return self.codec.encode(payload, self.key_provider.get_private_key(), self.algorithm)
