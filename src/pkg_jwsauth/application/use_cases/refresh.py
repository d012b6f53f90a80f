from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from ...domain.constants import RefreshState
from ...domain.entities import AuthFailure, SimpleIdentity
from ...domain.exceptions import MalformedTokenError
from ...domain.ports import IdentityLookup
from ..policies.refresh import RefreshPolicy
from ..token_manager import TokenManager
from .authenticate import IdentityFactory, build_identity

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RefreshTokenUseCase:
    """
    Application use case: re-issue a token that may have expired but is
    still inside the refresh window.

    Only the signature is verified here; `exp` is deliberately ignored,
    since refreshing is precisely for tokens that have expired. The new
    token is built from the identity's *current* claims (via
    `identity_lookup` when configured) and keeps the original `iat`, so
    the window is always measured from the original login.
    """

    token_manager: TokenManager
    refresh_policy: RefreshPolicy
    identity_factory: IdentityFactory = field(default=SimpleIdentity.from_claims)
    identity_lookup: Optional[IdentityLookup] = None

    def execute(self, credential: Optional[str]) -> Union[str, AuthFailure]:
        if not credential:
            return AuthFailure.missing()

        try:
            token = self.token_manager.load(credential)
        except MalformedTokenError as exc:
            logger.debug("Rejected malformed token on refresh: %s", exc)
            return AuthFailure.invalid_or_expired("Invalid token")

        if not self.token_manager.verify(token):
            logger.debug("Rejected token with bad signature on refresh")
            return AuthFailure.invalid_or_expired("Invalid token")

        identity = build_identity(self.identity_factory, token)
        if isinstance(identity, AuthFailure):
            return identity

        now = self.token_manager.claims_policy.clock.now()
        state = self.refresh_policy.evaluate(token.issued_at, now)
        if state is not RefreshState.REFRESHABLE:
            logger.info("Refresh denied for identity %r: %s", identity.id, state.value)
            return AuthFailure.refresh_expired()

        current = identity
        if self.identity_lookup is not None:
            current = self.identity_lookup.resolve(identity)
            if current is None:
                logger.info("Refresh denied: identity %r no longer resolves", identity.id)
                return AuthFailure.invalid_or_expired("Invalid token")

        return self.token_manager.new_token(
            current.token_claims(),
            issued_at=token.issued_at,
            now=now,
        )
