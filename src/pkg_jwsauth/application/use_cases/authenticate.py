from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Union

from ...domain.constants import EXPIRATION_CLAIM
from ...domain.entities import AuthFailure, SimpleIdentity, Token
from ...domain.exceptions import MalformedTokenError
from ...domain.ports import Identity
from ..token_manager import TokenManager

logger = logging.getLogger(__name__)

IdentityFactory = Callable[[Mapping[str, Any]], Identity]


def build_identity(
        factory: IdentityFactory,
        token: Token,
) -> Union[Identity, AuthFailure]:
    """
    Payload -> Identity, with `exp` stripped.

    A payload the factory cannot make sense of is reported as an invalid
    token rather than leaking the factory's exception to the caller.
    """
    claims = {k: v for k, v in token.payload.items() if k != EXPIRATION_CLAIM}
    try:
        return factory(claims)
    except (TypeError, ValueError, KeyError) as exc:
        logger.warning("Token payload does not describe an identity: %s", exc)
        return AuthFailure.invalid_or_expired()


@dataclass(slots=True)
class AuthenticateTokenUseCase:
    """
    Application use case:
    - Decode a bearer credential via the TokenManager
    - Check signature and expiry
    - Map the payload -> Identity

    Never raises for bad input: every client-side problem becomes an
    AuthFailure. Only configuration errors (KeyLoadError) propagate.
    """

    token_manager: TokenManager
    identity_factory: IdentityFactory = field(default=SimpleIdentity.from_claims)

    def execute(self, credential: Optional[str]) -> Union[Identity, AuthFailure]:
        if not credential:
            return AuthFailure.missing()

        try:
            token = self.token_manager.load(credential)
        except MalformedTokenError as exc:
            logger.debug("Rejected malformed token: %s", exc)
            return AuthFailure.invalid_or_expired()

        if not self.token_manager.is_valid(token):
            logger.debug("Rejected invalid or expired token")
            return AuthFailure.invalid_or_expired()

        return build_identity(self.identity_factory, token)
