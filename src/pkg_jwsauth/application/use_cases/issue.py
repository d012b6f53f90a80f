from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Union

from ...domain.ports import Identity
from ..token_manager import TokenManager

logger = logging.getLogger(__name__)

IdentityOrClaims = Union[Identity, Mapping[str, Any]]


def claims_of(subject: IdentityOrClaims) -> Mapping[str, Any]:
    """Claims to sign for either an Identity or a plain claims mapping."""
    if isinstance(subject, Mapping):
        return subject
    return subject.token_claims()


@dataclass(slots=True)
class IssueTokenUseCase:
    """
    Application use case: sign a new token on explicit login.

    The identity has already been authenticated by the host application
    (password check etc.); this only stamps `iat`/`exp` and signs.
    """

    token_manager: TokenManager

    def execute(self, subject: IdentityOrClaims) -> str:
        claims = claims_of(subject)
        token = self.token_manager.new_token(claims)
        logger.debug("Issued token for identity %r", claims.get("id"))
        return token
