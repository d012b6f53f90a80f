from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ..domain.entities import AuthFailure
from ..domain.ports import Identity
from .token_manager import TokenManager
from .use_cases.authenticate import AuthenticateTokenUseCase
from .use_cases.issue import IdentityOrClaims, IssueTokenUseCase
from .use_cases.refresh import RefreshTokenUseCase


@dataclass(slots=True)
class Authenticator:
    """
    Framework-agnostic token lifecycle facade.

    Transport integrations (FastAPI, RPC servers, etc.) hand it the bearer
    string they extracted, and map the returned AuthFailure kinds to their
    own error responses.
    """

    token_manager: TokenManager
    issue_use_case: IssueTokenUseCase
    auth_use_case: AuthenticateTokenUseCase
    refresh_use_case: RefreshTokenUseCase

    def issue_token(self, subject: IdentityOrClaims) -> str:
        """Identity (or claims) -> signed token string, on explicit login."""
        return self.issue_use_case.execute(subject)

    def authenticate(self, credential: Optional[str]) -> Union[Identity, AuthFailure]:
        """Bearer credential -> Identity, or AuthFailure(missing | invalid_or_expired)."""
        return self.auth_use_case.execute(credential)

    def refresh(self, credential: Optional[str]) -> Union[str, AuthFailure]:
        """Possibly expired credential -> new token string, or AuthFailure."""
        return self.refresh_use_case.execute(credential)
