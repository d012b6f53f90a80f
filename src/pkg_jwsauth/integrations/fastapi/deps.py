from __future__ import annotations

from dataclasses import dataclass
from typing import NoReturn, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials

from .schemas import AuthToken
from .security import DEFAULT_COOKIE_NAME, bearer_scheme, extract_token_from_request
from ...application.authenticator import Authenticator
from ...domain.constants import AuthFailureKind
from ...domain.entities import AuthFailure
from ...domain.ports import Identity

_BEARER_ERRORS = {
    AuthFailureKind.MISSING: 'Bearer',
    AuthFailureKind.INVALID_OR_EXPIRED: 'Bearer error="invalid_token"',
    AuthFailureKind.REFRESH_EXPIRED: 'Bearer error="invalid_token"',
}


def raise_auth_failure(failure: AuthFailure) -> NoReturn:
    """AuthFailure -> HTTP 401, keeping the failure kind visible to clients."""
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": failure.kind.value, "message": failure.message},
        headers={"WWW-Authenticate": _BEARER_ERRORS[failure.kind]},
    )


@dataclass(slots=True)
class FastAPIAuthentication:
    """
    FastAPI integration for pkg_jwsauth, built on top of the
    framework-agnostic Authenticator facade.
    """

    authenticator: Authenticator
    cookie_name: str = DEFAULT_COOKIE_NAME

    # ------------------------------------------------------------------ #
    # Base dependencies
    # ------------------------------------------------------------------ #

    async def get_current_identity(
            self,
            request: Request,
            credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    ) -> Identity:
        """Dependency: Require authentication."""
        token = extract_token_from_request(request, credentials, self.cookie_name)
        result = self.authenticator.authenticate(token)
        if isinstance(result, AuthFailure):
            raise_auth_failure(result)
        return result

    async def get_optional_identity(
            self,
            request: Request,
            credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    ) -> Optional[Identity]:
        """Dependency: Optional authentication; bad or missing tokens -> anonymous."""
        token = extract_token_from_request(request, credentials, self.cookie_name)
        result = self.authenticator.authenticate(token)
        if isinstance(result, AuthFailure):
            return None
        return result

    async def refresh_token(
            self,
            request: Request,
            credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    ) -> AuthToken:
        """Endpoint: exchange a (possibly expired) refreshable token for a new one."""
        token = extract_token_from_request(request, credentials, self.cookie_name)
        result = self.authenticator.refresh(token)
        if isinstance(result, AuthFailure):
            raise_auth_failure(result)
        return AuthToken(token=result)
