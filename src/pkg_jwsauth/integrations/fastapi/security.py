from __future__ import annotations

from typing import Optional

from fastapi import Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

# Expose this so apps can plug it into dependencies if they want OpenAPI security
bearer_scheme = HTTPBearer(auto_error=False)

DEFAULT_COOKIE_NAME = "access_token"


def _bearer_from_header(value: Optional[str]) -> Optional[str]:
    """`Authorization: Bearer <token>` -> token. The scheme is case-insensitive."""
    if not value:
        return None
    scheme, _, token = value.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def extract_token_from_request(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = None,
    cookie_name: str = DEFAULT_COOKIE_NAME,
) -> Optional[str]:
    """
    Find the bearer credential for this request, in order of preference:

      1. credentials already parsed by `bearer_scheme`
      2. the raw Authorization header (routes not using `bearer_scheme`)
      3. the `cookie_name` cookie

    Returns None when the client sent nothing. Whether a credential is
    missing or merely bad is decided by the Authenticator, not here.
    """
    if credentials is not None and (credentials.credentials or "").strip():
        return credentials.credentials.strip()

    return (
        _bearer_from_header(request.headers.get("Authorization"))
        or request.cookies.get(cookie_name)
        or None
    )
