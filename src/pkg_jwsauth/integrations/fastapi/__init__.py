"""

from pkg_jwsauth.integrations.fastapi import create_fastapi_auth, create_token_router
from pkg_jwsauth.config import settings_from_env

fastapi_auth = create_fastapi_auth(settings_from_env())
app.include_router(create_token_router(fastapi_auth), prefix="/user")

get_current_identity = fastapi_auth.get_current_identity
get_optional_identity = fastapi_auth.get_optional_identity


"""
from __future__ import annotations

from typing import Optional

from .deps import FastAPIAuthentication, raise_auth_failure
from .routes import create_token_router
from .schemas import AuthToken
from .security import bearer_scheme, extract_token_from_request
from ..common.auth_factory import create_authenticator
from ...config.settings import JWSAuthSettings
from ...domain.ports import IdentityLookup


def create_fastapi_auth(
    settings: JWSAuthSettings,
    *,
    identity_lookup: Optional[IdentityLookup] = None,
) -> FastAPIAuthentication:
    """
    High-level helper for FastAPI apps:

    - Creates an Authenticator from settings
    - Wraps it in FastAPIAuthentication, exposing dependencies like:

        fastapi_auth.get_current_identity
        fastapi_auth.get_optional_identity
        fastapi_auth.refresh_token
    """
    authenticator = create_authenticator(settings, identity_lookup=identity_lookup)
    return FastAPIAuthentication(authenticator=authenticator)


__all__ = [
    "AuthToken",
    "FastAPIAuthentication",
    "bearer_scheme",
    "create_fastapi_auth",
    "create_token_router",
    "extract_token_from_request",
    "raise_auth_failure",
]
