from __future__ import annotations

from fastapi import APIRouter

from .deps import FastAPIAuthentication
from .schemas import AuthToken


def create_token_router(
    fastapi_auth: FastAPIAuthentication,
    *,
    path: str = "/refresh-token",
) -> APIRouter:
    """
    Router with the token refresh endpoint.

    Login is left to the host app, since it owns password checks; it
    returns `AuthToken(token=authenticator.issue_token(user))`.
    """
    router = APIRouter(tags=["auth"])
    router.add_api_route(
        path,
        fastapi_auth.refresh_token,
        methods=["POST"],
        response_model=AuthToken,
    )
    return router
