from __future__ import annotations

from pydantic import BaseModel


class AuthToken(BaseModel):
    """A single token string, as returned by login and refresh endpoints."""

    token: str
