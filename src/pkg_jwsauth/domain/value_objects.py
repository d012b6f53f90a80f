# src/pkg_jwsauth/domain/value_objects.py

from __future__ import annotations

import numbers
from typing import Any, Iterable, Mapping


def is_timestamp(value: Any) -> bool:
    """
    True for values usable as a unix timestamp claim.

    Booleans are numbers in Python but never a meaningful timestamp.
    """
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _normalize(values: Iterable[str] | None) -> list[str]:
    """
    Normalize an iterable of strings into a list.
    If a plain string is passed, treat it as a single-element collection.
    """
    if not values:
        return []
    if isinstance(values, str):
        return [values]
    return list(values)


def simple_token_claims(
        identity_id: Any,
        username: str | None = None,
        authorizations: Iterable[str] | None = None,
        info: Mapping[str, Any] | None = None,
        extra: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Default claim set for an identity with an id and a username.

    `authorizations` and `info` are only included when non-empty so that
    tokens for plain users stay small. `extra` claims pass through as-is,
    but can never override the named ones.
    """
    claims: dict[str, Any] = dict(extra or {})
    claims["id"] = identity_id
    claims["username"] = username

    authz = _normalize(authorizations)
    if authz:
        claims["authorizations"] = authz

    if info:
        claims["info"] = dict(info)

    return claims
