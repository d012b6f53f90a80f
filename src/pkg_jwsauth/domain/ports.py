from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from .entities import Token


class KeyProvider(Protocol):
    """
    Port for key material.

    Implementations load lazily and cache for their own lifetime. Keys are
    opaque to callers; whatever is returned must be accepted by the
    TokenCodec for the configured algorithm.
    """

    def get_public_key(self) -> Any:
        """Key used to verify signatures. Raises KeyLoadError."""
        ...

    def get_private_key(self) -> Any:
        """Key used to sign tokens. Raises KeyLoadError."""
        ...


class TokenCodec(Protocol):
    """
    Port for the three-segment signed token structure.
    """

    def decode(self, token: str) -> Token:
        """Split and decode, without verifying. Raises MalformedTokenError."""
        ...

    def verify(self, token: Token, public_key: Any, algorithm: str) -> bool:
        """Check the signature, pinned to `algorithm`."""
        ...

    def encode(self, claims: Mapping[str, Any], private_key: Any, algorithm: str) -> str:
        """Sign `claims` and return the transport string."""
        ...


class Clock(Protocol):
    """Single source of "now" as an integer unix timestamp."""

    def now(self) -> int:
        ...


@runtime_checkable
class Identity(Protocol):
    """
    Application principal carried by a token.

    `token_claims()` is the explicit claim-extraction contract: it returns
    the claims to sign (never `iat`/`exp`, those are stamped at issuance).
    `issued_at` is the `iat` of the token the identity was read from, or
    None for identities that did not come from a token.
    """

    @property
    def id(self) -> Any:
        ...

    @property
    def issued_at(self) -> Optional[int]:
        ...

    def token_claims(self) -> Mapping[str, Any]:
        ...


class IdentityLookup(Protocol):
    """
    Port for resolving an identity's current state at refresh time.

    Returns the up-to-date identity (authorizations and info may have
    changed since the token was issued), or None when the principal no
    longer exists or is disabled.
    """

    def resolve(self, identity: Identity) -> Optional[Identity]:
        ...
