from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .constants import AuthFailureKind, EXPIRATION_CLAIM, ISSUED_AT_CLAIM
from .value_objects import is_timestamp, simple_token_claims


@dataclass(frozen=True, slots=True)
class Token:
    """
    A decoded, not necessarily verified, JWS.

    `signing_input` holds the exact `header.payload` bytes as they appeared
    in the transport string; signatures are always checked against these
    bytes, never against a re-serialization of `header`/`payload`.
    `encoded` is the compact string the token was decoded from.
    """
    header: Mapping[str, Any]
    payload: Mapping[str, Any]
    signature: bytes
    signing_input: bytes
    encoded: str = ""

    @property
    def algorithm(self) -> Optional[str]:
        return self.header.get("alg")

    @property
    def expires_at(self) -> Any:
        return self.payload.get(EXPIRATION_CLAIM)

    @property
    def issued_at(self) -> Any:
        return self.payload.get(ISSUED_AT_CLAIM)


@dataclass(frozen=True, slots=True)
class AuthFailure:
    """
    Expected, user-facing authentication outcome.

    Returned (not raised) by the Authenticator so the transport layer can
    map each kind to its own protocol error.
    """
    kind: AuthFailureKind
    message: str = ""

    @classmethod
    def missing(cls) -> AuthFailure:
        return cls(AuthFailureKind.MISSING, "Missing auth")

    @classmethod
    def invalid_or_expired(cls, message: str = "Invalid or expired token") -> AuthFailure:
        return cls(AuthFailureKind.INVALID_OR_EXPIRED, message)

    @classmethod
    def refresh_expired(cls) -> AuthFailure:
        return cls(AuthFailureKind.REFRESH_EXPIRED, "Token expired; user must reauthenticate")


@dataclass(slots=True)
class SimpleIdentity:
    """
    Default identity: an id, a username, optional authorizations and info.

    Application identity types can hold one of these and delegate
    `token_claims()` to it, or call `simple_token_claims()` directly.
    Unknown payload claims are kept in `extra` and written back unchanged.
    """
    id: Any
    username: Optional[str] = None
    authorizations: List[str] = field(default_factory=list)
    info: Dict[str, Any] = field(default_factory=dict)
    issued_at: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> SimpleIdentity:
        data = dict(claims)
        data.pop(EXPIRATION_CLAIM, None)
        iat = data.pop(ISSUED_AT_CLAIM, None)

        return cls(
            id=data.pop("id", None),
            username=data.pop("username", None),
            authorizations=list(data.pop("authorizations", None) or []),
            info=dict(data.pop("info", None) or {}),
            issued_at=iat if is_timestamp(iat) else None,
            extra=data,
        )

    def token_claims(self) -> Dict[str, Any]:
        return simple_token_claims(
            self.id,
            username=self.username,
            authorizations=self.authorizations,
            info=self.info,
            extra=self.extra,
        )
