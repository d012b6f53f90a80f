from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ...domain.exceptions import KeyLoadError


@dataclass(frozen=True, slots=True)
class StaticKeyProvider:
    """
    KeyProvider over keys that are already in memory.

    Useful when keys come from a secrets manager rather than files, and for
    symmetric algorithms where the same secret signs and verifies.
    """
    public_key: Any = None
    private_key: Any = None

    @classmethod
    def shared_secret(cls, secret: str | bytes) -> StaticKeyProvider:
        return cls(public_key=secret, private_key=secret)

    def get_public_key(self) -> Any:
        if self.public_key is None:
            raise KeyLoadError("No public key configured")
        return self.public_key

    def get_private_key(self) -> Any:
        if self.private_key is None:
            raise KeyLoadError("No private key configured")
        return self.private_key
