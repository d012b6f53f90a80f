from __future__ import annotations

import os

from ..domain.constants import DEFAULT_ALGORITHM, DEFAULT_TOKEN_TYPE
from .settings import JWSAuthSettings


def settings_from_env(*, require_private_key: bool = True) -> JWSAuthSettings:
    """
    Build settings from JWSAUTH_* environment variables.

    Services that only verify tokens can pass `require_private_key=False`.
    An explicitly empty JWSAUTH_REFRESH_EXP disables refresh; leaving it
    unset keeps the default window.
    """
    public_key = os.getenv("JWSAUTH_PUBLIC_KEY")
    private_key = os.getenv("JWSAUTH_PRIVATE_KEY")

    required = [("JWSAUTH_PUBLIC_KEY", public_key)]
    if require_private_key:
        required.append(("JWSAUTH_PRIVATE_KEY", private_key))

    missing = [n for n, v in required if not v]
    if missing:
        raise RuntimeError(f"Missing JWS auth settings: {', '.join(missing)}")

    defaults = JWSAuthSettings()
    return JWSAuthSettings(
        public_key_path=public_key,
        private_key_path=private_key or None,
        private_key_passphrase=os.getenv("JWSAUTH_PRIVATE_KEY_PASSPHRASE") or None,
        algorithm=os.getenv("JWSAUTH_ALGORITHM") or DEFAULT_ALGORITHM,
        validity=os.getenv("JWSAUTH_EXP", defaults.validity),
        refresh_window=os.getenv("JWSAUTH_REFRESH_EXP", defaults.refresh_window),
        token_type=os.getenv("JWSAUTH_TOKEN_TYPE") or DEFAULT_TOKEN_TYPE,
    )
