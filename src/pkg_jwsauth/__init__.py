"""
pkg_jwsauth

Stateless JWS session tokens: issue, verify and selectively refresh
signed tokens without a server-side session store. Framework integrations
(FastAPI, ...) sit on top of a framework-agnostic core.
"""

__version__ = "0.1.0"

from .domain.entities import AuthFailure, SimpleIdentity, Token
from .domain.constants import AuthFailureKind, RefreshState
from .domain.exceptions import (
    AuthenticationError,
    KeyLoadError,
    MalformedTokenError,
)
from .domain.value_objects import simple_token_claims
from .domain.ports import Clock, Identity, IdentityLookup, KeyProvider, TokenCodec

from .application.authenticator import Authenticator
from .application.token_manager import TokenManager
from .application.policies.claims import ClaimsPolicy
from .application.policies.refresh import RefreshPolicy

from .adapters.clock import FixedClock, SystemClock
from .adapters.jose.codec import JWSTokenCodec
from .adapters.keys.pem import PemFileKeyProvider
from .adapters.keys.static import StaticKeyProvider

from .config.durations import parse_duration
from .config.env import settings_from_env
from .config.settings import JWSAuthSettings
from .integrations.common.auth_factory import create_authenticator

__all__ = [
    "__version__",
    # domain core
    "Token",
    "AuthFailure",
    "AuthFailureKind",
    "RefreshState",
    "SimpleIdentity",
    "simple_token_claims",
    "Identity",
    "IdentityLookup",
    "KeyProvider",
    "TokenCodec",
    "Clock",
    # exceptions
    "AuthenticationError",
    "KeyLoadError",
    "MalformedTokenError",
    # application
    "Authenticator",
    "TokenManager",
    "ClaimsPolicy",
    "RefreshPolicy",
    # adapters
    "JWSTokenCodec",
    "PemFileKeyProvider",
    "StaticKeyProvider",
    "SystemClock",
    "FixedClock",
    # config
    "JWSAuthSettings",
    "parse_duration",
    "settings_from_env",
    "create_authenticator",
]
