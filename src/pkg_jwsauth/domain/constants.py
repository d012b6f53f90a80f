from enum import Enum

EXPIRATION_CLAIM = "exp"
ISSUED_AT_CLAIM = "iat"
RESERVED_CLAIMS = frozenset({EXPIRATION_CLAIM, ISSUED_AT_CLAIM})

DEFAULT_ALGORITHM = "RS256"
DEFAULT_TOKEN_TYPE = "JWS"


class AuthFailureKind(Enum):
    MISSING = "missing"
    INVALID_OR_EXPIRED = "invalid_or_expired"
    REFRESH_EXPIRED = "refresh_expired"


class RefreshState(Enum):
    NOT_REFRESHABLE = "not_refreshable"
    REFRESHABLE = "refreshable"
    REFRESH_EXPIRED = "refresh_expired"
