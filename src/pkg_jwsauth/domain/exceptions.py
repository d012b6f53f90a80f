class AuthenticationError(Exception):
    """Base class for token authentication errors."""
    pass


class KeyLoadError(AuthenticationError):
    """Raised when key material is missing, unreadable or not a usable key."""
    pass


class MalformedTokenError(AuthenticationError):
    """Raised when a token string cannot be decoded into its three segments."""
    pass
