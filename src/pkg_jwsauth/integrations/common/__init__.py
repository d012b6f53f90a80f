from .auth_factory import create_authenticator

__all__ = ["create_authenticator"]
