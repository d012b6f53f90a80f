from .pem import PemFileKeyProvider
from .static import StaticKeyProvider

__all__ = ["PemFileKeyProvider", "StaticKeyProvider"]
