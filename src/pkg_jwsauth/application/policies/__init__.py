from .claims import ClaimsPolicy
from .refresh import RefreshPolicy

__all__ = ["ClaimsPolicy", "RefreshPolicy"]
