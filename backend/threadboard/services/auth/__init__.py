from .guard import AccessGuard
from .service import AuthService

__all__ = ["AccessGuard", "AuthService"]
