"""Auth package: token store and password session."""
from storefront.services.records import AuthStore
from .session import AuthSession, AuthResult

__all__ = ["AuthStore", "AuthSession", "AuthResult"]
