"""
Services Module
"""
from .auth import AuthService, AuthSession

__all__ = ["AuthService", "AuthSession"]
