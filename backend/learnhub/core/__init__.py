"""
Core module for the LearnHub backend.

- config: settings loaded from the environment
- database: engine, session factory and declarative base
- security: password hashing and bearer tokens
- exceptions, permissions: error taxonomy and access policy (import
  them from their own modules)
"""

from .config import settings
from .database import engine, SessionLocal
from .security import (
    create_access_token,
    get_password_hash,
    username_from_token,
    verify_password,
)

__all__ = [
    "settings",
    "engine",
    "SessionLocal",
    "create_access_token",
    "get_password_hash",
    "username_from_token",
    "verify_password",
]
