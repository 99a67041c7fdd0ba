"""
Persistence adapters for LearnHub.

- base: the storage contract
- memory: map-backed store for tests and demos
- database: SQLAlchemy-backed durable store
"""

from functools import lru_cache

from learnhub.core.config import settings
from .base import Storage
from .database import DatabaseStorage
from .memory import MemoryStorage


@lru_cache()
def get_storage() -> Storage:
    """
    Dependency returning the configured storage adapter (one per process).
    """
    if settings.uses_memory_storage:
        return MemoryStorage()

    from learnhub.core.database import SessionLocal

    return DatabaseStorage(SessionLocal)


__all__ = ["Storage", "DatabaseStorage", "MemoryStorage", "get_storage"]
