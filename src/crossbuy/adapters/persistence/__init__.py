# src/crossbuy/adapters/persistence/__init__.py
"""
Persistence Adapters - Data Storage

This package contains the repository interface and its implementations:
- Store / ActivityRecorder interfaces
- Thread-safe in-memory store
"""

from crossbuy.adapters.persistence.base import ActivityRecorder, Store
from crossbuy.adapters.persistence.memory_store import MemoryStore

__all__ = [
    "ActivityRecorder",
    "Store",
    "MemoryStore",
]
