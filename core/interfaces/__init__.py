"""Interfaces module - Abstract base classes for cloud services"""

from .storage import BaseStorageBackend

__all__ = [
    "BaseStorageBackend",
]
