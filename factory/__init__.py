"""Factory package - Explicit construction of storage backends"""

from .client_factory import create_storage_backend, open_object_storage

__all__ = [
    "create_storage_backend",
    "open_object_storage",
]
