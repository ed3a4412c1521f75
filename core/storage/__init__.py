"""
Object storage core

Backend-agnostic operations on top of core.interfaces.storage.BaseStorageBackend
"""

from core.storage.existence import (
    head_if_exists,
    key_exists,
    poll_until_exists,
    wait_until_key_exists,
)
from core.storage.object_storage import ObjectStorage
from core.storage.pagination import list_all
from core.utils.keys import date_partitioned_unique_key

__all__ = [
    "ObjectStorage",
    "date_partitioned_unique_key",
    "head_if_exists",
    "key_exists",
    "list_all",
    "poll_until_exists",
    "wait_until_key_exists",
]
