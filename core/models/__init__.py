"""Models module - Pydantic data models"""

from .storage import ByteStream, ListPage, ObjectHandle, ObjectHead

__all__ = [
    "ByteStream",
    "ObjectHead",
    "ObjectHandle",
    "ListPage",
]
