"""
Storage error taxonomy

Two layers:
- Backend errors: raised by BaseStorageBackend implementations, transport-neutral
- Storage errors: raised by ObjectStorage and the core algorithms, one class per kind

Backend errors never leak through the facade; they are always wrapped in a
StorageError and kept as its cause.
"""


# ============================================
# BACKEND ERRORS (raised below the capability seam)
# ============================================
class BackendError(Exception):
    """Base class for failures reported by a storage backend"""


class BackendNotFoundError(BackendError):
    """The requested key (or copy source) does not exist"""


class BackendServiceError(BackendError):
    """Any other backend failure: permissions, throttling, network, unexpected response"""


class BackendTimeoutError(BackendError):
    """An object did not appear before the wait deadline"""


# ============================================
# STORAGE ERRORS (raised by the core)
# ============================================
class StorageError(Exception):
    """
    Base class for errors surfaced to callers of the storage core

    Attributes:
        operation: What the core was doing (e.g. "put serializable")
        cause: Underlying exception, also chained as __cause__
        user_visible: Whether the message is safe to show to end users
    """

    message = "Object storage error"
    user_visible = False

    def __init__(self, operation: str, cause: BaseException | None = None):
        self.operation = operation
        self.cause = cause
        super().__init__(self.message, operation, cause)

    def __str__(self) -> str:
        if self.cause is None:
            return f"{self.message}: {self.operation}"
        return f"{self.message}: {self.operation} ({self.cause})"


class ObjectNotFoundError(StorageError):
    """Requested key does not exist (only raised by read-style operations)"""

    message = "Requested item does not exist"
    user_visible = True


class CalloutError(StorageError):
    """The call to the storage service failed"""

    message = "Object storage callout failed"


class InvalidOperationError(StorageError):
    """The caller supplied something the core cannot send to the backend"""

    message = "Invalid object storage operation"


class ItemParsingError(StorageError):
    """The stored body could not be interpreted as the expected value"""

    message = "Object storage item parsing error"


__all__ = [
    "BackendError",
    "BackendNotFoundError",
    "BackendServiceError",
    "BackendTimeoutError",
    "StorageError",
    "ObjectNotFoundError",
    "CalloutError",
    "InvalidOperationError",
    "ItemParsingError",
]
