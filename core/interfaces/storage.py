from abc import ABC, abstractmethod
from datetime import timedelta
from typing import BinaryIO

from core.models.storage import ListPage, ObjectHandle, ObjectHead

DEFAULT_POLL_INTERVAL = timedelta(seconds=5)


class BaseStorageBackend(ABC):
    """
    Abstract interface for object storage backends

    Kept as small and as close to the S3 primitives as possible so that
    everything built on top of it (ObjectStorage, pagination, existence
    polling) can be tested against an in-memory double.

    Implementations:
    - S3StorageBackend (AWS S3, LocalStack, MinIO)

    Error contract (see core.errors):
    - BackendNotFoundError: key absent (head_object, get_object, copy_object source)
    - BackendServiceError: everything else
    - BackendTimeoutError: wait_until_object_exists deadline passed
    """

    poll_interval: timedelta = DEFAULT_POLL_INTERVAL

    async def connect(self) -> None:
        """Initialize the underlying client (no-op by default)"""

    async def close(self) -> None:
        """Release the underlying client (no-op by default)"""

    async def __aenter__(self) -> "BaseStorageBackend":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @abstractmethod
    async def put_object(
        self,
        bucket: str,
        key: str,
        body: bytes | BinaryIO,
        metadata: dict[str, str] | None = None,
        content_type: str | None = None,
    ) -> None:
        """
        Store body at key, replacing any existing object

        Args:
            bucket: Bucket name
            key: Object key
            body: Content as bytes or a readable binary file object
            metadata: Optional user metadata
            content_type: Optional MIME type
        """

    @abstractmethod
    async def get_object(self, bucket: str, key: str) -> ObjectHandle:
        """
        Open an object for reading

        Returns:
            ObjectHandle whose body the caller must drain (handle.read())
        """

    @abstractmethod
    async def head_object(self, bucket: str, key: str) -> ObjectHead:
        """Fetch metadata and size without the body"""

    @abstractmethod
    async def copy_object(self, bucket: str, source_key: str, target_key: str) -> None:
        """Server-side copy within one bucket (source is left in place)"""

    @abstractmethod
    async def delete_object(self, bucket: str, key: str) -> None:
        """Delete key; deleting an absent key is not an error"""

    @abstractmethod
    async def generate_presigned_url(
        self, bucket: str, key: str, expires_in: timedelta
    ) -> str:
        """
        Sign a GET URL for key

        Does not check that the key exists.
        """

    @abstractmethod
    async def list_keys(
        self, bucket: str, prefix: str, continuation_token: str | None = None
    ) -> ListPage:
        """
        Fetch one page of keys starting with prefix

        Args:
            bucket: Bucket name
            prefix: Key prefix filter
            continuation_token: Cursor from the previous page, None for the first

        Returns:
            ListPage (see core.storage.pagination.list_all for the full listing)
        """

    async def wait_until_object_exists(
        self, bucket: str, key: str, timeout: timedelta
    ) -> None:
        """
        Block until key exists or timeout elapses

        Default: emulated bounded polling over head_object. Backends with a
        native waiter override this.

        Raises:
            BackendTimeoutError: Object did not appear in time
            BackendServiceError: A probe failed for a reason other than absence
        """
        from core.storage.existence import poll_until_exists

        await poll_until_exists(self, bucket, key, timeout, self.poll_interval)
