"""
ObjectStorage - High-level operations on one bucket

Wraps a BaseStorageBackend and a bucket name. Stateless beyond those two,
so a single instance can be shared by any number of concurrent tasks.

Error mapping (see core.errors):
- ObjectNotFoundError: only from read-style calls (get_bytes, get_serializable)
- CalloutError: the backend call failed
- InvalidOperationError: rejected before reaching the backend
- ItemParsingError: body fetched but could not be parsed

Architecture:
    ObjectStorage
        ├─ core.storage.serialization (JSON round-trip)
        ├─ core.storage.existence (HEAD classification, bounded wait)
        ├─ core.storage.pagination (continuation-token listing)
        └─ BaseStorageBackend (S3StorageBackend in production)
"""

import logging
from datetime import timedelta
from pathlib import Path
from typing import Any, TypeVar

from core.errors import (
    BackendError,
    BackendNotFoundError,
    CalloutError,
    InvalidOperationError,
    ObjectNotFoundError,
)
from core.interfaces.storage import BaseStorageBackend
from core.storage import existence
from core.storage.pagination import list_all
from core.storage.serialization import JSON_CONTENT_TYPE, from_json_bytes, to_json_bytes

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ObjectStorage:
    """
    Object storage facade bound to a single bucket

    Construction performs no network calls; the backend must already be
    connected (see factory.client_factory.open_object_storage).

    Usage:
        storage = ObjectStorage(backend, "my-bucket")
        await storage.put_serializable("reports/1.json", {"a": 1})
        report = await storage.get_serializable("reports/1.json")
    """

    def __init__(
        self,
        backend: BaseStorageBackend,
        bucket: str,
        wait_timeout: timedelta = existence.DEFAULT_WAIT_TIMEOUT,
    ):
        """
        Args:
            backend: Ready storage backend
            bucket: Bucket every key is scoped to
            wait_timeout: Upper bound for wait_until_key_exists (default 60s)

        Raises:
            ValueError: wait_timeout is negative
        """
        if wait_timeout < timedelta(0):
            raise ValueError(f"wait_timeout must be non-negative, got {wait_timeout}")

        self._backend = backend
        self._bucket = bucket
        self._wait_timeout = wait_timeout

    @property
    def backend(self) -> BaseStorageBackend:
        return self._backend

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def wait_timeout(self) -> timedelta:
        return self._wait_timeout

    def _callout_error(self, operation: str, key: str, error: BackendError) -> CalloutError:
        logger.error(f"✗ S3 {operation} error for s3://{self._bucket}/{key}: {error}")
        return CalloutError(operation, error)

    # ============================================
    # WRITES
    # ============================================
    async def put_bytes(
        self,
        key: str,
        data: bytes,
        metadata: dict[str, str] | None = None,
        content_type: str | None = None,
    ) -> None:
        """
        Store raw bytes at key, overwriting

        Raises:
            CalloutError: Backend write failed
        """
        try:
            await self._backend.put_object(self._bucket, key, data, metadata, content_type)
        except BackendError as e:
            raise self._callout_error("put object", key, e) from e

        logger.debug(f"Stored {len(data)} bytes at s3://{self._bucket}/{key}")

    async def put_serializable(self, key: str, value: Any) -> None:
        """
        Serialize value to JSON and store it at key, overwriting

        Args:
            key: Object key
            value: JSON-compatible value or pydantic model

        Raises:
            InvalidOperationError: Value is not serializable
            CalloutError: Backend write failed
        """
        body = to_json_bytes(value)
        try:
            await self._backend.put_object(
                self._bucket, key, body, None, JSON_CONTENT_TYPE
            )
        except BackendError as e:
            raise self._callout_error("put serializable", key, e) from e

        logger.debug(f"Stored serialized value at s3://{self._bucket}/{key}")

    async def upload_file(
        self,
        key: str,
        local_path: str | Path,
        metadata: dict[str, str] | None = None,
    ) -> None:
        """
        Upload a local file to key with optional metadata

        The file is opened and read with blocking I/O on the event loop thread.

        Raises:
            InvalidOperationError: File cannot be opened
            CalloutError: Backend write failed
        """
        try:
            file = open(local_path, "rb")
        except OSError as e:
            raise InvalidOperationError("open file", e) from e

        with file:
            try:
                await self._backend.put_object(self._bucket, key, file, metadata)
            except BackendError as e:
                raise self._callout_error("upload file", key, e) from e

        logger.debug(f"Uploaded {local_path} to s3://{self._bucket}/{key}")

    async def move_object(self, source_key: str, target_key: str) -> None:
        """
        Copy source_key to target_key, then delete source_key

        Not atomic: if the delete fails after a successful copy, both keys
        hold the data and the CalloutError says which step failed.

        Raises:
            CalloutError: Copy or delete failed
        """
        try:
            await self._backend.copy_object(self._bucket, source_key, target_key)
        except BackendError as e:
            raise self._callout_error("copy object", source_key, e) from e

        try:
            await self._backend.delete_object(self._bucket, source_key)
        except BackendError as e:
            logger.warning(
                f"⚠ Move left both s3://{self._bucket}/{source_key} and "
                f"s3://{self._bucket}/{target_key} in place"
            )
            raise self._callout_error("delete object", source_key, e) from e

        logger.debug(f"Moved s3://{self._bucket}/{source_key} → {target_key}")

    async def delete_object(self, key: str) -> None:
        """
        Delete key

        Raises:
            CalloutError: Backend delete failed
        """
        try:
            await self._backend.delete_object(self._bucket, key)
        except BackendError as e:
            raise self._callout_error("delete object", key, e) from e

        logger.debug(f"Deleted s3://{self._bucket}/{key}")

    # ============================================
    # READS
    # ============================================
    async def get_bytes(self, key: str) -> bytes:
        """
        Fetch the full body of key

        Raises:
            ObjectNotFoundError: Key does not exist
            CalloutError: Any other read failure (including draining the body)
        """
        try:
            handle = await self._backend.get_object(self._bucket, key)
        except BackendNotFoundError as e:
            raise ObjectNotFoundError("get object", e) from e
        except BackendError as e:
            raise self._callout_error("get object", key, e) from e

        try:
            data = await handle.read()
        except BackendError as e:
            raise self._callout_error("read object body", key, e) from e

        logger.debug(f"Fetched {len(data)} bytes from s3://{self._bucket}/{key}")
        return data

    async def get_serializable(self, key: str, model: type[T] | None = None) -> T | Any:
        """
        Fetch key and parse it as JSON

        Args:
            key: Object key
            model: Optional type to validate into (pydantic model, list[int], ...)

        Raises:
            ObjectNotFoundError: Key does not exist
            CalloutError: Any other read failure
            ItemParsingError: Body is not valid JSON for model
        """
        return from_json_bytes(await self.get_bytes(key), model)

    async def key_exists(self, key: str) -> bool:
        """
        Check whether key exists

        Raises:
            CalloutError: HEAD failed for a reason other than absence
        """
        return await existence.key_exists(self._backend, self._bucket, key)

    async def get_metadata_if_key_exists(self, key: str) -> dict[str, str] | None:
        """
        Fetch user metadata if key exists

        Returns:
            Metadata ({} when the object has none), or None if key is absent

        Raises:
            CalloutError: HEAD failed for a reason other than absence
        """
        head = await existence.head_if_exists(self._backend, self._bucket, key)
        if head is None:
            return None
        return head.metadata or {}

    async def wait_until_key_exists(self, key: str) -> None:
        """
        Block until key exists, bounded by wait_timeout

        Raises:
            CalloutError: Timed out, or a probe failed
        """
        await existence.wait_until_key_exists(
            self._backend, self._bucket, key, self._wait_timeout
        )

    async def generate_presigned_url(self, key: str, expires_in: timedelta | float) -> str:
        """
        Sign a time-limited GET URL for key

        Args:
            key: Object key (existence is not checked)
            expires_in: Validity as timedelta or seconds, must be > 0

        Raises:
            InvalidOperationError: expires_in is not a positive duration
            CalloutError: Signing failed
        """
        if not isinstance(expires_in, timedelta):
            try:
                expires_in = timedelta(seconds=expires_in)
            except (TypeError, ValueError, OverflowError) as e:
                raise InvalidOperationError("generate presigned url", e) from e
        if expires_in <= timedelta(0):
            raise InvalidOperationError(
                "generate presigned url",
                ValueError(f"expires_in must be positive, got {expires_in}"),
            )

        try:
            url = await self._backend.generate_presigned_url(self._bucket, key, expires_in)
        except BackendError as e:
            raise self._callout_error("generate presigned url", key, e) from e

        logger.debug(
            f"Presigned s3://{self._bucket}/{key} for {expires_in.total_seconds():g}s"
        )
        return url

    async def get_size(self, key: str) -> int:
        """
        Object size in bytes (0 when the backend omits it)

        Raises:
            CalloutError: HEAD failed, including when key is absent
        """
        try:
            head = await self._backend.head_object(self._bucket, key)
        except BackendError as e:
            raise self._callout_error("get object size", key, e) from e

        return head.content_length if head.content_length is not None else 0

    async def list(self, prefix: str) -> list[str]:
        """
        List all keys starting with prefix, in backend order

        Raises:
            CalloutError: A page request failed (no partial result)
        """
        return await list_all(self._backend, self._bucket, prefix)
