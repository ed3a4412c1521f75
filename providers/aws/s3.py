"""
AWS S3 implementation of the storage backend

Works with AWS, LocalStack and other S3-compatible endpoints (MinIO)

Only glue lives here: each primitive forwards to the aioboto3 client and
translates botocore failures into core.errors backend errors. Everything
worth testing without a network sits above BaseStorageBackend.
"""

import logging
import math
from datetime import timedelta
from typing import Any, BinaryIO

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError, WaiterError

from core.errors import (
    BackendError,
    BackendNotFoundError,
    BackendServiceError,
    BackendTimeoutError,
)
from core.interfaces.storage import DEFAULT_POLL_INTERVAL, BaseStorageBackend
from core.models.storage import ListPage, ObjectHandle, ObjectHead

logger = logging.getLogger(__name__)

# HeadObject reports a bare 404; GetObject/CopyObject report NoSuchKey
NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


def classify_error(error: Exception, action: str) -> BackendError:
    """
    Map a botocore failure to a backend error

    Args:
        error: ClientError or BotoCoreError raised by the client
        action: S3 action name for the message (e.g. "HeadObject")

    Returns:
        BackendNotFoundError for missing keys, BackendServiceError otherwise
    """
    if isinstance(error, ClientError):
        code = str(error.response.get("Error", {}).get("Code", ""))
        if code in NOT_FOUND_CODES:
            return BackendNotFoundError(f"{action}: {code}")
    return BackendServiceError(f"{action}: {error}")


class S3Body:
    """Body stream that reports transport failures as backend errors"""

    def __init__(self, stream: Any):
        self._stream = stream

    async def read(self) -> bytes:
        try:
            return await self._stream.read()
        except BotoCoreError as e:
            raise BackendServiceError(f"GetObject body: {e}") from e

    def close(self) -> None:
        self._stream.close()


class S3StorageBackend(BaseStorageBackend):
    """
    AWS S3 implementation

    Features:
    - Native object_exists waiter for wait_until_object_exists
    - Presigned GET URLs
    - Server-side copy
    - Works with LocalStack for local development

    Usage:
        backend = S3StorageBackend(region="us-east-1")
        await backend.connect()
        ...
        await backend.close()
    """

    def __init__(
        self,
        region: str,
        endpoint_url: str | None = None,
        aws_access_key_id: str | None = None,
        aws_secret_access_key: str | None = None,
        poll_interval: timedelta = DEFAULT_POLL_INTERVAL,
    ):
        """
        Args:
            region: AWS region of the buckets
            endpoint_url: Custom endpoint (LocalStack/MinIO), None for AWS
            aws_access_key_id: Explicit key, None for the default credential chain
            aws_secret_access_key: Explicit secret, None for the default credential chain
            poll_interval: Delay between waiter probes
        """
        self.region = region
        self.endpoint_url = endpoint_url
        self.aws_access_key_id = aws_access_key_id
        self.aws_secret_access_key = aws_secret_access_key
        self.poll_interval = poll_interval
        self.session = aioboto3.Session()
        self.client = None
        self._client_cm = None

    async def connect(self) -> None:
        """Initialize S3 client"""
        try:
            # Create client context manager
            client_cm = self.session.client(
                "s3",
                region_name=self.region,
                endpoint_url=self.endpoint_url or None,
                aws_access_key_id=self.aws_access_key_id,
                aws_secret_access_key=self.aws_secret_access_key,
            )

            # Enter async context
            self.client = await client_cm.__aenter__()
            self._client_cm = client_cm

            logger.info(f"✓ Connected to S3: {self.endpoint_url or 'AWS'} ({self.region})")
        except Exception as e:
            logger.error(f"✗ Failed to connect to S3: {e}")
            raise

    def _require_client(self) -> Any:
        if not self.client:
            raise RuntimeError("S3 client not connected")
        return self.client

    async def put_object(
        self,
        bucket: str,
        key: str,
        body: bytes | BinaryIO,
        metadata: dict[str, str] | None = None,
        content_type: str | None = None,
    ) -> None:
        client = self._require_client()
        params: dict[str, Any] = {"Bucket": bucket, "Key": key, "Body": body}
        if metadata is not None:
            params["Metadata"] = metadata
        if content_type:
            params["ContentType"] = content_type

        try:
            await client.put_object(**params)
        except (ClientError, BotoCoreError) as e:
            raise classify_error(e, "PutObject") from e

    async def get_object(self, bucket: str, key: str) -> ObjectHandle:
        client = self._require_client()
        try:
            response = await client.get_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise classify_error(e, "GetObject") from e

        return ObjectHandle(
            body=S3Body(response["Body"]),
            content_length=response.get("ContentLength"),
            content_type=response.get("ContentType"),
            metadata=response.get("Metadata"),
        )

    async def head_object(self, bucket: str, key: str) -> ObjectHead:
        client = self._require_client()
        try:
            response = await client.head_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise classify_error(e, "HeadObject") from e

        return ObjectHead(
            content_length=response.get("ContentLength"),
            content_type=response.get("ContentType"),
            etag=response.get("ETag"),
            last_modified=response.get("LastModified"),
            metadata=response.get("Metadata"),
        )

    async def copy_object(self, bucket: str, source_key: str, target_key: str) -> None:
        client = self._require_client()
        try:
            await client.copy_object(
                Bucket=bucket,
                Key=target_key,
                CopySource={"Bucket": bucket, "Key": source_key},
            )
        except (ClientError, BotoCoreError) as e:
            raise classify_error(e, "CopyObject") from e

    async def delete_object(self, bucket: str, key: str) -> None:
        client = self._require_client()
        try:
            await client.delete_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise classify_error(e, "DeleteObject") from e

    async def generate_presigned_url(
        self, bucket: str, key: str, expires_in: timedelta
    ) -> str:
        client = self._require_client()
        try:
            url = await client.generate_presigned_url(
                "get_object",
                Params={"Bucket": bucket, "Key": key},
                ExpiresIn=max(1, int(expires_in.total_seconds())),
            )
        except (ClientError, BotoCoreError) as e:
            raise classify_error(e, "PresignGetObject") from e

        if not url:
            raise BackendServiceError("PresignGetObject: generated URL is empty")
        return str(url)

    async def list_keys(
        self, bucket: str, prefix: str, continuation_token: str | None = None
    ) -> ListPage:
        client = self._require_client()
        params: dict[str, Any] = {"Bucket": bucket, "Prefix": prefix}
        if continuation_token:
            params["ContinuationToken"] = continuation_token

        try:
            response = await client.list_objects_v2(**params)
        except (ClientError, BotoCoreError) as e:
            raise classify_error(e, "ListObjectsV2") from e

        return ListPage(
            keys=[obj["Key"] for obj in response.get("Contents", []) if obj.get("Key")],
            is_truncated=bool(response.get("IsTruncated", False)),
            next_continuation_token=response.get("NextContinuationToken"),
        )

    async def wait_until_object_exists(
        self, bucket: str, key: str, timeout: timedelta
    ) -> None:
        """
        Block on the native object_exists waiter

        Probes every poll_interval (whole seconds, at least 1) for long
        enough to cover timeout.
        """
        client = self._require_client()
        delay = max(1, round(self.poll_interval.total_seconds()))
        max_attempts = math.ceil(max(timeout.total_seconds(), 0) / delay) + 1

        waiter = client.get_waiter("object_exists")
        try:
            await waiter.wait(
                Bucket=bucket,
                Key=key,
                WaiterConfig={"Delay": delay, "MaxAttempts": max_attempts},
            )
        except WaiterError as e:
            if "Max attempts exceeded" in str(e.kwargs.get("reason", "")):
                raise BackendTimeoutError(
                    f"s3://{bucket}/{key} did not appear within "
                    f"{timeout.total_seconds():g}s ({max_attempts} probes)"
                ) from e
            raise BackendServiceError(f"ObjectExists waiter: {e}") from e
        except (ClientError, BotoCoreError) as e:
            raise classify_error(e, "HeadObject") from e

    async def close(self) -> None:
        """Close client"""
        if self.client:
            try:
                await self._client_cm.__aexit__(None, None, None)
                logger.info("✓ S3 connection closed")
            except Exception as e:
                logger.error(f"Error closing S3 client: {e}")
            finally:
                self.client = None
                self._client_cm = None
