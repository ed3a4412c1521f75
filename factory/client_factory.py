"""
Client factory - Build storage backends from configuration

Explicit construction instead of a hidden registry: resolved settings in,
ready backend (or ObjectStorage) out. Code above the factory only ever sees
BaseStorageBackend.
"""

import logging
from datetime import timedelta

from config.settings import Settings, get_settings
from core.interfaces.storage import BaseStorageBackend
from core.storage.object_storage import ObjectStorage

logger = logging.getLogger(__name__)


def create_storage_backend(settings: Settings | None = None) -> BaseStorageBackend:
    """
    Create storage backend based on CLOUD_PROVIDER config

    The backend is not connected yet; call connect() (or use it as an
    async context manager) before handing it to ObjectStorage.

    Returns:
        BaseStorageBackend: S3StorageBackend for aws/localstack

    Examples:
        >>> # .env: CLOUD_PROVIDER=aws, S3_REGION=eu-west-1
        >>> backend = create_storage_backend()  # Returns S3StorageBackend
        >>>
        >>> # .env: CLOUD_PROVIDER=localstack, AWS_ENDPOINT_URL=http://localhost:4566
        >>> backend = create_storage_backend()  # Same class, custom endpoint
    """
    settings = settings or get_settings()
    provider = settings.CLOUD_PROVIDER.lower()

    if provider in ["aws", "localstack"]:
        if provider == "localstack" and not settings.AWS_ENDPOINT_URL:
            raise ValueError("AWS_ENDPOINT_URL is required when CLOUD_PROVIDER=localstack")

        from providers.aws.s3 import S3StorageBackend

        logger.info(f"✓ Creating S3StorageBackend ({provider}, region={settings.s3_region})")
        return S3StorageBackend(
            region=settings.s3_region,
            endpoint_url=settings.AWS_ENDPOINT_URL,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            poll_interval=timedelta(seconds=settings.S3_WAIT_POLL_INTERVAL_SECONDS),
        )

    else:
        raise ValueError(
            f"Unsupported cloud provider: {provider}. "
            "Supported: aws, localstack"
        )


async def open_object_storage(
    bucket: str | None = None, settings: Settings | None = None
) -> ObjectStorage:
    """
    Create and connect a backend, then bind it to a bucket

    The caller owns the backend lifecycle: await storage.backend.close()
    when done.

    Args:
        bucket: Bucket name (defaults to S3_BUCKET from storage.yaml)
        settings: Settings override (defaults to get_settings())

    Returns:
        ObjectStorage ready for use
    """
    settings = settings or get_settings()
    backend = create_storage_backend(settings)
    await backend.connect()
    return ObjectStorage(
        backend,
        bucket or settings.S3_BUCKET,
        wait_timeout=timedelta(seconds=settings.S3_WAIT_TIMEOUT_SECONDS),
    )
