"""
Unit tests for factory pattern

Tests that the correct storage backend is created based on config
"""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from core.storage.object_storage import ObjectStorage
from factory.client_factory import create_storage_backend, open_object_storage
from providers.aws.s3 import S3StorageBackend


def make_settings(provider="aws", endpoint_url=None):
    """Settings double with every attribute the factory reads"""
    settings = MagicMock()
    settings.CLOUD_PROVIDER = provider
    settings.s3_region = "eu-west-1"
    settings.AWS_ENDPOINT_URL = endpoint_url
    settings.AWS_ACCESS_KEY_ID = None
    settings.AWS_SECRET_ACCESS_KEY = None
    settings.S3_BUCKET = "default-bucket"
    settings.S3_WAIT_TIMEOUT_SECONDS = 30.0
    settings.S3_WAIT_POLL_INTERVAL_SECONDS = 2.0
    return settings


@pytest.mark.unit
class TestStorageBackendFactory:
    """Test storage backend factory"""

    @patch("factory.client_factory.get_settings")
    def test_create_s3_backend_for_aws(self, mock_settings):
        """Test that AWS config creates S3StorageBackend"""
        mock_settings.return_value = make_settings("aws")

        backend = create_storage_backend()

        assert isinstance(backend, S3StorageBackend)
        assert backend.region == "eu-west-1"
        assert backend.endpoint_url is None
        assert backend.poll_interval == timedelta(seconds=2)
        assert backend.client is None

    @patch("factory.client_factory.get_settings")
    def test_create_s3_backend_for_localstack(self, mock_settings):
        """Test that LocalStack config creates S3StorageBackend with custom endpoint"""
        mock_settings.return_value = make_settings("localstack", "http://localhost:4566")

        backend = create_storage_backend()

        assert isinstance(backend, S3StorageBackend)
        assert backend.endpoint_url == "http://localhost:4566"

    @patch("factory.client_factory.get_settings")
    def test_localstack_requires_endpoint(self, mock_settings):
        mock_settings.return_value = make_settings("localstack")

        with pytest.raises(ValueError, match="AWS_ENDPOINT_URL"):
            create_storage_backend()

    @patch("factory.client_factory.get_settings")
    def test_provider_is_case_insensitive(self, mock_settings):
        mock_settings.return_value = make_settings("AWS")

        assert isinstance(create_storage_backend(), S3StorageBackend)

    @pytest.mark.parametrize("provider", ["gcp", "azure", "invalid"])
    def test_unsupported_provider_raises_error(self, provider):
        """Test that unsupported provider raises ValueError"""
        with pytest.raises(ValueError, match="Unsupported cloud provider"):
            create_storage_backend(make_settings(provider))

    def test_explicit_settings_skip_singleton(self):
        with patch("factory.client_factory.get_settings") as mock_settings:
            create_storage_backend(make_settings("aws"))

        mock_settings.assert_not_called()


@pytest.mark.unit
class TestOpenObjectStorage:
    """Test open_object_storage wiring"""

    @pytest.mark.asyncio
    @patch("factory.client_factory.create_storage_backend")
    async def test_connects_and_binds_default_bucket(self, mock_create):
        backend = MagicMock()
        backend.connect = AsyncMock()
        mock_create.return_value = backend

        storage = await open_object_storage(settings=make_settings())

        backend.connect.assert_awaited_once()
        assert isinstance(storage, ObjectStorage)
        assert storage.backend is backend
        assert storage.bucket == "default-bucket"
        assert storage.wait_timeout == timedelta(seconds=30)

    @pytest.mark.asyncio
    @patch("factory.client_factory.create_storage_backend")
    async def test_bucket_override(self, mock_create):
        mock_create.return_value.connect = AsyncMock()

        storage = await open_object_storage("reports", settings=make_settings())

        assert storage.bucket == "reports"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
