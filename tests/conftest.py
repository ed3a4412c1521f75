"""
Pytest configuration for test suite

Markers:
- unit: Fast unit tests (no external dependencies)
- integration: Integration tests (requires LocalStack / real S3)

Fixtures:
- fake_backend: In-memory BaseStorageBackend with failure injection
- storage: ObjectStorage bound to fake_backend and TEST_BUCKET
"""

from datetime import timedelta

import pytest

from core.storage.object_storage import ObjectStorage
from tests.fakes import TEST_BUCKET, FakeStorageBackend


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: Fast unit tests (no dependencies)")
    config.addinivalue_line(
        "markers", "integration: Integration tests (requires LocalStack)"
    )


@pytest.fixture
def fake_backend():
    """In-memory backend, empty"""
    return FakeStorageBackend()


@pytest.fixture
def storage(fake_backend):
    """ObjectStorage bound to the fake backend with a short wait timeout"""
    return ObjectStorage(fake_backend, TEST_BUCKET, wait_timeout=timedelta(milliseconds=200))
