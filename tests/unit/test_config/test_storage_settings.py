"""
Unit tests for storage settings

Tests .env overrides and YAML defaults from config/providers/storage.yaml.
"""

import logging

import pytest

from config.settings import Settings, configure_logging, get_settings
from core.utils.config import get_nested, load_yaml, load_yaml_safe


@pytest.fixture
def clean_env(monkeypatch):
    """Remove storage-related variables so defaults apply"""
    for name in (
        "CLOUD_PROVIDER",
        "AWS_REGION",
        "S3_REGION",
        "AWS_ENDPOINT_URL",
        "AWS_ACCESS_KEY_ID",
        "AWS_SECRET_ACCESS_KEY",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.mark.unit
class TestEnvSettings:
    """Test values that come from .env / environment"""

    def test_defaults(self, clean_env):
        settings = Settings(_env_file=None)

        assert settings.CLOUD_PROVIDER == "aws"
        assert settings.AWS_REGION == "us-east-1"
        assert settings.AWS_ENDPOINT_URL is None

    def test_s3_region_falls_back_to_aws_region(self, clean_env):
        settings = Settings(_env_file=None, AWS_REGION="eu-central-1")

        assert settings.s3_region == "eu-central-1"

    def test_s3_region_override(self, clean_env, monkeypatch):
        monkeypatch.setenv("AWS_REGION", "eu-central-1")
        monkeypatch.setenv("S3_REGION", "ap-southeast-2")

        settings = Settings(_env_file=None)

        assert settings.s3_region == "ap-southeast-2"

    def test_get_settings_singleton(self):
        assert get_settings() is get_settings()


@pytest.mark.unit
class TestStorageYamlSettings:
    """Test values that come from storage.yaml"""

    def test_bucket(self):
        settings = get_settings()

        assert isinstance(settings.S3_BUCKET, str)
        assert settings.S3_BUCKET

    def test_wait_timing(self):
        settings = get_settings()

        assert settings.S3_WAIT_TIMEOUT_SECONDS == 60.0
        assert settings.S3_WAIT_POLL_INTERVAL_SECONDS == 5.0


@pytest.mark.unit
class TestConfigUtils:
    """Test YAML helpers"""

    def test_get_nested(self):
        config = {"s3": {"wait": {"timeout_seconds": 10}}}

        assert get_nested(config, "s3", "wait", "timeout_seconds") == 10
        assert get_nested(config, "s3", "missing", default=7) == 7
        assert get_nested(config, "s3", "wait", "timeout_seconds", "deeper", default=1) == 1

    def test_load_yaml_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_yaml(str(tmp_path / "nope.yaml"))

        assert load_yaml_safe(str(tmp_path / "nope.yaml")) == {}

    def test_load_yaml_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_yaml(str(path)) == {}

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "storage.yaml"
        path.write_text("s3:\n  bucket: reports\n")

        assert load_yaml(str(path)) == {"s3": {"bucket": "reports"}}


@pytest.mark.unit
class TestConfigureLogging:
    def test_sets_root_level(self, clean_env):
        root = logging.getLogger()
        previous_handlers, previous_level = root.handlers[:], root.level
        root.handlers = []
        try:
            configure_logging(Settings(_env_file=None, LOG_LEVEL="debug"))

            assert root.level == logging.DEBUG
        finally:
            root.handlers = previous_handlers
            root.setLevel(previous_level)
