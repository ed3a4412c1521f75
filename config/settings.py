"""
Application Settings - Load from YAML configs + .env secrets

Design Philosophy:
- Storage defaults (bucket, waiter timing) → config/providers/storage.yaml (public, versioned in git)
- Secrets and per-deployment values (credentials, region, endpoint) → .env / environment

The core never reads these directly: factory/client_factory.py turns them
into a ready backend, which is then handed to ObjectStorage.

Uses Pydantic for validation and type safety
"""

import logging
import sys

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.utils.config import get_nested, load_yaml_safe

STORAGE_CONFIG_PATH = "config/providers/storage.yaml"


class Settings(BaseSettings):
    """
    Application settings

    Architecture:
    - Storage defaults → config/providers/storage.yaml (public)
    - Secrets → .env (gitignored)

    Usage:
        from config.settings import get_settings

        settings = get_settings()
        print(settings.S3_BUCKET)  # From storage.yaml
        print(settings.s3_region)  # From .env (S3_REGION, falls back to AWS_REGION)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra fields in .env
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Load YAML config from file (cached at class level)
        if not hasattr(Settings, "_yaml_loaded"):
            Settings._storage_config = load_yaml_safe(STORAGE_CONFIG_PATH)
            Settings._yaml_loaded = True

    # ============================================
    # ENVIRONMENT (.env only)
    # ============================================
    ENVIRONMENT: str = Field(default="local", description="Environment: local, dev, staging, prod")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    # ============================================
    # CLOUD PROVIDER (.env only)
    # ============================================
    CLOUD_PROVIDER: str = Field(
        default="aws",
        description="Object storage provider: aws, localstack",
    )

    # ============================================
    # AWS CREDENTIALS (.env only - secrets)
    # ============================================
    AWS_REGION: str = Field(default="us-east-1")
    S3_REGION: str | None = Field(default=None, description="Overrides AWS_REGION for S3")
    AWS_ACCESS_KEY_ID: str | None = Field(default=None)  # None → default boto credential chain
    AWS_SECRET_ACCESS_KEY: str | None = Field(default=None)
    AWS_ENDPOINT_URL: str | None = Field(default=None)  # For LocalStack / MinIO

    @property
    def s3_region(self) -> str:
        """Region used for the S3 client"""
        return self.S3_REGION or self.AWS_REGION

    # ============================================
    # S3 / OBJECT STORAGE (from YAML)
    # ============================================
    @property
    def S3_BUCKET(self) -> str:
        """Default bucket from storage.yaml"""
        return get_nested(self._storage_config, "s3", "bucket", default="object-storage-local")

    @property
    def S3_WAIT_TIMEOUT_SECONDS(self) -> float:
        """Upper bound for wait_until_key_exists from storage.yaml"""
        return float(
            get_nested(self._storage_config, "s3", "wait", "timeout_seconds", default=60)
        )

    @property
    def S3_WAIT_POLL_INTERVAL_SECONDS(self) -> float:
        """Delay between existence probes from storage.yaml"""
        return float(
            get_nested(self._storage_config, "s3", "wait", "poll_interval_seconds", default=5)
        )


# Singleton pattern
_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """
    Get application settings (singleton)

    Returns:
        Settings instance

    Example:
        >>> settings = get_settings()
        >>> print(settings.S3_WAIT_TIMEOUT_SECONDS)
        60.0
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def configure_logging(settings: Settings | None = None) -> None:
    """
    Configure root logging for applications embedding the storage core

    Library modules only create module loggers; call this once from main().
    """
    settings = settings or get_settings()
    _fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    _console = logging.StreamHandler(sys.stdout)
    _console.setFormatter(logging.Formatter(_fmt))

    logging.basicConfig(level=settings.LOG_LEVEL.upper(), handlers=[_console])
