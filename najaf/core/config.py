"""
Application Configuration Module

Centralizes all configuration using environment variables with Pydantic Settings.
Supports two families of modes:
    - DEVELOPMENT: Uses mock services (no API keys needed)
    - STAGING / PRODUCTION: Uses the real text-generation API and queues
      staff chimes for the client to play

The ENV_MODE variable controls which services are instantiated throughout
the application; STORAGE_BACKEND controls where the shared product and
order lists are persisted.

Usage:
    from najaf.core.config import get_settings

    settings = get_settings()
    if settings.is_development:
        # Use mock services
    else:
        # Use real APIs

Author: Khalil_Bannouri
Version: 1.0.0
"""

import logging
import sys
from enum import Enum
from typing import Optional
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentMode(str, Enum):
    """
    Application environment modes.

    Attributes:
        DEVELOPMENT: Local testing with mock services
        PRODUCTION: Live environment with real API integrations
        STAGING: Pre-production testing with real APIs but test keys
    """
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    STAGING = "staging"


class StorageBackend(str, Enum):
    """Where the shared key-value entries (products, orders) live."""
    MEMORY = "memory"
    FILE = "file"
    DATABASE = "database"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    Sensitive values (API keys) should NEVER be committed to version control.

    Attributes:
        env_mode: Current environment (development/production/staging)
        debug: Enable verbose logging and error details

        # Storage
        storage_backend: memory / file / database
        data_directory: Directory for JSON entries and ledger exports
        database_url: SQLAlchemy async URL for the database backend

        # Realtime simulation
        poll_interval_seconds: Interval of the per-session order poller

        # Text generation
        openai_api_key: API key for the chat model
        ai_model: Chat model name

        # Business Configuration
        restaurant_name: Display name for the restaurant
        currency_label: Suffix printed after amounts
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # ENVIRONMENT
    # ==========================================================================

    env_mode: EnvironmentMode = Field(
        default=EnvironmentMode.DEVELOPMENT,
        description="Application environment mode"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )

    # ==========================================================================
    # APPLICATION
    # ==========================================================================

    app_name: str = Field(
        default="Najaf Restaurant Ordering",
        description="Application display name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=8001,
        description="API server port"
    )

    # ==========================================================================
    # STORAGE
    # ==========================================================================

    storage_backend: StorageBackend = Field(
        default=StorageBackend.FILE,
        description="Backend for the shared products/orders entries"
    )
    data_directory: str = Field(
        default="data",
        description="Directory for data files"
    )
    storage_lock_timeout: int = Field(
        default=10,
        description="Seconds to wait for a storage file lock"
    )
    database_url: str = Field(
        default="sqlite+aiosqlite:///data/najaf.db",
        description="SQLAlchemy async connection URL"
    )

    # ==========================================================================
    # REDIS / CELERY
    # ==========================================================================

    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL"
    )
    celery_task_always_eager: bool = Field(
        default=False,
        description="Run Celery tasks inline instead of sending them to the broker"
    )

    # ==========================================================================
    # ORDER SYNC
    # ==========================================================================

    poll_interval_seconds: float = Field(
        default=2.0,
        gt=0,
        description="Seconds between order sync polls"
    )
    session_idle_timeout_seconds: float = Field(
        default=1800,
        gt=0,
        description="Sessions unused for this long are logged out"
    )
    session_sweep_interval_seconds: float = Field(
        default=60,
        gt=0,
        description="Seconds between idle session sweeps"
    )

    # ==========================================================================
    # TEXT GENERATION (OPENAI VIA LANGCHAIN)
    # ==========================================================================

    openai_api_key: Optional[str] = Field(
        default=None,
        description="OpenAI API key for menu descriptions and sales tips"
    )
    ai_model: str = Field(
        default="gpt-4o-mini",
        description="Chat model used for text generation"
    )
    ai_temperature: float = Field(
        default=0.7,
        description="Sampling temperature for text generation"
    )

    # ==========================================================================
    # BUSINESS CONFIGURATION
    # ==========================================================================

    restaurant_name: str = Field(
        default="نجف",
        description="Restaurant display name"
    )
    currency_label: str = Field(
        default="ر.س",
        description="Currency suffix shown after amounts"
    )
    default_product_category: str = Field(
        default="عام",
        description="Category assigned to products added without one"
    )
    placeholder_image_url: str = Field(
        default="https://picsum.photos/400/400?random={seed}",
        description="Image URL template for products added without an image"
    )

    # ==========================================================================
    # VALIDATORS
    # ==========================================================================

    @field_validator("env_mode", mode="before")
    @classmethod
    def validate_env_mode(cls, v: str) -> EnvironmentMode:
        """Convert string to EnvironmentMode enum."""
        if isinstance(v, EnvironmentMode):
            return v
        try:
            return EnvironmentMode(v.lower())
        except ValueError:
            valid = [e.value for e in EnvironmentMode]
            raise ValueError(f"Invalid env_mode. Must be one of: {valid}")

    @field_validator("storage_backend", mode="before")
    @classmethod
    def validate_storage_backend(cls, v: str) -> StorageBackend:
        """Convert string to StorageBackend enum."""
        if isinstance(v, StorageBackend):
            return v
        try:
            return StorageBackend(v.lower())
        except ValueError:
            valid = [e.value for e in StorageBackend]
            raise ValueError(f"Invalid storage_backend. Must be one of: {valid}")

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.env_mode == EnvironmentMode.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.env_mode == EnvironmentMode.PRODUCTION

    @property
    def is_staging(self) -> bool:
        """Check if running in staging mode."""
        return self.env_mode == EnvironmentMode.STAGING

    @property
    def use_real_services(self) -> bool:
        """Check if real external services should be used."""
        return self.env_mode in (EnvironmentMode.PRODUCTION, EnvironmentMode.STAGING)

    @property
    def data_path(self) -> Path:
        """Data directory as a Path."""
        return Path(self.data_directory)

    # ==========================================================================
    # VALIDATION METHODS
    # ==========================================================================

    def validate_production_config(self) -> list[str]:
        """
        Validate that all required production settings are configured.

        Returns:
            List of missing configuration keys (empty if all present)
        """
        missing = []

        if self.use_real_services:
            if not self.openai_api_key:
                missing.append("OPENAI_API_KEY")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are loaded only once,
    improving performance and ensuring consistency across
    the application lifecycle.

    Returns:
        Settings: Configured application settings

    Example:
        >>> settings = get_settings()
        >>> print(settings.env_mode)
        EnvironmentMode.DEVELOPMENT
    """
    return Settings()


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configure application-wide logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured root logger
    """
    settings = get_settings()

    if settings.debug:
        level = logging.DEBUG

    log_format = "%(asctime)s │ %(levelname)-8s │ %(name)-25s │ %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return logging.getLogger("najaf")
