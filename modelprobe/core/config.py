"""Application configuration using pydantic-settings."""

import os
from functools import lru_cache
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "ModelProbe"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    # Validation
    VALIDATION_TIMEOUT_S: float = 60.0
    MODEL_TEST_TIMEOUT_S: float = 60.0

    # Providers exposed by the API (empty = every registered provider)
    PROVIDERS: str = ""

    # Observability
    METRICS_ENABLED: bool = True
    METRICS_PATH: str = "/metrics"
    HEALTH_PATH: str = "/health"

    @property
    def providers_list(self) -> List[str]:
        """Parse PROVIDERS into a list."""
        return [p.strip().lower() for p in self.PROVIDERS.split(",") if p.strip()]

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        v = v.lower()
        if v not in {"json", "text"}:
            raise ValueError("LOG_FORMAT must be 'json' or 'text'")
        return v

    @field_validator("VALIDATION_TIMEOUT_S", "MODEL_TEST_TIMEOUT_S")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Timeouts must be positive."""
        if v <= 0:
            raise ValueError("timeouts must be greater than zero")
        return v


class ProviderSettings(BaseSettings):
    """Per-provider overrides loaded dynamically."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    name: str
    api_key: str = ""
    base_url: Optional[str] = None
    timeout_s: Optional[float] = None

    @classmethod
    def for_provider(cls, name: str) -> "ProviderSettings":
        """Load overrides for a specific provider.

        Reads PROVIDER_<NAME>_API_KEY, PROVIDER_<NAME>_BASE_URL and
        PROVIDER_<NAME>_TIMEOUT_S.
        """
        prefix = f"PROVIDER_{name.upper()}_"
        timeout = os.getenv(f"{prefix}TIMEOUT_S")
        return cls(
            name=name,
            api_key=os.getenv(f"{prefix}API_KEY", ""),
            base_url=os.getenv(f"{prefix}BASE_URL") or None,
            timeout_s=float(timeout) if timeout else None,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
