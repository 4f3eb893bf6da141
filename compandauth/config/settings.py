"""Settings using Pydantic BaseSettings."""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)
    log_file: Optional[str] = Field(default=None)

    # Which CAA strategy new entities get: "counter" or "timeout"
    caa_strategy: str = Field(default="counter")
    # Counter window: number of most recent sessions kept valid
    caa_counter_delta: int = Field(default=10, ge=0)
    # Timeout window: seconds a session stays valid after issue (7 days)
    caa_timeout_seconds: int = Field(default=604800, ge=0)
    # Wrap CAAs in a reader/writer lock when entities are shared across threads
    caa_thread_safe: bool = Field(default=False)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        vv = (v or "").strip().lower()
        if vv not in {"development", "staging", "production", "test"}:
            raise ValueError("ENVIRONMENT must be one of: development, staging, production, test")
        return vv

    @field_validator("caa_strategy")
    @classmethod
    def validate_caa_strategy(cls, v: str) -> str:
        vv = (v or "").strip().lower()
        if vv not in {"counter", "timeout"}:
            raise ValueError("CAA_STRATEGY must be one of: counter, timeout")
        return vv

    @property
    def is_test(self) -> bool:
        """Check if running in test mode."""
        return self.environment == "test"

    @property
    def caa_window(self) -> int:
        """Window parameter matching the configured strategy."""
        if self.caa_strategy == "timeout":
            return self.caa_timeout_seconds
        return self.caa_counter_delta


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
