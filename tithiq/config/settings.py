"""
Configuration Management for Tithiq

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Thresholds used by the insight engine live next to the storage and
export knobs so that a single `.env` file can tune the whole app.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Main application settings.
    
    Loads configuration from environment variables and .env file.
    """
    
    model_config = SettingsConfigDict(
        env_prefix="TITHIQ_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    
    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum level for local logs"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (False = human readable console output)"
    )
    
    # Persistence
    storage_path: Path = Field(
        default=Path("~/.tithiq/store.json"),
        description="JSON file backing the key-value store"
    )
    storage_write_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a failed write is attempted"
    )
    
    # History
    max_records: int = Field(
        default=20,
        ge=1,
        le=1000,
        description="Maximum number of giving records kept (oldest evicted)"
    )
    
    # Export
    csv_date_format: str = Field(
        default="%Y-%m-%d",
        description="strftime format for dates in CSV export"
    )
    
    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept any casing for the level name."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level
    
    @property
    def resolved_storage_path(self) -> Path:
        """Storage path with `~` expanded."""
        return self.storage_path.expanduser()


class InsightSettings(BaseSettings):
    """Thresholds for the insight engine."""
    
    model_config = SettingsConfigDict(
        env_prefix="TITHIQ_INSIGHT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    consistent_threshold: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        description="Consistency rate at or above which the user is a consistent giver"
    )
    building_threshold: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Consistency rate at or above which consistency is building"
    )
    trend_window: int = Field(
        default=3,
        ge=2,
        le=12,
        description="Number of trailing months compared for a trend"
    )
    under_ratio: float = Field(
        default=0.7,
        gt=0.0,
        description="Actual share below configured * ratio is under-contributing"
    )
    over_ratio: float = Field(
        default=1.3,
        gt=0.0,
        description="Actual share above configured * ratio may be over-contributing"
    )
    over_floor_percentage: float = Field(
        default=60.0,
        ge=0.0,
        le=100.0,
        description="Over-contribution is only reported above this share"
    )


class Settings(BaseSettings):
    """
    Root settings container.
    
    Aggregates all sub-settings for easy access.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    @property
    def app(self) -> AppSettings:
        return AppSettings()
    
    @property
    def insights(self) -> InsightSettings:
        return InsightSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).
    
    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()
