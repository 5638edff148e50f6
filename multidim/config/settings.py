"""
Multi-Dimensional Analytics Core
Centralized Configuration Management

Configuration is loaded with Pydantic settings from environment variables
(and an optional .env file), validated and cached for the process lifetime.
"""

from functools import lru_cache
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DimensionSettings(BaseSettings):
    """Dimension and label rendering configuration"""
    
    model_config = SettingsConfigDict(env_prefix="DIMENSION_")
    
    time_dimension_id: str = Field(default="time", description="Virtual dimension id used for time breakdowns")
    illegal_placeholder: str = Field(default="ILLEGAL", description="Label rendered for unresolved ids")
    label_separator: str = Field(default=", ", description="Separator between item names in labels")


class TimeSettings(BaseSettings):
    """Time bucketing defaults"""
    
    model_config = SettingsConfigDict(env_prefix="TIME_")
    
    default_granularity: str = Field(default="Month", description="Granularity used when none is given")
    default_horizon_months: int = Field(default=12, description="Length of the default time range in months")
    
    @field_validator("default_granularity")
    @classmethod
    def validate_granularity(cls, v: str) -> str:
        """Validate granularity value"""
        allowed = ["Day", "Week", "Month", "Quarter", "Year"]
        if v.capitalize() not in allowed:
            raise ValueError(f"Granularity must be one of: {allowed}")
        return v.capitalize()


class MonitoringSettings(BaseSettings):
    """Logging Configuration"""
    
    model_config = SettingsConfigDict(env_prefix="", populate_by_name=True)
    
    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: str = Field(default="json", description="Log format: json or text")
    log_file: Optional[str] = Field(default=None, description="Log file path")


class Settings(BaseSettings):
    """
    Main Application Settings
    
    Aggregates all configuration sections and provides a single entry point
    for accessing configuration.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )
    
    app_name: str = Field(default="multidim-analytics", alias="APP_NAME", description="Application name")
    app_env: str = Field(default="development", alias="APP_ENV", description="Environment")
    debug: bool = Field(default=False, alias="DEBUG", description="Debug logging with console output")

    # Subsystem configurations
    dimensions: DimensionSettings = Field(default_factory=DimensionSettings)
    time: TimeSettings = Field(default_factory=TimeSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)
    
    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.
    
    Uses LRU cache to ensure settings are only loaded once.
    
    Returns:
        Settings: Application settings instance
    """
    return Settings()
