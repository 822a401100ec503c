"""
Configuration management using pydantic-settings.
All settings loaded from environment variables (12-factor app).
"""

from functools import lru_cache
from typing import List
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import AliasChoices, Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Time zone used to bucket every event into calendar parts
    app_timezone: str = Field(
        default="Asia/Bangkok",
        validation_alias=AliasChoices("app_timezone", "google_sheets_timezone"),
        description="IANA time zone identifier for day/hour bucketing",
    )

    # KPI windows
    kpi_window_days: int = Field(
        default=30, gt=0, description="Length of the current and previous KPI windows"
    )
    sparkline_days: int = Field(
        default=7, gt=0, description="Number of trailing days shown in KPI sparklines"
    )
    rollup_cap: int = Field(
        default=10, ge=1, description="Maximum rows emitted per rollup dimension"
    )

    # Alert thresholds (growth values are percentages)
    revenue_critical_growth: float = Field(
        default=-20.0, description="Revenue growth below this raises a critical alert"
    )
    revenue_warning_growth: float = Field(
        default=-10.0, description="Revenue growth below this raises a warning alert"
    )
    checkin_warning_growth: float = Field(
        default=-15.0, description="Check-in growth below this raises a warning alert"
    )
    low_correlation_threshold: float = Field(
        default=0.3, ge=0.0, le=1.0, description="|r| below this raises an info alert"
    )

    # API
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    api_reload: bool = Field(default=True, description="Enable hot reload")
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="CORS allowed origins (comma-separated)",
    )

    # Logging
    log_level: str = Field(default="info", description="Log level")
    log_format: str = Field(default="json", description="Log format (json|console)")

    # Development
    dev_mode: bool = Field(default=True, description="Development mode")
    testing: bool = Field(default=False, description="Testing mode")

    @field_validator("app_timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject unknown zones at load time rather than on first use."""
        v = v.strip()
        if not v:
            raise ValueError("app_timezone must not be empty")
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown time zone: {v}") from e
        return v

    @field_validator("revenue_warning_growth")
    @classmethod
    def validate_warning_above_critical(cls, v: float, info: ValidationInfo) -> float:
        critical = info.data.get("revenue_critical_growth")
        if critical is not None and v < critical:
            raise ValueError("revenue_warning_growth must not be below revenue_critical_growth")
        return v

    @property
    def cors_origin_list(self) -> List[str]:
        """Parse comma-separated CORS origins."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to ensure singleton behavior.
    """
    return Settings()
