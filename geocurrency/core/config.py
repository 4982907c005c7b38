"""
Configuration management using Pydantic Settings.

Loads configuration from environment variables with validation and type safety.
"""

from datetime import timedelta
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are loaded from .env file or environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="geocurrency", description="Application name")
    app_env: Literal["development", "staging", "production"] = Field(
        default="production", description="Environment"
    )
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["json", "text"] = Field(default="json", description="Log format")
    debug: bool = Field(default=False, description="Debug mode")

    # Fallback locale and currency
    default_culture: str = Field(default="es-CO", description="Fallback culture name")
    default_currency: str = Field(default="COP", description="Fallback currency ISO 4217")
    default_currency_symbol: str = Field(default="$", description="Fallback currency symbol")

    # IP geolocation
    geolocation_url: str = Field(
        default="https://ipapi.co/json/", description="IP geolocation endpoint"
    )
    geolocation_timeout: float = Field(
        default=3.0, description="IP geolocation timeout in seconds"
    )

    # Exchange rates
    exchange_rate_url: str = Field(
        default="https://api.exchangerate.host/latest",
        description="USD-based exchange rate endpoint",
    )
    exchange_rate_timeout: float = Field(
        default=10.0, description="Exchange rate API timeout in seconds"
    )
    rate_ttl_hours: int = Field(default=12, description="Exchange rate cache TTL in hours")

    # Privacy
    mask_client_ips_in_logs: bool = Field(
        default=True, description="Mask IP addresses in logs"
    )

    # API Server
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, description="API server port")
    enable_api_docs: bool = Field(default=True, description="Enable API documentation")
    allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:8000",
        description="Allowed CORS origins (comma-separated)",
    )

    @field_validator("default_currency")
    @classmethod
    def uppercase_currency(cls, v: str) -> str:
        """Currency codes are stored uppercase."""
        return v.strip().upper()

    @field_validator("allowed_origins")
    @classmethod
    def parse_allowed_origins(cls, v: str) -> list[str]:
        """Parse comma-separated origins into list."""
        return [origin.strip() for origin in v.split(",") if origin.strip()]

    @property
    def rate_ttl(self) -> timedelta:
        """Exchange rate time-to-live."""
        return timedelta(hours=self.rate_ttl_hours)

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.app_env == "development"


# Global settings instance
settings = Settings()
