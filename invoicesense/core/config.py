"""Application configuration via Pydantic Settings v2."""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

RangePresetName = Literal["7d", "30d", "90d", "1y", "mtd", "ytd"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "InvoiceSense"
    app_env: Literal["development", "testing", "staging", "production"] = "development"
    debug: bool = False

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # API
    api_host: str = "0.0.0.0"  # noqa: S104
    api_port: int = 3001
    cors_origins: list[str] = [
        "http://localhost:5173",  # Vite dev server (default)
        "http://localhost:3000",
        "http://127.0.0.1:5173",
    ]

    # Airtable datastore
    airtable_api_key: str = ""
    airtable_base_id: str = ""
    airtable_table_name: str = "Invoices"
    airtable_clients_table: str = "Clients"
    airtable_api_url: str = "https://api.airtable.com/v0"
    airtable_timeout_seconds: float = 30.0
    airtable_page_size: int = 100
    airtable_max_retries: int = 3
    airtable_retry_delay_seconds: float = 1.0

    # Serve the sample dataset when Airtable fails mid-request
    datastore_fallback_to_sample: bool = False

    # Analytics
    analytics_default_range: RangePresetName = "30d"
    analytics_top_clients_limit: int = 5
    analytics_recent_activity_limit: int = 10
    # Processing logs are not modeled; these are reported as-is
    analytics_success_rate: float = 98.5
    analytics_avg_processing_time: float = 12.3

    @field_validator("airtable_page_size")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        """Airtable caps list pages at 100 records.

        Args:
            v: Requested page size.

        Returns:
            Validated page size.

        Raises:
            ValueError: If outside 1..100.
        """
        if not 1 <= v <= 100:
            raise ValueError(f"airtable_page_size must be between 1 and 100, got {v}")
        return v

    @property
    def airtable_configured(self) -> bool:
        """Check if both Airtable credentials are present."""
        return bool(self.airtable_api_key and self.airtable_base_id)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton."""
    return Settings()
