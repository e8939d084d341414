"""
PawTrack - Configuration Management
Centralized configuration using pydantic-settings.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Supabase (auth, relational storage, object storage)
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    reports_table: str = "reports"
    profiles_table: str = "profiles"
    storage_bucket: str = "report-photos"
    password_reset_redirect_url: Optional[str] = None

    # Reverse geocoding (OpenStreetMap Nominatim)
    nominatim_url: str = "https://nominatim.openstreetmap.org"
    geocoder_user_agent: str = "pawtrack/0.1"

    # HTTP
    http_timeout_seconds: float = 30.0

    # Device
    device_latitude: Optional[float] = None
    device_longitude: Optional[float] = None
    camera_dir: str = "captures"

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
