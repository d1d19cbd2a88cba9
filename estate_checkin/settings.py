"""Application settings and configuration (Pydantic v2)."""
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings."""

    app_name: str = Field(default="Estate Check-in", description="Service name")

    # Origin used to build check-in URLs (QR targets)
    frontend_url: str = Field(
        default="http://localhost:5173",
        description="Frontend base URL used as origin of check-in links",
    )
    cors_origins: Optional[List[str]] = Field(
        default=None, description="Allowed CORS origins (defaults to frontend_url)"
    )

    # Storage: no URL means the in-memory store
    database_url: Optional[str] = Field(
        default=None, description="SQLAlchemy URL, e.g. sqlite:///./estate.db"
    )
    seed_sample_data: bool = Field(
        default=True, description="Load sample participants and properties at startup"
    )

    # Check-in tuning
    location_timeout_seconds: float = Field(default=15.0, gt=0)
    checkin_window_padding_minutes: int = Field(default=60, ge=0)
    checkin_warning_range_km: float = Field(default=1.0, gt=0)
    nearby_range_km: float = Field(default=0.5, gt=0)

    log_level: str = Field(default="INFO")

    # Pydantic v2 settings
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="",                 # no prefix
    )

    @property
    def allowed_origins(self) -> List[str]:
        return self.cors_origins or [self.frontend_url]


# Global settings instance
settings = Settings()
