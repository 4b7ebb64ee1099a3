from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Ignore unrelated env keys so a shared .env can carry the booking app's settings too.
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Hall Reports Engine"
    environment: str = "development"
    api_prefix: str = "/api/v1"
    cors_allow_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    supabase_url: str = Field(..., alias="SUPABASE_URL")
    supabase_service_role_key: Optional[str] = Field(
        default=None, alias="SUPABASE_SERVICE_ROLE_KEY"
    )
    supabase_anon_key: Optional[str] = Field(default=None, alias="SUPABASE_ANON_KEY")
    store_page_size: int = Field(default=1000, alias="STORE_PAGE_SIZE")
    store_timeout_seconds: float = Field(default=30.0, alias="STORE_TIMEOUT_SECONDS")

    report_bookable_hours: float = Field(default=12.0, alias="REPORT_BOOKABLE_HOURS")
    report_hold_age_hours: int = Field(default=48, alias="REPORT_HOLD_AGE_HOURS")
    report_currency_symbol: str = Field(default="$", alias="REPORT_CURRENCY_SYMBOL")
    report_forecast_optimistic: float = Field(default=1.15, alias="REPORT_FORECAST_OPTIMISTIC")
    report_forecast_cautious: float = Field(default=0.85, alias="REPORT_FORECAST_CAUTIOUS")


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_cors_origins() -> list[str]:
    settings = get_settings()
    return [origin.strip() for origin in settings.cors_allow_origins.split(",") if origin.strip()]
