from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Ignore unrelated env keys so the shared .env can also serve the frontend.
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Agency Reports Backend"
    environment: str = "development"
    api_prefix: str = "/api/v1"
    cors_allow_origins: str = "http://localhost:5173,http://127.0.0.1:5173"
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    supabase_url: str = Field(..., alias="SUPABASE_URL")
    supabase_service_role_key: Optional[str] = Field(
        default=None, alias="SUPABASE_SERVICE_ROLE_KEY"
    )
    supabase_anon_key: Optional[str] = Field(default=None, alias="SUPABASE_ANON_KEY")
    supabase_timeout_seconds: float = Field(default=30.0, alias="SUPABASE_TIMEOUT_SECONDS")

    base_currency_code: str = Field(default="UYU", alias="BASE_CURRENCY_CODE")
    display_currency_code: str = Field(default="USD", alias="DISPLAY_CURRENCY_CODE")
    # Base currency units per one display currency unit.
    display_currency_rate: float = Field(default=40.0, gt=0, alias="DISPLAY_CURRENCY_RATE")

    report_history_months: int = Field(default=12, ge=1, alias="REPORT_HISTORY_MONTHS")
    report_top_clients: int = Field(default=5, ge=1, alias="REPORT_TOP_CLIENTS")
    report_max_workers: int = Field(default=7, ge=1, alias="REPORT_MAX_WORKERS")
    report_synthetic_seed: Optional[int] = Field(default=None, alias="REPORT_SYNTHETIC_SEED")


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_cors_origins() -> list[str]:
    settings = get_settings()
    return [origin.strip() for origin in settings.cors_allow_origins.split(",") if origin.strip()]
