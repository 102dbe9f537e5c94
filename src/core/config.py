from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Ignore unrelated env keys so local/dev .env can include optional integrations.
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "HR Directory Backend"
    environment: str = "development"
    api_prefix: str = "/api/v1"
    cors_allow_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    hr_api_base_url: str = Field(default="", alias="HR_API_BASE_URL")
    hr_api_token: Optional[str] = Field(default=None, alias="HR_API_TOKEN")
    hr_employee_report_id: Optional[str] = Field(default=None, alias="HR_EMPLOYEE_REPORT_ID")
    hr_request_timeout_seconds: float = Field(default=30.0, alias="HR_REQUEST_TIMEOUT_SECONDS")

    directory_freshness_hours: int = Field(default=24, alias="DIRECTORY_FRESHNESS_HOURS")
    directory_new_hire_window_days: int = Field(default=7, alias="DIRECTORY_NEW_HIRE_WINDOW_DAYS")
    directory_refresh_state_path: str = Field(
        default=".cache/employee_directory_last_refresh.txt", alias="DIRECTORY_REFRESH_STATE_PATH"
    )
    directory_manual_refresh_token: Optional[str] = Field(
        default=None, alias="DIRECTORY_MANUAL_REFRESH_TOKEN"
    )

    ecommerce_api_url: str = Field(default="https://www.wixapis.com", alias="ECOMMERCE_API_URL")
    ecommerce_api_key: Optional[str] = Field(default=None, alias="ECOMMERCE_API_KEY")
    ecommerce_site_id: Optional[str] = Field(default=None, alias="ECOMMERCE_SITE_ID")
    ecommerce_app_id: str = Field(
        default="97ed05e3-04ed-4095-af45-90587bfed9f0", alias="ECOMMERCE_APP_ID"
    )
    ecommerce_timeout_seconds: float = Field(default=30.0, alias="ECOMMERCE_TIMEOUT_SECONDS")
    firing_upload_folder: str = Field(default="/firing-worksheet-Uploads", alias="FIRING_UPLOAD_FOLDER")


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_cors_origins() -> list[str]:
    settings = get_settings()
    return [origin.strip() for origin in settings.cors_allow_origins.split(",") if origin.strip()]
