"""Application configuration via pydantic settings."""

from functools import lru_cache
from pathlib import Path

from typing import Any

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed application configuration."""

    app_env: str = Field("local", alias="APP_ENV")
    app_name: str = "Livestock Feeding API"
    api_v1_prefix: str = "/api/v1"

    database_url: str = Field(..., alias="DATABASE_URL")
    sync_database_url: str | None = Field(default=None, alias="SYNC_DATABASE_URL")

    secret_key: str = Field("change-me", alias="SECRET_KEY")
    jwt_secret_key: str = Field(default="", alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    redis_url: str | None = Field(default=None, alias="REDIS_URL")

    default_timezone: str = Field("UTC", alias="DEFAULT_TIMEZONE")

    feeding_calc_url: str | None = Field(default=None, alias="FEEDING_CALC_URL")
    feeding_calc_api_key: str | None = Field(default=None, alias="FEEDING_CALC_API_KEY")
    feeding_calc_timeout_seconds: float = Field(
        5.0, alias="FEEDING_CALC_TIMEOUT_SECONDS"
    )
    feeding_fallback_hours: int = Field(24, alias="FEEDING_FALLBACK_HOURS")
    feeding_upcoming_window_minutes: int = Field(
        120, alias="FEEDING_UPCOMING_WINDOW_MINUTES"
    )
    feeding_reminder_lead_minutes: int = Field(
        15, alias="FEEDING_REMINDER_LEAD_MINUTES"
    )
    feeding_records_limit: int = Field(50, alias="FEEDING_RECORDS_LIMIT")
    vaccination_due_soon_days: int = Field(7, alias="VACCINATION_DUE_SOON_DAYS")

    cors_allow_credentials: bool = Field(default=False, alias="CORS_ALLOW_CREDENTIALS")
    cors_allowlist: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173"], alias="CORS_ALLOWLIST"
    )

    rate_limit_default: str = Field("100/minute", alias="RATE_LIMIT_DEFAULT")
    rate_limit_login: str = Field("10/minute", alias="RATE_LIMIT_LOGIN")

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[3] / ".env",
        case_sensitive=False,
    )

    def model_post_init(self, __context: Any) -> None:
        """Populate JWT secret from the generic secret when not provided."""

        if not self.jwt_secret_key:
            object.__setattr__(self, "jwt_secret_key", self.secret_key)

    @field_validator("cors_allowlist", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()  # type: ignore[call-arg]
