"""Application configuration for the HMS proxy."""
from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_env: str = Field(default="development")
    port: int = Field(default=10000)
    log_level: str = Field(default="INFO")
    cors_allow_origins: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])

    hms_management_token: str = Field(default="")
    hms_access_key: str = Field(default="")
    hms_app_secret: str = Field(default="")
    hms_api_url: str = Field(default="https://api.100ms.live/v2")
    hms_request_timeout_seconds: float = Field(default=10.0, gt=0)
    hms_default_role: str = Field(default="guest")
    hms_token_ttl_seconds: int = Field(default=24 * 3600, ge=1)

    credentials_cache_ttl_seconds: float = Field(default=5 * 60, ge=0)

    database_url: str = Field(default="")
    database_ssl_required: bool = Field(default=False)

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> object:
        """Allow comma-separated env values for CORS origins."""

        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @property
    def database_configured(self) -> bool:
        return bool(self.database_url.strip())

    @property
    def database_async_url(self) -> str:
        """Return the database URL using the asyncpg driver."""

        url = self.database_url.strip()
        for prefix in ("postgres://", "postgresql://"):
            if url.startswith(prefix):
                return "postgresql+asyncpg://" + url[len(prefix):]
        return url


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


settings = get_settings()
