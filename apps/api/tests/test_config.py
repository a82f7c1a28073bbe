"""Tests for settings parsing."""
from __future__ import annotations

from app.core.config import Settings


def test_defaults_without_environment(monkeypatch) -> None:
    for name in ("HMS_MANAGEMENT_TOKEN", "HMS_ACCESS_KEY", "HMS_APP_SECRET", "DATABASE_URL", "PORT"):
        monkeypatch.delenv(name, raising=False)

    config = Settings(_env_file=None)

    assert config.hms_management_token == ""
    assert config.hms_api_url == "https://api.100ms.live/v2"
    assert config.port == 10000
    assert config.credentials_cache_ttl_seconds == 300
    assert config.hms_token_ttl_seconds == 86400
    assert config.hms_default_role == "guest"
    assert config.database_configured is False


def test_environment_values_are_read(monkeypatch) -> None:
    monkeypatch.setenv("HMS_ACCESS_KEY", "key-from-env")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.example, https://b.example")

    config = Settings(_env_file=None)

    assert config.hms_access_key == "key-from-env"
    assert config.port == 8080
    assert config.cors_allow_origins == ["https://a.example", "https://b.example"]


def test_database_async_url_uses_asyncpg_driver() -> None:
    assert (
        Settings(_env_file=None, database_url="postgres://u:p@db:5432/app").database_async_url
        == "postgresql+asyncpg://u:p@db:5432/app"
    )
    assert (
        Settings(_env_file=None, database_url="postgresql://u:p@db/app").database_async_url
        == "postgresql+asyncpg://u:p@db/app"
    )
    assert (
        Settings(_env_file=None, database_url="postgresql+asyncpg://u:p@db/app").database_async_url
        == "postgresql+asyncpg://u:p@db/app"
    )
