"""Tests for credential caching and fallback resolution."""
from __future__ import annotations

from types import SimpleNamespace

import pytest

from app.core.config import Settings
from app.services import credentials

STATIC = credentials.CredentialSet("env-mgmt", "env-key", "env-secret")
FROM_DB = credentials.CredentialSet("db-mgmt", "db-key", "db-secret")


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class CountingLoader:
    def __init__(self, result: credentials.CredentialSet | None = None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls = 0

    async def __call__(self) -> credentials.CredentialSet | None:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result


def _settings() -> Settings:
    return Settings(
        _env_file=None,
        hms_management_token="env-mgmt",
        hms_access_key="env-key",
        hms_app_secret="env-secret",
    )


def _resolver(loader: CountingLoader, cache: credentials.CredentialCache, clock: FakeClock):
    return credentials.build_resolver(_settings(), cache=cache, loader=loader, clock=clock)


def test_cache_staleness_is_a_pure_function_of_now() -> None:
    cache = credentials.CredentialCache(ttl_seconds=300)
    assert cache.is_stale(0.0)

    cache.store(FROM_DB, now=1_000.0)
    assert not cache.is_stale(1_000.0)
    assert not cache.is_stale(1_299.9)
    assert cache.is_stale(1_300.0)

    cache.clear()
    assert cache.entry is None
    assert cache.is_stale(1_000.0)


@pytest.mark.asyncio
@pytest.mark.parametrize("age", [0.0, 1.0, 150.0, 299.0])
async def test_fresh_cache_skips_database(age: float) -> None:
    clock = FakeClock()
    cache = credentials.CredentialCache(ttl_seconds=300)
    cache.store(FROM_DB, now=clock.now)
    clock.now += age
    loader = CountingLoader(result=credentials.CredentialSet("other", "other", "other"))

    result = await _resolver(loader, cache, clock).resolve()

    assert result == FROM_DB
    assert loader.calls == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("age", [300.0, 301.0, 3_600.0])
async def test_stale_cache_refreshes_once(age: float) -> None:
    clock = FakeClock()
    cache = credentials.CredentialCache(ttl_seconds=300)
    cache.store(STATIC, now=clock.now)
    clock.now += age
    loader = CountingLoader(result=FROM_DB)

    result = await _resolver(loader, cache, clock).resolve()

    assert result == FROM_DB
    assert loader.calls == 1
    assert cache.entry == FROM_DB
    assert cache.fetched_at == clock.now


@pytest.mark.asyncio
async def test_successful_refresh_serves_later_calls_from_cache() -> None:
    clock = FakeClock()
    cache = credentials.CredentialCache(ttl_seconds=300)
    loader = CountingLoader(result=FROM_DB)
    resolver = _resolver(loader, cache, clock)

    first = await resolver.resolve()
    clock.now += 60
    second = await resolver.resolve()

    assert first == second == FROM_DB
    assert loader.calls == 1


@pytest.mark.asyncio
async def test_missing_row_falls_back_to_static_every_call() -> None:
    clock = FakeClock()
    cache = credentials.CredentialCache(ttl_seconds=300)
    loader = CountingLoader(result=None)
    resolver = _resolver(loader, cache, clock)

    assert await resolver.resolve() == STATIC
    assert await resolver.resolve() == STATIC
    assert loader.calls == 2
    assert cache.entry is None


@pytest.mark.asyncio
async def test_database_error_returns_static_and_keeps_cache() -> None:
    clock = FakeClock()
    cache = credentials.CredentialCache(ttl_seconds=300)
    cache.store(FROM_DB, now=clock.now)
    clock.now += 900
    loader = CountingLoader(error=RuntimeError("connection refused"))

    result = await _resolver(loader, cache, clock).resolve()

    assert result == STATIC
    assert loader.calls == 1
    assert cache.entry == FROM_DB
    assert cache.fetched_at == 1_000.0


@pytest.mark.asyncio
async def test_resolver_without_results_returns_empty_credentials() -> None:
    resolver = credentials.CredentialResolver([])

    result = await resolver.resolve()

    assert result == credentials.CredentialSet("", "", "")


def test_build_resolver_orders_cache_database_static() -> None:
    resolver = credentials.build_resolver(_settings(), loader=CountingLoader())

    assert [provider.name for provider in resolver.providers] == ["cache", "database", "static"]


@pytest.mark.asyncio
async def test_load_from_database_without_engine(monkeypatch) -> None:
    monkeypatch.setattr(credentials.db_session, "SessionLocal", None)

    assert await credentials.load_from_database() is None


@pytest.mark.asyncio
async def test_load_from_database_maps_newest_active_row(monkeypatch) -> None:
    session = object()

    class _SessionContext:
        async def __aenter__(self):
            return session

        async def __aexit__(self, exc_type, exc, tb):
            return False

    async def get_latest_active_stub(received):
        assert received is session
        return SimpleNamespace(hms_management_token="db-mgmt", hms_access_key="db-key", hms_secret=None)

    monkeypatch.setattr(credentials.db_session, "SessionLocal", lambda: _SessionContext())
    monkeypatch.setattr(credentials.api_settings_repo, "get_latest_active", get_latest_active_stub)

    result = await credentials.load_from_database()

    assert result == credentials.CredentialSet("db-mgmt", "db-key", "")
