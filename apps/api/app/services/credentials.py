"""HMS credential resolution.

Credentials come from the first provider that yields a result: a short-lived
in-memory cache, the newest active ``admin_api_settings`` row, and finally the
static values from process configuration. The cache is one global slot with no
lock; concurrent refreshes both hit the database and the last write wins.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Protocol, Sequence

from ..core.config import Settings, settings
from ..db import session as db_session
from ..models.admin_api_setting import AdminApiSetting
from ..repositories import api_settings as api_settings_repo

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True, slots=True)
class CredentialSet:
    management_token: str = ""
    access_key: str = ""
    app_secret: str = ""

    @classmethod
    def from_row(cls, row: AdminApiSetting) -> "CredentialSet":
        return cls(
            management_token=row.hms_management_token or "",
            access_key=row.hms_access_key or "",
            app_secret=row.hms_secret or "",
        )

    @classmethod
    def from_settings(cls, config: Settings) -> "CredentialSet":
        return cls(
            management_token=config.hms_management_token,
            access_key=config.hms_access_key,
            app_secret=config.hms_app_secret,
        )


CredentialLoader = Callable[[], Awaitable[CredentialSet | None]]


@dataclass
class CredentialCache:
    """Single cache slot holding the last credentials read from the database."""

    ttl_seconds: float = 5 * 60
    entry: CredentialSet | None = None
    fetched_at: float = 0.0

    def is_stale(self, now: float) -> bool:
        return self.entry is None or now - self.fetched_at >= self.ttl_seconds

    def get(self, now: float) -> CredentialSet | None:
        if self.is_stale(now):
            return None
        return self.entry

    def store(self, credentials: CredentialSet, now: float) -> None:
        self.entry = credentials
        self.fetched_at = now

    def clear(self) -> None:
        self.entry = None
        self.fetched_at = 0.0


class CredentialProvider(Protocol):
    name: str

    async def fetch(self) -> CredentialSet | None:
        ...


class CachedCredentials:
    name = "cache"

    def __init__(self, cache: CredentialCache, clock: Clock = time.monotonic) -> None:
        self._cache = cache
        self._clock = clock

    async def fetch(self) -> CredentialSet | None:
        credentials = self._cache.get(self._clock())
        if credentials is not None:
            logger.debug("Using cached HMS credentials")
        return credentials


class DatabaseCredentials:
    """Read credentials from the database and refresh the cache on success."""

    name = "database"

    def __init__(self, loader: CredentialLoader, cache: CredentialCache, clock: Clock = time.monotonic) -> None:
        self._loader = loader
        self._cache = cache
        self._clock = clock

    async def fetch(self) -> CredentialSet | None:
        try:
            credentials = await self._loader()
        except Exception as exc:  # noqa: BLE001 - degrade to static configuration
            logger.warning("Error fetching HMS credentials from database: %s", exc)
            return None

        if credentials is None:
            return None

        self._cache.store(credentials, self._clock())
        logger.info("HMS credentials fetched from database")
        return credentials


class StaticCredentials:
    name = "static"

    def __init__(self, config: Settings) -> None:
        self._config = config

    async def fetch(self) -> CredentialSet | None:
        return CredentialSet.from_settings(self._config)


class CredentialResolver:
    """Return the first credential set produced by an ordered provider chain."""

    def __init__(self, providers: Sequence[CredentialProvider]) -> None:
        self._providers = list(providers)

    @property
    def providers(self) -> list[CredentialProvider]:
        return list(self._providers)

    async def resolve(self) -> CredentialSet:
        """Return best-effort credentials; never raises."""

        for provider in self._providers:
            credentials = await provider.fetch()
            if credentials is not None:
                return credentials
        return CredentialSet()


async def load_from_database() -> CredentialSet | None:
    """Load the newest active credential row, or ``None`` without a database."""

    if db_session.SessionLocal is None:
        return None

    async with db_session.SessionLocal() as session:
        row = await api_settings_repo.get_latest_active(session)

    if row is None:
        logger.info("No active HMS credentials found in database")
        return None
    return CredentialSet.from_row(row)


def build_resolver(
    config: Settings = settings,
    *,
    cache: CredentialCache | None = None,
    loader: CredentialLoader = load_from_database,
    clock: Clock = time.monotonic,
) -> CredentialResolver:
    """Assemble the cache, database and static providers in lookup order."""

    cache = cache if cache is not None else CredentialCache(ttl_seconds=config.credentials_cache_ttl_seconds)
    return CredentialResolver(
        [
            CachedCredentials(cache, clock),
            DatabaseCredentials(loader, cache, clock),
            StaticCredentials(config),
        ]
    )


credential_cache = CredentialCache(ttl_seconds=settings.credentials_cache_ttl_seconds)
resolver = build_resolver(cache=credential_cache)


def get_credential_resolver() -> CredentialResolver:
    """FastAPI dependency returning the process-wide resolver."""

    return resolver
