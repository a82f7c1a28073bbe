"""Database session management."""
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from ..core.config import settings


def _build_engine() -> AsyncEngine | None:
    """Create the async engine, or return ``None`` when no database is configured."""

    if not settings.database_configured:
        return None

    connect_args: dict[str, object] = {}
    if settings.database_ssl_required:
        connect_args["ssl"] = True

    return create_async_engine(
        settings.database_async_url,
        echo=False,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


engine = _build_engine()
SessionLocal: async_sessionmaker[AsyncSession] | None = (
    async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession) if engine is not None else None
)
