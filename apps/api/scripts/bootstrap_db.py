"""Create the credential table and seed it from environment settings for development."""
from __future__ import annotations

import asyncio
import sys

from sqlalchemy import update

from app.core.config import settings
from app.db.session import SessionLocal, engine
from app.models.admin_api_setting import AdminApiSetting
from app.models.base import Base


async def create_schema() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_credentials() -> bool:
    """Insert an active row from HMS_* settings, deactivating older rows."""

    if not (settings.hms_management_token or settings.hms_access_key or settings.hms_app_secret):
        return False

    async with SessionLocal() as session:
        async with session.begin():
            await session.execute(
                update(AdminApiSetting).where(AdminApiSetting.is_active.is_(True)).values(is_active=False)
            )
            session.add(
                AdminApiSetting(
                    hms_management_token=settings.hms_management_token,
                    hms_access_key=settings.hms_access_key,
                    hms_secret=settings.hms_app_secret,
                    is_active=True,
                )
            )
    return True


async def main() -> int:
    if engine is None or SessionLocal is None:
        print("DATABASE_URL is not set; nothing to bootstrap.")
        return 1

    await create_schema()
    seeded = await seed_credentials()
    await engine.dispose()

    print("Schema ready." + (" Seeded active HMS credentials." if seeded else " No HMS_* settings to seed."))
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
