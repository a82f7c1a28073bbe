"""Credential row lookups."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.admin_api_setting import AdminApiSetting


async def get_latest_active(session: AsyncSession) -> AdminApiSetting | None:
    """Return the most recently created active credential row."""

    stmt = (
        select(AdminApiSetting)
        .where(AdminApiSetting.is_active.is_(True))
        .order_by(AdminApiSetting.created_at.desc())
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalars().first()
