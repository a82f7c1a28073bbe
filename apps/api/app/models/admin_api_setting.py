"""Admin-managed HMS credential rows."""
from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AdminApiSetting(Base):
    """HMS credentials entered through the admin console.

    Only the newest row with ``is_active`` set is ever used by the proxy.
    """

    __tablename__ = "admin_api_settings"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid4()))
    hms_management_token: Mapped[str | None] = mapped_column(Text)
    hms_access_key: Mapped[str | None] = mapped_column(String)
    hms_secret: Mapped[str | None] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
