"""Expose ORM models."""
from .admin_api_setting import AdminApiSetting

__all__ = [
    "AdminApiSetting",
]
