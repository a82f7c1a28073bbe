"""Client for the 100ms (HMS) room management API."""
from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.config import settings
from ..core.errors import ConfigurationError, platform_error

logger = logging.getLogger(__name__)


def _room_id(room: Any) -> Any:
    return room.get("id") if isinstance(room, dict) else None


class HmsClient:
    """Issue management-token authenticated calls against the HMS REST API."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def create_room(self, management_token: str, name: str, description: str | None = None) -> Any:
        """Create a room and return the platform's representation."""

        body = {"name": name, "description": description or ""}
        room = await self._request("POST", "/rooms", management_token, json=body)
        logger.info("Room created: %s", _room_id(room))
        return room

    async def get_room(self, management_token: str, room_id: str) -> Any:
        """Fetch a room; raises ``RoomNotFoundError`` when HMS answers 404."""

        room = await self._request("GET", f"/rooms/{room_id}", management_token)
        logger.info("Room found: %s", _room_id(room))
        return room

    async def _request(self, method: str, path: str, management_token: str, **kwargs: Any) -> Any:
        if not management_token:
            raise ConfigurationError(
                "HMS Management Token not configured. Please set it in admin settings."
            )

        headers = {"Authorization": f"Bearer {management_token}"}
        async with httpx.AsyncClient(
            base_url=self._base_url, timeout=self._timeout, transport=self._transport
        ) as client:
            response = await client.request(method, path, headers=headers, **kwargs)

        if response.is_success:
            return response.json()

        try:
            error_body: Any = response.json()
        except ValueError:
            error_body = None

        logger.warning("HMS API error on %s %s: %s %s", method, path, response.status_code, response.reason_phrase)
        raise platform_error(response.status_code, error_body, response.reason_phrase)


def build_client() -> HmsClient:
    return HmsClient(settings.hms_api_url, timeout=settings.hms_request_timeout_seconds)


hms_client = build_client()


def get_hms_client() -> HmsClient:
    """FastAPI dependency returning the shared HMS client."""

    return hms_client
