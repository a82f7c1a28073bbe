"""HMS token issuance and room management endpoints."""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends

from ..core.errors import RoomNotFoundError, missing_fields_error
from ..schemas.hms import (
    AuthTokenRequest,
    AuthTokenResponse,
    CreateRoomRequest,
    ErrorResponse,
    RoomMissingResponse,
)
from ..services import tokens as token_service
from ..services.credentials import CredentialResolver, get_credential_resolver
from ..services.hms import HmsClient, get_hms_client

logger = logging.getLogger(__name__)

router = APIRouter(responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})


@router.post("/auth-token", response_model=AuthTokenResponse)
async def create_auth_token(
    payload: AuthTokenRequest | None = None,
    resolver: CredentialResolver = Depends(get_credential_resolver),
) -> AuthTokenResponse:
    """Return a signed app token for joining an HMS room."""

    payload = payload or AuthTokenRequest()
    logger.info("Auth token request: room=%s user=%s role=%s", payload.room_id, payload.user_id, payload.role)

    missing = [name for name, value in (("roomId", payload.room_id), ("userId", payload.user_id)) if not value]
    if missing:
        raise missing_fields_error(missing)

    credentials = await resolver.resolve()
    token = token_service.issue_token(credentials, payload.room_id, payload.user_id, payload.role)

    logger.info("Auth token generated for room %s", payload.room_id)
    return AuthTokenResponse(token=token)


@router.post("/rooms")
async def create_room(
    payload: CreateRoomRequest | None = None,
    resolver: CredentialResolver = Depends(get_credential_resolver),
    hms: HmsClient = Depends(get_hms_client),
) -> Any:
    """Create a room on HMS and return it verbatim."""

    payload = payload or CreateRoomRequest()
    logger.info("Create room request: %s", payload.name)

    if not payload.name:
        raise missing_fields_error(["name"])

    credentials = await resolver.resolve()
    return await hms.create_room(credentials.management_token, payload.name, payload.description)


@router.get("/rooms/{room_id}")
async def get_room(
    room_id: str,
    resolver: CredentialResolver = Depends(get_credential_resolver),
    hms: HmsClient = Depends(get_hms_client),
) -> Any:
    """Return the HMS room, or ``{"exists": false}`` when HMS does not know it."""

    logger.info("Check room: %s", room_id)

    credentials = await resolver.resolve()
    try:
        return await hms.get_room(credentials.management_token, room_id)
    except RoomNotFoundError:
        return RoomMissingResponse().model_dump()
