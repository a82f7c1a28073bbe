"""Data contracts for the HMS proxy endpoints."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AuthTokenRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    room_id: str | None = Field(default=None, alias="roomId", description="HMS room to join")
    user_id: str | None = Field(default=None, alias="userId", description="Opaque user identifier")
    role: str | None = Field(default=None, description="HMS role; defaults to the configured role")


class AuthTokenResponse(BaseModel):
    token: str = Field(..., description="HS256 app token for the HMS SDK")


class CreateRoomRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str | None = Field(default=None, description="Human-assigned room name")
    description: str | None = None


class RoomMissingResponse(BaseModel):
    exists: bool = False


class ErrorResponse(BaseModel):
    error: str
