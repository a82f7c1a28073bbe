"""HMS app token issuance.

Tokens are self-signed HS256 JWTs built from the access key and signed with the
app secret, so issuing one needs no call to the HMS API and creates no
server-side state."""
from __future__ import annotations

import time
from typing import Any
from uuid import uuid4

import jwt

from ..core.config import settings
from ..core.errors import ConfigurationError
from .credentials import CredentialSet

TOKEN_ALGORITHM = "HS256"
TOKEN_TYPE = "app"
TOKEN_VERSION = 2


def build_payload(
    access_key: str,
    room_id: str,
    user_id: str,
    role: str,
    *,
    issued_at: int,
    ttl_seconds: int,
) -> dict[str, Any]:
    return {
        "access_key": access_key,
        "room_id": room_id,
        "user_id": user_id,
        "role": role,
        "type": TOKEN_TYPE,
        "version": TOKEN_VERSION,
        "iat": issued_at,
        "nbf": issued_at,
        "exp": issued_at + ttl_seconds,
        "jti": str(uuid4()),
    }


def issue_token(
    credentials: CredentialSet,
    room_id: str,
    user_id: str,
    role: str | None = None,
    *,
    now: float | None = None,
    ttl_seconds: int | None = None,
) -> str:
    """Produce a signed HMS app token for one user in one room."""

    if not credentials.access_key or not credentials.app_secret:
        raise ConfigurationError(
            "HMS App credentials not configured. Please set them in admin settings."
        )

    issued_at = int(now if now is not None else time.time())
    payload = build_payload(
        credentials.access_key,
        room_id,
        user_id,
        role or settings.hms_default_role,
        issued_at=issued_at,
        ttl_seconds=ttl_seconds or settings.hms_token_ttl_seconds,
    )
    return jwt.encode(payload, credentials.app_secret, algorithm=TOKEN_ALGORITHM)
