"""Client-facing error types for the proxy endpoints."""
from __future__ import annotations

from typing import Any

from fastapi import status


class ProxyError(Exception):
    """Base error rendered to clients as ``{"error": message}``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ProxyError):
    """A required client field was missing."""

    status_code = status.HTTP_400_BAD_REQUEST


class ConfigurationError(ProxyError):
    """HMS credentials are not available from any source."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class UpstreamError(ProxyError):
    """The HMS API answered with a non-success status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message, status_code=status_code)


class RoomNotFoundError(UpstreamError):
    """The HMS API reported that a room does not exist."""


def missing_fields_error(fields: list[str]) -> ValidationError:
    """Build the 400 error for absent request fields."""

    if len(fields) == 1:
        return ValidationError(f"Missing required field: {fields[0]}")
    return ValidationError(f"Missing required fields: {' and '.join(fields)}")


def platform_error(status_code: int, body: Any, reason: str) -> UpstreamError:
    """Translate a non-success HMS response into a client error.

    The message prefers the platform's ``message`` then ``error`` field and
    falls back to the HTTP reason phrase when the body carries neither.
    """

    message = ""
    if isinstance(body, dict):
        message = str(body.get("message") or body.get("error") or "")
    message = message or reason or "HMS API Error"

    if status_code == status.HTTP_404_NOT_FOUND:
        return RoomNotFoundError(status_code, message)
    return UpstreamError(status_code, message)
