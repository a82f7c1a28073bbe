"""FastAPI application for the HMS proxy backend."""
from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .core.config import settings
from .core.errors import ProxyError
from .routers import hms as hms_router

logger = logging.getLogger(__name__)


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    logger.info("HMS proxy backend starting on port %s", settings.port)
    logger.info(
        "HMS token: %s",
        "configured (env)" if settings.hms_management_token else "will load from database",
    )
    logger.info("Database: %s", "configured" if settings.database_configured else "not configured")
    yield


app = FastAPI(title="HMS Proxy API", version="0.1.0", lifespan=lifespan)

if settings.cors_allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )


@app.middleware("http")
async def log_requests(request: Request, call_next) -> Response:
    """Log each request and turn unexpected failures into JSON 500s."""

    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as exc:  # noqa: BLE001 - single fallback path for handler failures
        logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
        response = JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc) or "Internal server error"},
        )

    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


@app.exception_handler(ProxyError)
async def proxy_error_handler(_: Request, exc: ProxyError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Request failed: %s", exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Request validation failed: %s", exc.errors())
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Invalid request body"})


app.include_router(hms_router.router, prefix="/api/hms", tags=["hms"])


@app.get("/", tags=["meta"])
async def index() -> dict[str, str]:
    """Liveness banner."""

    return {"status": "HMS Proxy Backend is running", "timestamp": _utc_timestamp()}


@app.head("/", tags=["meta"])
async def index_head() -> Response:
    """Fast health checks issue HEAD /; answer with 200 to avoid noisy 405s."""

    return Response(status_code=200)


@app.get("/health", tags=["meta"])
async def health() -> dict[str, object]:
    """Report whether a management token is configured in the environment."""

    return {
        "status": "ok",
        "hasToken": bool(settings.hms_management_token),
        "timestamp": _utc_timestamp(),
    }


def serve() -> None:
    """Run the API under uvicorn."""

    import uvicorn

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    serve()
