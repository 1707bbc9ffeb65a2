"""Target service application factory."""

from __future__ import annotations

import time
import uuid
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

from compose_conformance.core.config import settings
from compose_conformance.core.exceptions import register_exception_handlers
from compose_conformance.core.logging import get_logger, request_id_var
from compose_conformance.schemas.common import ErrorResponse
from compose_conformance.services.udp_listener import UdpListener

from .routes import health, ping, scale, udp, volumes


logger = get_logger("api")


def create_http_client(**kwargs) -> httpx.AsyncClient:
    """Outbound client for /ping; redirects are followed to the final body."""
    return httpx.AsyncClient(
        timeout=settings.ping_timeout, follow_redirects=True, **kwargs
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the UDP listener and the outbound probe client for the app's lifetime."""
    listener: UdpListener = app.state.udp_listener
    await listener.start()
    app.state.http_client = create_http_client()

    try:
        yield
    finally:
        await listener.stop()
        await app.state.http_client.aclose()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Add request ID to all requests for tracing."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        request_id_var.set(request_id)

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with its outcome and duration."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.monotonic()

        response = await call_next(request)

        duration = time.monotonic() - start_time
        path = request.url.path

        logger.info(
            f"{request.method} {path} -> {response.status_code} ({duration:.3f}s)",
            extra={
                "extra_fields": {
                    "method": request.method,
                    "path": path,
                    "status_code": response.status_code,
                    "duration_ms": int(duration * 1000),
                }
            },
        )

        return response


def create_app(udp_listener: UdpListener | None = None) -> FastAPI:
    """Create and configure the target service application."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Probe service deployed by compose conformance fixtures",
        docs_url="/docs" if settings.debug else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        responses={
            500: {"model": ErrorResponse, "description": "Internal Server Error"},
        },
    )
    app.state.udp_listener = udp_listener or UdpListener(
        settings.udp_host, settings.udp_port
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(ping.router, tags=["Network"])
    app.include_router(volumes.router, tags=["Files"])
    app.include_router(udp.router, tags=["UDP"])
    app.include_router(scale.router, tags=["Scale"])

    return app
