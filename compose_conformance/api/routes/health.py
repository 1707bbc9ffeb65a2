"""Health check endpoints."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from compose_conformance.api.dependencies import get_udp_listener
from compose_conformance.core.config import settings
from compose_conformance.schemas.common import HealthResponse
from compose_conformance.services.udp_listener import UdpListener


router = APIRouter()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Used by deployment healthchecks before the harness starts probing.",
)
async def health_check(
    listener: UdpListener = Depends(get_udp_listener),
) -> HealthResponse:
    checks = {"udp_listener": listener.running}
    return HealthResponse(
        status="healthy" if all(checks.values()) else "degraded",
        version=settings.app_version,
        timestamp=datetime.now(timezone.utc),
        checks=checks,
    )
