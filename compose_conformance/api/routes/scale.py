"""Replica report routes."""

from __future__ import annotations

from fastapi import APIRouter, Query

from compose_conformance.core.config import settings
from compose_conformance.schemas.common import ValueResponse
from compose_conformance.services.replicas import count_replicas


router = APIRouter()


@router.get(
    "/scalechecker",
    response_model=ValueResponse,
    summary="Replica count",
    description="Counts the replicas of a service visible through the deployment network.",
)
async def scale_checker(
    service: str = Query("", description="Service name; defaults to SCALE_SERVICE"),
) -> ValueResponse:
    count = await count_replicas(service or settings.scale_service)
    return ValueResponse(response=str(count))
