"""Reachability probe routes."""

from __future__ import annotations

import httpx
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse, Response

from compose_conformance.api.dependencies import get_http_client
from compose_conformance.core.logging import get_logger
from compose_conformance.schemas.common import ValueResponse


logger = get_logger("api.ping")

router = APIRouter()

LOCAL_PONG = "PONG FROM TARGET"


def _probe_failure(message: str) -> JSONResponse:
    # Plain envelope with a 400 status; compliance expectations read the body only.
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ValueResponse(response=message).model_dump(),
    )


@router.get(
    "/ping",
    response_model=ValueResponse,
    summary="Reachability probe",
    description=(
        "Without an address, confirms the service itself is reachable. "
        "With an address, fetches http://<address> from inside the deployment "
        "and relays the remote body verbatim."
    ),
    responses={
        400: {"model": ValueResponse, "description": "Remote address unreachable"},
    },
)
async def ping(
    address: str = Query("", description="host:port/path to probe from this service"),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    if not address:
        return ValueResponse(response=LOCAL_PONG)

    url = f"http://{address}"
    try:
        async with client.stream("GET", url) as remote:
            try:
                body = await remote.aread()
            except httpx.HTTPError as e:
                logger.warning(f"Reading body from {address} failed: {e}")
                return _probe_failure(f"Could not read body from response: {e}")
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.info(f"Address {address} unreachable: {e.__class__.__name__}")
        return _probe_failure(f"Could not reach address: {address}")

    return Response(
        content=body,
        status_code=status.HTTP_200_OK,
        media_type=remote.headers.get("content-type", "text/plain; charset=utf-8"),
    )
