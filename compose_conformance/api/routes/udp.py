"""UDP capture routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from compose_conformance.api.dependencies import get_payload_cell
from compose_conformance.schemas.common import ValueResponse
from compose_conformance.services.udp_listener import PayloadCell


router = APIRouter()


@router.get(
    "/udp",
    response_model=ValueResponse,
    summary="Last captured datagram",
    description="Returns the request string of the most recently received UDP datagram.",
)
async def last_datagram(cell: PayloadCell = Depends(get_payload_cell)) -> ValueResponse:
    return ValueResponse(response=cell.get())
