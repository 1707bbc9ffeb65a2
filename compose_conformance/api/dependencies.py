"""API dependencies for shared resources owned by the application lifespan."""

from __future__ import annotations

import httpx
from fastapi import Request

from compose_conformance.services.udp_listener import PayloadCell, UdpListener


__all__ = [
    "get_http_client",
    "get_payload_cell",
    "get_udp_listener",
]


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Outbound client used by the reachability probe."""
    return request.app.state.http_client


def get_udp_listener(request: Request) -> UdpListener:
    return request.app.state.udp_listener


def get_payload_cell(request: Request) -> PayloadCell:
    """Shared cell holding the last captured datagram payload."""
    return request.app.state.udp_listener.cell
