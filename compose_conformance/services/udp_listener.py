"""UDP capture listener.

Keeps the payload of the most recent datagram so that ``GET /udp`` can
prove a UDP port declared in the deployment actually reaches the service.
The listener is an asyncio datagram endpoint owned by the application
lifespan, so it starts and stops with the HTTP server.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Optional

from pydantic import ValidationError

from compose_conformance.core.logging import get_logger
from compose_conformance.schemas.common import UdpRequest


logger = get_logger("udp")


class PayloadCell:
    """Lock-guarded holder for the last received payload (last write wins)."""

    def __init__(self, initial: str = ""):
        self._value = initial
        self._lock = threading.Lock()

    def get(self) -> str:
        with self._lock:
            return self._value

    def set(self, value: str) -> None:
        with self._lock:
            self._value = value


def decode_datagram(data: bytes) -> Optional[str]:
    """Extract the ``request`` string from a datagram, or None if malformed."""
    try:
        return UdpRequest.model_validate_json(data).request
    except ValidationError as e:
        logger.warning(f"Dropping malformed datagram ({len(data)} bytes): {e.error_count()} error(s)")
        return None


class UdpCaptureProtocol(asyncio.DatagramProtocol):
    """Writes every well-formed datagram payload into a PayloadCell."""

    def __init__(self, cell: PayloadCell):
        self.cell = cell

    def datagram_received(self, data: bytes, addr: tuple) -> None:
        value = decode_datagram(data)
        if value is None:
            return
        self.cell.set(value)
        logger.debug(f"Captured datagram from {addr[0]}:{addr[1]}")

    def error_received(self, exc: Exception) -> None:
        logger.warning(f"UDP socket error: {exc}")


class UdpListener:
    """Background datagram endpoint with an explicit start/stop lifecycle."""

    def __init__(self, host: str, port: int, cell: PayloadCell | None = None):
        self.host = host
        self.port = port
        self.cell = cell or PayloadCell()
        self._transport: asyncio.DatagramTransport | None = None

    @property
    def running(self) -> bool:
        return self._transport is not None and not self._transport.is_closing()

    @property
    def bound_port(self) -> int | None:
        """Actual port after binding (useful when started on port 0)."""
        if self._transport is None:
            return None
        return self._transport.get_extra_info("sockname")[1]

    async def start(self) -> None:
        if self.running:
            return
        loop = asyncio.get_running_loop()
        transport, _ = await loop.create_datagram_endpoint(
            lambda: UdpCaptureProtocol(self.cell),
            local_addr=(self.host, self.port),
        )
        self._transport = transport
        logger.info(f"UDP listener running on {self.host}:{self.bound_port}")

    async def stop(self) -> None:
        if self._transport is None:
            return
        self._transport.close()
        self._transport = None
        logger.info("UDP listener stopped")
