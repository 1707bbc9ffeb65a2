"""API routes package."""

from . import (
    health,
    ping,
    scale,
    udp,
    volumes,
)


__all__ = [
    "health",
    "ping",
    "scale",
    "udp",
    "volumes",
]
