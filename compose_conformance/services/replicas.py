"""Replica counting through the deployment's service discovery."""

from __future__ import annotations

import asyncio
import socket

from compose_conformance.core.logging import get_logger


logger = get_logger("replicas")


async def count_replicas(service: str) -> int:
    """Count distinct addresses the service name resolves to.

    Compose networks publish one DNS record per replica of a scaled service.
    A name that does not resolve counts as zero replicas.
    """
    loop = asyncio.get_running_loop()
    try:
        infos = await loop.getaddrinfo(service, None, type=socket.SOCK_STREAM)
    except socket.gaierror as e:
        logger.info(f"Service {service!r} did not resolve: {e}")
        return 0
    addresses = {info[4][0] for info in infos}
    return len(addresses)
