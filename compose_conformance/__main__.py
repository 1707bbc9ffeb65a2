"""Run the target service: ``python -m compose_conformance``."""

from __future__ import annotations

import uvicorn

from compose_conformance.api.app import create_app
from compose_conformance.core.config import settings
from compose_conformance.core.logging import setup_logging


def main() -> None:
    setup_logging()
    uvicorn.run(
        create_app(),
        host=settings.http_host,
        port=settings.http_port,
        log_config=None,
        timeout_keep_alive=60,
    )


if __name__ == "__main__":
    main()
