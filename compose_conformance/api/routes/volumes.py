"""Mounted file relay routes.

Volumes, secrets and configs declared by a deployment all materialize as
files below the mount root; this endpoint reads them back so the harness can
compare contents from outside the deployment.
"""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Query

from compose_conformance.core.config import settings
from compose_conformance.core.exceptions import (
    BadRequestError,
    FileReadError,
    NotFoundError,
)
from compose_conformance.core.logging import get_logger
from compose_conformance.schemas.common import ErrorResponse, ValueResponse


logger = get_logger("api.volumes")

router = APIRouter()


def resolve_mounted_file(root: Path, filename: str) -> Path:
    """Resolve filename below root, refusing paths that escape it."""
    if not filename:
        raise BadRequestError("filename is required")
    base = root.resolve()
    path = (base / filename).resolve()
    if path != base and base not in path.parents:
        raise BadRequestError(
            "filename must stay inside the mount root",
            details={"filename": filename},
        )
    return path


def read_mounted_file(root: Path, filename: str) -> str:
    path = resolve_mounted_file(root, filename)
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise NotFoundError(
            f"File not found: {filename}", details={"filename": filename}
        )
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Reading {path} failed: {e}")
        raise FileReadError(details={"filename": filename, "reason": str(e)})


@router.get(
    "/volumefile",
    response_model=ValueResponse,
    summary="Read a mounted file",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid filename"},
        404: {"model": ErrorResponse, "description": "File not mounted"},
        500: {"model": ErrorResponse, "description": "File unreadable"},
    },
)
async def volume_file(
    filename: str = Query("", description="File name relative to the mount root"),
) -> ValueResponse:
    content = read_mounted_file(Path(settings.volumes_root), filename)
    return ValueResponse(response=content)
