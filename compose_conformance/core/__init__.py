"""Core infrastructure: settings, logging, exceptions."""

from .config import settings
from .exceptions import (
    AppException,
    BadRequestError,
    NotFoundError,
)


__all__ = [
    "AppException",
    "BadRequestError",
    "NotFoundError",
    "settings",
]
