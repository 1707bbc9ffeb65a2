"""Pydantic schemas for target service responses."""

from .common import ErrorResponse, HealthResponse, UdpRequest, ValueResponse


__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "UdpRequest",
    "ValueResponse",
]
