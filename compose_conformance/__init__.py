"""Compose specification conformance harness and its target service."""

__version__ = "1.0.0"
