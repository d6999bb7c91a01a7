"""Signed webhook receiver for ASGI applications."""

__version__ = "1.0.0"
