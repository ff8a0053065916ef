"""Shared HTTP server helpers."""

from .server import SECURITY_HEADERS, build_server, create_app, security_headers

__all__ = ["SECURITY_HEADERS", "build_server", "create_app", "security_headers"]
