"""Minimal FastAPI and uvicorn helpers for the paste HTTP surface."""

from __future__ import annotations

from typing import Awaitable, Callable

import uvicorn
from fastapi import FastAPI, Request, Response

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


def create_app(*, title: str = "pastebin", version: str = "0.0.0") -> FastAPI:
    """Create a FastAPI app with project defaults and security headers."""
    app = FastAPI(title=title, version=version)
    app.middleware("http")(security_headers)
    return app


async def security_headers(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Add browser hardening headers to every response."""
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


def build_server(
    app: FastAPI,
    *,
    host: str = "127.0.0.1",
    port: int = 8080,
    log_level: str = "info",
    timeout_graceful_shutdown: float | None = None,
) -> uvicorn.Server:
    """Build one uvicorn server for ``app`` without starting it."""
    config = uvicorn.Config(
        app,
        host=host,
        port=port,
        log_level=log_level.lower(),
        log_config=None,
        timeout_graceful_shutdown=(
            None
            if timeout_graceful_shutdown is None
            else int(timeout_graceful_shutdown)
        ),
    )
    return uvicorn.Server(config)
