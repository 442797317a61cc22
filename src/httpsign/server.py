"""Demo HTTP server: a Starlette app guarded by signature verification."""

from __future__ import annotations

import logging
import time as _time
from typing import Any

import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from httpsign.auth.middleware import SignatureAuthMiddleware, auth_key_id_var
from httpsign.auth.protocol import RequestAuthenticator

logger = logging.getLogger(__name__)

_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(
    authenticator: RequestAuthenticator,
    *,
    exempt_paths: set[str] | None = None,
    exempt_prefixes: set[str] | None = None,
) -> Starlette:
    """Build an app that echoes the authenticated key id for any signed request.

    ``/health`` answers without authentication unless ``exempt_paths`` says
    otherwise.
    """
    start_time = _time.monotonic()

    async def _health(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok", "uptime_seconds": round(_time.monotonic() - start_time, 1)})

    async def _echo(request: Request) -> JSONResponse:
        body = await request.body()
        return JSONResponse(
            {
                "key_id": auth_key_id_var.get(),
                "method": request.method,
                "path": request.url.path,
                "body_length": len(body),
            }
        )

    return Starlette(
        routes=[
            Route("/health", endpoint=_health, methods=["GET"]),
            Route("/{path:path}", endpoint=_echo, methods=_ALL_METHODS),
        ],
        middleware=[
            Middleware(
                SignatureAuthMiddleware,
                authenticator=authenticator,
                exempt_paths=exempt_paths,
                exempt_prefixes=exempt_prefixes,
            )
        ],
    )


def validate_host_port(host: str, port: int) -> None:
    """Validate host and port parameters."""
    if not host:
        raise ValueError("Host must not be empty")
    if not isinstance(port, int) or port < 1 or port > 65535:
        raise ValueError(f"Port must be between 1 and 65535, got {port}")


def run(app: Any, host: str = "127.0.0.1", port: int = 8000, log_level: str = "info") -> None:
    """Serve ``app`` with uvicorn. Blocks until shutdown."""
    validate_host_port(host, port)
    logger.info("Starting signed HTTP server on %s:%d", host, port)
    config = uvicorn.Config(app, host=host, port=port, log_level=log_level)
    uvicorn.Server(config).run()
