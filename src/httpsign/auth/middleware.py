"""ASGI middleware that admits only correctly signed requests."""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any

from starlette import status
from starlette.responses import JSONResponse
from starlette.websockets import WebSocketClose

from httpsign.auth.protocol import RequestAuthenticator
from httpsign.errors import ErrorMapper, HTTPSignatureError
from httpsign.request import HTTPRequest

logger = logging.getLogger(__name__)

# Key id of the authenticated caller, visible to the wrapped app
auth_key_id_var: ContextVar[str | None] = ContextVar("auth_key_id", default=None)

REALM = "httpsign"


class SignatureAuthMiddleware:
    """ASGI middleware that verifies request signatures and sets ``auth_key_id_var``.

    The request body is buffered so the digest can be checked, then replayed
    to the wrapped app. WebSocket handshakes are verified as bodiless GET
    requests; other scope types such as ``lifespan`` pass through.

    Args:
        app: The ASGI application to wrap.
        authenticator: A ``RequestAuthenticator`` implementation.
        exempt_paths: Exact paths that bypass authentication.
        exempt_prefixes: Path prefixes that bypass authentication.
        required_headers: Header names advertised in ``WWW-Authenticate`` on
            401 responses. Defaults to the authenticator's own list when it
            exposes one.
    """

    def __init__(
        self,
        app: Any,
        authenticator: RequestAuthenticator,
        *,
        exempt_paths: set[str] | None = None,
        exempt_prefixes: set[str] | None = None,
        required_headers: tuple[str, ...] | None = None,
    ) -> None:
        self._app = app
        self._authenticator = authenticator
        self._exempt_paths = exempt_paths if exempt_paths is not None else {"/health"}
        self._exempt_prefixes = exempt_prefixes or set()
        if required_headers is None:
            required_headers = getattr(authenticator, "required_headers", ())
        self._required_headers = tuple(required_headers)
        self._error_mapper = ErrorMapper()

    def _is_exempt(self, path: str) -> bool:
        """Check if a path is exempt from authentication."""
        if path in self._exempt_paths:
            return True
        return any(path.startswith(prefix) for prefix in self._exempt_prefixes)

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self._app(scope, receive, send)
            return

        path = scope.get("path", "")
        if self._is_exempt(path):
            await self._app(scope, receive, send)
            return

        if scope["type"] == "websocket":
            await self._handle_websocket(scope, receive, send)
            return

        body = await self._read_body(receive)
        request = HTTPRequest.from_scope(scope, body)
        verdict = self._authenticator.authenticate(request)

        if not verdict.accepted:
            await self._send_error(scope, receive, send, verdict.error)
            return

        token = auth_key_id_var.set(verdict.key_id)
        try:
            await self._app(scope, self._replay(body, receive), send)
        finally:
            auth_key_id_var.reset(token)

    async def _handle_websocket(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        """Verify the handshake as a bodiless GET; close with 1008 on rejection."""
        verdict = self._authenticator.authenticate(HTTPRequest.from_scope(scope))
        if not verdict.accepted:
            logger.debug("Rejected websocket handshake on %s", scope.get("path", ""))
            await WebSocketClose(code=status.WS_1008_POLICY_VIOLATION)(scope, receive, send)
            return

        token = auth_key_id_var.set(verdict.key_id)
        try:
            await self._app(scope, receive, send)
        finally:
            auth_key_id_var.reset(token)

    @staticmethod
    async def _read_body(receive: Any) -> bytes:
        """Drain the ``http.request`` messages of one request into bytes."""
        chunks: list[bytes] = []
        while True:
            message = await receive()
            if message["type"] != "http.request":
                break
            chunks.append(message.get("body", b""))
            if not message.get("more_body", False):
                break
        return b"".join(chunks)

    @staticmethod
    def _replay(body: bytes, receive: Any) -> Any:
        """Return a ``receive`` callable that first yields the buffered body."""
        sent = False

        async def replay_receive() -> dict[str, Any]:
            nonlocal sent
            if not sent:
                sent = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        return replay_receive

    async def _send_error(
        self,
        scope: dict[str, Any],
        receive: Any,
        send: Any,
        error: HTTPSignatureError | None,
    ) -> None:
        """Send a JSON error response for a rejected request."""
        exc: Exception = error if error is not None else HTTPSignatureError("Request rejected")
        status_code = self._error_mapper.status_code(exc)
        headers: dict[str, str] = {}
        if status_code == 401:
            signed = " ".join(self._required_headers)
            headers["www-authenticate"] = f'Signature realm="{REALM}",headers="{signed}"'
        response = JSONResponse(self._error_mapper.to_response(exc), status_code=status_code, headers=headers)
        await response(scope, receive, send)
