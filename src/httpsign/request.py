"""Inbound request abstraction consumed by the verification pipeline."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from httpsign.constants import HOST


@runtime_checkable
class SignedRequest(Protocol):
    """What the verifier needs to know about a request.

    Attributes:
        method: HTTP method as received.
        target: Path and query string exactly as received.
        host: Host the request was addressed to.
        body: Raw body bytes as delivered.
    """

    method: str
    target: str
    host: str
    body: bytes

    def header(self, name: str) -> str | None:
        """Return the first value of header ``name`` (case-insensitive), or None."""
        ...


@dataclass(frozen=True)
class HTTPRequest:
    """Immutable request snapshot implementing ``SignedRequest``.

    ``headers`` keeps the original order and duplicates; lookups return the
    first value.
    """

    method: str
    target: str
    headers: tuple[tuple[str, str], ...] = ()
    body: bytes = b""
    host: str = ""

    def __post_init__(self) -> None:
        # Accept any iterable of pairs and freeze it
        object.__setattr__(self, "headers", tuple((str(k), str(v)) for k, v in self.headers))
        if not self.host:
            object.__setattr__(self, "host", self.header(HOST) or "")

    def header(self, name: str) -> str | None:
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None

    @classmethod
    def build(
        cls,
        method: str,
        target: str,
        headers: dict[str, str] | Iterable[tuple[str, str]] | None = None,
        body: bytes = b"",
        host: str = "",
    ) -> HTTPRequest:
        """Convenience constructor accepting a header dict or pair list."""
        if isinstance(headers, dict):
            pairs: Iterable[tuple[str, str]] = headers.items()
        else:
            pairs = headers or ()
        return cls(method=method, target=target, headers=tuple(pairs), body=body, host=host)

    @classmethod
    def from_scope(cls, scope: dict[str, Any], body: bytes = b"") -> HTTPRequest:
        """Build a request from an ASGI HTTP scope and its buffered body.

        Uses ``raw_path`` when the server provides it, so the target is the
        path the client actually sent rather than its percent-decoded form.
        """
        headers = tuple(
            (key.decode("latin-1"), value.decode("latin-1")) for key, value in scope.get("headers", [])
        )
        raw_path = scope.get("raw_path")
        # Some servers leave the query string on raw_path
        path = raw_path.split(b"?", 1)[0].decode("latin-1") if raw_path else scope.get("path", "")
        query = scope.get("query_string", b"")
        target = f"{path}?{query.decode('latin-1')}" if query else path

        host = ""
        for key, value in headers:
            if key.lower() == HOST:
                host = value
                break
        if not host and scope.get("server"):
            server_host, server_port = scope["server"]
            host = f"{server_host}:{server_port}" if server_port else server_host

        return cls(method=scope.get("method", "GET"), target=target, headers=headers, body=body, host=host)


async def from_starlette_request(request: Any) -> HTTPRequest:
    """Build an ``HTTPRequest`` from a ``starlette.requests.Request``.

    Reads (and caches, per Starlette) the full body.
    """
    body = await request.body()
    return HTTPRequest.from_scope(request.scope, body)


# Verify protocol compliance at import time
assert isinstance(HTTPRequest("GET", "/"), SignedRequest)
