"""Algorithm protocol for pluggable signing backends."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Algorithm(Protocol):
    """Protocol for signing algorithms.

    Verification is performed by signing the canonical string again and
    comparing the result, so implementations only provide ``sign``.

    Attributes:
        name: Wire-level algorithm token, e.g. ``"hmac-sha256"``.
    """

    name: str

    def sign(self, message: bytes, key: str | bytes) -> bytes:
        """Sign ``message`` with ``key``.

        Raises:
            Any exception on failure; callers treat it as an internal error.
        """
        ...
