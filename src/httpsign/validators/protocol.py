"""Validator protocol for checks that run before signature verification."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from httpsign.request import SignedRequest


@runtime_checkable
class Validator(Protocol):
    """Protocol for request pre-checks.

    Implementations hold only static configuration and are invoked once per
    request, in chain order.
    """

    def validate(self, request: SignedRequest) -> None:
        """Check ``request``.

        Raises:
            HTTPSignatureError: The request is rejected.
        """
        ...
