"""Authenticator protocol for pluggable request-authentication backends."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from httpsign.errors import HTTPSignatureError
from httpsign.request import SignedRequest


@dataclass(frozen=True)
class Verdict:
    """Outcome of authenticating one request.

    Attributes:
        key_id: Key id the request was signed with, when accepted.
        error: Rejection reason, when rejected.
    """

    key_id: str | None = None
    error: HTTPSignatureError | None = None

    @property
    def accepted(self) -> bool:
        return self.error is None and self.key_id is not None


@runtime_checkable
class RequestAuthenticator(Protocol):
    """Protocol for authentication backends.

    Implementations inspect a request and return a ``Verdict``; they never
    raise for a rejected request.
    """

    def authenticate(self, request: SignedRequest) -> Verdict:
        """Authenticate a request.

        Args:
            request: The inbound request, body included.

        Returns:
            An accepted ``Verdict`` carrying the key id, or a rejected one
            carrying the error.
        """
        ...
