"""Shared test fixtures for httpsign tests."""

from __future__ import annotations

import base64
import hashlib
import hmac
from collections.abc import Callable
from datetime import datetime, timezone

import pytest

from httpsign.auth import HTTPSignatureAuthenticator
from httpsign.constants import DEFAULT_SIGNED_HEADERS
from httpsign.crypto import HMACSHA256, HMACSHA512
from httpsign.request import HTTPRequest
from httpsign.signer import RequestSigner
from httpsign.store import Secret, SecretStore
from httpsign.validators import DateValidator, DigestValidator

# Frozen server time shared by the date-sensitive fixtures
FIXED_NOW = datetime(2026, 10, 17, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def store() -> SecretStore:
    return SecretStore(
        {
            "read": Secret(key="k1", algorithm=HMACSHA256()),
            "write": Secret(key="k2", algorithm=HMACSHA512()),
        }
    )


@pytest.fixture
def authenticator(store: SecretStore, clock: Callable[[], datetime]) -> HTTPSignatureAuthenticator:
    return HTTPSignatureAuthenticator(store, validators=[DateValidator(clock=clock), DigestValidator()])


@pytest.fixture
def hmac_b64() -> Callable[[str, str], str]:
    """Reference HMAC-SHA256 computed independently of httpsign."""

    def _sign(key: str, message: str) -> str:
        digest = hmac.new(key.encode(), message.encode("latin-1"), hashlib.sha256).digest()
        return base64.b64encode(digest).decode("ascii")

    return _sign


@pytest.fixture
def signed_request(store: SecretStore, clock: Callable[[], datetime]) -> Callable[..., HTTPRequest]:
    """Factory building a request signed the way a well-behaved client would."""

    def _make(
        method: str = "GET",
        target: str = "/a",
        *,
        key_id: str = "read",
        headers: dict[str, str] | None = None,
        body: bytes = b"",
        signed_headers: tuple[str, ...] = DEFAULT_SIGNED_HEADERS,
        host: str = "example.com",
        include_algorithm: bool = True,
    ) -> HTTPRequest:
        signer = RequestSigner(
            key_id,
            store[key_id],
            headers=signed_headers,
            include_algorithm=include_algorithm,
            clock=clock,
        )
        given = dict(headers or {})
        added = signer.sign(method, target, given, body=body, host=host)
        return HTTPRequest.build(method, target, {"Host": host, **given, **added}, body=body)

    return _make
