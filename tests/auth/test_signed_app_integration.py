"""Integration tests: signer -> HTTP -> SignatureAuthMiddleware -> Starlette app.

Requests travel through Starlette's TestClient, so the signature has to
survive real ASGI scope construction (raw path, query string, host header).
"""

from __future__ import annotations

import json

import pytest
from starlette.testclient import TestClient

from httpsign.auth import HTTPSignatureAuthenticator
from httpsign.server import create_app
from httpsign.signer import RequestSigner
from httpsign.store import SecretStore

HOST = "testserver"


@pytest.fixture
def client(store: SecretStore) -> TestClient:
    # Real clock: the signer stamps Date with the current time
    authenticator = HTTPSignatureAuthenticator(store)
    return TestClient(create_app(authenticator))


@pytest.fixture
def read_signer(store: SecretStore) -> RequestSigner:
    return RequestSigner(
        "read",
        store["read"],
        headers=("(request-target)", "host", "date", "digest", "content-type"),
    )


class TestSignedRequests:
    def test_get_accepted(self, client: TestClient, store: SecretStore):
        signer = RequestSigner("read", store["read"])
        headers = signer.sign("GET", "/a", host=HOST)
        response = client.get("/a", headers=headers)
        assert response.status_code == 200
        assert response.json() == {"key_id": "read", "method": "GET", "path": "/a", "body_length": 0}

    def test_post_with_body_and_query(self, client: TestClient, read_signer: RequestSigner):
        body = json.dumps({"name": "widget"}).encode()
        extra = {"Content-Type": "application/json"}
        headers = read_signer.sign("POST", "/items?page=2", extra, body=body, host=HOST)
        response = client.post("/items?page=2", content=body, headers={**extra, **headers})
        assert response.status_code == 200
        assert response.json()["body_length"] == len(body)

    def test_other_key(self, client: TestClient, store: SecretStore):
        signer = RequestSigner("write", store["write"])
        response = client.delete("/items/7", headers=signer.sign("DELETE", "/items/7", host=HOST))
        assert response.status_code == 200
        assert response.json()["key_id"] == "write"


class TestRejectedRequests:
    def test_unsigned(self, client: TestClient):
        response = client.get("/a")
        assert response.status_code == 401
        assert response.headers["www-authenticate"].startswith('Signature realm="httpsign"')
        assert response.json()["error"] == "MISSING_SIGNATURE"

    def test_tampered_body(self, client: TestClient, read_signer: RequestSigner):
        extra = {"Content-Type": "application/json"}
        headers = read_signer.sign("POST", "/items", extra, body=b'{"qty": 1}', host=HOST)
        response = client.post("/items", content=b'{"qty": 9}', headers={**extra, **headers})
        assert response.status_code == 400
        assert response.json()["error"] == "DIGEST_MISMATCH"

    def test_replayed_to_other_path(self, client: TestClient, store: SecretStore):
        headers = RequestSigner("read", store["read"]).sign("GET", "/a", host=HOST)
        response = client.get("/b", headers=headers)
        assert response.status_code == 401
        assert response.json() == {"error": "INVALID_SIGNATURE", "message": "Invalid signature"}

    def test_insufficient_headers(self, client: TestClient, store: SecretStore):
        signer = RequestSigner("read", store["read"], headers=("date", "digest"))
        response = client.get("/a", headers=signer.sign("GET", "/a", host=HOST))
        assert response.status_code == 400
        assert response.json()["error"] == "INSUFFICIENT_SIGNED_HEADERS"

    def test_unknown_key(self, client: TestClient, store: SecretStore):
        signer = RequestSigner("ghost", store["read"])
        response = client.get("/a", headers=signer.sign("GET", "/a", host=HOST))
        assert response.status_code == 400
        assert response.json()["error"] == "UNKNOWN_KEY_ID"

    def test_oversized_date_year(self, client: TestClient, store: SecretStore):
        date = {"Date": "Sat, 17 Oct 99999999999999999999 12:00:00 GMT"}
        headers = RequestSigner("read", store["read"]).sign("GET", "/a", date, host=HOST)
        response = client.get("/a", headers={**date, **headers})
        assert response.status_code == 400
        assert response.json()["error"] == "UNPARSEABLE_DATE"


class TestHealth:
    def test_health_exempt(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
