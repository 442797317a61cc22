"""Tests for DigestValidator and compute_digest."""

from __future__ import annotations

import base64
import hashlib

import pytest

from httpsign.errors import DigestMismatchError
from httpsign.request import HTTPRequest
from httpsign.validators import DigestValidator, Validator, compute_digest

BODY = b'{"name": "widget"}'


def _request(body: bytes, digest: str | None) -> HTTPRequest:
    headers = {"Digest": digest} if digest is not None else {}
    return HTTPRequest.build("POST", "/items", headers, body=body)


class TestComputeDigest:
    def test_sha256(self):
        expected = base64.b64encode(hashlib.sha256(BODY).digest()).decode()
        assert compute_digest(BODY) == f"SHA-256={expected}"

    def test_sha512(self):
        expected = base64.b64encode(hashlib.sha512(BODY).digest()).decode()
        assert compute_digest(BODY, "sha-512") == f"SHA-512={expected}"

    def test_empty_body(self):
        assert compute_digest(b"") == "SHA-256=47DEQpj8HBSa+/TImW+5JCeuQeRkm5NMpJWZG3hSuFU="

    def test_unsupported(self):
        with pytest.raises(ValueError, match="Unsupported"):
            compute_digest(BODY, "MD5")


class TestDigestValidator:
    def test_implements_protocol(self):
        assert isinstance(DigestValidator(), Validator)

    def test_matching_digest(self):
        DigestValidator().validate(_request(BODY, compute_digest(BODY)))

    def test_matching_sha512(self):
        DigestValidator().validate(_request(BODY, compute_digest(BODY, "SHA-512")))

    def test_token_case_insensitive(self):
        DigestValidator().validate(_request(BODY, compute_digest(BODY).replace("SHA-256", "sha-256")))

    def test_empty_body_with_digest(self):
        DigestValidator().validate(_request(b"", compute_digest(b"")))

    def test_empty_body_without_digest(self):
        DigestValidator().validate(_request(b"", None))

    def test_body_without_digest(self):
        with pytest.raises(DigestMismatchError):
            DigestValidator().validate(_request(BODY, None))

    def test_altered_body(self):
        with pytest.raises(DigestMismatchError):
            DigestValidator().validate(_request(BODY + b" ", compute_digest(BODY)))

    def test_altered_digest(self):
        with pytest.raises(DigestMismatchError):
            DigestValidator().validate(_request(BODY, compute_digest(b"other")))

    def test_no_normalization_of_value(self):
        with pytest.raises(DigestMismatchError):
            DigestValidator().validate(_request(BODY, compute_digest(BODY) + " "))

    @pytest.mark.parametrize("value", ["SHA-256", "SHA-256=", "garbage"])
    def test_malformed(self, value):
        with pytest.raises(DigestMismatchError):
            DigestValidator().validate(_request(BODY, value))

    def test_unsupported_algorithm(self):
        with pytest.raises(DigestMismatchError, match="Unsupported"):
            DigestValidator().validate(_request(BODY, "MD5=abc"))

    def test_custom_header_name(self):
        request = HTTPRequest.build("POST", "/", {"X-Content-Digest": compute_digest(BODY)}, body=BODY)
        DigestValidator("x-content-digest").validate(request)
