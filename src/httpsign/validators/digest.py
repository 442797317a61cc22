"""Body digest validation (RFC 3230 ``Digest`` header)."""

from __future__ import annotations

import base64
import hashlib
import hmac
from collections.abc import Callable
from typing import Any

from httpsign.constants import DIGEST
from httpsign.errors import DigestMismatchError
from httpsign.request import SignedRequest
from httpsign.validators.protocol import Validator

DIGEST_ALGORITHMS: dict[str, Callable[..., Any]] = {
    "SHA-256": hashlib.sha256,
    "SHA-512": hashlib.sha512,
}


def compute_digest(body: bytes, algorithm: str = "SHA-256") -> str:
    """Return the ``Digest`` header value for ``body``, e.g. ``SHA-256=<base64>``.

    Raises:
        ValueError: ``algorithm`` is not supported.
    """
    token = algorithm.upper()
    try:
        hash_fn = DIGEST_ALGORITHMS[token]
    except KeyError:
        raise ValueError(f"Unsupported digest algorithm: {algorithm!r}") from None
    encoded = base64.b64encode(hash_fn(body).digest()).decode("ascii")
    return f"{token}={encoded}"


class DigestValidator:
    """Rejects requests whose declared digest does not match the delivered body.

    A request without a ``Digest`` header passes only when its body is empty.
    """

    def __init__(self, header_name: str = DIGEST) -> None:
        self._header_name = header_name

    @property
    def header_name(self) -> str:
        return self._header_name

    def validate(self, request: SignedRequest) -> None:
        declared = request.header(self._header_name)
        if not declared:
            if request.body:
                raise DigestMismatchError("Digest header missing for non-empty body")
            return

        token, sep, encoded = declared.partition("=")
        if not sep or not encoded:
            raise DigestMismatchError("Malformed digest header")

        hash_fn = DIGEST_ALGORITHMS.get(token.upper())
        if hash_fn is None:
            raise DigestMismatchError(f"Unsupported digest algorithm {token!r}")

        expected = base64.b64encode(hash_fn(request.body).digest())
        if not hmac.compare_digest(expected, encoded.encode("utf-8")):
            raise DigestMismatchError("Digest does not match body")

    def __repr__(self) -> str:
        return f"DigestValidator(header_name={self._header_name!r})"


# Verify protocol compliance at import time
assert isinstance(DigestValidator(), Validator)
