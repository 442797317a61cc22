"""HMAC signing algorithms backed by PyJWT's HMAC primitives."""

from __future__ import annotations

from typing import Any, ClassVar

from jwt.algorithms import HMACAlgorithm

from httpsign.crypto.protocol import Algorithm


class HMACSignatureAlgorithm:
    """Keyed-hash signature over the canonical signing string.

    Subclasses pick the wire token and the hash function. Key preparation is
    delegated to PyJWT, which refuses PEM/SSH public keys as HMAC secrets.
    """

    name: ClassVar[str]
    hash_alg: ClassVar[Any]

    def __init__(self) -> None:
        self._impl = HMACAlgorithm(self.hash_alg)

    def sign(self, message: bytes, key: str | bytes) -> bytes:
        prepared = self._impl.prepare_key(key)
        return self._impl.sign(message, prepared)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class HMACSHA256(HMACSignatureAlgorithm):
    name = "hmac-sha256"
    hash_alg = HMACAlgorithm.SHA256


class HMACSHA384(HMACSignatureAlgorithm):
    name = "hmac-sha384"
    hash_alg = HMACAlgorithm.SHA384


class HMACSHA512(HMACSignatureAlgorithm):
    name = "hmac-sha512"
    hash_alg = HMACAlgorithm.SHA512


# Verify protocol compliance at import time
assert isinstance(HMACSHA256(), Algorithm)
