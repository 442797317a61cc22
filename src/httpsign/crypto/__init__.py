"""Pluggable signing algorithms."""

from __future__ import annotations

from httpsign.crypto.hmac import HMACSHA256, HMACSHA384, HMACSHA512, HMACSignatureAlgorithm
from httpsign.crypto.protocol import Algorithm

ALGORITHMS: dict[str, type[HMACSignatureAlgorithm]] = {
    cls.name: cls for cls in (HMACSHA256, HMACSHA384, HMACSHA512)
}


def get_algorithm(name: str) -> Algorithm:
    """Return a new instance of the algorithm registered under ``name``.

    Raises:
        ValueError: If no algorithm is registered under that name.
    """
    try:
        cls = ALGORITHMS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown algorithm: {name!r}. Valid: {sorted(ALGORITHMS)}") from None
    return cls()


__all__ = [
    "Algorithm",
    "HMACSignatureAlgorithm",
    "HMACSHA256",
    "HMACSHA384",
    "HMACSHA512",
    "ALGORITHMS",
    "get_algorithm",
]
