"""Request validators run ahead of signature verification."""

from __future__ import annotations

from httpsign.validators.date import DateValidator, parse_http_date
from httpsign.validators.digest import DIGEST_ALGORITHMS, DigestValidator, compute_digest
from httpsign.validators.protocol import Validator


def default_validators() -> list[Validator]:
    """Return the default chain: date freshness, then body digest."""
    return [DateValidator(), DigestValidator()]


__all__ = [
    "Validator",
    "DateValidator",
    "DigestValidator",
    "DIGEST_ALGORITHMS",
    "compute_digest",
    "default_validators",
    "parse_http_date",
]
