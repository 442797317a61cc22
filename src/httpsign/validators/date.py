"""Clock-skew validation of the request date header."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime

from httpsign.constants import DATE, MAX_CLOCK_SKEW
from httpsign.errors import DateParseError, DateRangeError
from httpsign.request import SignedRequest
from httpsign.validators.protocol import Validator

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_http_date(value: str | None) -> datetime:
    """Parse an HTTP-date (RFC 1123 / RFC 5322) into an aware datetime.

    Raises:
        DateParseError: ``value`` is empty or not a valid HTTP-date.
    """
    if not value:
        raise DateParseError("Could not parse date header: header is empty")
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise DateParseError(f"Could not parse date header: {exc}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class DateValidator:
    """Rejects requests whose date is further than ``max_skew`` from server time.

    Args:
        header_name: Header carrying the client timestamp.
        strict_header_mode: When False and ``header_name`` is absent, fall
            back to the literal ``date`` header.
        max_skew: Largest accepted difference, inclusive.
        clock: Returns the current server time as an aware datetime.
    """

    def __init__(
        self,
        header_name: str = DATE,
        *,
        strict_header_mode: bool = False,
        max_skew: timedelta = MAX_CLOCK_SKEW,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if not header_name:
            raise ValueError("header_name must not be empty")
        if max_skew < timedelta(0):
            raise ValueError(f"max_skew must not be negative, got {max_skew}")
        self._header_name = header_name
        self._strict_header_mode = strict_header_mode
        self._max_skew = max_skew
        self._clock = clock or _utcnow

    @property
    def header_name(self) -> str:
        return self._header_name

    @property
    def strict_header_mode(self) -> bool:
        return self._strict_header_mode

    @property
    def max_skew(self) -> timedelta:
        return self._max_skew

    def validate(self, request: SignedRequest) -> None:
        value = request.header(self._header_name)
        if not value and not self._strict_header_mode:
            value = request.header(DATE)

        timestamp = parse_http_date(value)
        skew = abs(self._clock() - timestamp)
        if skew > self._max_skew:
            logger.debug("Date %s is %s away from server time (max %s)", value, skew, self._max_skew)
            raise DateRangeError(f"Date is {skew} away from server time")

    def __repr__(self) -> str:
        return (
            f"DateValidator(header_name={self._header_name!r}, "
            f"strict_header_mode={self._strict_header_mode}, max_skew={self._max_skew!r})"
        )


# Verify protocol compliance at import time
assert isinstance(DateValidator(), Validator)
