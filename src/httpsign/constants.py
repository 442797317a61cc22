"""Header names and defaults shared across httpsign."""

from __future__ import annotations

from datetime import timedelta

REQUEST_TARGET = "(request-target)"
DATE = "date"
DIGEST = "digest"
HOST = "host"

AUTHORIZATION = "authorization"
SIGNATURE = "signature"
SIGNATURE_SCHEME = "Signature"

# Headers a client must sign when the server does not configure its own list,
# and the list assumed when the credential omits the ``headers`` directive.
DEFAULT_REQUIRED_HEADERS: tuple[str, ...] = (REQUEST_TARGET, DATE, DIGEST)
DEFAULT_SIGNED_HEADERS: tuple[str, ...] = DEFAULT_REQUIRED_HEADERS

MAX_CLOCK_SKEW = timedelta(seconds=30)

SECRETS_FILE_ENV = "HTTPSIGN_SECRETS_FILE"
