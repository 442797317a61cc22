"""Canonical signing-string construction.

Client and server must produce byte-identical strings, so values are taken
verbatim from the request and never normalized.
"""

from __future__ import annotations

from collections.abc import Sequence

from httpsign.constants import HOST, REQUEST_TARGET
from httpsign.errors import MissingHeaderError, ParseError
from httpsign.request import SignedRequest


def _field_value(request: SignedRequest, name: str) -> str:
    if name == REQUEST_TARGET:
        return f"{request.method.lower()} {request.target}"
    if name == HOST:
        return request.host

    value = request.header(name)
    if not value:
        raise MissingHeaderError(name)
    return value


def build_signing_string(request: SignedRequest, headers: Sequence[str]) -> str:
    """Build the string the client must have signed.

    One ``"<name>: <value>"`` line per header name, in the given order,
    joined by ``"\\n"`` with no trailing newline.

    Raises:
        MissingHeaderError: A listed header (other than ``(request-target)``
            and ``host``) is absent or empty on the request.
    """
    return "\n".join(f"{name}: {_field_value(request, name)}" for name in headers)


def encode_signing_string(text: str) -> bytes:
    """Encode a signing string to the bytes that are signed.

    ISO-8859-1 maps header bytes one-to-one, matching how ASGI servers decode
    them.

    Raises:
        ParseError: The string holds characters outside ISO-8859-1.
    """
    try:
        return text.encode("latin-1")
    except UnicodeEncodeError as exc:
        raise ParseError("Signed values contain characters outside ISO-8859-1") from exc
