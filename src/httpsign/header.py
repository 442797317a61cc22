"""Parser for the HTTP Signatures credential.

Accepted forms::

    Authorization: Signature keyId="read",algorithm="hmac-sha256",headers="(request-target) date",signature="..."
    Signature: keyId="read" headers="(request-target) date" signature="..."

Directives may be separated by commas, whitespace, or both.
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass

from httpsign.constants import AUTHORIZATION, DEFAULT_SIGNED_HEADERS, SIGNATURE, SIGNATURE_SCHEME
from httpsign.errors import MissingSignatureError, ParseError
from httpsign.request import SignedRequest

_PAIR_RE = re.compile(r'([A-Za-z][A-Za-z0-9]*)="([^"]*)"')
_SEPARATOR_RE = re.compile(r"[\s,]*")
_KNOWN_DIRECTIVES = frozenset({"keyId", "algorithm", "headers", "signature"})


@dataclass(frozen=True)
class SignatureHeader:
    """Structured view of a signature credential.

    Attributes:
        key_id: Identifier of the shared secret.
        algorithm: Declared algorithm token, ``""`` when not declared.
        headers: Signed header names in signing order, case preserved.
        signature: Signature bytes decoded from base64.
    """

    key_id: str
    algorithm: str
    headers: tuple[str, ...]
    signature: bytes

    @classmethod
    def from_request(cls, request: SignedRequest) -> SignatureHeader:
        """Locate and parse the credential carried by ``request``.

        ``Authorization: Signature ...`` takes precedence over a bare
        ``Signature`` header.

        Raises:
            MissingSignatureError: The request carries no credential.
            ParseError: The credential is malformed.
        """
        authorization = request.header(AUTHORIZATION)
        if authorization and _has_signature_scheme(authorization):
            return parse_signature_header(authorization)

        signature = request.header(SIGNATURE)
        if signature:
            return parse_signature_header(signature)

        if authorization:
            raise ParseError("Authorization header does not use the Signature scheme")
        raise MissingSignatureError("No signature credential in request")


def _has_signature_scheme(value: str) -> bool:
    parts = value.split(None, 1)
    return bool(parts) and parts[0].lower() == SIGNATURE_SCHEME.lower()


def _split_directives(credential: str) -> dict[str, str]:
    params: dict[str, str] = {}
    pos = 0
    end = len(credential)
    while True:
        pos = _SEPARATOR_RE.match(credential, pos).end()  # type: ignore[union-attr]
        if pos >= end:
            break

        match = _PAIR_RE.match(credential, pos)
        if match is None:
            raise ParseError(f"Malformed directive at offset {pos}")

        name, value = match.groups()
        if name not in _KNOWN_DIRECTIVES:
            raise ParseError(f"Unknown directive {name!r}")
        if name in params:
            raise ParseError(f"Duplicate directive {name!r}")
        params[name] = value

        pos = match.end()
        if pos < end and credential[pos] != "," and not credential[pos].isspace():
            raise ParseError(f"Expected separator at offset {pos}")
    return params


def parse_signature_header(value: str) -> SignatureHeader:
    """Parse a signature credential, with or without the ``Signature`` scheme.

    Raises:
        ParseError: Empty input, malformed or unknown directives, missing
            ``keyId``/``signature``, empty ``headers``, or invalid base64.
    """
    credential = value.strip()
    if _has_signature_scheme(credential):
        parts = credential.split(None, 1)
        credential = parts[1] if len(parts) > 1 else ""
    if not credential:
        raise ParseError("Empty signature credential")

    params = _split_directives(credential)

    key_id = params.get("keyId", "")
    if not key_id:
        raise ParseError("Missing keyId directive")

    encoded = params.get("signature", "")
    if not encoded:
        raise ParseError("Missing signature directive")
    try:
        signature = base64.b64decode(encoded, validate=True)
    except binascii.Error as exc:
        raise ParseError("Signature is not valid base64") from exc

    if "headers" in params:
        headers = tuple(params["headers"].split())
        if not headers:
            raise ParseError("Empty headers directive")
    else:
        headers = DEFAULT_SIGNED_HEADERS

    return SignatureHeader(
        key_id=key_id,
        algorithm=params.get("algorithm", ""),
        headers=headers,
        signature=signature,
    )
