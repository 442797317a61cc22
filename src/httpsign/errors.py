"""Error taxonomy for request-signature verification and its HTTP mapping."""

from __future__ import annotations

from typing import Any


class HTTPSignatureError(Exception):
    """Base class for every rejection raised while verifying a request.

    Attributes:
        code: Stable machine-readable error code.
        status_code: HTTP status the boundary layer should answer with.
        client_fault: True when the request itself is at fault (4xx).
        public_message: Message safe to return to an untrusted caller.
    """

    code = "SIGNATURE_ERROR"
    status_code = 400
    public_message = "Request signature could not be verified"

    @property
    def client_fault(self) -> bool:
        return self.status_code < 500


class ParseError(HTTPSignatureError):
    """The signature credential could not be decomposed."""

    code = "MALFORMED_SIGNATURE"
    status_code = 401
    public_message = "Malformed signature header"


class MissingSignatureError(ParseError):
    """The request carries no signature credential at all."""

    code = "MISSING_SIGNATURE"
    public_message = "Missing signature header"


class MissingHeaderError(HTTPSignatureError):
    """A header named in the signed-headers list is absent or empty."""

    code = "MISSING_SIGNED_HEADER"
    public_message = "A signed header is missing from the request"

    def __init__(self, header: str) -> None:
        self.header = header
        super().__init__(f"Signed header {header!r} is missing or empty")


class UnknownKeyError(HTTPSignatureError):
    code = "UNKNOWN_KEY_ID"
    public_message = "Unknown key id"

    def __init__(self, key_id: str) -> None:
        self.key_id = key_id
        super().__init__(f"Unknown key id {key_id!r}")


class AlgorithmMismatchError(HTTPSignatureError):
    code = "ALGORITHM_MISMATCH"
    public_message = "Algorithm does not match the key"

    def __init__(self, declared: str, registered: str) -> None:
        self.declared = declared
        self.registered = registered
        super().__init__(f"Declared algorithm {declared!r} does not match registered {registered!r}")


class DateParseError(HTTPSignatureError):
    code = "UNPARSEABLE_DATE"
    public_message = "Could not parse date header"


class DateRangeError(HTTPSignatureError):
    code = "DATE_OUT_OF_RANGE"
    public_message = "Date submitted is not in acceptable range"


class DigestMismatchError(HTTPSignatureError):
    code = "DIGEST_MISMATCH"
    public_message = "Digest does not match the request body"


class InsufficientSignedHeadersError(HTTPSignatureError):
    """The client signed fewer headers than the server requires."""

    code = "INSUFFICIENT_SIGNED_HEADERS"
    public_message = "Signature does not cover all required headers"

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Required headers not signed: {', '.join(missing)}")


class SignatureMismatchError(HTTPSignatureError):
    code = "INVALID_SIGNATURE"
    status_code = 401
    public_message = "Invalid signature"


class SigningError(HTTPSignatureError):
    """The server failed to compute the expected signature (misconfiguration)."""

    code = "SIGNING_ERROR"
    status_code = 500
    public_message = "Internal error occurred"


class ErrorMapper:
    """Maps verification errors to JSON-serializable response bodies."""

    def to_response(self, error: Exception) -> dict[str, Any]:
        """Convert an exception to a response body dict.

        Returns:
            dict with keys ``error`` (code) and ``message`` (safe message).
            Internal details never reach the caller.
        """
        if isinstance(error, HTTPSignatureError):
            return {"error": error.code, "message": error.public_message}

        return {"error": SigningError.code, "message": SigningError.public_message}

    def status_code(self, error: Exception) -> int:
        if isinstance(error, HTTPSignatureError):
            return error.status_code
        return 500
