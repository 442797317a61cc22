"""httpsign: shared-secret HTTP Signatures verification for ASGI services."""

from __future__ import annotations

from httpsign.auth import (
    HTTPSignatureAuthenticator,
    RequestAuthenticator,
    SignatureAuthMiddleware,
    Verdict,
    auth_key_id_var,
)
from httpsign.canonical import build_signing_string, encode_signing_string
from httpsign.crypto import HMACSHA256, HMACSHA384, HMACSHA512, Algorithm, get_algorithm
from httpsign.errors import (
    AlgorithmMismatchError,
    DateParseError,
    DateRangeError,
    DigestMismatchError,
    ErrorMapper,
    HTTPSignatureError,
    InsufficientSignedHeadersError,
    MissingHeaderError,
    MissingSignatureError,
    ParseError,
    SignatureMismatchError,
    SigningError,
    UnknownKeyError,
)
from httpsign.header import SignatureHeader, parse_signature_header
from httpsign.request import HTTPRequest, SignedRequest, from_starlette_request
from httpsign.signer import RequestSigner
from httpsign.store import KeyID, Secret, SecretStore
from httpsign.validators import DateValidator, DigestValidator, Validator, compute_digest

__all__ = [
    # Orchestration
    "HTTPSignatureAuthenticator",
    "RequestAuthenticator",
    "Verdict",
    "SignatureAuthMiddleware",
    "auth_key_id_var",
    # Building blocks
    "SignatureHeader",
    "parse_signature_header",
    "build_signing_string",
    "encode_signing_string",
    "HTTPRequest",
    "SignedRequest",
    "from_starlette_request",
    "RequestSigner",
    # Secrets and algorithms
    "KeyID",
    "Secret",
    "SecretStore",
    "Algorithm",
    "HMACSHA256",
    "HMACSHA384",
    "HMACSHA512",
    "get_algorithm",
    # Validators
    "Validator",
    "DateValidator",
    "DigestValidator",
    "compute_digest",
    # Errors
    "HTTPSignatureError",
    "ParseError",
    "MissingSignatureError",
    "MissingHeaderError",
    "UnknownKeyError",
    "AlgorithmMismatchError",
    "DateParseError",
    "DateRangeError",
    "DigestMismatchError",
    "InsufficientSignedHeadersError",
    "SignatureMismatchError",
    "SigningError",
    "ErrorMapper",
]

__version__ = "0.1.0"
