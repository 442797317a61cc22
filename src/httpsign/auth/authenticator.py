"""HTTP Signatures authenticator: the request-admission decision."""

from __future__ import annotations

import hmac
import logging
from collections.abc import Iterable, Mapping

from httpsign.auth.protocol import RequestAuthenticator, Verdict
from httpsign.canonical import build_signing_string, encode_signing_string
from httpsign.constants import DEFAULT_REQUIRED_HEADERS
from httpsign.errors import (
    HTTPSignatureError,
    InsufficientSignedHeadersError,
    SignatureMismatchError,
    SigningError,
)
from httpsign.header import SignatureHeader
from httpsign.request import SignedRequest
from httpsign.store import Secret, SecretStore
from httpsign.validators import Validator, default_validators

logger = logging.getLogger(__name__)


class HTTPSignatureAuthenticator:
    """Verifies shared-secret HTTP signatures.

    Configuration is fixed at construction; ``verify`` and ``authenticate``
    only read it, so one instance can serve concurrent requests.

    Args:
        secrets: Key id to ``Secret`` mapping.
        validators: Checks run before signature verification. ``None`` selects
            the default chain (date, digest); any other value replaces it.
        required_headers: Header names every signature must cover. ``None`` or
            empty selects ``(request-target) date digest``.
        debug: Log every rejection reason at WARNING level.
    """

    def __init__(
        self,
        secrets: SecretStore | Mapping[str, Secret],
        *,
        validators: Iterable[Validator] | None = None,
        required_headers: Iterable[str] | None = None,
        debug: bool = False,
    ) -> None:
        self._secrets = secrets if isinstance(secrets, SecretStore) else SecretStore(secrets)
        self._validators: tuple[Validator, ...] = tuple(
            default_validators() if validators is None else validators
        )
        self._required_headers: tuple[str, ...] = tuple(required_headers or ()) or DEFAULT_REQUIRED_HEADERS
        self._debug = debug

    @property
    def secrets(self) -> SecretStore:
        return self._secrets

    @property
    def validators(self) -> tuple[Validator, ...]:
        return self._validators

    @property
    def required_headers(self) -> tuple[str, ...]:
        return self._required_headers

    @property
    def debug(self) -> bool:
        return self._debug

    def verify(self, request: SignedRequest) -> str:
        """Verify ``request`` and return the key id it was signed with.

        Steps run in order and stop at the first failure: parse the
        credential, run the validators, check the required headers are
        signed, resolve the secret, rebuild the signing string, re-sign and
        compare.

        Raises:
            HTTPSignatureError: The specific rejection reason.
        """
        sig_header = SignatureHeader.from_request(request)

        for validator in self._validators:
            validator.validate(request)

        self._check_required_headers(sig_header.headers)

        secret = self._secrets.resolve(sig_header.key_id, sig_header.algorithm)
        message = encode_signing_string(build_signing_string(request, sig_header.headers))

        try:
            expected = secret.algorithm.sign(message, secret.key)
        except Exception as exc:
            raise SigningError(f"Signing with {secret.algorithm.name!r} failed: {exc}") from exc
        if not isinstance(expected, (bytes, bytearray)):
            raise SigningError(
                f"Algorithm {secret.algorithm.name!r} returned {type(expected).__name__}, expected bytes"
            )

        if not hmac.compare_digest(expected, sig_header.signature):
            raise SignatureMismatchError("Signature does not match")
        return sig_header.key_id

    def authenticate(self, request: SignedRequest) -> Verdict:
        """Verify ``request`` and report the outcome without raising."""
        try:
            key_id = self.verify(request)
        except SigningError as exc:
            logger.error("[HTTP_SIGN] signing failed: %s", exc, exc_info=True)
            return Verdict(error=exc)
        except HTTPSignatureError as exc:
            self._log_rejection(exc)
            return Verdict(error=exc)
        return Verdict(key_id=key_id)

    def _check_required_headers(self, signed: tuple[str, ...]) -> None:
        missing = [name for name in self._required_headers if name not in signed]
        if missing:
            raise InsufficientSignedHeadersError(missing)

    def _log_rejection(self, error: HTTPSignatureError) -> None:
        if self._debug:
            logger.warning("[HTTP_SIGN] [ERROR] %s", error)
        else:
            logger.debug("Request rejected (%s): %s", error.code, error)


# Verify protocol compliance at import time
assert isinstance(HTTPSignatureAuthenticator({}), RequestAuthenticator)
