"""Client-side request signing.

Uses the same canonical builder as the verifier, so a request signed here and
delivered unchanged is accepted by ``HTTPSignatureAuthenticator``.
"""

from __future__ import annotations

import base64
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from email.utils import formatdate

from httpsign.canonical import build_signing_string, encode_signing_string
from httpsign.constants import DATE, DEFAULT_SIGNED_HEADERS, DIGEST, SIGNATURE_SCHEME
from httpsign.request import HTTPRequest
from httpsign.store import Secret
from httpsign.validators import compute_digest


def format_http_date(moment: datetime) -> str:
    """Format ``moment`` as an RFC 1123 HTTP-date."""
    return formatdate(moment.timestamp(), usegmt=True)


class RequestSigner:
    """Signs outgoing requests for one key id.

    Args:
        key_id: Key id the server knows the secret under.
        secret: Shared secret and algorithm.
        headers: Header names to sign, in order.
        include_algorithm: Send the ``algorithm`` directive.
        clock: Returns the current time; used for the ``Date`` header.
    """

    def __init__(
        self,
        key_id: str,
        secret: Secret,
        *,
        headers: Iterable[str] = DEFAULT_SIGNED_HEADERS,
        include_algorithm: bool = True,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if not key_id:
            raise ValueError("key_id must not be empty")
        self._key_id = key_id
        self._secret = secret
        self._headers = tuple(headers)
        if not self._headers:
            raise ValueError("headers must not be empty")
        self._include_algorithm = include_algorithm
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def sign(
        self,
        method: str,
        target: str,
        headers: dict[str, str] | None = None,
        body: bytes = b"",
        host: str = "",
    ) -> dict[str, str]:
        """Return the headers to add to the request.

        ``Date`` and ``Digest`` are generated when they are signed but not
        supplied; ``Authorization`` always carries the credential.
        """
        given = dict(headers or {})
        present = {name.lower() for name in given}
        added: dict[str, str] = {}
        if DATE in self._headers and DATE not in present:
            added["Date"] = format_http_date(self._clock())
        if DIGEST in self._headers and DIGEST not in present:
            added["Digest"] = compute_digest(body)

        request = HTTPRequest.build(method, target, [*given.items(), *added.items()], body=body, host=host)
        message = encode_signing_string(build_signing_string(request, self._headers))
        signature = self._secret.algorithm.sign(message, self._secret.key)

        added["Authorization"] = f"{SIGNATURE_SCHEME} {self.format_credential(signature)}"
        return added

    def format_credential(self, signature: bytes) -> str:
        """Render the ``keyId``/``algorithm``/``headers``/``signature`` directives."""
        parts = [f'keyId="{self._key_id}"']
        if self._include_algorithm:
            parts.append(f'algorithm="{self._secret.algorithm.name}"')
        parts.append(f'headers="{" ".join(self._headers)}"')
        parts.append(f'signature="{base64.b64encode(signature).decode("ascii")}"')
        return ",".join(parts)
