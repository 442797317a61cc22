"""Authentication support for httpsign."""

from httpsign.auth.authenticator import HTTPSignatureAuthenticator
from httpsign.auth.middleware import SignatureAuthMiddleware, auth_key_id_var
from httpsign.auth.protocol import RequestAuthenticator, Verdict

__all__ = [
    "RequestAuthenticator",
    "HTTPSignatureAuthenticator",
    "Verdict",
    "SignatureAuthMiddleware",
    "auth_key_id_var",
]
