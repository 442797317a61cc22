"""CLI entry point: python -m httpsign."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import timedelta
from pathlib import Path

from httpsign.auth import HTTPSignatureAuthenticator
from httpsign.config import load_secret_store, resolve_secrets_path
from httpsign.constants import DATE, DEFAULT_REQUIRED_HEADERS, MAX_CLOCK_SKEW, SECRETS_FILE_ENV
from httpsign.server import create_app, run
from httpsign.signer import RequestSigner
from httpsign.store import SecretStore
from httpsign.validators import DateValidator, DigestValidator, Validator

logger = logging.getLogger(__name__)

_DEFAULT_HEADERS_TEXT = " ".join(DEFAULT_REQUIRED_HEADERS)


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the httpsign CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m httpsign",
        description="Verify or produce shared-secret HTTP signatures.",
    )
    parser.add_argument(
        "--secrets-file",
        type=Path,
        default=None,
        help=f"JSON file mapping key ids to secrets (default: ${SECRETS_FILE_ENV}).",
    )
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="INFO",
        help="Logging level (default: INFO).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run a demo server that requires signed requests.")
    serve.add_argument("--host", default="127.0.0.1", help="Host address (default: 127.0.0.1).")
    serve.add_argument("--port", type=int, default=8000, help="Port (default: 8000, range: 1-65535).")
    serve.add_argument(
        "--required-headers",
        default=None,
        help=f'Space-separated header names every signature must cover (default: "{_DEFAULT_HEADERS_TEXT}").',
    )
    serve.add_argument(
        "--date-header",
        default=DATE,
        help='Header carrying the client timestamp (default: "date").',
    )
    serve.add_argument(
        "--strict-date-header",
        action="store_true",
        default=False,
        help="Do not fall back to the Date header when --date-header is absent.",
    )
    serve.add_argument(
        "--max-skew",
        type=float,
        default=MAX_CLOCK_SKEW.total_seconds(),
        help="Maximum accepted clock skew in seconds (default: 30).",
    )
    serve.add_argument(
        "--no-validators",
        action="store_true",
        default=False,
        help="Disable the date and digest validators.",
    )
    serve.add_argument(
        "--exempt-paths",
        default=None,
        help="Comma-separated paths exempt from auth (default: /health).",
    )
    serve.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Log every rejection reason.",
    )

    sign = subparsers.add_parser("sign", help="Print the headers a client must send.")
    sign.add_argument("--key-id", required=True, help="Key id to sign with.")
    sign.add_argument("--method", default="GET", help="HTTP method (default: GET).")
    sign.add_argument("--target", default="/", help="Path and query (default: /).")
    sign.add_argument("--host-header", default="", help="Host value, needed when signing 'host'.")
    sign.add_argument(
        "--headers",
        default=None,
        help=f'Space-separated header names to sign (default: "{_DEFAULT_HEADERS_TEXT}").',
    )
    sign.add_argument(
        "--header",
        action="append",
        default=[],
        metavar="NAME:VALUE",
        help="Extra request header, repeatable.",
    )
    sign.add_argument("--body-file", type=Path, default=None, help="File holding the request body.")

    return parser


def _load_store(args: argparse.Namespace) -> SecretStore:
    path = resolve_secrets_path(args.secrets_file)
    if path is None:
        print(f"Error: --secrets-file or ${SECRETS_FILE_ENV} is required.", file=sys.stderr)
        sys.exit(1)
    if not path.is_file():
        print(f"Error: secrets file '{path}' does not exist.", file=sys.stderr)
        sys.exit(1)
    try:
        return load_secret_store(path)
    except ValueError as exc:
        print(f"Error: invalid secrets file '{path}': {exc}", file=sys.stderr)
        sys.exit(1)


def _build_validators(args: argparse.Namespace) -> list[Validator]:
    if args.no_validators:
        return []
    return [
        DateValidator(
            args.date_header,
            strict_header_mode=args.strict_date_header,
            max_skew=timedelta(seconds=args.max_skew),
        ),
        DigestValidator(),
    ]


def _serve(args: argparse.Namespace, parser: argparse.ArgumentParser) -> None:
    if args.port < 1 or args.port > 65535:
        parser.error(f"--port must be in range 1-65535, got {args.port}")
    if args.max_skew < 0:
        parser.error(f"--max-skew must not be negative, got {args.max_skew}")

    store = _load_store(args)
    required = args.required_headers.split() if args.required_headers else None
    authenticator = HTTPSignatureAuthenticator(
        store,
        validators=_build_validators(args),
        required_headers=required,
        debug=args.debug,
    )
    logger.info(
        "Signature authentication enabled (%d key(s), required headers: %s)",
        len(store),
        " ".join(authenticator.required_headers),
    )

    exempt_paths = None
    if args.exempt_paths:
        exempt_paths = set(p.strip() for p in args.exempt_paths.split(","))

    try:
        run(create_app(authenticator, exempt_paths=exempt_paths), host=args.host, port=args.port)
    except Exception:
        logger.exception("Server startup failed.")
        sys.exit(2)


def _sign(args: argparse.Namespace, parser: argparse.ArgumentParser) -> None:
    store = _load_store(args)
    secret = store.get(args.key_id)
    if secret is None:
        print(f"Error: key id '{args.key_id}' not found in secrets file.", file=sys.stderr)
        sys.exit(1)

    extra: dict[str, str] = {}
    for item in args.header:
        name, sep, value = item.partition(":")
        if not sep or not name.strip():
            parser.error(f"--header must look like NAME:VALUE, got {item!r}")
        extra[name.strip()] = value.strip()

    body = args.body_file.read_bytes() if args.body_file else b""
    headers = args.headers.split() if args.headers else DEFAULT_REQUIRED_HEADERS
    signer = RequestSigner(args.key_id, secret, headers=headers)
    for name, value in signer.sign(args.method, args.target, extra, body=body, host=args.host_header).items():
        print(f"{name}: {value}")


def main() -> None:
    """CLI entry point.

    Exit codes:
        0 - Normal shutdown / headers printed
        1 - Invalid configuration (missing or invalid secrets file, unknown key id)
        2 - Argument error or server startup failure
    """
    parser = _build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.command == "serve":
        _serve(args, parser)
    else:
        _sign(args, parser)


if __name__ == "__main__":
    main()
