"""Operator helpers for the piratepanda environment.

``check`` loads an ``.env`` file and builds the settings the server would
start with, so missing secrets are caught before a deploy rather than at
process start. ``generate-secret`` prints a random value suitable for
``JWT_SECRET`` or ``OAUTH_COOKIE_SECRET``.

Example usages::

    python -m scripts.check_env check --env-file /srv/piratepanda/.env

    python -m scripts.check_env generate-secret --bytes 48
"""

from __future__ import annotations

import argparse
import secrets
import sys
from pathlib import Path

from piratepanda.core.config import load_settings
from piratepanda.core.errors import StartupConfigError

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_RUNTIME_ERROR = 5

MIN_SECRET_BYTES = 32


def _check(env_file: Path) -> int:
    """Validate the settings that ``env_file`` (plus the environment) yields."""
    if not env_file.exists():
        print(
            f"Environment file {env_file} does not exist. "
            "Ensure the path is correct or create it before running this tool.",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    try:
        settings = load_settings(str(env_file))
    except StartupConfigError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    print(f"Configuration OK. Login callback: {settings.login_callback_url}")
    return EXIT_OK


def _generate_secret(num_bytes: int) -> int:
    if num_bytes < MIN_SECRET_BYTES:
        print(
            f"Refusing to generate a secret shorter than {MIN_SECRET_BYTES} bytes.",
            file=sys.stderr,
        )
        return EXIT_VALIDATION_ERROR
    print(secrets.token_urlsafe(num_bytes))
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate piratepanda settings and generate secrets."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check",
        help="Validate that every required setting is present and well formed.",
    )
    check_parser.add_argument(
        "--env-file",
        default=".env",
        type=Path,
        help="Path to the environment file (default: .env in the working directory).",
    )

    secret_parser = subparsers.add_parser(
        "generate-secret",
        help="Print a random URL-safe secret.",
    )
    secret_parser.add_argument(
        "--bytes",
        dest="num_bytes",
        default=48,
        type=int,
        help="Number of random bytes before encoding (default: 48).",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "generate-secret":
        return _generate_secret(args.num_bytes)
    return _check(args.env_file)


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
