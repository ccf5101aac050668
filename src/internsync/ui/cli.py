# ruff: noqa: T201

from __future__ import annotations

import argparse
import asyncio
import getpass
import logging
import os
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from internsync.app import request_password_reset, run_login
from internsync.config import ConfigurationError, configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from internsync.app import LoginSummary

log = logging.getLogger(__name__)

DEFAULT_PASSWORD_ENV = "INTERNSYNC_PASSWORD"


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="InternSync session and mirror tools")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    login = subparsers.add_parser("login", help="Sign in, hydrate and print a mirror summary")
    login.add_argument("--email", type=str, required=True, help="Account email address")
    login.add_argument(
        "--password-env",
        type=str,
        default=DEFAULT_PASSWORD_ENV,
        help="Environment variable holding the password; prompts if unset (default: %(default)s)",
    )

    reset = subparsers.add_parser("reset-password", help="Request a password reset code")
    reset.add_argument("--email", type=str, required=True, help="Account email address")

    return parser.parse_args(list(argv))


def _read_password(env_name: str) -> str:
    password = os.getenv(env_name)
    if password:
        return password
    if not sys.stdin.isatty():
        raise ValueError(f"Password not provided; set {env_name}")
    return getpass.getpass("Password: ")


def _print_summary(summary: LoginSummary) -> None:
    profile = summary.profile
    if profile is not None:
        print(f"Signed in as {profile.name} <{profile.email}> ({profile.role})")
    for collection, count in sorted(summary.counts.items()):
        print(f"  {collection:<24} {count:>6}")
    print(f"Unread notifications: {summary.unread_notifications}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        password = ""
        if parsed_args.command == "login":
            password = _read_password(parsed_args.password_env)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    if parsed_args.verbose:
        configure_logging(verbose=True, force=True)

    try:
        if parsed_args.command == "login":
            summary = asyncio.run(run_login(parsed_args.email, password))
            if not summary.authenticated:
                log.error("Login failed: %s", summary.message)
                sys.exit(1)
            _print_summary(summary)
        elif parsed_args.command == "reset-password":
            result = asyncio.run(request_password_reset(parsed_args.email))
            print(result.message)
            if not result.ok:
                sys.exit(1)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
