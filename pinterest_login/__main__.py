"""Command-line login: ``python -m pinterest_login [--head] [-t SECONDS]``.

Reads ``PINTEREST_EMAIL`` / ``PINTEREST_PASSWORD`` and prompts for whatever
is missing. Prints the cookies as JSON on stdout.
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import json
import logging
import sys
from typing import Callable, Optional, Sequence

from .config import LOG_LEVEL, PINTEREST_EMAIL, PINTEREST_PASSWORD
from .errors import PinterestLoginError
from .models.session import Credentials
from .session_manager.config_builder import DefaultSessionConfigBuilder
from .session_manager.manager import login

logger = logging.getLogger("pinterest-login")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pinterest-login",
        description="Log into Pinterest through a real browser and print the session cookies.",
    )
    parser.add_argument("--head", action="store_true", help="show the browser window")
    parser.add_argument(
        "-t", "--timeout", type=float, default=3.0, metavar="SECONDS",
        help="per-request timeout (default: 3)",
    )
    parser.add_argument(
        "--launch-timeout", type=float, default=None, metavar="SECONDS",
        help="browser start-up timeout (default: none)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def get_credentials(
    email: Optional[str] = PINTEREST_EMAIL,
    password: Optional[str] = PINTEREST_PASSWORD,
    prompt: Callable[[str], str] = input,
    prompt_password: Callable[[str], str] = getpass.getpass,
) -> Credentials:
    """Use the given email/password, asking interactively for the missing ones."""
    if not email:
        email = prompt("Pinterest email/username: ").strip()
    if not password:
        password = prompt_password("Account password: ")
    return Credentials(identifier=email, secret=password)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if args.verbose else LOG_LEVEL,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    try:
        credentials = get_credentials()
    except (EOFError, ValueError) as e:
        print(f"Can't get the authentication info: {e}", file=sys.stderr)
        return 1

    config_builder = DefaultSessionConfigBuilder(
        headless=not args.head,
        request_timeout=args.timeout,
        launch_timeout=args.launch_timeout,
    )

    try:
        cookies = asyncio.run(login(credentials, config_builder))
    except PinterestLoginError as e:
        print(e, file=sys.stderr)
        return 1

    print(json.dumps(cookies, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
