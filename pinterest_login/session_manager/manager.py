"""Login orchestration and the local login HTTP service.

``login()`` runs one complete attempt: launch a session, open the login page,
fill/submit/check the form, harvest cookies, tear everything down.

The HTTP service wraps ``login()`` so other local processes (the MCP server,
scripts) can request a login without driving a browser themselves.

Endpoints:
    POST /login   - Run one login attempt, return the cookie map
    GET  /status  - Return service counters
"""

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from aiohttp import web
from pydantic import ValidationError

from ..config import (
    BROWSER_HEADLESS,
    BROWSER_LAUNCH_TIMEOUT,
    BROWSER_REQUEST_TIMEOUT,
    MAX_CONCURRENT_LOGINS,
    SESSION_MANAGER_HOST,
    SESSION_MANAGER_PORT,
)
from ..constants import PINTEREST_LOGIN_URL
from ..errors import (
    AuthenticationError,
    ConfigurationError,
    DriverError,
    DriverTimeoutError,
    PinterestLoginError,
)
from ..models.session import Credentials, LoginRequest, LoginStatus
from .browser import BrowserFactory, launch
from .config_builder import DefaultSessionConfigBuilder, SessionConfigBuilder
from .cookies import harvest
from .login_bot import DefaultLoginBot, LoginAutomator

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(name)s] %(levelname)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)


async def login(
    credentials: Credentials,
    config_builder: Optional[SessionConfigBuilder] = None,
    *,
    bot: Optional[LoginAutomator] = None,
    browser_factory: Optional[BrowserFactory] = None,
) -> dict[str, str]:
    """Log into Pinterest and return the session cookies as ``{name: value}``.

    Args:
        credentials: Email/username and password.
        config_builder: Browser options. Defaults to the ``BROWSER_*`` environment settings.
        bot: Form automation to use. Defaults to a ``DefaultLoginBot`` bounded by the request timeout.
        browser_factory: Browser launcher. Defaults to Camoufox.

    Raises:
        ConfigurationError: the browser options are invalid (nothing was launched).
        DriverError: the browser failed; whether the credentials are valid is unknown.
        DriverTimeoutError: a request or launch timeout elapsed.
        AuthenticationError: Pinterest rejected the credentials.
    """
    config_builder = config_builder or DefaultSessionConfigBuilder.from_env()
    launch_config = config_builder.build()
    if bot is None:
        field_timeout = (
            launch_config.request_timeout_ms / 1000
            if launch_config.request_timeout_ms is not None
            else None
        )
        bot = DefaultLoginBot(credentials, field_timeout=field_timeout)

    session = await launch(launch_config, browser_factory=browser_factory)
    try:
        page = await session.goto(PINTEREST_LOGIN_URL)

        logger.info("Filling the login form")
        await bot.fill_login_form(page)
        logger.info("Submitting the login form")
        await bot.submit_login_form(page)
        logger.info("Checking whether the login succeeded")
        await bot.check_login(page)

        cookies = await harvest(page)
    finally:
        await session.close()

    return cookies


class SessionManager:
    """Serves login attempts, each in its own browser session."""

    def __init__(
        self,
        browser_factory: Optional[BrowserFactory] = None,
        max_concurrent: int = MAX_CONCURRENT_LOGINS,
    ):
        self._browser_factory = browser_factory
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self.status = LoginStatus()

    def _config_builder(self, body: LoginRequest) -> DefaultSessionConfigBuilder:
        provided = body.model_fields_set
        return DefaultSessionConfigBuilder(
            headless=body.headless if body.headless is not None else BROWSER_HEADLESS,
            request_timeout=(
                body.request_timeout if "request_timeout" in provided else BROWSER_REQUEST_TIMEOUT
            ),
            launch_timeout=(
                body.launch_timeout if "launch_timeout" in provided else BROWSER_LAUNCH_TIMEOUT
            ),
        )

    async def run_login(self, body: LoginRequest) -> dict[str, str]:
        credentials = Credentials(identifier=body.email, secret=body.password)
        async with self._semaphore:
            self.status.in_flight += 1
            try:
                cookies = await login(
                    credentials,
                    self._config_builder(body),
                    browser_factory=self._browser_factory,
                )
            except PinterestLoginError as e:
                self.status.failed += 1
                self.status.last_error = str(e)
                raise
            finally:
                self.status.in_flight -= 1

        self.status.succeeded += 1
        self.status.last_success_time = datetime.now(timezone.utc).isoformat()
        return cookies


# ── HTTP Handlers ────────────────────────────────────────────────────────────


def _error_response(error: PinterestLoginError) -> web.Response:
    if isinstance(error, AuthenticationError):
        status = 401
    elif isinstance(error, ConfigurationError):
        status = 400
    elif isinstance(error, DriverTimeoutError):
        status = 504
    elif isinstance(error, DriverError):
        status = 502
    else:
        status = 500
    return web.json_response({"error": str(error), "kind": type(error).__name__}, status=status)


async def handle_login(request: web.Request) -> web.Response:
    mgr: SessionManager = request.app["manager"]
    try:
        body = await request.json() if request.content_length else {}
        params = LoginRequest(**body)
    except (ValidationError, ValueError, TypeError) as e:
        return web.json_response({"error": f"Invalid params: {e}"}, status=400)

    try:
        cookies = await mgr.run_login(params)
    except PinterestLoginError as e:
        logger.error(f"Login failed: {e}")
        return _error_response(e)

    return web.json_response({"cookies": cookies, "count": len(cookies)})


async def handle_status(request: web.Request) -> web.Response:
    mgr: SessionManager = request.app["manager"]
    status = mgr.status.model_copy(
        update={"message": "Login in progress." if mgr.status.in_flight else "Idle."}
    )
    return web.json_response(status.model_dump())


# ── App Factory ──────────────────────────────────────────────────────────────


def create_app(browser_factory: Optional[BrowserFactory] = None) -> web.Application:
    app = web.Application()
    app["manager"] = SessionManager(browser_factory=browser_factory)

    app.router.add_post("/login", handle_login)
    app.router.add_get("/status", handle_status)

    return app


def main():
    """Run the login service as a standalone HTTP service."""
    app = create_app()
    logger.info(f"Login service starting on {SESSION_MANAGER_HOST}:{SESSION_MANAGER_PORT}")
    web.run_app(app, host=SESSION_MANAGER_HOST, port=SESSION_MANAGER_PORT)


if __name__ == "__main__":
    main()
