"""MCP Server entry point for the Pinterest login service.

Exposes 2 tools via the Model Context Protocol:
- tool_login: sign into Pinterest in a fresh browser, return the cookies
- tool_login_status: counters of the running login service

The login HTTP service (aiohttp on localhost:8025) is auto-started as part
of the MCP server lifecycle, no separate process needed.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager

from aiohttp.web import AppRunner, TCPSite
from mcp.server.fastmcp import FastMCP

from .config import LOG_LEVEL, SESSION_MANAGER_HOST, SESSION_MANAGER_PORT
from .tools.session_tools import request_login, service_status

# Configure logging to stderr (stdout is reserved for MCP JSON-RPC)
logging.basicConfig(
    stream=sys.stderr,
    level=LOG_LEVEL,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)
logger = logging.getLogger("pinterest-login")


# ── Lifespan: auto-start login service ───────────────────────────────────────


@asynccontextmanager
async def lifespan(server: FastMCP):
    """Start the login HTTP service alongside the MCP server."""
    from .session_manager.manager import create_app

    app = create_app()
    runner = AppRunner(app)
    await runner.setup()
    site = TCPSite(runner, SESSION_MANAGER_HOST, SESSION_MANAGER_PORT)
    managed = False
    try:
        await site.start()
        logger.info(
            "Login service auto-started on %s:%s", SESSION_MANAGER_HOST, SESSION_MANAGER_PORT
        )
        managed = True
    except OSError:
        # Port already in use; assume the service was started manually
        logger.info(
            "Login service already running on %s:%s", SESSION_MANAGER_HOST, SESSION_MANAGER_PORT
        )
        await runner.cleanup()

    try:
        yield {}
    finally:
        if managed:
            await runner.cleanup()
            logger.info("Login service stopped.")


# ── MCP Server ───────────────────────────────────────────────────────────────

mcp = FastMCP(
    "pinterest-login",
    lifespan=lifespan,
    instructions=(
        "Pinterest Login - signs into Pinterest through a real browser and returns "
        "the session cookies, no API key needed. "
        "Call tool_login with an email and password; a wrong password is reported as "
        "'Login rejected', browser failures as 'Error'. "
        "Use tool_login_status to see whether a login is still running."
    ),
)


@mcp.tool()
async def tool_login(email: str, password: str, headless: bool = True) -> str:
    """Log into Pinterest and return the session cookies.

    Launches a fresh anti-detection browser, submits the login form and,
    if Pinterest accepts the credentials, returns every cookie as JSON.

    Args:
        email: Pinterest email or username.
        password: Pinterest password.
        headless: If False, opens a visible browser window.
    """
    return await request_login(email, password, headless)


@mcp.tool()
async def tool_login_status() -> str:
    """Check the login service.

    Returns: logins in flight, succeeded and failed counts, last error.
    """
    return await service_status()


# ── Entry Point ──────────────────────────────────────────────────────────────


def main():
    """Run the MCP server on STDIO transport."""
    logger.info("Starting Pinterest login MCP server...")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
