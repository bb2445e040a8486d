"""MCP tools for requesting logins from the local login service."""

from __future__ import annotations

import json
from typing import Optional

import httpx

from ..config import SESSION_MANAGER_URL


async def _call_session_manager(
    method: str,
    path: str,
    json_body: dict | None = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> dict:
    """Make a request to the login service."""
    url = f"{SESSION_MANAGER_URL}{path}"
    try:
        async with httpx.AsyncClient(timeout=180.0, transport=transport) as client:
            if method == "GET":
                resp = await client.get(url)
            else:
                resp = await client.post(url, json=json_body or {})

            if resp.status_code >= 400:
                data = resp.json()
                return {
                    "error": data.get("error", f"HTTP {resp.status_code}"),
                    "kind": data.get("kind", ""),
                }
            return resp.json()

    except httpx.ConnectError:
        return {
            "error": "Login service is not reachable at "
            f"{SESSION_MANAGER_URL}. It should auto-start with the MCP server. "
            "If running standalone: python -m pinterest_login.session_manager"
        }
    except httpx.TimeoutException:
        return {"error": "Login service timed out. The browser may still be loading."}
    except (httpx.HTTPError, ValueError) as e:
        return {"error": f"Failed to talk to the login service: {e}"}


async def request_login(
    email: str,
    password: str,
    headless: bool = True,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Log into Pinterest in a fresh browser and return the session cookies.

    Args:
        email: Pinterest email or username.
        password: Pinterest password.
        headless: If False, opens a visible browser window.

    Returns:
        JSON-formatted cookie map, or an error message.
    """
    result = await _call_session_manager(
        "POST",
        "/login",
        {"email": email, "password": password, "headless": headless},
        transport=transport,
    )

    if "error" in result:
        if result.get("kind") == "AuthenticationError":
            return f"Login rejected: {result['error']}"
        return f"Error: {result['error']}"

    return json.dumps(result["cookies"], indent=2)


async def service_status(transport: Optional[httpx.AsyncBaseTransport] = None) -> str:
    """Report how many logins are running, succeeded, and failed.

    Returns:
        JSON-formatted service status.
    """
    result = await _call_session_manager("GET", "/status", transport=transport)

    if "error" in result:
        return f"Error: {result['error']}"

    return json.dumps(result, indent=2)
