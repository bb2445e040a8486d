"""Read the authenticated page's cookie jar."""

from __future__ import annotations

import logging

from playwright.async_api import Page

from ..errors import translate_driver_errors

logger = logging.getLogger(__name__)


async def harvest(page: Page) -> dict[str, str]:
    """Return every cookie in the page's browsing context as ``{name: value}``.

    Cookies that share a name (e.g. different paths or domains) collapse to
    the last one the browser reports.
    """
    with translate_driver_errors("reading cookies"):
        raw_cookies = await page.context.cookies()

    cookies: dict[str, str] = {}
    for cookie in raw_cookies:
        cookies[cookie["name"]] = cookie["value"]

    logger.info(f"Harvested {len(cookies)} cookies")
    logger.debug(f"Cookie names: {sorted(cookies)}")
    return cookies
