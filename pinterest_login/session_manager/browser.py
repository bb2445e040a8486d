"""Camoufox browser sessions: launch, event draining, teardown."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any, AsyncContextManager, Callable, Optional

from camoufox.async_api import AsyncCamoufox
from playwright.async_api import Browser, BrowserContext, Page

from ..constants import CONTEXT_EVENTS, PAGE_EVENTS
from ..errors import DriverError, translate_driver_errors
from ..models.session import LaunchConfig

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(name)s] %(levelname)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)

# Called with the launch options; returns an async context manager yielding a Browser.
BrowserFactory = Callable[..., AsyncContextManager[Browser]]


class LiveSession:
    """One browser, one isolated context and one page, scoped to a single login attempt.

    The session owns a background task that drains the browser's protocol
    events for as long as the session lives. Use ``launch()`` to create one
    and ``close()`` (or ``async with``) to tear it down.
    """

    def __init__(self, manager: AsyncContextManager[Browser], browser: Browser):
        self._manager: Optional[AsyncContextManager[Browser]] = manager
        self._browser: Optional[Browser] = browser
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None
        self._events: asyncio.Queue = asyncio.Queue()
        self._drain_task: Optional[asyncio.Task] = None

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RuntimeError("Session has no open page.")
        return self._page

    @property
    def is_running(self) -> bool:
        return self._page is not None

    @property
    def drain_task(self) -> Optional[asyncio.Task]:
        return self._drain_task

    async def __aenter__(self) -> LiveSession:
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    def _forward(self, name: str) -> Callable[[Any], None]:
        def listener(payload: Any = None) -> None:
            self._events.put_nowait((name, payload))
        return listener

    async def _drain_events(self) -> None:
        """Pull protocol events off the queue and throw them away, until cancelled."""
        while True:
            name, _payload = await self._events.get()
            logger.debug(f"Drained event: {name}")

    def _start_draining(self) -> None:
        self._browser.on("disconnected", self._forward("disconnected"))
        self._drain_task = asyncio.create_task(self._drain_events())

    async def _open(self, config: LaunchConfig) -> None:
        with translate_driver_errors("opening browser context"):
            self._context = await self._browser.new_context()
            for name in CONTEXT_EVENTS:
                self._context.on(name, self._forward(name))
            for script in config.init_scripts:
                await self._context.add_init_script(script)

            self._page = await self._context.new_page()
            for name in PAGE_EVENTS:
                self._page.on(name, self._forward(name))

        if config.request_timeout_ms is not None:
            self._page.set_default_timeout(config.request_timeout_ms)
            self._page.set_default_navigation_timeout(config.request_timeout_ms)

    async def goto(self, url: str) -> Page:
        """Navigate the session's page and wait until it has loaded."""
        logger.info(f"Navigating to {url}")
        with translate_driver_errors(f"navigating to {url}"):
            await self.page.goto(url, wait_until="domcontentloaded")
            await self.page.wait_for_load_state("load")
        logger.info(f"Landed on URL: {self.page.url}")
        return self.page

    async def _stop_draining(self) -> None:
        task, self._drain_task = self._drain_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            # Only the drain task's own cancellation is expected here
            current = asyncio.current_task()
            if not task.cancelled() or (current is not None and current.cancelling()):
                raise

    async def close(self) -> None:
        """Cancel the drain task and release the context and browser."""
        try:
            await self._stop_draining()
        finally:
            await self._release()

    async def _release(self) -> None:
        try:
            if self._context is not None:
                await self._context.close()
        except Exception as e:
            logger.warning(f"Error closing context: {e}")
        finally:
            self._context = None
            self._page = None

        try:
            if self._manager is not None:
                await self._manager.__aexit__(None, None, None)
        except Exception as e:
            logger.warning(f"Error closing browser: {e}")
        finally:
            self._manager = None
            self._browser = None

        logger.info("Browser session closed.")


async def launch(config: LaunchConfig, browser_factory: Optional[BrowserFactory] = None) -> LiveSession:
    """Start a browser and open an isolated page on it.

    Raises:
        DriverTimeoutError: the browser did not start within ``config.launch_timeout``.
        DriverError: the browser could not be started or the page could not be opened.
    """
    factory = browser_factory or AsyncCamoufox
    logger.info(f"Launching browser (headless={config.headless})...")

    manager = factory(**config.launch_options)
    try:
        try:
            with translate_driver_errors("launching browser"):
                if config.launch_timeout is not None:
                    browser = await asyncio.wait_for(manager.__aenter__(), config.launch_timeout)
                else:
                    browser = await manager.__aenter__()
        except OSError as e:
            # Missing browser binary or a dead transport
            raise DriverError(f"launching browser failed: {e}") from e
    except BaseException:
        # The driver may be half started; release whatever it got to
        exc_info = sys.exc_info()
        try:
            await manager.__aexit__(*exc_info)
        except Exception as e:
            logger.warning(f"Error releasing a failed launch: {e}")
        raise

    session = LiveSession(manager, browser)
    session._start_draining()
    try:
        await session._open(config)
    except BaseException:
        await session.close()
        raise

    logger.info("Browser launched, page ready.")
    return session
