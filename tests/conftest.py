"""A scripted stand-in for Camoufox/Playwright and a fake Pinterest login page.

The stubs implement just the slice of the Playwright async API the login
flow touches: browser.new_context, context.new_page/cookies/add_init_script,
page.goto/query_selector/query_selector_all/wait_for_load_state, element
click/type/bounding_box, and ``on(event, listener)`` everywhere.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import pytest
from playwright.async_api import Error as PlaywrightError

from pinterest_login.constants import PINTEREST_LOGIN_URL, SELECTORS
from pinterest_login.models.session import Credentials

EMAIL = SELECTORS["login_email"]
PASSWORD = SELECTORS["login_password"]
BUTTON = SELECTORS["login_button"]


class StubSite:
    """Behaviour of the fake login page."""

    def __init__(
        self,
        email: str = "user@example.com",
        password: str = "correct-pw",
        *,
        render_after: int = 0,
        shift_on_reject: bool = True,
        button_count: int = 1,
        with_password_field: bool = True,
        destroy_context_on_success: bool = False,
        home_url: str = "https://www.pinterest.com/home",
    ):
        self.email = email
        self.password = password
        self.render_after = render_after
        self.shift_on_reject = shift_on_reject
        self.button_count = button_count
        self.with_password_field = with_password_field
        self.destroy_context_on_success = destroy_context_on_success
        self.home_url = home_url
        self.goto_error: Optional[Exception] = None
        self.session_cookies = [
            {"name": "_pinterest_sess", "value": "TWc9PSZsb2dnZWRfaW4=", "domain": ".pinterest.com"},
            {"name": "_auth", "value": "1", "domain": ".pinterest.com"},
        ]
        self.anonymous_cookies = [
            {"name": "csrftoken", "value": "abc123", "domain": ".pinterest.com"},
        ]


class StubElement:
    def __init__(self, page: StubPage, selector: str, y: float = 100.0):
        self.page = page
        self.selector = selector
        self.value = ""
        self.clicks = 0
        self.typed_delays: list = []
        self.box: Optional[dict] = {"x": 20.0, "y": y, "width": 240.0, "height": 48.0}

    async def click(self):
        if self.selector == BUTTON and self not in self.page.buttons:
            raise PlaywrightError("Element is not attached to the DOM")
        self.clicks += 1
        await self.page.on_click(self)

    async def type(self, text: str, delay: Optional[float] = None):
        self.value += text
        self.typed_delays.append(delay)

    async def bounding_box(self):
        return dict(self.box) if self.box is not None else None


class StubPage:
    def __init__(self, context: StubContext, site: StubSite):
        self.context = context
        self.site = site
        self.url = "about:blank"
        self.listeners: dict[str, list] = {}
        self.default_timeout: Optional[float] = None
        self.navigation_timeout: Optional[float] = None
        self.elements: dict[str, StubElement] = {}
        self.buttons: list[StubElement] = []
        self.email_lookups = 0
        self._pending_renders = 0
        self._context_destroyed = False

    def on(self, event, listener):
        self.listeners.setdefault(event, []).append(listener)

    def emit(self, event, payload=None):
        for listener in self.listeners.get(event, []):
            listener(payload)

    def set_default_timeout(self, timeout):
        self.default_timeout = timeout

    def set_default_navigation_timeout(self, timeout):
        self.navigation_timeout = timeout

    def _render_login_form(self):
        self.elements = {EMAIL: StubElement(self, EMAIL, y=40.0)}
        if self.site.with_password_field:
            self.elements[PASSWORD] = StubElement(self, PASSWORD, y=100.0)
        self.buttons = [
            StubElement(self, BUTTON, y=160.0 + 60 * i) for i in range(self.site.button_count)
        ]
        self._pending_renders = self.site.render_after

    async def goto(self, url, wait_until=None):
        if self.site.goto_error is not None:
            raise self.site.goto_error
        self.url = url
        self.context.jar.extend(self.site.anonymous_cookies)
        if url == PINTEREST_LOGIN_URL:
            self._render_login_form()
        self.emit("framenavigated", url)
        self.emit("domcontentloaded", self)

    async def wait_for_load_state(self, state="load"):
        self.emit("load", self)

    async def query_selector(self, selector):
        if self._context_destroyed:
            self._context_destroyed = False
            raise PlaywrightError(
                "Execution context was destroyed, most likely because of a navigation"
            )
        if selector == EMAIL:
            self.email_lookups += 1
            if self._pending_renders > 0:
                self._pending_renders -= 1
                return None
        return self.elements.get(selector)

    async def query_selector_all(self, selector):
        if selector == BUTTON:
            return list(self.buttons)
        element = self.elements.get(selector)
        return [element] if element else []

    async def on_click(self, element: StubElement):
        if element.selector != BUTTON or element not in self.buttons:
            return
        email = self.elements.get(EMAIL)
        password = self.elements.get(PASSWORD)
        accepted = (
            email is not None
            and password is not None
            and email.value == self.site.email
            and password.value == self.site.password
        )
        if accepted:
            self.url = self.site.home_url
            self.elements = {}
            self.buttons = []
            self.context.jar.extend(self.site.session_cookies)
            self._context_destroyed = self.site.destroy_context_on_success
            self.emit("framenavigated", self.url)
        elif self.site.shift_on_reject:
            # Inline "wrong password" tooltip pushes the control down a pixel
            element.box["y"] += 1


class StubContext:
    def __init__(self, site: StubSite):
        self.site = site
        self.jar: list[dict] = []
        self.pages: list[StubPage] = []
        self.listeners: dict[str, list] = {}
        self.init_scripts: list[str] = []
        self.closed = False

    def on(self, event, listener):
        self.listeners.setdefault(event, []).append(listener)

    def emit(self, event, payload=None):
        for listener in self.listeners.get(event, []):
            listener(payload)

    async def add_init_script(self, script):
        self.init_scripts.append(script)

    async def new_page(self):
        page = StubPage(self, self.site)
        self.pages.append(page)
        return page

    async def cookies(self, urls=None):
        return [dict(cookie) for cookie in self.jar]

    async def close(self):
        self.closed = True


class StubBrowser:
    def __init__(self, site: StubSite):
        self.site = site
        self.contexts: list[StubContext] = []
        self.listeners: dict[str, list] = {}

    def on(self, event, listener):
        self.listeners.setdefault(event, []).append(listener)

    async def new_context(self, **kwargs):
        context = StubContext(self.site)
        self.contexts.append(context)
        return context


class StubBrowserManager:
    def __init__(self, factory: StubBrowserFactory):
        self.factory = factory

    async def __aenter__(self):
        self.factory.events.append("driver-started")
        if self.factory.launch_delay:
            await asyncio.sleep(self.factory.launch_delay)
        if self.factory.launch_error is not None:
            raise self.factory.launch_error
        self.factory.launched += 1
        browser = StubBrowser(self.factory.site)
        self.factory.browsers.append(browser)
        return browser

    async def __aexit__(self, *args):
        self.factory.events.append("released")
        self.factory.closed += 1


class StubBrowserFactory:
    """Drop-in for ``AsyncCamoufox``: ``factory(**launch_options)`` -> async context manager."""

    def __init__(self, site: StubSite):
        self.site = site
        self.calls: list[dict] = []
        self.browsers: list[StubBrowser] = []
        self.launched = 0
        self.closed = 0
        self.launch_delay = 0.0
        self.launch_error: Optional[Exception] = None
        self.events: list[str] = []

    def __call__(self, **options):
        self.calls.append(options)
        return StubBrowserManager(self)

    @property
    def page(self) -> StubPage:
        return self.browsers[-1].contexts[-1].pages[-1]


@pytest.fixture
def site():
    return StubSite()


@pytest.fixture
def factory(site):
    return StubBrowserFactory(site)


@pytest.fixture
def good_credentials():
    return Credentials(identifier="user@example.com", secret="correct-pw")


@pytest.fixture
def bad_credentials():
    return Credentials(identifier="user@example.com", secret="wrong-pw")


def background_tasks() -> set:
    return {task for task in asyncio.all_tasks() if task is not asyncio.current_task()}
