"""Login bots: fill, submit, and verify the Pinterest login form."""

from __future__ import annotations

import asyncio
import logging
import re
import sys
from enum import Enum
from typing import Optional, Protocol, Sequence
from urllib.parse import urlsplit

from playwright.async_api import ElementHandle, Page
from playwright.async_api import Error as PlaywrightError

from ..constants import (
    FIELD_POLL_INTERVAL_MS,
    PINTEREST_LOGIN_URL,
    SELECTORS,
    SUBMIT_POLL_INTERVAL_MS,
    TYPE_DELAY_MS,
)
from ..errors import (
    AuthenticationError,
    DriverError,
    DriverTimeoutError,
    translate_driver_errors,
)
from ..models.session import Credentials
from .rejection import (
    BoundingBoxRejectionDetector,
    RejectionDetector,
    SubmissionSnapshot,
    SubmissionState,
)

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(name)s] %(levelname)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)


def login_url_pattern(login_url: str = PINTEREST_LOGIN_URL) -> re.Pattern:
    """Build the "still on the login page" pattern for ``login_url``.

    Matches either scheme, an optional ``www.`` prefix, and the login path as
    a whole segment (``/login`` and ``/login/...`` but not ``/loginhelp``).
    """
    parts = urlsplit(login_url)
    host = (parts.hostname or "").removeprefix("www.")
    path = parts.path.strip("/")
    return re.compile(
        rf"^(https?://)(www\.)?{re.escape(host)}/{re.escape(path)}(/|$)",
        re.IGNORECASE,
    )


LOGIN_URL_PATTERN = login_url_pattern()


def _left_the_page(error: PlaywrightError) -> bool:
    """True for errors Playwright raises when a navigation swept the document away."""
    message = str(error)
    return "context was destroyed" in message or "not attached" in message


def is_login_page(url: str, pattern: re.Pattern = LOGIN_URL_PATTERN) -> bool:
    """True if ``url`` (query and fragment ignored) is the login page."""
    parts = urlsplit(url)
    return pattern.match(f"{parts.scheme}://{parts.netloc}{parts.path}") is not None


class LoginState(Enum):
    AWAITING_FORM = "awaiting_form"
    CREDENTIALS_ENTERED = "credentials_entered"
    SUBMITTED = "submitted"
    SUCCESS = "success"
    FAILED = "failed"


class LoginAutomator(Protocol):
    """Drives one page through fill -> submit -> check.

    Each step raises ``DriverError`` when the browser misbehaves;
    ``check_login`` raises ``AuthenticationError`` when Pinterest says no.
    """

    async def fill_login_form(self, page: Page) -> None:
        ...

    async def submit_login_form(self, page: Page) -> SubmissionState:
        ...

    async def check_login(self, page: Page) -> None:
        ...


class DefaultLoginBot:
    """Logs into Pinterest with an email and password.

    You normally hand this to ``login()`` rather than calling it directly.
    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        detector: Optional[RejectionDetector] = None,
        poll_interval: float = FIELD_POLL_INTERVAL_MS / 1000,
        submit_poll_interval: float = SUBMIT_POLL_INTERVAL_MS / 1000,
        type_delay_ms: float = TYPE_DELAY_MS,
        field_timeout: Optional[float] = None,
    ):
        self._credentials = credentials
        self._detector = detector or BoundingBoxRejectionDetector()
        self._poll_interval = poll_interval
        self._submit_poll_interval = submit_poll_interval
        self._type_delay_ms = type_delay_ms
        self._field_timeout = field_timeout
        self.state = LoginState.AWAITING_FORM

    async def _wait_for_element(self, page: Page, selector: str) -> ElementHandle:
        # "Not found" and "not rendered yet" look the same, so keep asking
        # until the field timeout (the session's request timeout) runs out.
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._field_timeout if self._field_timeout is not None else None
        attempts = 0
        while True:
            element = await page.query_selector(selector)
            if element is not None:
                logger.debug(f"Found {selector} after {attempts} retries")
                return element
            if deadline is not None and loop.time() >= deadline:
                raise DriverTimeoutError(
                    f"{selector!r} did not appear within {self._field_timeout}s"
                )
            attempts += 1
            await asyncio.sleep(self._poll_interval)

    async def _type_into(self, element: ElementHandle, text: str) -> None:
        await element.click()
        await element.type(text, delay=self._type_delay_ms)

    async def fill_login_form(self, page: Page) -> None:
        logger.debug(f"Filling the login form for {self._credentials.identifier}")
        with translate_driver_errors("filling the login form"):
            email_input = await self._wait_for_element(page, SELECTORS["login_email"])
            await self._type_into(email_input, self._credentials.identifier)
            logger.debug("Email entered, entering the password")

            password_input = await page.query_selector(SELECTORS["login_password"])
            if password_input is None:
                raise DriverError(f"No element matches {SELECTORS['login_password']!r}")
            await self._type_into(password_input, self._credentials.secret.get_secret_value())

        self.state = LoginState.CREDENTIALS_ENTERED
        logger.info("Login form filled.")

    async def _identifier_present(self, page: Page) -> bool:
        try:
            return await page.query_selector(SELECTORS["login_email"]) is not None
        except PlaywrightError as e:
            if _left_the_page(e):
                return False
            raise

    async def _snapshot(self, page: Page, clicked: Sequence[ElementHandle]) -> SubmissionSnapshot:
        if not await self._identifier_present(page):
            return SubmissionSnapshot(identifier_present=False)
        boxes = tuple([await element.bounding_box() for element in clicked])
        return SubmissionSnapshot(identifier_present=True, boxes=boxes)

    async def submit_login_form(self, page: Page) -> SubmissionState:
        """Click every "Log in" control and wait until the page reacts.

        The page reacts either by leaving the login form (the email input
        disappears) or by showing an inline error, which shifts the clicked
        control by a few pixels. Whichever comes first ends the wait; the
        actual verdict is left to ``check_login``.
        """
        selector = SELECTORS["login_button"]
        with translate_driver_errors("submitting the login form"):
            buttons = await page.query_selector_all(selector)
            if not buttons:
                raise DriverError(f"No element matches {selector!r}")

            clicked = []
            baseline = []
            for button in buttons:
                try:
                    box = await button.bounding_box()
                    await button.click()
                except PlaywrightError as e:
                    # An earlier click already took the page elsewhere
                    if clicked and _left_the_page(e):
                        logger.debug(f"Stopped clicking after {len(clicked)} control(s): {e}")
                        break
                    raise
                clicked.append(button)
                baseline.append(box)
            logger.info(f"Clicked {len(clicked)} login control(s), waiting for a reaction...")

            before = SubmissionSnapshot(identifier_present=True, boxes=tuple(baseline))
            while True:
                after = await self._snapshot(page, clicked)
                result = self._detector.classify(before, after)
                if result is not SubmissionState.PENDING:
                    break
                await asyncio.sleep(self._submit_poll_interval)

        self.state = LoginState.SUBMITTED
        logger.info(f"Submission settled: {result.value}")
        return result

    async def check_login(self, page: Page) -> None:
        with translate_driver_errors("waiting for the login to complete"):
            await page.wait_for_load_state("load")
            url = page.url

        if not url:
            self.state = LoginState.FAILED
            logger.warning("Couldn't read the page URL after submitting, treating as rejected")
            raise AuthenticationError()

        logger.debug(f"Post-login URL: {url}")
        if is_login_page(url):
            self.state = LoginState.FAILED
            logger.warning("Still on the login page, credentials were rejected")
            raise AuthenticationError()

        self.state = LoginState.SUCCESS
        logger.info("Login successful.")
