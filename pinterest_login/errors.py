"""Error taxonomy for a login attempt."""

from __future__ import annotations

import asyncio
from contextlib import contextmanager
from typing import Iterator

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError


class PinterestLoginError(Exception):
    """Base class for every failure raised by a login attempt."""


class ConfigurationError(PinterestLoginError):
    """The session configuration could not be turned into a launch configuration.

    Raised before any browser process exists, so there is nothing to clean up.
    """


class DriverError(PinterestLoginError):
    """The browser failed to launch, connect, or complete a protocol call.

    Seeing this means the outcome of the login is unknown, not that the
    credentials were wrong.
    """


TransportError = DriverError


class DriverTimeoutError(DriverError):
    """A configured request or launch timeout elapsed."""


class AuthenticationError(PinterestLoginError):
    """Pinterest rejected the credentials (or the page was unreachable after submit)."""

    def __init__(self, message: str = "The email or password you entered is incorrect."):
        super().__init__(f"Authentication error: {message}")


@contextmanager
def translate_driver_errors(action: str = "browser call") -> Iterator[None]:
    """Re-raise Playwright and timeout failures as ``DriverError`` subclasses."""
    try:
        yield
    except PlaywrightTimeoutError as e:
        raise DriverTimeoutError(f"{action} timed out: {e}") from e
    except asyncio.TimeoutError as e:
        raise DriverTimeoutError(f"{action} timed out") from e
    except PlaywrightError as e:
        raise DriverError(f"{action} failed: {e}") from e
