"""Turn user-facing session options into a concrete browser launch configuration."""

from __future__ import annotations

import logging
import sys
from typing import Optional, Protocol

from pydantic import ValidationError

from ..config import BROWSER_HEADLESS, BROWSER_LAUNCH_TIMEOUT, BROWSER_REQUEST_TIMEOUT
from ..constants import FIREFOX_USER_PREFS, HIDE_WEBDRIVER_SCRIPT
from ..errors import ConfigurationError
from ..models.session import LaunchConfig, SessionConfig

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(name)s] %(levelname)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)


class SessionConfigBuilder(Protocol):
    """Anything that can produce a launch configuration.

    Implement this to control how the browser is started, e.g. to point a
    test at a scripted driver or to add extra Camoufox options.
    """

    def build(self) -> LaunchConfig:
        ...


class DefaultSessionConfigBuilder:
    """Builds a Camoufox launch configuration from headless/timeout settings.

    Args:
        headless: Launch without a visible window (you probably want this).
        request_timeout: Seconds before a page call gives up. ``None`` waits forever.
        launch_timeout: Seconds allowed for the browser to start. ``None`` waits forever.
    """

    def __init__(
        self,
        headless: bool = True,
        request_timeout: Optional[float] = 5.0,
        launch_timeout: Optional[float] = None,
    ):
        self.headless = headless
        self.request_timeout = request_timeout
        self.launch_timeout = launch_timeout

    @classmethod
    def from_env(cls) -> DefaultSessionConfigBuilder:
        """Use the defaults from ``BROWSER_*`` environment variables."""
        return cls(BROWSER_HEADLESS, BROWSER_REQUEST_TIMEOUT, BROWSER_LAUNCH_TIMEOUT)

    def build(self) -> LaunchConfig:
        logger.debug(
            "Building launch config (headless=%s, request_timeout=%s, launch_timeout=%s)",
            self.headless, self.request_timeout, self.launch_timeout,
        )
        try:
            session_config = SessionConfig(
                headless=self.headless,
                request_timeout=self.request_timeout,
                launch_timeout=self.launch_timeout,
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid session configuration: {e}") from e

        request_timeout_ms = (
            session_config.request_timeout * 1000
            if session_config.request_timeout is not None
            else None
        )
        launch_config = LaunchConfig(
            headless=session_config.headless,
            request_timeout_ms=request_timeout_ms,
            launch_timeout=session_config.launch_timeout,
            launch_options={
                "headless": session_config.headless,
                "humanize": True,
                "i_know_what_im_doing": True,
                "firefox_user_prefs": dict(FIREFOX_USER_PREFS),
            },
            init_scripts=[HIDE_WEBDRIVER_SCRIPT],
        )
        logger.debug("Built launch config: %s", launch_config)
        return launch_config
