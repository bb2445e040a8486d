"""Log into Pinterest through a real browser and get the session cookies.

    from pinterest_login import Credentials, login

    cookies = await login(Credentials(identifier=email, secret=password))

Not affiliated with or supported by Pinterest.
"""

from .constants import PINTEREST_LOGIN_URL
from .errors import (
    AuthenticationError,
    ConfigurationError,
    DriverError,
    DriverTimeoutError,
    PinterestLoginError,
    TransportError,
)
from .models.session import Credentials, LaunchConfig, SessionConfig
from .session_manager.browser import LiveSession, launch
from .session_manager.config_builder import DefaultSessionConfigBuilder, SessionConfigBuilder
from .session_manager.cookies import harvest
from .session_manager.login_bot import DefaultLoginBot, LoginAutomator, is_login_page
from .session_manager.manager import login
from .session_manager.rejection import (
    BoundingBoxRejectionDetector,
    RejectionDetector,
    SubmissionSnapshot,
    SubmissionState,
)

__all__ = [
    "PINTEREST_LOGIN_URL",
    "AuthenticationError",
    "ConfigurationError",
    "DriverError",
    "DriverTimeoutError",
    "PinterestLoginError",
    "TransportError",
    "Credentials",
    "LaunchConfig",
    "SessionConfig",
    "LiveSession",
    "launch",
    "DefaultSessionConfigBuilder",
    "SessionConfigBuilder",
    "harvest",
    "DefaultLoginBot",
    "LoginAutomator",
    "is_login_page",
    "login",
    "BoundingBoxRejectionDetector",
    "RejectionDetector",
    "SubmissionSnapshot",
    "SubmissionState",
]
