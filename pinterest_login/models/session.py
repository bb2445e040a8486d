"""Pydantic models for credentials, session configuration, and service state."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class Credentials(BaseModel):
    """Email (or username) and password for one login attempt."""

    model_config = ConfigDict(frozen=True)

    identifier: str = Field(min_length=1)
    secret: SecretStr


class SessionConfig(BaseModel):
    """User-facing browser options, validated before anything is launched."""

    model_config = ConfigDict(frozen=True)

    headless: bool = True
    request_timeout: Optional[float] = Field(default=None, gt=0)  # seconds
    launch_timeout: Optional[float] = Field(default=None, gt=0)  # seconds


class LaunchConfig(BaseModel):
    """Concrete launch configuration consumed exactly once by ``launch()``."""

    model_config = ConfigDict(frozen=True)

    headless: bool = True
    request_timeout_ms: Optional[float] = None
    launch_timeout: Optional[float] = None
    launch_options: dict[str, Any] = Field(default_factory=dict)
    init_scripts: list[str] = Field(default_factory=list)


class LoginStatus(BaseModel):
    """Current state of the local login service."""

    in_flight: int = 0
    succeeded: int = 0
    failed: int = 0
    last_success_time: Optional[str] = None
    last_error: Optional[str] = None
    message: str = ""


class LoginRequest(BaseModel):
    """Body of ``POST /login`` on the login service."""

    email: str = Field(min_length=1)
    password: SecretStr
    headless: Optional[bool] = None
    request_timeout: Optional[float] = None
    launch_timeout: Optional[float] = None
