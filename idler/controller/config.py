"""
Controller configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults. Durations accept the
Go-style notation used by OpenFaaS deployments ("30s", "5m", "1h30m").
"""

import re
from datetime import timedelta

from pydantic import Field, field_validator
from pydantic_settings import SettingsConfigDict

from idler.common.core.config import BaseAppConfig

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ns|us|µs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def _parse_duration_text(text: str) -> timedelta:
    try:
        return timedelta(seconds=float(text))
    except ValueError:
        pass

    pos = 0
    seconds = 0.0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            break
        seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()

    if pos == 0 or pos != len(text):
        raise ValueError(f"invalid duration: {text!r}")
    return timedelta(seconds=seconds)


def parse_duration(value) -> timedelta:
    """Parse "5m", "1h30m", "500ms" or a plain number of seconds. Negative values are rejected."""
    if isinstance(value, timedelta):
        duration = value
    elif isinstance(value, (int, float)):
        duration = timedelta(seconds=value)
    else:
        duration = _parse_duration_text(str(value).strip())

    if duration < timedelta(0):
        raise ValueError(f"duration must not be negative: {value!r}")
    return duration


class IdlerConfig(BaseAppConfig):
    """
    Configuration management for the scale-to-zero controller.

    Immutable once loaded; components receive the values they need through
    their constructors.
    """

    # Gateway
    GATEWAY_URL: str = Field(default="", description="Gateway base URL (faas-netes/faas-swarm)")

    # Metrics backend
    PROMETHEUS_HOST: str = Field(default="prometheus", description="Prometheus host")
    PROMETHEUS_PORT: int = Field(default=9090, description="Prometheus port")

    # Reconciliation
    INACTIVITY_DURATION: timedelta = Field(
        default=timedelta(minutes=5), description="Window without invocations before scaling down"
    )
    RECONCILE_INTERVAL: timedelta = Field(
        default=timedelta(seconds=30), description="Sleep between reconciliation cycles"
    )

    # Flags
    DRY_RUN: bool = Field(default=False, description="Log scaling events instead of sending them")
    WRITE_DEBUG: bool = Field(default=False, description="Verbose output")

    # Basic auth secrets
    BASIC_AUTH_USER_FILE: str = Field(
        default="/var/secrets/basic-auth-user", description="Gateway basic auth username file"
    )
    BASIC_AUTH_PASSWORD_FILE: str = Field(
        default="/var/secrets/basic-auth-password", description="Gateway basic auth password file"
    )

    # OpenFaaS deployments set these variables in lower case (gateway_url, write_debug, ...).
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    @field_validator("GATEWAY_URL")
    @classmethod
    def _ensure_trailing_slash(cls, value: str) -> str:
        value = value.strip()
        if value and not value.endswith("/"):
            value += "/"
        return value

    @field_validator("INACTIVITY_DURATION", "RECONCILE_INTERVAL", mode="before")
    @classmethod
    def _parse_duration(cls, value):
        return parse_duration(value)

    @field_validator("INACTIVITY_DURATION")
    @classmethod
    def _whole_minutes(cls, value: timedelta) -> timedelta:
        # The rate() window is expressed in whole minutes.
        if value < timedelta(minutes=1):
            raise ValueError("INACTIVITY_DURATION must be at least 1m")
        return value

    @field_validator("WRITE_DEBUG", mode="before")
    @classmethod
    def _parse_debug_flag(cls, value):
        if isinstance(value, str):
            return value.strip() in ("1", "true")
        return value
