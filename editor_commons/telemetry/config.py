"""Configuration for the telemetry reporter."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Optional, Union

from editor_commons.exceptions import TelemetryConfigError
from editor_commons.telemetry.models import Environment

logger = logging.getLogger("editor_commons.telemetry")

DEFAULT_TELEMETRY_URL = "https://api.appcelerator.com/p/v4/app-track"
DEFAULT_PERSIST_LENGTH = "30d"

DurationLike = Union[str, int, float, timedelta]

_SECOND = 1000
_MINUTE = _SECOND * 60
_HOUR = _MINUTE * 60
_DAY = _HOUR * 24
_WEEK = _DAY * 7
_YEAR = _DAY * 365.25

_UNITS = {
    "ms": 1,
    "msec": 1,
    "msecs": 1,
    "millisecond": 1,
    "milliseconds": 1,
    "s": _SECOND,
    "sec": _SECOND,
    "secs": _SECOND,
    "second": _SECOND,
    "seconds": _SECOND,
    "m": _MINUTE,
    "min": _MINUTE,
    "mins": _MINUTE,
    "minute": _MINUTE,
    "minutes": _MINUTE,
    "h": _HOUR,
    "hr": _HOUR,
    "hrs": _HOUR,
    "hour": _HOUR,
    "hours": _HOUR,
    "d": _DAY,
    "day": _DAY,
    "days": _DAY,
    "w": _WEEK,
    "week": _WEEK,
    "weeks": _WEEK,
    "y": _YEAR,
    "yr": _YEAR,
    "yrs": _YEAR,
    "year": _YEAR,
    "years": _YEAR,
}

_DURATION_RE = re.compile(r"^(?P<value>\d*\.?\d+)\s*(?P<unit>[a-z]+)?$", re.IGNORECASE)


def parse_duration(value: DurationLike) -> int:
    """Convert a human duration into milliseconds.

    Numbers are taken as milliseconds. Strings are a number followed by an
    optional unit, e.g. ``"30d"``, ``"1h"``, ``"1.5 hours"`` or ``"1"``.

    Args:
        value: Duration to convert

    Returns:
        int: Duration in milliseconds

    Raises:
        TelemetryConfigError: If the value cannot be interpreted as a duration
    """
    if isinstance(value, bool):
        raise TelemetryConfigError(f"Invalid duration: {value!r}")
    if isinstance(value, timedelta):
        return int(value.total_seconds() * 1000)
    if isinstance(value, (int, float)):
        if value < 0:
            raise TelemetryConfigError(f"Duration must not be negative: {value!r}")
        try:
            return int(value)
        except (OverflowError, ValueError):
            raise TelemetryConfigError(f"Invalid duration: {value!r}")
    if not isinstance(value, str):
        raise TelemetryConfigError(f"Invalid duration: {value!r}")

    match = _DURATION_RE.match(value.strip())
    if not match:
        raise TelemetryConfigError(f"Invalid duration: {value!r}")

    unit = (match.group("unit") or "ms").lower()
    if unit not in _UNITS:
        raise TelemetryConfigError(f"Unknown duration unit {unit!r} in {value!r}")

    try:
        return int(float(match.group("value")) * _UNITS[unit])
    except OverflowError:
        raise TelemetryConfigError(f"Duration out of range: {value!r}")


def is_telemetry_globally_disabled() -> bool:
    """Check if telemetry is globally disabled via environment variables.

    Returns:
        bool: True if telemetry is globally disabled, False otherwise
    """
    disabled = os.environ.get("EDITOR_COMMONS_TELEMETRY_DISABLED", "").lower()
    return disabled in ("1", "true", "yes", "on")


@dataclass
class TelemetryConfig:
    """Configuration for a telemetry reporter.

    Only ``enabled`` is meant to change after construction.
    """

    guid: str
    product_version: str
    environment: Union[Environment, str] = Environment.PRODUCTION
    enabled: bool = True
    hardware_id: Optional[str] = None
    session_id: Optional[str] = None
    persist_directory: Optional[Path] = None
    persist_length: DurationLike = DEFAULT_PERSIST_LENGTH
    url: str = DEFAULT_TELEMETRY_URL
    persist_length_ms: int = field(init=False)

    def __post_init__(self) -> None:
        try:
            self.environment = Environment(self.environment)
        except ValueError:
            raise TelemetryConfigError(
                f"Invalid environment {self.environment!r}, expected one of "
                f"{[e.value for e in Environment]}"
            )
        if self.persist_directory is not None:
            self.persist_directory = Path(self.persist_directory)
        self.persist_length_ms = parse_duration(self.persist_length)
        if not self.url:
            self.url = DEFAULT_TELEMETRY_URL

    @classmethod
    def from_env(
        cls,
        guid: str,
        product_version: str,
        environment: Union[Environment, str] = Environment.PRODUCTION,
        **overrides: Any,
    ) -> TelemetryConfig:
        """Load config from environment variables.

        Keyword overrides take precedence over the environment, except that the
        global opt-out always disables telemetry.
        """
        values: Dict[str, Any] = {}

        url = os.environ.get("EDITOR_COMMONS_TELEMETRY_URL")
        if url:
            values["url"] = url

        persist_dir = os.environ.get("EDITOR_COMMONS_TELEMETRY_PERSIST_DIR")
        if persist_dir:
            values["persist_directory"] = Path(persist_dir).expanduser()

        persist_length = os.environ.get("EDITOR_COMMONS_TELEMETRY_PERSIST_LENGTH")
        if persist_length:
            values["persist_length"] = persist_length

        values.update(overrides)

        if is_telemetry_globally_disabled():
            logger.info("Telemetry globally disabled via environment variable")
            values["enabled"] = False

        return cls(
            guid=guid,
            product_version=product_version,
            environment=environment,
            **values,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "enabled": self.enabled,
            "environment": Environment(self.environment).value,
            "guid": self.guid,
            "product_version": self.product_version,
            "persist_directory": str(self.persist_directory) if self.persist_directory else None,
            "persist_length_ms": self.persist_length_ms,
            "url": self.url,
        }
