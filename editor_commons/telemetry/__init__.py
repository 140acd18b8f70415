"""This module provides the telemetry reporter for editor integrations.

It collects anonymous usage events, delivers them best-effort and keeps a
local copy of every event for a configurable retention period.
"""

from editor_commons.telemetry.config import (
    DEFAULT_PERSIST_LENGTH,
    DEFAULT_TELEMETRY_URL,
    TelemetryConfig,
    is_telemetry_globally_disabled,
    parse_duration,
)
from editor_commons.telemetry.machine_id import get_machine_id
from editor_commons.telemetry.models import Environment, TelemetryEvent
from editor_commons.telemetry.store import EventStore
from editor_commons.telemetry.telemetry import Telemetry, set_telemetry_log_level


__all__ = [
    "DEFAULT_PERSIST_LENGTH",
    "DEFAULT_TELEMETRY_URL",
    "Environment",
    "EventStore",
    "Telemetry",
    "TelemetryConfig",
    "TelemetryEvent",
    "get_machine_id",
    "is_telemetry_globally_disabled",
    "parse_duration",
    "set_telemetry_log_level",
]
