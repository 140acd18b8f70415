"""Shared client-side utilities for editor integrations: telemetry and update checks."""

__version__ = "0.1.0"

from .exceptions import EditorCommonsError, TelemetryConfigError, UpdateCheckError
from .telemetry import Telemetry, TelemetryConfig
from .updates import ProductUpdater, UpdateInfo, check_for_updates, validate_environment

__all__ = [
    "Telemetry",
    "TelemetryConfig",
    "ProductUpdater",
    "UpdateInfo",
    "check_for_updates",
    "validate_environment",
    "EditorCommonsError",
    "TelemetryConfigError",
    "UpdateCheckError",
]
