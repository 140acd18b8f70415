"""Models for telemetry data."""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

# Schema version of the event envelope understood by the collection endpoint
EVENT_SCHEMA_VERSION = "4"


class Environment(str, Enum):
    """Deployment environment a product reports from."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"


class DistributionInfo(BaseModel):
    version: str
    environment: Environment


class HardwareInfo(BaseModel):
    id: str
    arch: str


class OSInfo(BaseModel):
    name: str
    version: str


class SessionInfo(BaseModel):
    """Session the event belongs to.

    Session-scoped extras (e.g. ``duration`` on ``session.end``) are kept as
    additional fields next to ``id``.
    """

    model_config = ConfigDict(extra="allow")

    id: str


class TelemetryEvent(BaseModel):
    """A single telemetry event: a fixed envelope plus a free-form payload."""

    app: str
    event: str
    distribution: DistributionInfo
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    hardware: HardwareInfo
    os: OSInfo
    session: SessionInfo
    timestamp: int
    version: str = EVENT_SCHEMA_VERSION
    data: Dict[str, Any] = Field(default_factory=dict)

    @property
    def filename(self) -> str:
        """Name of the file this event is persisted under."""
        return f"{self.timestamp}.json"

    def to_payload(self) -> Dict[str, Any]:
        """JSON-compatible form used both on the wire and on disk."""
        return self.model_dump(mode="json")
