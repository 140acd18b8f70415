"""Telemetry reporter for anonymous usage events.

Events are delivered to a collection endpoint on a best-effort basis and, when a
persist directory is configured, written to disk regardless of delivery outcome.
"""

from __future__ import annotations

import asyncio
import logging
import os
import platform
import sys
import time
import uuid
from typing import Any, Awaitable, Callable, Dict, Optional, Union

import httpx

from editor_commons.telemetry.config import TelemetryConfig
from editor_commons.telemetry.machine_id import get_machine_id
from editor_commons.telemetry.models import (
    DistributionInfo,
    Environment,
    HardwareInfo,
    OSInfo,
    SessionInfo,
    TelemetryEvent,
)
from editor_commons.telemetry.sender import send_telemetry
from editor_commons.telemetry.store import EventStore

logger = logging.getLogger("editor_commons.telemetry")

MachineIdResolver = Callable[[], Awaitable[str]]

SESSION_START_EVENT = "session.start"
SESSION_END_EVENT = "session.end"


def _now_ms() -> int:
    return int(time.time() * 1000)


class Telemetry:
    """Reports telemetry events for a single product.

    The reporter is instance-scoped; several reporters can run side by side.
    """

    def __init__(
        self,
        config: TelemetryConfig,
        *,
        machine_id_resolver: Optional[MachineIdResolver] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the reporter. No I/O happens here.

        Args:
            config: Reporter configuration
            machine_id_resolver: Coroutine function returning the hardware ID,
                used only when the config does not provide one
            transport: Optional httpx transport used for delivery
        """
        self.config = config
        self.hardware_id: Optional[str] = config.hardware_id
        self.session_id: str = config.session_id or str(uuid.uuid4())
        self.session_start_time: Optional[int] = None
        self.store: Optional[EventStore] = (
            EventStore(config.persist_directory) if config.persist_directory else None
        )

        self._machine_id_resolver = machine_id_resolver or get_machine_id
        self._hardware_id_task: Optional[asyncio.Future] = None
        self._transport = transport
        self._last_timestamp = 0

    @classmethod
    def from_env(
        cls,
        guid: str,
        product_version: str,
        environment: Union[Environment, str] = Environment.PRODUCTION,
        **overrides: Any,
    ) -> Telemetry:
        """Create a reporter whose config is read from environment variables."""
        return cls(TelemetryConfig.from_env(guid, product_version, environment, **overrides))

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self.config.enabled = value
        logger.info(f"Telemetry {'enabled' if value else 'disabled'}")

    @property
    def has_active_session(self) -> bool:
        return self.session_start_time is not None

    async def start_session(self, data: Optional[Dict[str, Any]] = None) -> None:
        """Start a session and report ``session.start``.

        Starting while a session is active restarts the duration measurement.

        Args:
            data: Event payload
        """
        if not self.enabled:
            return

        self.session_start_time = _now_ms()
        await self.send_event(SESSION_START_EVENT, data)

    async def end_session(self, data: Optional[Dict[str, Any]] = None) -> None:
        """End the active session and report ``session.end`` with its duration.

        Does nothing when no session is active. A new session ID is used for
        every event sent afterwards.

        Args:
            data: Event payload
        """
        if self.session_start_time is None:
            return

        duration = _now_ms() - self.session_start_time
        self.session_start_time = None

        try:
            await self.send_event(SESSION_END_EVENT, data, session_extra={"duration": duration})
        finally:
            self.session_id = str(uuid.uuid4())

    async def send_event(
        self,
        event: str,
        data: Optional[Dict[str, Any]] = None,
        session_extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Record an event with optional payload.

        Args:
            event: Name of the event
            data: Event payload (must not contain sensitive data)
            session_extra: Extra session-scoped fields, e.g. ``duration``
        """
        if not self.enabled:
            logger.debug(f"Telemetry disabled, skipping event: {event}")
            return

        telemetry_event = await self._build_event(event, data, session_extra)
        payload = telemetry_event.to_payload()

        tasks = [send_telemetry(self.config.url, payload, transport=self._transport)]
        if self.store is not None:
            tasks.append(self.store.write(telemetry_event, payload))

        results = await asyncio.gather(*tasks, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logger.warning(f"Failed to record telemetry event {event}: {result}")

    async def empty(self) -> int:
        """Delete persisted events older than the configured persist length.

        Returns:
            int: Number of events removed
        """
        if self.store is None:
            return 0
        return await self.store.sweep(self.config.persist_length_ms)

    async def _build_event(
        self,
        event: str,
        data: Optional[Dict[str, Any]],
        session_extra: Optional[Dict[str, Any]],
    ) -> TelemetryEvent:
        hardware_id = await self._get_hardware_id()
        return TelemetryEvent(
            app=self.config.guid,
            event=event,
            distribution=DistributionInfo(
                version=self.config.product_version,
                environment=self.config.environment,
            ),
            hardware=HardwareInfo(id=hardware_id, arch=platform.machine()),
            os=OSInfo(name=sys.platform, version=platform.release()),
            session=SessionInfo.model_validate({**(session_extra or {}), "id": self.session_id}),
            timestamp=self._next_timestamp(),
            data=dict(data or {}),
        )

    async def _get_hardware_id(self) -> str:
        """Resolve the hardware ID once and cache it for the reporter's lifetime."""
        if self.hardware_id:
            return self.hardware_id

        # Concurrent callers share a single resolution
        if self._hardware_id_task is None or self._hardware_id_task.cancelled():
            self._hardware_id_task = asyncio.ensure_future(self._machine_id_resolver())

        try:
            # A cancelled caller must not cancel the resolution other callers wait on
            resolved = await asyncio.shield(self._hardware_id_task)
        except Exception as e:
            logger.warning(f"Failed to resolve hardware ID, using a random one: {e}")
            resolved = str(uuid.uuid4())

        if not self.hardware_id:
            self.hardware_id = resolved
        return self.hardware_id

    def _next_timestamp(self) -> int:
        # Strictly increasing so events from this reporter never share a file name
        timestamp = max(_now_ms(), self._last_timestamp + 1)
        self._last_timestamp = timestamp
        return timestamp


def set_telemetry_log_level(level: Optional[int] = None) -> None:
    """Set the logging level for telemetry loggers to reduce console output.

    By default, checks the EDITOR_COMMONS_TELEMETRY_LOG_LEVEL environment variable
    ("DEBUG", "INFO", "WARNING" or "ERROR") and falls back to logging.WARNING,
    so telemetry stays quiet inside host applications unless asked otherwise.

    Args:
        level: The logging level to set (overrides environment variable if provided)
    """
    if level is None:
        env_level = os.environ.get("EDITOR_COMMONS_TELEMETRY_LOG_LEVEL", "WARNING").upper()
        level = {
            "DEBUG": logging.DEBUG,
            "INFO": logging.INFO,
            "WARNING": logging.WARNING,
            "ERROR": logging.ERROR,
        }.get(env_level, logging.WARNING)

    logging.getLogger("editor_commons.telemetry").setLevel(level)


# Applied at import time so the level is in place before any logging happens
set_telemetry_log_level()
