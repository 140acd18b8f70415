"""On-disk store of telemetry events, one JSON file per event."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from editor_commons.telemetry.models import TelemetryEvent

logger = logging.getLogger("editor_commons.telemetry")

EVENT_FILE_SUFFIX = ".json"


def event_timestamp(path: Path) -> Optional[int]:
    """Timestamp encoded in an event file name, or None if it is not an event file."""
    if path.suffix != EVENT_FILE_SUFFIX:
        return None
    # Plain ASCII digits only; int() would also take "1_000", " 5" or "+5"
    if not (path.stem.isascii() and path.stem.isdigit()):
        return None
    return int(path.stem)


class EventStore:
    """Persists telemetry events to a directory and prunes old ones.

    Files are named ``<timestamp>.json`` where the timestamp is the event's
    milliseconds since the epoch. Anything else in the directory is left alone.
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    async def write(self, event: TelemetryEvent, payload: Optional[Dict[str, Any]] = None) -> Optional[Path]:
        """Write an event to the store.

        Args:
            event: Event to persist
            payload: Pre-serialized form of the event, if already built

        Returns:
            The written file, or None if the write failed
        """
        path = self.directory / event.filename
        data = json.dumps(payload if payload is not None else event.to_payload())
        try:
            await asyncio.to_thread(self._write_file, path, data)
        except OSError as e:
            logger.warning(f"Failed to persist telemetry event to {path}: {e}")
            return None
        return path

    def _write_file(self, path: Path, data: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path.write_text(data, encoding="utf-8")

    async def list_event_files(self) -> List[Path]:
        """List persisted event files, oldest first."""
        return await asyncio.to_thread(self._list_event_files)

    def _list_event_files(self) -> List[Path]:
        try:
            entries = list(self.directory.iterdir())
        except FileNotFoundError:
            return []
        events = []
        for entry in entries:
            timestamp = event_timestamp(entry)
            if timestamp is not None:
                events.append((timestamp, entry))
        return [entry for _, entry in sorted(events)]

    async def sweep(self, max_age_ms: int, now: Optional[int] = None) -> int:
        """Delete event files older than ``max_age_ms``.

        Args:
            max_age_ms: Retention window in milliseconds
            now: Reference time in milliseconds (defaults to the current time)

        Returns:
            int: Number of files removed
        """
        if now is None:
            now = int(time.time() * 1000)
        return await asyncio.to_thread(self._sweep, max_age_ms, now)

    def _sweep(self, max_age_ms: int, now: int) -> int:
        try:
            entries = list(self.directory.iterdir())
        except FileNotFoundError:
            return 0
        except OSError as e:
            logger.debug(f"Could not list telemetry store {self.directory}: {e}")
            return 0

        removed = 0
        for entry in entries:
            timestamp = event_timestamp(entry)
            if timestamp is None:
                continue
            if now - timestamp <= max_age_ms:
                continue
            try:
                entry.unlink()
                removed += 1
            except OSError as e:
                logger.debug(f"Could not remove expired telemetry event {entry}: {e}")

        if removed:
            logger.debug(f"Removed {removed} expired telemetry events from {self.directory}")
        return removed
