"""Resolve a stable, anonymous identifier for the current machine."""

from __future__ import annotations

import asyncio
import hashlib
import logging
import sys
import uuid
from pathlib import Path
from typing import Optional

logger = logging.getLogger("editor_commons.telemetry")

LINUX_MACHINE_ID_FILES = (
    Path("/etc/machine-id"),
    Path("/var/lib/dbus/machine-id"),
)

DEFAULT_STORAGE_DIR = Path.home() / ".editor-commons"


def _read_linux_machine_id() -> Optional[str]:
    for id_file in LINUX_MACHINE_ID_FILES:
        try:
            value = id_file.read_text().strip()
        except OSError:
            continue
        if value:
            return value
    return None


def _read_windows_machine_guid() -> Optional[str]:
    import winreg

    try:
        with winreg.OpenKey(
            winreg.HKEY_LOCAL_MACHINE,
            r"SOFTWARE\Microsoft\Cryptography",
            0,
            winreg.KEY_READ | winreg.KEY_WOW64_64KEY,
        ) as key:
            value, _ = winreg.QueryValueEx(key, "MachineGuid")
    except OSError as e:
        logger.debug(f"Could not read MachineGuid from registry: {e}")
        return None
    return str(value).strip() or None


def _get_or_create_installation_id(storage_dir: Path) -> str:
    """Get or create a random installation ID that persists across runs.

    Used where the platform offers no machine ID we can read. This ID is not
    tied to any personal information.
    """
    id_file = storage_dir / "machine_id"

    try:
        stored_id = id_file.read_text().strip()
        if stored_id:
            logger.debug(f"Using existing installation ID from {id_file}")
            return stored_id
    except OSError as e:
        logger.debug(f"No stored installation ID: {e}")

    new_id = str(uuid.uuid4())
    try:
        storage_dir.mkdir(parents=True, exist_ok=True)
        id_file.write_text(new_id)
        logger.debug(f"Created new installation ID in {id_file}")
    except OSError as e:
        # Last resort: the ID will not persist across runs
        logger.warning(f"Could not write installation ID: {e}")
    return new_id


def _read_machine_id(storage_dir: Path) -> str:
    raw_id: Optional[str] = None
    if sys.platform.startswith("linux"):
        raw_id = _read_linux_machine_id()
    elif sys.platform == "win32":
        raw_id = _read_windows_machine_guid()

    if not raw_id:
        raw_id = _get_or_create_installation_id(storage_dir)

    return hashlib.sha256(raw_id.encode("utf-8")).hexdigest()


async def get_machine_id(storage_dir: Optional[Path] = None) -> str:
    """Get a hashed identifier for this machine.

    Args:
        storage_dir: Directory for the fallback installation ID
            (defaults to ``~/.editor-commons``)

    Returns:
        str: SHA-256 hex digest of the machine identifier
    """
    return await asyncio.to_thread(_read_machine_id, storage_dir or DEFAULT_STORAGE_DIR)
