"""Base class for per-product update checks."""

from __future__ import annotations

import asyncio
import logging
import re
from abc import ABC, abstractmethod
from typing import Optional, Tuple

from editor_commons.updates.models import UpdateInfo

logger = logging.getLogger("editor_commons.updates")

_NUMERIC_VERSION_RE = re.compile(r"^v?(\d+(?:\.\d+)*)")


def _numeric_parts(version: str) -> Optional[Tuple[int, ...]]:
    match = _NUMERIC_VERSION_RE.match(version.strip())
    if not match:
        return None
    return tuple(int(part) for part in match.group(1).split("."))


def _pad(parts: Tuple[int, ...], length: int) -> Tuple[int, ...]:
    return parts + (0,) * (length - len(parts))


def is_newer_version(latest: str, current: Optional[str]) -> bool:
    """Check whether ``latest`` is an update over ``current``.

    Versions are compared on their leading dotted numeric part, so
    ``"8.0.0.GA"`` is newer than ``"7.5.0.GA"``. Versions without a numeric
    part are compared as plain strings.

    Args:
        latest: Latest published version
        current: Installed version, or None if nothing is installed

    Returns:
        bool: True if an update is available
    """
    if not current:
        return True

    latest_parts = _numeric_parts(latest)
    current_parts = _numeric_parts(current)
    if latest_parts is None or current_parts is None:
        return latest.strip() != current.strip()

    length = max(len(latest_parts), len(current_parts))
    return _pad(latest_parts, length) > _pad(current_parts, length)


class ProductUpdater(ABC):
    """Checks one installable product against its latest published version.

    Subclasses know how to find the installed version (if any) and how to look
    up the latest release.
    """

    product_name: str = ""

    @abstractmethod
    async def get_installed_version(self) -> Optional[str]:
        """Return the installed version, or None if the product is not installed."""
        ...

    @abstractmethod
    async def get_latest_version(self) -> str:
        """Return the latest published version.

        Raises:
            UpdateCheckError: If the latest version cannot be determined
        """
        ...

    async def check_for_update(self) -> UpdateInfo:
        current_version, latest_version = await asyncio.gather(
            self.get_installed_version(),
            self.get_latest_version(),
        )
        has_update = is_newer_version(latest_version, current_version)
        logger.debug(
            f"{self.product_name}: installed {current_version}, latest {latest_version}, "
            f"update available: {has_update}"
        )
        return UpdateInfo(
            product_name=self.product_name,
            current_version=current_version,
            latest_version=latest_version,
            has_update=has_update,
        )
