"""Summaries of which tracked products are installed."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List

from editor_commons.exceptions import UpdateCheckError
from editor_commons.updates.base import ProductUpdater
from editor_commons.updates.models import EnvironmentInfo, ProductInfo, UpdateInfo

logger = logging.getLogger("editor_commons.updates")


async def validate_environment(updaters: Iterable[ProductUpdater]) -> EnvironmentInfo:
    """Split products into installed and missing ones.

    Args:
        updaters: Products to inspect, in the order they should be reported

    Returns:
        EnvironmentInfo with installed products and their versions, and the
        names of missing products
    """
    updaters = list(updaters)
    versions = await asyncio.gather(*(updater.get_installed_version() for updater in updaters))

    info = EnvironmentInfo()
    for updater, version in zip(updaters, versions):
        if version:
            info.installed.append(ProductInfo(name=updater.product_name, version=version))
        else:
            info.missing.append(ProductInfo(name=updater.product_name))
    return info


async def check_for_updates(updaters: Iterable[ProductUpdater]) -> List[UpdateInfo]:
    """Check several products for updates concurrently.

    Products whose check raises UpdateCheckError are logged and left out.
    """
    updaters = list(updaters)
    results = await asyncio.gather(
        *(updater.check_for_update() for updater in updaters),
        return_exceptions=True,
    )

    updates: List[UpdateInfo] = []
    for updater, result in zip(updaters, results):
        if isinstance(result, UpdateCheckError):
            logger.warning(f"Could not check {updater.product_name} for updates: {result}")
            continue
        if isinstance(result, BaseException):
            raise result
        updates.append(result)
    return updates
