"""Update checks for locally installed products."""

from editor_commons.updates.base import ProductUpdater, is_newer_version
from editor_commons.updates.environment import check_for_updates, validate_environment
from editor_commons.updates.models import EnvironmentInfo, ProductInfo, UpdateInfo

__all__ = [
    "ProductUpdater",
    "UpdateInfo",
    "ProductInfo",
    "EnvironmentInfo",
    "check_for_updates",
    "is_newer_version",
    "validate_environment",
]
