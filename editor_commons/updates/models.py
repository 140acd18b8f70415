"""Models for update checks."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class UpdateInfo(BaseModel):
    """Result of checking a single product for updates."""

    product_name: str
    current_version: Optional[str] = None
    latest_version: str
    has_update: bool


class ProductInfo(BaseModel):
    name: str
    version: Optional[str] = None


class EnvironmentInfo(BaseModel):
    """Which tracked products are installed on this machine."""

    installed: List[ProductInfo] = Field(default_factory=list)
    missing: List[ProductInfo] = Field(default_factory=list)
