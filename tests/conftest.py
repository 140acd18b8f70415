"""Shared fixtures for the editor-commons tests."""

import json
import os
from pathlib import Path
from typing import List, Optional

import httpx
import pytest

from editor_commons.telemetry import TelemetryConfig


class MockEndpoint:
    """Collection endpoint stand-in that records every request it receives."""

    def __init__(self, status_code: int = 200, error: Optional[Exception] = None):
        self.status_code = status_code
        self.error = error
        self.requests: List[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code)

    @property
    def bodies(self) -> List[dict]:
        return [json.loads(request.content) for request in self.requests]


def read_events(directory: Path) -> List[dict]:
    """Load every persisted event file in a directory, oldest first."""
    files = sorted(
        (path for path in directory.iterdir() if path.suffix == ".json" and path.stem.isdigit()),
        key=lambda path: int(path.stem),
    )
    return [json.loads(path.read_text()) for path in files]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep host EDITOR_COMMONS_* variables out of the tests."""
    for name in list(os.environ):
        if name.startswith("EDITOR_COMMONS_"):
            monkeypatch.delenv(name)


@pytest.fixture
def persist_directory(tmp_path):
    return tmp_path


@pytest.fixture
def endpoint():
    return MockEndpoint(200)


@pytest.fixture
def make_config(persist_directory):
    """Build a config with the usual test identity, overridable per test."""

    def _make(**overrides) -> TelemetryConfig:
        values = {
            "enabled": True,
            "environment": "development",
            "guid": "1234",
            "hardware_id": "1234",
            "product_version": "1234",
            "session_id": "1234",
            "persist_directory": persist_directory,
        }
        values.update(overrides)
        return TelemetryConfig(**values)

    return _make
