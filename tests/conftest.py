"""Shared fixtures for the logship test-suite."""
from __future__ import annotations

from collections.abc import Iterator

import pytest
import structlog

from logship.observability.context import HostContext

@pytest.fixture(autouse=True)
def _isolate_ambient_state() -> Iterator[None]:
    yield
    HostContext.clear()
    structlog.reset_defaults()
