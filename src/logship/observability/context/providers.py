"""Observability – providers the shipper consults while formatting.

Each provider is a plain callable so hosts can inject their own without
subclassing anything.
"""
from __future__ import annotations

import enum
import logging
from typing import Any, Callable

from logship.observability.context.host import HostContext

LevelNameResolver = Callable[[Any], str]
RemoteAddressProvider = Callable[[], "str | None"]
DebugTagProvider = Callable[[], "str | None"]


def level_name(level: Any) -> str:
    """Map a severity to its lower-case name.

    Accepts stdlib :mod:`logging` levels, level names and :class:`enum.Enum`
    members. Unknown values map to ``"unknown"``.
    """
    if isinstance(level, enum.Enum):
        return str(level.name).lower()
    if isinstance(level, bool):
        return "unknown"
    if isinstance(level, int):
        name = logging.getLevelName(level)
        if name.startswith("Level "):
            return "unknown"
        return name.lower()
    if isinstance(level, str) and level:
        return level.lower()
    return "unknown"


def context_remote_address() -> str | None:
    """Remote address of the current request, if any."""
    ctx = HostContext.get()
    return ctx.remote_addr if ctx is not None else None


def context_debug_tag() -> str | None:
    """Debug-session tag of the current request, if any."""
    ctx = HostContext.get()
    return ctx.debug_tag if ctx is not None else None


__all__ = [
    "DebugTagProvider",
    "LevelNameResolver",
    "RemoteAddressProvider",
    "context_debug_tag",
    "context_remote_address",
    "level_name",
]
