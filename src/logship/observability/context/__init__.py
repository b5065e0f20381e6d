"""Observability – host context and the providers built on it."""
from logship.observability.context.host import HostContext
from logship.observability.context.providers import (
    DebugTagProvider,
    LevelNameResolver,
    RemoteAddressProvider,
    context_debug_tag,
    context_remote_address,
    level_name,
)

__all__ = [
    "DebugTagProvider",
    "HostContext",
    "LevelNameResolver",
    "RemoteAddressProvider",
    "context_debug_tag",
    "context_remote_address",
    "level_name",
]
