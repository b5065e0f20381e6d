"""Observability – structlog processors and get_logger helper."""
from __future__ import annotations

from typing import Any

import structlog

from logship.observability.context import HostContext


class HostContextProcessor:
    """structlog processor that injects the active :class:`HostContext`.

    Adds ``remote_addr`` and ``debug_tag`` to the event dict when a host
    context is set and the values are not ``None``.

    Usage::

        structlog.configure(processors=[HostContextProcessor(), ...])
    """

    def __call__(
        self,
        logger: Any,           # noqa: ARG002
        method_name: str,      # noqa: ARG002
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        ctx = HostContext.get()
        if ctx is not None:
            if ctx.remote_addr is not None:
                event_dict.setdefault("remote_addr", ctx.remote_addr)
            if ctx.debug_tag is not None:
                event_dict.setdefault("debug_tag", ctx.debug_tag)
        return event_dict


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a bound structlog logger.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs to bind on the returned logger.
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


__all__ = ["HostContextProcessor", "get_logger"]
