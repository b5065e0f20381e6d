"""Observability – HostContext, the ambient per-request values."""
from __future__ import annotations

import contextlib
import dataclasses
from collections.abc import Iterator
from contextvars import ContextVar


@dataclasses.dataclass(frozen=True)
class HostContext:
    """Values the host application knows about the current request.

    A web middleware sets one per request; CLI programs usually leave it
    unset, in which case the shipper falls back to ``cli_ip``.
    """

    remote_addr: str | None = None
    debug_tag: str | None = None

    @staticmethod
    def set(ctx: "HostContext") -> None:
        _CTX_VAR.set(ctx)

    @staticmethod
    def get() -> "HostContext | None":
        return _CTX_VAR.get()

    @staticmethod
    def clear() -> None:
        _CTX_VAR.set(None)

    @staticmethod
    @contextlib.contextmanager
    def scope(
        remote_addr: str | None = None,
        debug_tag: str | None = None,
    ) -> Iterator["HostContext"]:
        """Set a context for the duration of a ``with`` block."""
        ctx = HostContext(remote_addr=remote_addr, debug_tag=debug_tag)
        token = _CTX_VAR.set(ctx)
        try:
            yield ctx
        finally:
            _CTX_VAR.reset(token)

    @staticmethod
    def from_environ(environ: dict[str, str]) -> "HostContext":
        """Build a context from a WSGI ``environ`` and store it."""
        ctx = HostContext(
            remote_addr=environ.get("REMOTE_ADDR") or None,
            debug_tag=environ.get("HTTP_X_DEBUG_TAG") or None,
        )
        _CTX_VAR.set(ctx)
        return ctx


_CTX_VAR: ContextVar[HostContext | None] = ContextVar("_logship_host_ctx", default=None)


__all__ = ["HostContext"]
