"""Shipper – LogEntry and StackFrame, the shapes handed in by the host."""
from __future__ import annotations

import time
import traceback
from collections.abc import Iterable, Mapping
from types import TracebackType
from typing import Any, NamedTuple

from logship.observability.context import HostContext

_FIELD_COUNT = 7


class StackFrame(NamedTuple):
    """One frame of a stack trace; ``file`` may be empty for internal frames."""

    file: str | None
    line: int | None = None


class LogEntry(NamedTuple):
    """A log message collected by the host logging framework.

    ``context`` pins the request values (remote address, debug tag) that
    were current when the message was logged; ``None`` means the shipper
    asks its providers at format time.
    """

    message: Any
    level: Any
    category: str
    timestamp: float
    traces: tuple[Any, ...] = ()
    code: Any = None
    context: HostContext | None = None

    @classmethod
    def coerce(cls, raw: Any) -> "LogEntry":
        """Accept a ``LogEntry`` or anything tuple-like, never failing.

        Missing items are padded (``level`` unknown, empty category, current
        time); surplus items are ignored. A bare value becomes the message.
        """
        if isinstance(raw, LogEntry):
            return raw
        if isinstance(raw, (tuple, list)):
            items = list(raw[:_FIELD_COUNT])
        else:
            items = [raw]
        if not items:
            items = [""]
        if len(items) < 4:
            # level, category, timestamp
            padding = [None, "", time.time()]
            items.extend(padding[len(items) - 1:])
        entry = cls(*items)
        if entry.traces is None or isinstance(entry.traces, (str, bytes)) or not isinstance(entry.traces, Iterable):
            entry = entry._replace(traces=())
        if not isinstance(entry.category, str):
            entry = entry._replace(category="" if entry.category is None else str(entry.category))
        if entry.context is not None and not isinstance(entry.context, HostContext):
            entry = entry._replace(context=None)
        return entry


def _first_present(obj: Any, *names: str) -> Any:
    for name in names:
        value = getattr(obj, name, None)
        if value is not None:
            return value
    return None


def to_stack_frame(frame: Any) -> StackFrame:
    """Normalise a mapping, ``FrameSummary``, ``StackFrame`` or pair to a StackFrame."""
    if isinstance(frame, StackFrame):
        return frame
    if isinstance(frame, traceback.FrameSummary):
        return StackFrame(frame.filename, frame.lineno)
    if isinstance(frame, Mapping):
        return StackFrame(frame.get("file"), frame.get("line"))
    if isinstance(frame, (tuple, list)) and len(frame) == 2:
        return StackFrame(frame[0], frame[1])
    return StackFrame(_first_present(frame, "filename", "file"), _first_present(frame, "lineno", "line"))


def frames_from_traceback(tb: TracebackType | None) -> tuple[StackFrame, ...]:
    """Frames of an exception traceback, outermost first."""
    if tb is None:
        return ()
    return tuple(StackFrame(f.filename, f.lineno) for f in traceback.extract_tb(tb))


__all__ = ["LogEntry", "StackFrame", "frames_from_traceback", "to_stack_frame"]
