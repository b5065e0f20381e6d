"""Shipper – turn a LogEntry into the flat record Loggly indexes.

Field order and presence::

    timestamp, level, category, message   always
    tag                                   entry context or debug tag provider has one
    code                                  exception code or entry code
    ip                                    enable_ip
    trail                                 enable_trail
    trace                                 enable_trace, frames without a file dropped

Loggly handles nested JSON poorly, so traces are flattened to
``"<file>(<line>)"`` strings.
"""
from __future__ import annotations

import dataclasses
import json
import math
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from logship.observability.context import (
    DebugTagProvider,
    LevelNameResolver,
    RemoteAddressProvider,
    context_debug_tag,
    context_remote_address,
    level_name,
)
from logship.shipper.entry import LogEntry, frames_from_traceback, to_stack_frame

TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M:%S"

_JSON_SCALARS = (str, int, float, bool, type(None))


@dataclasses.dataclass(frozen=True)
class FormatOptions:
    """Which optional fields a formatter adds."""

    enable_ip: bool = False
    enable_trail: bool = False
    enable_trace: bool = False
    trail: str | None = None
    cli_ip: str = "0.0.0.0"


def format_timestamp(timestamp: float) -> str:
    """Unix timestamp as ``YYYY/MM/DD HH:MM:SS`` in the host's local time zone."""
    return datetime.fromtimestamp(timestamp).strftime(TIMESTAMP_FORMAT)


def _safe_timestamp(timestamp: Any) -> str:
    try:
        return format_timestamp(timestamp)
    except (TypeError, ValueError, OverflowError, OSError):
        return str(timestamp)


def format_trace(traces: Iterable[Any]) -> list[str]:
    out: list[str] = []
    for raw in traces or ():
        frame = to_stack_frame(raw)
        if not frame.file:
            continue
        line = "" if frame.line is None else frame.line
        out.append(f"{frame.file}({line})")
    return out


def _exception_message(exc: BaseException) -> str:
    message = getattr(exc, "message", None)
    if isinstance(message, str):
        return message
    return str(exc)


def _finite(value: Any) -> Any:
    """Replace NaN and infinities, which JSON cannot carry, by their str()."""
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, dict):
        return {_finite(k): _finite(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_finite(v) for v in value]
    return value


def _dumps(value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False, default=str, allow_nan=False)
    except ValueError:
        return json.dumps(_finite(value), ensure_ascii=False, default=str, allow_nan=False)


def _encode_structured(payload: Any) -> str:
    try:
        return _dumps(payload)
    except (TypeError, ValueError, RecursionError):
        return str(payload)


class MessageFormatter:
    """Pure entry-to-record transformation.

    Only the injected providers are consulted besides the entry itself.
    """

    def __init__(
        self,
        options: FormatOptions | None = None,
        *,
        level_names: LevelNameResolver = level_name,
        remote_address: RemoteAddressProvider = context_remote_address,
        debug_tag: DebugTagProvider = context_debug_tag,
    ) -> None:
        self._options = options or FormatOptions()
        self._level_names = level_names
        self._remote_address = remote_address
        self._debug_tag = debug_tag

    @property
    def options(self) -> FormatOptions:
        return self._options

    def format(self, entry: LogEntry | Iterable[Any]) -> dict[str, Any]:
        entry = LogEntry.coerce(entry)
        payload = entry.message
        traces: Iterable[Any] = entry.traces
        code = entry.code

        if isinstance(payload, BaseException):
            text: Any = _exception_message(payload)
            if payload.__traceback__ is not None:
                traces = frames_from_traceback(payload.__traceback__)
            exc_code = getattr(payload, "code", None)
            if exc_code is not None:
                code = exc_code
        elif isinstance(payload, (dict, list, tuple)):
            text = _encode_structured(payload)
        elif isinstance(payload, _JSON_SCALARS):
            text = payload
        else:
            text = str(payload)

        record: dict[str, Any] = {
            "timestamp": _safe_timestamp(entry.timestamp),
            "level": self._level_names(entry.level),
            "category": entry.category,
            "message": text,
        }
        ctx = entry.context
        tag = ctx.debug_tag if ctx is not None else self._debug_tag()
        if tag is not None:
            record["tag"] = tag
        if code is not None:
            record["code"] = code
        opts = self._options
        if opts.enable_ip:
            addr = ctx.remote_addr if ctx is not None else self._remote_address()
            record["ip"] = addr if addr is not None else opts.cli_ip
        if opts.enable_trail:
            record["trail"] = opts.trail
        if opts.enable_trace:
            record["trace"] = format_trace(traces)
        return record


def serialize_record(record: dict[str, Any]) -> str:
    """JSON-encode one record; always an object, even when empty."""
    return _dumps(dict(record))


__all__ = [
    "FormatOptions",
    "MessageFormatter",
    "TIMESTAMP_FORMAT",
    "format_timestamp",
    "format_trace",
    "serialize_record",
]
