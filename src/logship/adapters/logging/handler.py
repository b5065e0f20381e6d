"""Logging adapter – LogglyHandler.

A :class:`logging.handlers.BufferingHandler` that collects records and
flushes them through a :class:`~logship.shipper.Shipper`::

    handler = LogglyHandler(Shipper({"customerToken": token}), capacity=50)
    logging.getLogger().addHandler(handler)
"""
from __future__ import annotations

import logging
import logging.handlers

from logship.observability.context import HostContext
from logship.shipper import LogEntry, Shipper
from logship.shipper.entry import frames_from_traceback

_OWN_LOGGER_PREFIX = "logship"

# LogRecord attribute holding the HostContext captured at emit time
CONTEXT_ATTR = "logship_context"


def record_to_entry(record: logging.LogRecord) -> LogEntry:
    """Convert a stdlib record into the entry shape the shipper formats."""
    traces: tuple = ()
    if record.exc_info and record.exc_info[1] is not None:
        message: object = record.exc_info[1]
    elif isinstance(record.msg, (dict, list)) and not record.args:
        message = record.msg
    else:
        message = record.getMessage()
    if record.exc_info and record.exc_info[2] is not None:
        traces = frames_from_traceback(record.exc_info[2])
    elif record.pathname:
        traces = ((record.pathname, record.lineno),)
    return LogEntry(
        message=message,
        level=record.levelno,
        category=record.name,
        timestamp=record.created,
        traces=traces,
        context=getattr(record, CONTEXT_ATTR, None),
    )


class LogglyHandler(logging.handlers.BufferingHandler):
    """Buffer records and ship them in one :meth:`Shipper.flush` call.

    Parameters
    ----------
    shipper:
        A configured :class:`Shipper`. The handler closes it on :meth:`close`.
    capacity:
        Buffered records that trigger a flush.
    flush_level:
        Records at or above this level flush the buffer immediately.
    """

    def __init__(
        self,
        shipper: Shipper,
        capacity: int = 100,
        flush_level: int = logging.ERROR,
        level: int = logging.NOTSET,
    ) -> None:
        super().__init__(capacity)
        self.setLevel(level)
        self._shipper = shipper
        self.flush_level = flush_level

    @property
    def shipper(self) -> Shipper:
        return self._shipper

    def emit(self, record: logging.LogRecord) -> None:
        # the shipper's own diagnostics would loop back into the buffer
        if record.name == _OWN_LOGGER_PREFIX or record.name.startswith(_OWN_LOGGER_PREFIX + "."):
            return
        setattr(record, CONTEXT_ATTR, HostContext.get() or HostContext())
        super().emit(record)

    def shouldFlush(self, record: logging.LogRecord) -> bool:  # noqa: N802
        return len(self.buffer) >= self.capacity or record.levelno >= self.flush_level

    def flush(self) -> None:
        self.acquire()
        try:
            if not self.buffer:
                return
            records = list(self.buffer)
            self.buffer.clear()
            entries: list[LogEntry] = []
            for record in records:
                try:
                    entries.append(record_to_entry(record))
                except Exception:  # noqa: BLE001
                    self.handleError(record)
            try:
                self._shipper.flush(entries)
            except Exception:  # noqa: BLE001
                self.handleError(records[-1])
        finally:
            self.release()

    def close(self) -> None:
        try:
            self.flush()
        finally:
            self._shipper.close()
            super().close()


__all__ = ["LogglyHandler", "record_to_entry"]
