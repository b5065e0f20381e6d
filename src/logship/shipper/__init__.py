"""Shipper – the Loggly log target.

Typical usage::

    from logship.shipper import LogEntry, Shipper

    with Shipper({"customerToken": token, "bulk": True}) as shipper:
        shipper.export([LogEntry("hello", logging.INFO, "app", time.time())])
"""
from logship.shipper.entry import LogEntry, StackFrame
from logship.shipper.formatter import (
    FormatOptions,
    MessageFormatter,
    format_timestamp,
    format_trace,
    serialize_record,
)
from logship.shipper.shipper import Shipper, generate_trail

__all__ = [
    "FormatOptions",
    "LogEntry",
    "MessageFormatter",
    "Shipper",
    "StackFrame",
    "format_timestamp",
    "format_trace",
    "generate_trail",
    "serialize_record",
]
