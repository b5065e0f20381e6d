"""Observability – logship's own structured logging."""
from logship.observability.logging.factory import JsonLoggerFactory
from logship.observability.logging.processors import HostContextProcessor, get_logger

__all__ = ["HostContextProcessor", "JsonLoggerFactory", "get_logger"]
