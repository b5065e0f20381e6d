"""Logging adapter – stdlib ``logging`` integration."""
from logship.adapters.logging.handler import LogglyHandler, record_to_entry

__all__ = ["LogglyHandler", "record_to_entry"]
