"""
logship – ship structured log records to Loggly over HTTPS.

Import path convention::

    from logship.shipper import Shipper, LogEntry
    from logship.config import ShipperSettings, ConfigurationError
    from logship.adapters.logging import LogglyHandler
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
