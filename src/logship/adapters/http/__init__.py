"""HTTP adapter – persistent httpx transport for the Loggly endpoint."""
from logship.adapters.http.client import (
    ClientFactory,
    DeliveryFailure,
    FailureHook,
    HttpxShipperTransport,
    build_http_client,
)

__all__ = [
    "ClientFactory",
    "DeliveryFailure",
    "FailureHook",
    "HttpxShipperTransport",
    "build_http_client",
]
