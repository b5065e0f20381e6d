"""Application-layer errors — misuse of the public API."""

from __future__ import annotations

from logship.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


class ShipperStateError(ApplicationError):
    """Operation not valid in the shipper's current lifecycle state."""

    default_code = "invalid_shipper_state"


__all__ = ["ApplicationError", "ShipperStateError"]
