"""Kernel error hierarchy — public re-export surface.

Hierarchy::

    BaseError
    ├── ApplicationError     (application.py)
    │   ├── ConfigurationError   (logship.config.validation)
    │   └── ShipperStateError
    └── InfrastructureError  (infrastructure.py)
        └── DeliveryError
"""

from logship.kernel.errors.application import ApplicationError, ShipperStateError
from logship.kernel.errors.base import BaseError
from logship.kernel.errors.infrastructure import DeliveryError, InfrastructureError

__all__ = [
    "ApplicationError",
    "BaseError",
    "DeliveryError",
    "InfrastructureError",
    "ShipperStateError",
]
