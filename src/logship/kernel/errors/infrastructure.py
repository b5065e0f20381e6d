"""Infrastructure errors — failures talking to the log endpoint."""

from __future__ import annotations

from typing import Any

from logship.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure."""

    default_code = "infrastructure_error"


class DeliveryError(InfrastructureError):
    """A POST to the log endpoint failed or was answered with a non-2xx status.

    Never raised out of :meth:`Shipper.export`; it only travels inside a
    :class:`~logship.adapters.http.DeliveryFailure` handed to the failure hook.
    """

    default_code = "delivery_error"

    def __init__(
        self,
        url: str,
        message: str | None = None,
        *,
        status_code: int | None = None,
        **kwargs: Any,
    ) -> None:
        if status_code is not None:
            kwargs.setdefault("code", "delivery_rejected")
        super().__init__(message or f"Delivery to '{url}' failed", **kwargs)
        self.url = url
        self.status_code = status_code


__all__ = ["DeliveryError", "InfrastructureError"]
