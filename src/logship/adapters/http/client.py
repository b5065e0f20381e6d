"""HTTP adapter – lazily opened, persistent httpx client for log delivery."""
from __future__ import annotations

import dataclasses
import weakref
from typing import Callable

import httpx

from logship.kernel.errors import DeliveryError
from logship.observability.logging import get_logger

log = get_logger(__name__)

ClientFactory = Callable[[], httpx.Client]


@dataclasses.dataclass(frozen=True)
class DeliveryFailure:
    """A send that did not reach the endpoint or was rejected by it."""

    url: str
    body: str
    error: DeliveryError
    status_code: int | None = None


FailureHook = Callable[[DeliveryFailure], None]


def build_http_client(connect_timeout: float = 5, timeout: float = 5) -> httpx.Client:
    """Create the keep-alive client used for every POST of one shipper.

    TLS peer and hostname verification are always on.
    """
    return httpx.Client(
        timeout=httpx.Timeout(timeout, connect=connect_timeout),
        verify=True,
        headers={"Content-Type": "application/json"},
    )


class HttpxShipperTransport:
    """Owns one ``httpx.Client`` and POSTs bodies to a fixed URL.

    The client is created on the first :meth:`post` and reused until
    :meth:`close`. Failures never propagate: they are handed to *on_failure*
    when one is given and dropped otherwise.
    """

    def __init__(
        self,
        url: str,
        client_factory: ClientFactory,
        on_failure: FailureHook | None = None,
    ) -> None:
        self._url = url
        self._client_factory = client_factory
        self._on_failure = on_failure
        self._client: httpx.Client | None = None
        self._finalizer: weakref.finalize | None = None

    @property
    def url(self) -> str:
        return self._url

    @property
    def is_open(self) -> bool:
        return self._client is not None

    def _ensure_client(self) -> httpx.Client:
        if self._client is None:
            self._client = self._client_factory()
            self._finalizer = weakref.finalize(self, self._client.close)
            log.debug("transport.connection_opened", url=self._url)
        return self._client

    def post(self, body: str) -> httpx.Response | None:
        """POST *body* as JSON; return the response, or ``None`` on transport failure."""
        client = self._ensure_client()
        try:
            response = client.post(
                self._url,
                content=body.encode("utf-8"),
                headers={"Content-Type": "application/json"},
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            self._report(body, DeliveryError(self._url, str(exc) or type(exc).__name__, cause=exc))
            return None
        if response.is_error:
            self._report(
                body,
                DeliveryError(
                    self._url,
                    f"HTTP {response.status_code} from POST {self._url}",
                    status_code=response.status_code,
                ),
                status_code=response.status_code,
            )
        return response

    def _report(self, body: str, error: DeliveryError, status_code: int | None = None) -> None:
        if self._on_failure is None:
            return
        failure = DeliveryFailure(url=self._url, body=body, error=error, status_code=status_code)
        try:
            self._on_failure(failure)
        except Exception:  # noqa: BLE001
            log.warning("transport.failure_hook_error", url=self._url, exc_info=True)

    def close(self) -> None:
        """Close the client. Safe to call more than once."""
        if self._finalizer is not None:
            self._finalizer()
            log.debug("transport.connection_closed", url=self._url)
        self._finalizer = None
        self._client = None


__all__ = [
    "ClientFactory",
    "DeliveryFailure",
    "FailureHook",
    "HttpxShipperTransport",
    "build_http_client",
]
