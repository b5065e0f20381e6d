"""Shipper – format collected log entries and POST them to Loggly."""
from __future__ import annotations

import functools
import uuid
from collections.abc import Iterable, Mapping
from typing import Any, Callable

import httpx

from logship.adapters.http import FailureHook, HttpxShipperTransport, build_http_client
from logship.config import ShipperSettings
from logship.kernel.errors import ShipperStateError
from logship.observability.context import (
    DebugTagProvider,
    LevelNameResolver,
    RemoteAddressProvider,
    context_debug_tag,
    context_remote_address,
    level_name,
)
from logship.observability.logging import get_logger
from logship.shipper.entry import LogEntry
from logship.shipper.formatter import FormatOptions, MessageFormatter, serialize_record

log = get_logger(__name__)

ShipperClientFactory = Callable[[ShipperSettings], httpx.Client]


def generate_trail() -> str:
    """Random 32-character hex identifier for one shipper's lifetime."""
    return uuid.uuid4().hex


class Shipper:
    """Formats log entries and delivers them to one Loggly endpoint.

    Lifecycle is ``Unconfigured`` → :meth:`configure` → ``Ready``. Passing
    *settings* to the constructor configures immediately.

    Delivery is synchronous and best-effort: :meth:`export` never raises for
    transport errors or non-2xx responses. Pass *on_failure* to observe them.

    Parameters
    ----------
    settings:
        :class:`ShipperSettings` or a mapping of options.
    client_factory:
        Builds the ``httpx.Client`` from the settings. Called at most once
        per shipper, on the first send.
    level_names, remote_address, debug_tag:
        Host providers, see :mod:`logship.observability.context`.
    on_failure:
        Called with a :class:`~logship.adapters.http.DeliveryFailure` for
        each failed send.
    """

    def __init__(
        self,
        settings: ShipperSettings | Mapping[str, Any] | None = None,
        *,
        client_factory: ShipperClientFactory | None = None,
        level_names: LevelNameResolver = level_name,
        remote_address: RemoteAddressProvider = context_remote_address,
        debug_tag: DebugTagProvider = context_debug_tag,
        on_failure: FailureHook | None = None,
    ) -> None:
        self._client_factory = client_factory or self._default_client
        self._level_names = level_names
        self._remote_address = remote_address
        self._debug_tag = debug_tag
        self._on_failure = on_failure
        self._settings: ShipperSettings | None = None
        self._trail: str | None = None
        self._url: str | None = None
        self._formatter: MessageFormatter | None = None
        self._transport: HttpxShipperTransport | None = None
        if settings is not None:
            self.configure(settings)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def configure(self, settings: ShipperSettings | Mapping[str, Any]) -> "Shipper":
        """Validate *settings* and move to ``Ready``.

        Raises
        ------
        ConfigurationError
            The customer token is missing or not 36 characters, or another
            option is invalid. The shipper stays unconfigured.
        ShipperStateError
            The shipper is already configured.
        """
        if self._settings is not None:
            raise ShipperStateError("Shipper is already configured")
        if not isinstance(settings, ShipperSettings):
            settings = ShipperSettings.from_mapping(settings)

        self._trail = settings.trail or generate_trail()
        self._url = settings.url
        self._formatter = MessageFormatter(
            FormatOptions(
                enable_ip=settings.enable_ip,
                enable_trail=settings.enable_trail,
                enable_trace=settings.enable_trace,
                trail=self._trail,
                cli_ip=settings.cli_ip,
            ),
            level_names=self._level_names,
            remote_address=self._remote_address,
            debug_tag=self._debug_tag,
        )
        self._transport = HttpxShipperTransport(
            self._url,
            functools.partial(self._client_factory, settings),
            on_failure=self._on_failure,
        )
        self._settings = settings
        log.debug("shipper.configured", bulk=settings.bulk, tags=list(settings.tags))
        return self

    @staticmethod
    def _default_client(settings: ShipperSettings) -> httpx.Client:
        return build_http_client(settings.connect_timeout, settings.timeout)

    @property
    def is_ready(self) -> bool:
        return self._settings is not None

    @property
    def settings(self) -> ShipperSettings:
        return self._require_ready()

    @property
    def url(self) -> str:
        self._require_ready()
        assert self._url is not None
        return self._url

    @property
    def trail(self) -> str:
        self._require_ready()
        assert self._trail is not None
        return self._trail

    def _require_ready(self) -> ShipperSettings:
        if self._settings is None:
            raise ShipperStateError("Shipper is not configured")
        return self._settings

    # ------------------------------------------------------------------
    # Formatting and delivery
    # ------------------------------------------------------------------

    def format_message(self, entry: LogEntry | Iterable[Any]) -> dict[str, Any]:
        """Normalised record for one entry."""
        self._require_ready()
        assert self._formatter is not None
        return self._formatter.format(entry)

    def export(self, entries: Iterable[LogEntry | Iterable[Any]]) -> None:
        """Send *entries* to the endpoint.

        One POST per entry, or a single newline-joined POST in bulk mode.
        An empty iterable sends nothing. An entry that cannot be formatted
        is dropped; the rest of the batch still goes out.
        """
        settings = self._require_ready()
        assert self._transport is not None
        bodies = [body for body in map(self._serialize, list(entries)) if body is not None]
        if not bodies:
            return
        if settings.bulk:
            self._transport.post("\n".join(bodies))
        else:
            for body in bodies:
                self._transport.post(body)

    def flush(self, entries: Iterable[LogEntry | Iterable[Any]]) -> None:
        """Log-target entry point for host buffers; same as :meth:`export`."""
        self.export(entries)

    def _serialize(self, entry: LogEntry | Iterable[Any]) -> str | None:
        try:
            return serialize_record(self.format_message(entry))
        except Exception:  # noqa: BLE001
            log.debug("shipper.entry_dropped", exc_info=True)
            return None

    def close(self) -> None:
        """Release the HTTP connection. Safe to call more than once."""
        if self._transport is not None:
            self._transport.close()

    def __enter__(self) -> "Shipper":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


__all__ = ["Shipper", "generate_trail"]
