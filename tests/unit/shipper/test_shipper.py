"""Unit tests for Shipper configuration, export and connection lifecycle."""

from __future__ import annotations

import gc
import json
import logging
from typing import Any

import httpx
import pytest
import respx

from logship.adapters.http import DeliveryFailure
from logship.config import ConfigurationError, ShipperSettings
from logship.kernel.errors import ShipperStateError
from logship.observability.context import HostContext
from logship.shipper import LogEntry, Shipper, generate_trail

TOKEN = "abcdefgh-1234-5678-9abc-def012345678"


class CountingClientFactory:
    """Client factory test double backed by ``httpx.MockTransport``."""

    def __init__(self, status_code: int = 200) -> None:
        self.created = 0
        self.requests: list[httpx.Request] = []
        self.clients: list[httpx.Client] = []
        self._status_code = status_code

    def _handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self._status_code, text="ok")

    def __call__(self, settings: ShipperSettings) -> httpx.Client:
        self.created += 1
        client = httpx.Client(
            transport=httpx.MockTransport(self._handler),
            headers={"Content-Type": "application/json"},
        )
        self.clients.append(client)
        return client


def _entry(message: Any = "hello", level: int = logging.INFO) -> LogEntry:
    return LogEntry(message, level, "app", 1700000000)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class TestConfigure:
    def test_unconfigured_by_default(self) -> None:
        assert Shipper().is_ready is False

    def test_constructor_settings_configure_immediately(self) -> None:
        shipper = Shipper({"customerToken": TOKEN})
        assert shipper.is_ready
        assert shipper.url == f"https://logs-01.loggly.com/inputs/{TOKEN}"

    def test_configure_returns_self(self) -> None:
        shipper = Shipper()
        assert shipper.configure(ShipperSettings(customer_token=TOKEN)) is shipper

    @pytest.mark.parametrize("token", ["", "x" * 35, "x" * 37])
    def test_bad_token_leaves_shipper_unconfigured(self, token: str) -> None:
        shipper = Shipper()
        with pytest.raises(ConfigurationError):
            shipper.configure({"customerToken": token})
        assert shipper.is_ready is False
        with pytest.raises(ShipperStateError):
            shipper.export([_entry()])

    def test_configure_twice_rejected(self) -> None:
        shipper = Shipper({"customerToken": TOKEN})
        with pytest.raises(ShipperStateError):
            shipper.configure({"customerToken": TOKEN})

    def test_url_with_tags(self) -> None:
        shipper = Shipper({"customerToken": TOKEN, "tags": ["a", "b"]})
        assert shipper.url.endswith(f"/inputs/{TOKEN}/tag/a,b/")

    def test_bulk_url(self) -> None:
        shipper = Shipper({"customerToken": TOKEN, "bulk": True})
        assert shipper.url.endswith(f"/bulk/{TOKEN}")

    def test_generated_trail_is_stable(self) -> None:
        shipper = Shipper({"customerToken": TOKEN, "enableTrail": True}, client_factory=CountingClientFactory())
        trail = shipper.trail
        assert len(trail) == 32
        assert shipper.format_message(_entry())["trail"] == trail
        assert shipper.format_message(_entry())["trail"] == trail

    def test_supplied_trail_is_used(self) -> None:
        shipper = Shipper({"customerToken": TOKEN, "trail": "my-trail"})
        assert shipper.trail == "my-trail"

    def test_generate_trail_differs(self) -> None:
        assert generate_trail() != generate_trail()

    def test_state_properties_require_ready(self) -> None:
        shipper = Shipper()
        with pytest.raises(ShipperStateError):
            _ = shipper.url
        with pytest.raises(ShipperStateError):
            shipper.format_message(_entry())


# ---------------------------------------------------------------------------
# format_message through the shipper
# ---------------------------------------------------------------------------


class TestFormatMessage:
    def test_basic_record(self) -> None:
        shipper = Shipper({"customerToken": TOKEN}, debug_tag=lambda: None)
        record = shipper.format_message(("hello", logging.INFO, "app", 1700000000, []))
        assert record["message"] == "hello"
        assert record["level"] == "info"
        assert record["category"] == "app"

    def test_ip_from_host_context(self) -> None:
        shipper = Shipper({"customerToken": TOKEN, "enableIp": True})
        with HostContext.scope(remote_addr="198.51.100.4"):
            assert shipper.format_message(_entry())["ip"] == "198.51.100.4"
        assert shipper.format_message(_entry())["ip"] == "0.0.0.0"

    def test_debug_tag_from_host_context(self) -> None:
        shipper = Shipper({"customerToken": TOKEN})
        with HostContext.scope(debug_tag="65a7c2"):
            assert shipper.format_message(_entry())["tag"] == "65a7c2"
        assert "tag" not in shipper.format_message(_entry())

    def test_trace(self) -> None:
        shipper = Shipper({"customerToken": TOKEN, "enableTrace": True})
        entry = LogEntry("x", logging.INFO, "app", 0, [{"file": "a.go", "line": 10}, {"file": "", "line": 0}])
        assert shipper.format_message(entry)["trace"] == ["a.go(10)"]


# ---------------------------------------------------------------------------
# export
# ---------------------------------------------------------------------------


class TestExport:
    def test_non_bulk_sends_one_request_per_entry(self) -> None:
        factory = CountingClientFactory()
        shipper = Shipper({"customerToken": TOKEN}, client_factory=factory)
        shipper.export([_entry("one"), _entry("two")])
        assert len(factory.requests) == 2
        bodies = [json.loads(r.content) for r in factory.requests]
        assert [b["message"] for b in bodies] == ["one", "two"]
        for request in factory.requests:
            assert request.method == "POST"
            assert str(request.url) == shipper.url
            assert request.headers["content-type"] == "application/json"

    def test_bulk_sends_single_newline_joined_request(self) -> None:
        factory = CountingClientFactory()
        shipper = Shipper({"customerToken": TOKEN, "bulk": True}, client_factory=factory)
        shipper.export([_entry("one"), _entry("two")])
        assert len(factory.requests) == 1
        lines = factory.requests[0].content.decode().split("\n")
        assert [json.loads(line)["message"] for line in lines] == ["one", "two"]
        assert str(factory.requests[0].url).endswith(f"/bulk/{TOKEN}")

    def test_empty_export_sends_nothing(self) -> None:
        factory = CountingClientFactory()
        shipper = Shipper({"customerToken": TOKEN}, client_factory=factory)
        shipper.export([])
        assert factory.requests == []
        assert factory.created == 0

    def test_connection_reused_across_exports(self) -> None:
        factory = CountingClientFactory()
        shipper = Shipper({"customerToken": TOKEN}, client_factory=factory)
        shipper.export([_entry()])
        shipper.export([_entry(), _entry()])
        shipper.flush([_entry()])
        assert factory.created == 1
        assert len(factory.requests) == 4

    def test_client_factory_receives_settings(self) -> None:
        seen: list[ShipperSettings] = []

        def factory(settings: ShipperSettings) -> httpx.Client:
            seen.append(settings)
            return httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200)))

        shipper = Shipper({"customerToken": TOKEN, "timeout": 9}, client_factory=factory)
        shipper.export([_entry()])
        assert seen[0].timeout == 9

    def test_empty_generator_sends_nothing_in_bulk(self) -> None:
        factory = CountingClientFactory()
        shipper = Shipper({"customerToken": TOKEN, "bulk": True}, client_factory=factory)
        shipper.export(iter([]))
        assert factory.requests == []
        assert factory.created == 0

    def test_generator_input_is_shipped(self) -> None:
        factory = CountingClientFactory()
        shipper = Shipper({"customerToken": TOKEN, "bulk": True}, client_factory=factory)
        shipper.export(_entry(m) for m in ("a", "b"))
        lines = factory.requests[0].content.decode().split("\n")
        assert [json.loads(line)["message"] for line in lines] == ["a", "b"]

    def test_short_tuple_is_padded_not_raised(self) -> None:
        factory = CountingClientFactory()
        shipper = Shipper({"customerToken": TOKEN}, client_factory=factory)
        shipper.export([_entry("ok"), ("bad", logging.INFO, "app")])
        bodies = [json.loads(r.content) for r in factory.requests]
        assert [b["message"] for b in bodies] == ["ok", "bad"]
        assert bodies[1]["category"] == "app"

    def test_unformattable_entry_is_dropped_and_batch_still_sent(self) -> None:
        def picky_levels(level: object) -> str:
            if level == "boom":
                raise LookupError(level)
            return "info"

        factory = CountingClientFactory()
        shipper = Shipper({"customerToken": TOKEN, "bulk": True}, client_factory=factory, level_names=picky_levels)
        shipper.export([_entry("first"), LogEntry("x", "boom", "app", 0), _entry("last")])
        lines = factory.requests[0].content.decode().split("\n")
        assert [json.loads(line)["message"] for line in lines] == ["first", "last"]

    def test_nothing_sent_when_every_entry_is_dropped(self) -> None:
        def broken(level: object) -> str:
            raise LookupError(level)

        factory = CountingClientFactory()
        shipper = Shipper({"customerToken": TOKEN, "bulk": True}, client_factory=factory, level_names=broken)
        shipper.export([_entry()])
        assert factory.requests == []

    def test_export_before_configure_rejected(self) -> None:
        with pytest.raises(ShipperStateError):
            Shipper().export([_entry()])


# ---------------------------------------------------------------------------
# Best-effort delivery
# ---------------------------------------------------------------------------


class TestDeliveryFailures:
    def test_server_error_is_not_raised(self) -> None:
        factory = CountingClientFactory(status_code=503)
        shipper = Shipper({"customerToken": TOKEN}, client_factory=factory)
        shipper.export([_entry()])
        assert len(factory.requests) == 1

    def test_server_error_reported_to_hook(self) -> None:
        failures: list[DeliveryFailure] = []
        shipper = Shipper(
            {"customerToken": TOKEN},
            client_factory=CountingClientFactory(status_code=500),
            on_failure=failures.append,
        )
        shipper.export([_entry("a"), _entry("b")])
        assert [f.status_code for f in failures] == [500, 500]
        assert json.loads(failures[1].body)["message"] == "b"
        assert failures[0].error.status_code == 500

    def test_transport_error_is_absorbed(self) -> None:
        failures: list[DeliveryFailure] = []

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        shipper = Shipper(
            {"customerToken": TOKEN},
            client_factory=lambda s: httpx.Client(transport=httpx.MockTransport(refuse)),
            on_failure=failures.append,
        )
        shipper.export([_entry(), _entry()])
        assert len(failures) == 2
        assert failures[0].status_code is None
        assert isinstance(failures[0].error.cause, httpx.ConnectError)

    def test_timeout_is_absorbed_without_hook(self) -> None:
        def slow(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        shipper = Shipper(
            {"customerToken": TOKEN},
            client_factory=lambda s: httpx.Client(transport=httpx.MockTransport(slow)),
        )
        shipper.export([_entry()])

    def test_failing_hook_does_not_escape(self) -> None:
        def hook(failure: DeliveryFailure) -> None:
            raise RuntimeError("observer broke")

        shipper = Shipper(
            {"customerToken": TOKEN},
            client_factory=CountingClientFactory(status_code=400),
            on_failure=hook,
        )
        shipper.export([_entry()])


# ---------------------------------------------------------------------------
# Default httpx client (respx)
# ---------------------------------------------------------------------------


class TestDefaultClient:
    @respx.mock
    def test_posts_with_default_client(self) -> None:
        url = f"https://logs-01.loggly.com/inputs/{TOKEN}/tag/web/"
        route = respx.post(url).mock(return_value=httpx.Response(200, json={"response": "ok"}))
        with Shipper({"customerToken": TOKEN, "tags": ["web"]}) as shipper:
            shipper.export([_entry("via respx")])
        assert route.call_count == 1
        sent = route.calls.last.request
        assert json.loads(sent.content)["message"] == "via respx"
        assert sent.headers["content-type"] == "application/json"

    @respx.mock
    def test_non_bulk_posts_carry_configured_timeouts(self) -> None:
        url = f"https://logs-01.loggly.com/inputs/{TOKEN}"
        route = respx.post(url).mock(return_value=httpx.Response(200))
        with Shipper({"customerToken": TOKEN, "connectTimeout": 2, "timeout": 7}) as shipper:
            shipper.export([_entry("one"), _entry("two")])
        assert route.call_count == 2
        for call in route.calls:
            assert call.request.extensions["timeout"] == {"connect": 2, "read": 7, "write": 7, "pool": 7}
        assert [json.loads(c.request.content)["message"] for c in route.calls] == ["one", "two"]


# ---------------------------------------------------------------------------
# Connection release
# ---------------------------------------------------------------------------


class TestClose:
    def test_close_releases_client_once(self) -> None:
        factory = CountingClientFactory()
        shipper = Shipper({"customerToken": TOKEN}, client_factory=factory)
        shipper.export([_entry()])
        client = factory.clients[0]
        shipper.close()
        assert client.is_closed
        shipper.close()
        assert factory.created == 1

    def test_close_before_any_send_is_noop(self) -> None:
        factory = CountingClientFactory()
        shipper = Shipper({"customerToken": TOKEN}, client_factory=factory)
        shipper.close()
        assert factory.created == 0

    def test_close_on_unconfigured_is_noop(self) -> None:
        Shipper().close()

    def test_context_manager_closes(self) -> None:
        factory = CountingClientFactory()
        with Shipper({"customerToken": TOKEN}, client_factory=factory) as shipper:
            shipper.export([_entry()])
        assert factory.clients[0].is_closed

    def test_export_after_close_opens_new_connection(self) -> None:
        factory = CountingClientFactory()
        shipper = Shipper({"customerToken": TOKEN}, client_factory=factory)
        shipper.export([_entry()])
        shipper.close()
        shipper.export([_entry()])
        assert factory.created == 2

    def test_discarded_shipper_releases_client(self) -> None:
        factory = CountingClientFactory()
        shipper = Shipper({"customerToken": TOKEN}, client_factory=factory)
        shipper.export([_entry()])
        client = factory.clients[0]
        del shipper
        gc.collect()
        assert client.is_closed
