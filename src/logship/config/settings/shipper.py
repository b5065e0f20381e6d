"""Config settings – ShipperSettings for the Loggly endpoint."""
from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from typing import Any, ClassVar

from logship.config.settings.base import Settings
from logship.config.validation import InvalidSettingValueError, MissingRequiredSettingError

DEFAULT_BASE_URL = "https://logs-01.loggly.com"
CUSTOMER_TOKEN_LENGTH = 36

# camelCase option names accepted by ShipperSettings.from_mapping
_OPTION_ALIASES: dict[str, str] = {
    "customerToken": "customer_token",
    "baseUrl": "base_url",
    "bulk": "bulk",
    "tags": "tags",
    "trail": "trail",
    "enableIp": "enable_ip",
    "enableTrail": "enable_trail",
    "enableTrace": "enable_trace",
    "connectTimeout": "connect_timeout",
    "timeout": "timeout",
    "cliIp": "cli_ip",
}


def _normalise_tags(tags: Iterable[str] | str | None) -> tuple[str, ...]:
    if not tags:
        return ()
    if isinstance(tags, str):
        return tuple(t.strip() for t in tags.split(",") if t.strip())
    if isinstance(tags, (set, frozenset)):
        return tuple(sorted(tags))
    return tuple(tags)


@dataclasses.dataclass(frozen=True)
class ShipperSettings(Settings):
    """Immutable endpoint configuration for a :class:`~logship.shipper.Shipper`.

    Environment variables use the ``LOGGLY_`` prefix when loaded through
    :class:`~logship.config.settings.EnvSettingsLoader`.
    """

    _prefix: ClassVar[str] = "LOGGLY"

    customer_token: str
    base_url: str = DEFAULT_BASE_URL
    bulk: bool = False
    tags: tuple[str, ...] = ()
    trail: str | None = None
    enable_ip: bool = False
    enable_trail: bool = False
    enable_trace: bool = False
    connect_timeout: int = 5
    timeout: int = 5
    cli_ip: str = "0.0.0.0"

    def _validate(self) -> None:
        if self.customer_token is None or self.customer_token == "":
            raise MissingRequiredSettingError("customer_token")
        if not isinstance(self.customer_token, str) or len(self.customer_token) != CUSTOMER_TOKEN_LENGTH:
            raise InvalidSettingValueError(
                "customer_token",
                self.customer_token,
                f"Loggly customer token must be a valid {CUSTOMER_TOKEN_LENGTH} character string",
            )
        for name in ("connect_timeout", "timeout"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise InvalidSettingValueError(name, value, "must be a positive number of seconds")
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "tags", _normalise_tags(self.tags))

    @property
    def url(self) -> str:
        """Endpoint URL: base URL, mode segment, token and optional tag suffix."""
        endpoint = "/bulk/" if self.bulk else "/inputs/"
        tags = f"/tag/{','.join(self.tags)}/" if self.tags else ""
        return f"{self.base_url}{endpoint}{self.customer_token}{tags}"

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "ShipperSettings":
        """Build settings from a plain mapping.

        Keys may be the camelCase option names (``customerToken``, ``enableIp``, …)
        or the dataclass field names.
        """
        field_names = {f.name for f in dataclasses.fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in field_names:
                raise InvalidSettingValueError(key, value, "unknown option")
            kwargs[name] = value
        if "customer_token" not in kwargs:
            raise MissingRequiredSettingError("customer_token")
        return cls(**kwargs)


__all__ = ["CUSTOMER_TOKEN_LENGTH", "DEFAULT_BASE_URL", "ShipperSettings"]
