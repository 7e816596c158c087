"""Device settings and runtime context."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import os
from typing import Any

import voluptuous as vol

from .const import (
    CONF_ACCESS_KEY,
    CONF_PASSWORD,
    CONF_PRESSURE_TOO_HIGH,
    CONF_PRESSURE_TOO_LOW,
    CONF_SERIAL_NUMBER,
    CONF_SYNC_INTERVAL,
    DEBUG_ENV_VAR,
    DEBUG_SYNC_INTERVAL,
    DEFAULT_PRESSURE_TOO_HIGH,
    DEFAULT_PRESSURE_TOO_LOW,
    DEFAULT_SYNC_INTERVAL,
    INTEGRATION_VERSION,
    MAX_SYNC_INTERVAL,
    MIN_SYNC_INTERVAL,
)
from .domain.alarm import PressureThresholds
from .i18n import format_message, get_messages

_NON_EMPTY = vol.All(vol.Coerce(str), vol.Strip, vol.Length(min=1))


def _validate_thresholds(settings: dict[str, Any]) -> dict[str, Any]:
    """Ensure the low pressure threshold does not exceed the high one."""

    if settings[CONF_PRESSURE_TOO_LOW] > settings[CONF_PRESSURE_TOO_HIGH]:
        raise vol.Invalid(
            "pressure lower limit must not exceed the upper limit",
            path=[CONF_PRESSURE_TOO_LOW],
        )
    return settings


SETTINGS_SCHEMA = vol.All(
    vol.Schema(
        {
            vol.Required(CONF_SERIAL_NUMBER): _NON_EMPTY,
            vol.Required(CONF_ACCESS_KEY): _NON_EMPTY,
            vol.Required(CONF_PASSWORD): vol.All(str, vol.Length(min=1)),
            vol.Optional(
                CONF_PRESSURE_TOO_LOW, default=DEFAULT_PRESSURE_TOO_LOW
            ): vol.All(vol.Coerce(float), vol.Range(min=0)),
            vol.Optional(
                CONF_PRESSURE_TOO_HIGH, default=DEFAULT_PRESSURE_TOO_HIGH
            ): vol.All(vol.Coerce(float), vol.Range(min=0)),
            vol.Optional(CONF_SYNC_INTERVAL, default=DEFAULT_SYNC_INTERVAL): vol.All(
                vol.Coerce(int), vol.Clamp(min=MIN_SYNC_INTERVAL, max=MAX_SYNC_INTERVAL)
            ),
        },
        extra=vol.ALLOW_EXTRA,
    ),
    _validate_thresholds,
)


@dataclass(frozen=True, slots=True)
class ConnectionSettings:
    """Credentials used to reach one appliance through the backend."""

    serial_number: str
    access_key: str = field(repr=False)
    password: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class DeviceSettings:
    """Validated per-device settings."""

    connection: ConnectionSettings
    thresholds: PressureThresholds
    sync_interval: int = DEFAULT_SYNC_INTERVAL

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> DeviceSettings:
        """Validate ``raw`` platform settings; raises ``vol.Invalid``."""

        data = SETTINGS_SCHEMA(dict(raw))
        return cls(
            connection=ConnectionSettings(
                serial_number=data[CONF_SERIAL_NUMBER],
                access_key=data[CONF_ACCESS_KEY],
                password=data[CONF_PASSWORD],
            ),
            thresholds=PressureThresholds(
                low=data[CONF_PRESSURE_TOO_LOW],
                high=data[CONF_PRESSURE_TOO_HIGH],
            ),
            sync_interval=data[CONF_SYNC_INTERVAL],
        )


def merge_settings(
    data: Mapping[str, Any], settings: Mapping[str, Any]
) -> dict[str, Any]:
    """Overlay non-empty ``settings`` values on pairing ``data``."""

    merged = dict(data)
    for key, value in settings.items():
        if value not in (None, ""):
            merged[key] = value
    return merged


def debug_from_env(environ: Mapping[str, str] | None = None) -> bool:
    """Return ``True`` when the debug environment variable is set."""

    env = os.environ if environ is None else environ
    return env.get(DEBUG_ENV_VAR, "").strip().lower() in {"1", "true", "yes", "on"}


@dataclass(slots=True)
class DeviceContext:
    """Process-wide settings shared by every device."""

    debug: bool = False
    integration_version: str = INTEGRATION_VERSION
    language: str | None = None
    messages: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Load the message table for ``language``."""

        if not self.messages:
            self.messages = get_messages(self.language)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        language: str | None = None,
    ) -> DeviceContext:
        """Build a context reading debug mode from the environment."""

        return cls(debug=debug_from_env(environ), language=language)

    def message(self, key: str, **placeholders: Any) -> str:
        """Return the localised message for ``key``."""

        return format_message(self.messages, key, **placeholders)

    def sync_interval(self, configured: int) -> int:
        """Return the poll interval in seconds for this process."""

        return DEBUG_SYNC_INTERVAL if self.debug else configured


__all__ = [
    "SETTINGS_SCHEMA",
    "ConnectionSettings",
    "DeviceContext",
    "DeviceSettings",
    "debug_from_env",
    "merge_settings",
]
