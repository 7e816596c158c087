"""Interface between the synchronization engine and the host platform."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class PlatformPortProto(Protocol):
    """Services a host platform provides to a device.

    The engine never subclasses platform types; everything it needs from the
    platform (capability values, availability, flow triggers and persisted
    settings) goes through this interface.
    """

    @property
    def name(self) -> str:
        """Return the user-visible device name."""

    def has_capability(self, capability: str) -> bool:
        """Return ``True`` when the device exposes ``capability``."""

    async def async_remove_capability(self, capability: str) -> None:
        """Remove ``capability`` from the device."""

    def get_capability_value(self, capability: str) -> Any:
        """Return the value the platform currently shows for ``capability``."""

    async def async_set_capability_value(self, capability: str, value: Any) -> None:
        """Publish a new value for ``capability``."""

    async def async_set_available(self) -> None:
        """Mark the device as available."""

    async def async_set_unavailable(self, reason: str | None = None) -> None:
        """Mark the device as unavailable with a human-readable ``reason``."""

    async def async_trigger_pressure_alarm(self, pressure: float) -> None:
        """Fire the pressure-alarm flow trigger with the offending pressure."""

    def get_data(self) -> Mapping[str, Any]:
        """Return the immutable data recorded when the device was paired."""

    def get_settings(self) -> Mapping[str, Any]:
        """Return the persisted device settings."""

    async def async_set_settings(self, settings: Mapping[str, Any]) -> None:
        """Persist device settings."""

    def get_store_value(self, key: str) -> Any:
        """Return a value from the device's private store."""


__all__ = ["PlatformPortProto"]
