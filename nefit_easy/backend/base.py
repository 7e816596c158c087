"""Backend abstractions for the Nefit Easy remote client."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ..codecs import PressureSnapshot, StatusSnapshot, ToggleSnapshot, WriteResult
    from ..config import ConnectionSettings


class RemoteClientError(Exception):
    """Communication with the Nefit Easy backend failed."""


class ResponseDecodeError(RemoteClientError):
    """The backend response could not be decoded.

    The backend encrypts payloads with a key derived from the user password,
    so an undecodable response almost always means the password is wrong.
    """


class NefitTransportProto(Protocol):
    """Protocol for the encrypted XMPP transport to the Nefit backend."""

    async def connect(self) -> None:
        """Open the connection to the backend."""

    async def disconnect(self) -> None:
        """Close the connection and release its resources."""

    async def get(self, path: str) -> Any:
        """Return the decoded response envelope for ``path``."""

    async def put(self, path: str, payload: Mapping[str, Any]) -> Any:
        """Write ``payload`` to ``path`` and return the result envelope."""


class RemoteClientProto(Protocol):
    """Protocol for the command-level client used by a device."""

    async def connect(self) -> None:
        """Connect to the backend."""

    async def end(self) -> None:
        """Release the connection."""

    async def status(self) -> StatusSnapshot:
        """Return the general appliance status."""

    async def pressure(self) -> PressureSnapshot:
        """Return the system pressure reading."""

    async def holiday_mode(self) -> ToggleSnapshot | None:
        """Return the holiday-mode status, if reported."""

    async def shower_timer(self) -> ToggleSnapshot | None:
        """Return the shower-timer status, if reported."""

    async def set_temperature(self, value: float) -> WriteResult:
        """Set the target temperature."""

    async def set_user_mode(self, mode: str) -> WriteResult:
        """Switch between ``clock`` and ``manual`` user modes."""

    async def set_fireplace_mode(self, enabled: bool) -> WriteResult:
        """Enable or disable fireplace mode."""

    async def set_holiday_mode(self, enabled: bool) -> WriteResult:
        """Enable or disable holiday mode."""

    async def set_shower_timer(self, enabled: bool) -> WriteResult:
        """Enable or disable the shower timer."""

    async def set_shower_time(self, minutes: int) -> WriteResult:
        """Set the shower timer duration in minutes."""


ClientFactory = Callable[["ConnectionSettings"], RemoteClientProto]
TransportFactory = Callable[["ConnectionSettings"], NefitTransportProto]


__all__ = [
    "ClientFactory",
    "NefitTransportProto",
    "RemoteClientError",
    "RemoteClientProto",
    "ResponseDecodeError",
    "TransportFactory",
]
