"""Device availability tracking."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
import logging

from .port import PlatformPortProto

_LOGGER = logging.getLogger(__name__)


class AvailabilityStatus(StrEnum):
    """Coarse reachability of a device."""

    CONNECTING = "connecting"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True, slots=True)
class AvailabilityState:
    """Availability plus the human-readable reason when not available."""

    status: AvailabilityStatus
    reason: str | None = None

    @property
    def available(self) -> bool:
        """Return ``True`` for the available state."""

        return self.status is AvailabilityStatus.AVAILABLE


CONNECTING = AvailabilityState(AvailabilityStatus.CONNECTING)
AVAILABLE = AvailabilityState(AvailabilityStatus.AVAILABLE)


class AvailabilityStateMachine:
    """Own the availability of one device and mirror it to the platform."""

    def __init__(self, port: PlatformPortProto, *, label: str = "") -> None:
        """Initialise the machine in the ``Connecting`` state."""

        self._port = port
        self._label = label
        self._state = CONNECTING
        self._halted = False
        self._published = False

    @property
    def state(self) -> AvailabilityState:
        """Return the current availability state."""

        return self._state

    @property
    def halted(self) -> bool:
        """Return ``True`` once the device has been removed."""

        return self._halted

    async def async_set_connecting(self, reason: str | None = None) -> None:
        """Enter ``Connecting``; the platform sees the device as unavailable."""

        await self._transition(
            AvailabilityState(AvailabilityStatus.CONNECTING, reason)
        )

    async def async_set_available(self) -> None:
        """Enter ``Available``."""

        await self._transition(AVAILABLE)

    async def async_set_unavailable(self, reason: str | None) -> None:
        """Enter ``Unavailable(reason)``."""

        await self._transition(
            AvailabilityState(AvailabilityStatus.UNAVAILABLE, reason)
        )

    async def async_halt(self) -> None:
        """Force ``Unavailable`` and ignore every later transition."""

        if self._halted:
            return
        await self._transition(AvailabilityState(AvailabilityStatus.UNAVAILABLE))
        self._halted = True

    async def _transition(self, new_state: AvailabilityState) -> None:
        """Publish ``new_state`` unless halted or unchanged."""

        if self._halted:
            _LOGGER.debug(
                "%s: ignoring %s after removal", self._label, new_state.status
            )
            return
        if self._published and new_state == self._state:
            return
        previous = self._state
        self._state = new_state
        self._published = True
        if new_state.available:
            await self._port.async_set_available()
        else:
            await self._port.async_set_unavailable(new_state.reason)
        if previous.status is not new_state.status:
            _LOGGER.info(
                "%s: availability %s -> %s%s",
                self._label,
                previous.status,
                new_state.status,
                f" ({new_state.reason})" if new_state.reason else "",
            )
