"""User-initiated capability writes."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
import logging
from typing import Any

from .backend.base import RemoteClientProto
from .codecs import WriteResult
from .const import (
    CAP_CLOCK_PROGRAMME,
    CAP_FIREPLACE_MODE,
    CAP_HOLIDAY_MODE,
    CAP_SHOWER_TIME,
    CAP_SHOWER_TIMER,
    CAP_TARGET_TEMP,
    DEBOUNCE_RATE,
    USER_MODE_CLOCK,
    USER_MODE_MANUAL,
)
from .debounce import Debouncer, SleepCallable
from .domain.store import CapabilityStore
from .errors import StorageWriteError
from .utils import format_value

_LOGGER = logging.getLogger(__name__)

ClientGetter = Callable[[], RemoteClientProto]


class CapabilityWriteController:
    """Apply capability changes to the backend, one debounce window each.

    Before writing, the current value is read back from the backend; when it
    already matches the request the write is skipped and only the local
    capability is reconciled. A non-``ok`` result leaves the capability
    untouched and yields ``False``.
    """

    def __init__(
        self,
        get_client: ClientGetter,
        store: CapabilityStore,
        *,
        delay: float = DEBOUNCE_RATE,
        sleep: SleepCallable | None = None,
        label: str = "",
    ) -> None:
        """Initialise one debouncer per controllable capability."""

        self._get_client = get_client
        self._store = store
        self._label = label
        actions: dict[str, Callable[[Any], Awaitable[bool]]] = {
            CAP_TARGET_TEMP: self._apply_target_temperature,
            CAP_CLOCK_PROGRAMME: self._apply_clock_programme,
            CAP_FIREPLACE_MODE: self._apply_fireplace_mode,
            CAP_HOLIDAY_MODE: self._apply_holiday_mode,
            CAP_SHOWER_TIMER: self._apply_shower_timer,
            CAP_SHOWER_TIME: self._apply_shower_time,
        }
        self._debouncers: dict[str, Debouncer[Any, bool]] = {}
        for capability, action in actions.items():
            self._debouncers[capability] = Debouncer(
                action,
                delay,
                sleep=sleep or asyncio.sleep,
                name=f"{label} {capability}",
            )

    @property
    def capabilities(self) -> tuple[str, ...]:
        """Return the capabilities this controller can write."""

        return tuple(self._debouncers)

    async def async_set(self, capability: str, value: Any) -> bool:
        """Request ``capability`` to become ``value``."""

        try:
            debouncer = self._debouncers[capability]
        except KeyError:
            raise KeyError(f"Capability {capability!r} is read-only") from None
        return await debouncer.async_call(value)

    async def async_set_target_temperature(self, value: float) -> bool:
        """Set the target temperature."""

        return await self.async_set(CAP_TARGET_TEMP, value)

    async def async_set_clock_programme(self, enabled: bool) -> bool:
        """Enable (clock) or disable (manual) the clock programme."""

        return await self.async_set(CAP_CLOCK_PROGRAMME, enabled)

    async def async_set_fireplace_mode(self, enabled: bool) -> bool:
        """Enable or disable fireplace mode."""

        return await self.async_set(CAP_FIREPLACE_MODE, enabled)

    async def async_set_holiday_mode(self, enabled: bool) -> bool:
        """Enable or disable holiday mode."""

        return await self.async_set(CAP_HOLIDAY_MODE, enabled)

    async def async_set_shower_timer(self, enabled: bool) -> bool:
        """Enable or disable the shower timer."""

        return await self.async_set(CAP_SHOWER_TIMER, enabled)

    async def async_set_shower_time(self, minutes: int) -> bool:
        """Set the shower timer duration in minutes."""

        return await self.async_set(CAP_SHOWER_TIME, minutes)

    def cancel(self) -> None:
        """Cancel every open debounce window."""

        for debouncer in self._debouncers.values():
            debouncer.cancel()

    async def _apply_target_temperature(self, value: float) -> bool:
        value = format_value(float(value))
        _LOGGER.debug("%s: setting target temperature to %s", self._label, value)
        client = self._get_client()

        async def _current() -> Any:
            status = await client.status()
            return format_value(status.target_setpoint)

        return await self._read_compare_write(
            CAP_TARGET_TEMP, value, _current, lambda: client.set_temperature(value)
        )

    async def _apply_clock_programme(self, enabled: bool) -> bool:
        enabled = bool(enabled)
        mode = USER_MODE_CLOCK if enabled else USER_MODE_MANUAL
        _LOGGER.debug("%s: setting programme mode to %s", self._label, mode)
        client = self._get_client()

        async def _current() -> Any:
            status = await client.status()
            return status.user_mode == USER_MODE_CLOCK

        return await self._read_compare_write(
            CAP_CLOCK_PROGRAMME, enabled, _current, lambda: client.set_user_mode(mode)
        )

    async def _apply_fireplace_mode(self, enabled: bool) -> bool:
        enabled = bool(enabled)
        _LOGGER.debug("%s: setting fireplace mode to %s", self._label, enabled)
        client = self._get_client()

        async def _current() -> Any:
            status = await client.status()
            return status.fireplace_mode is True

        return await self._read_compare_write(
            CAP_FIREPLACE_MODE,
            enabled,
            _current,
            lambda: client.set_fireplace_mode(enabled),
        )

    async def _apply_holiday_mode(self, enabled: bool) -> bool:
        enabled = bool(enabled)
        _LOGGER.debug("%s: setting holiday mode to %s", self._label, enabled)
        client = self._get_client()

        async def _current() -> Any:
            snapshot = await client.holiday_mode()
            return None if snapshot is None else snapshot.is_on

        return await self._read_compare_write(
            CAP_HOLIDAY_MODE, enabled, _current, lambda: client.set_holiday_mode(enabled)
        )

    async def _apply_shower_timer(self, enabled: bool) -> bool:
        enabled = bool(enabled)
        _LOGGER.debug("%s: setting shower timer to %s", self._label, enabled)
        client = self._get_client()

        async def _current() -> Any:
            snapshot = await client.shower_timer()
            return None if snapshot is None else snapshot.is_on

        return await self._read_compare_write(
            CAP_SHOWER_TIMER, enabled, _current, lambda: client.set_shower_timer(enabled)
        )

    async def _apply_shower_time(self, minutes: int) -> bool:
        minutes = int(minutes)
        _LOGGER.debug("%s: setting shower time to %s minutes", self._label, minutes)
        result = await self._get_client().set_shower_time(minutes)
        return await self._handle_result(CAP_SHOWER_TIME, minutes, result)

    async def _read_compare_write(
        self,
        capability: str,
        value: Any,
        read_current: Callable[[], Awaitable[Any]],
        write: Callable[[], Awaitable[WriteResult]],
    ) -> bool:
        """Skip the write when the backend already holds ``value``."""

        current = await read_current()
        if current == value:
            _LOGGER.debug(
                "%s: %s already %s, not updating", self._label, capability, value
            )
            await self._reconcile(capability, value)
            return True
        result = await write()
        return await self._handle_result(capability, value, result)

    async def _handle_result(
        self, capability: str, value: Any, result: WriteResult
    ) -> bool:
        """Store ``value`` when the backend accepted it."""

        _LOGGER.debug("%s: %s write status: %s", self._label, capability, result.status)
        if not result.ok:
            _LOGGER.warning(
                "%s: backend rejected %s=%s (status %s)",
                self._label,
                capability,
                value,
                result.status,
            )
            return False
        await self._reconcile(capability, value)
        return True

    async def _reconcile(self, capability: str, value: Any) -> None:
        try:
            await self._store.async_set(capability, value)
        except StorageWriteError as err:
            _LOGGER.error("%s: %s", self._label, err)
