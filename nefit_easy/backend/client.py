"""Command-level client for the Nefit Easy backend."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
import logging
from typing import Any, TypeVar

from ..codecs import (
    PressureSnapshot,
    StatusSnapshot,
    ToggleSnapshot,
    WriteResult,
    decode_pressure,
    decode_status,
    decode_toggle,
    decode_write_result,
    encode_toggle,
    encode_value,
)
from ..const import USER_MODE_CLOCK, USER_MODE_MANUAL, VALUE_ON
from .base import NefitTransportProto, ResponseDecodeError
from .sanitize import mask_identifier

_LOGGER = logging.getLogger(__name__)

_T = TypeVar("_T")

UI_STATUS_PATH = "/ecus/rrc/uiStatus"
OUTDOOR_TEMP_PATH = "/system/sensors/temperatures/outdoor_t1"
PRESSURE_PATH = "/system/appliance/systemPressure"
USER_MODE_PATH = "/heatingCircuits/hc1/usermode"
ROOM_MANUAL_PATH = "/heatingCircuits/hc1/temperatureRoomManual"
OVERRIDE_STATUS_PATH = "/heatingCircuits/hc1/manualTempOverride/status"
OVERRIDE_TEMP_PATH = "/heatingCircuits/hc1/manualTempOverride/temperature"
FIREPLACE_PATH = "/ecus/rrc/userprogram/fireplacefunction"
HOLIDAY_MODE_PATH = "/heatingCircuits/hc1/holidayMode/status"
SHOWER_TIMER_PATH = "/dhwCircuits/dhwA/extraDhw/status"
SHOWER_TIME_PATH = "/dhwCircuits/dhwA/extraDhw/duration"


class NefitEasyClient:
    """Map Nefit Easy commands onto raw backend endpoints."""

    def __init__(self, transport: NefitTransportProto, serial_number: str) -> None:
        """Initialise the client around an unconnected transport."""

        self._transport = transport
        self._serial = mask_identifier(serial_number)
        self._closed = False

    async def connect(self) -> None:
        """Connect the underlying transport."""

        await self._transport.connect()
        self._closed = False
        _LOGGER.debug("%s: connected to backend", self._serial)

    async def end(self) -> None:
        """Disconnect the underlying transport; safe to call twice."""

        if self._closed:
            return
        self._closed = True
        await self._transport.disconnect()
        _LOGGER.debug("%s: disconnected from backend", self._serial)

    async def _get(self, path: str) -> Any:
        """Return the raw envelope for ``path``."""

        _LOGGER.debug("%s: GET %s", self._serial, path)
        try:
            return await self._transport.get(path)
        except ValueError as err:
            raise ResponseDecodeError(f"Undecodable response for {path}") from err

    async def _put(self, path: str, body: Mapping[str, Any]) -> WriteResult:
        """Write ``body`` to ``path`` and return the decoded result."""

        _LOGGER.debug("%s: PUT %s %s", self._serial, path, body)
        try:
            raw = await self._transport.put(path, body)
        except ValueError as err:
            raise ResponseDecodeError(f"Undecodable response for {path}") from err
        return self._decode(path, decode_write_result, raw)

    @staticmethod
    def _decode(path: str, decoder: Callable[..., _T], *raw: Any) -> _T:
        """Run ``decoder`` and convert validation errors to decode errors."""

        try:
            return decoder(*raw)
        except ValueError as err:
            raise ResponseDecodeError(f"Undecodable response for {path}") from err

    async def status(self) -> StatusSnapshot:
        """Return the general status merged with the outdoor temperature."""

        ui_status, outdoor = await asyncio.gather(
            self._get(UI_STATUS_PATH), self._get(OUTDOOR_TEMP_PATH)
        )
        return self._decode(UI_STATUS_PATH, decode_status, ui_status, outdoor)

    async def pressure(self) -> PressureSnapshot:
        """Return the system pressure reading."""

        raw = await self._get(PRESSURE_PATH)
        return self._decode(PRESSURE_PATH, decode_pressure, raw)

    async def holiday_mode(self) -> ToggleSnapshot | None:
        """Return the holiday-mode status."""

        raw = await self._get(HOLIDAY_MODE_PATH)
        return self._decode(HOLIDAY_MODE_PATH, decode_toggle, raw)

    async def shower_timer(self) -> ToggleSnapshot | None:
        """Return the shower-timer (extra hot water) status."""

        raw = await self._get(SHOWER_TIMER_PATH)
        return self._decode(SHOWER_TIMER_PATH, decode_toggle, raw)

    async def set_temperature(self, value: float) -> WriteResult:
        """Set the target temperature for the active user mode.

        In manual mode the manual room setpoint is written. In clock mode the
        programme keeps running and a temporary override is activated for
        the current switchpoint instead.
        """

        status = await self.status()
        if status.user_mode == USER_MODE_MANUAL:
            return await self._put(ROOM_MANUAL_PATH, encode_value(value))

        result = await self._put(OVERRIDE_STATUS_PATH, {"value": VALUE_ON})
        if not result.ok:
            return result
        return await self._put(OVERRIDE_TEMP_PATH, encode_value(value))

    async def set_user_mode(self, mode: str) -> WriteResult:
        """Switch between ``clock`` and ``manual`` user modes."""

        if mode not in (USER_MODE_CLOCK, USER_MODE_MANUAL):
            raise ValueError(f"Invalid user mode: {mode!r}")
        return await self._put(USER_MODE_PATH, encode_value(mode))

    async def set_fireplace_mode(self, enabled: bool) -> WriteResult:
        """Enable or disable fireplace mode."""

        return await self._put(FIREPLACE_PATH, encode_toggle(enabled))

    async def set_holiday_mode(self, enabled: bool) -> WriteResult:
        """Enable or disable holiday mode."""

        return await self._put(HOLIDAY_MODE_PATH, encode_toggle(enabled))

    async def set_shower_timer(self, enabled: bool) -> WriteResult:
        """Enable or disable the shower timer."""

        return await self._put(SHOWER_TIMER_PATH, encode_toggle(enabled))

    async def set_shower_time(self, minutes: int) -> WriteResult:
        """Set the shower timer duration."""

        return await self._put(SHOWER_TIME_PATH, encode_value(int(minutes)))
