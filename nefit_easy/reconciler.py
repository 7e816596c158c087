"""Project backend snapshots onto capability values."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import logging
from typing import Any

from .backend.base import RemoteClientProto
from .codecs import PressureSnapshot, StatusSnapshot
from .const import (
    BOILER_CENTRAL_HEATING,
    CAP_ALARM_PRESSURE,
    CAP_CENTRAL_HEATING,
    CAP_CLOCK_PROGRAMME,
    CAP_FIREPLACE_MODE,
    CAP_HOLIDAY_MODE,
    CAP_INDOOR_TEMP,
    CAP_OPERATING_MODE,
    CAP_OUTDOOR_TEMP,
    CAP_PRESSURE,
    CAP_SHOWER_TIMER,
    CAP_TARGET_TEMP,
    PRESSURE_SANITY_CEILING,
    PRESSURE_UNIT_BAR,
    USER_MODE_CLOCK,
)
from .domain.alarm import PressureThresholds, evaluate_pressure_alarm
from .domain.store import CapabilityStore
from .errors import StorageWriteError, SyncError
from .port import PlatformPortProto

_LOGGER = logging.getLogger(__name__)

ClientGetter = Callable[[], RemoteClientProto]
ThresholdsGetter = Callable[[], PressureThresholds]


def status_capabilities(status: StatusSnapshot) -> dict[str, Any]:
    """Return the capability values derived from a general status snapshot."""

    return {
        CAP_CLOCK_PROGRAMME: status.user_mode == USER_MODE_CLOCK,
        CAP_FIREPLACE_MODE: status.fireplace_mode,
        CAP_OPERATING_MODE: status.boiler_indicator,
        CAP_CENTRAL_HEATING: status.boiler_indicator == BOILER_CENTRAL_HEATING,
        CAP_INDOOR_TEMP: status.in_house_temp,
        CAP_OUTDOOR_TEMP: status.outdoor_temp,
        CAP_TARGET_TEMP: status.target_setpoint,
    }


def valid_pressure(snapshot: PressureSnapshot | None) -> float | None:
    """Return the pressure in bar, or ``None`` for unusable readings."""

    if snapshot is None or snapshot.pressure is None:
        return None
    if snapshot.unit != PRESSURE_UNIT_BAR:
        return None
    if snapshot.pressure >= PRESSURE_SANITY_CEILING:
        return None
    return snapshot.pressure


class StatusReconciler:
    """Fetch one round of snapshots and feed the capability store."""

    def __init__(
        self,
        get_client: ClientGetter,
        store: CapabilityStore,
        port: PlatformPortProto,
        get_thresholds: ThresholdsGetter,
        *,
        label: str = "",
    ) -> None:
        """Initialise the reconciler for one device."""

        self._get_client = get_client
        self._store = store
        self._port = port
        self._get_thresholds = get_thresholds
        self._label = label

    async def async_reconcile(self) -> None:
        """Run one reconciliation; raise ``SyncError`` when fetching fails."""

        client = self._get_client()
        try:
            status, pressure, holiday, shower = await asyncio.gather(
                client.status(),
                client.pressure(),
                client.holiday_mode(),
                client.shower_timer(),
            )
        except asyncio.CancelledError:
            raise
        except Exception as err:
            raise SyncError(str(err) or type(err).__name__) from err

        if status is not None:
            _LOGGER.debug("%s: updating status", self._label)
            await self._apply(status_capabilities(status))

        toggles: dict[str, Any] = {}
        if holiday is not None:
            toggles[CAP_HOLIDAY_MODE] = holiday.is_on
        if shower is not None:
            toggles[CAP_SHOWER_TIMER] = shower.is_on
        if toggles:
            await self._apply(toggles)

        await self._apply_pressure(pressure)

    async def _apply_pressure(self, snapshot: PressureSnapshot | None) -> None:
        """Write pressure and alarm state for a plausible reading."""

        value = valid_pressure(snapshot)
        if value is None:
            _LOGGER.debug("%s: discarding pressure reading %s", self._label, snapshot)
            return

        _LOGGER.debug("%s: updating pressure %s", self._label, value)
        thresholds = self._get_thresholds()
        evaluation = evaluate_pressure_alarm(
            value, thresholds, self._store.get(CAP_ALARM_PRESSURE)
        )
        if evaluation.activated is not None:
            _LOGGER.info(
                "%s: activating pressure alarm at %s bar (lower limit = %s, upper limit = %s)",
                self._label,
                value,
                thresholds.low,
                thresholds.high,
            )
            try:
                await self._port.async_trigger_pressure_alarm(
                    evaluation.activated.pressure
                )
            except Exception:  # noqa: BLE001 - logged, the cycle continues
                _LOGGER.exception("%s: pressure alarm trigger failed", self._label)

        await self._apply(
            {CAP_PRESSURE: value, CAP_ALARM_PRESSURE: evaluation.active}
        )

    async def _apply(self, values: dict[str, Any]) -> None:
        """Write ``values`` concurrently; failed writes are logged individually."""

        results = await asyncio.gather(
            *(self._store.async_set(cap, value) for cap, value in values.items()),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, StorageWriteError):
                _LOGGER.error("%s: %s", self._label, result)
            elif isinstance(result, BaseException):
                raise result
