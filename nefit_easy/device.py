"""Nefit Easy device: wires the synchronization engine to a platform port."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import logging
from typing import Any

from .availability import AvailabilityStateMachine
from .backend.base import ClientFactory, RemoteClientProto
from .backend.sanitize import mask_identifier, redact_settings
from .config import DeviceContext, DeviceSettings, merge_settings
from .const import (
    CAP_OPERATING_MODE,
    CONF_SERIAL_NUMBER,
    CREDENTIAL_KEYS,
    DEBOUNCE_RATE,
    DEFAULT_PRESSURE_TOO_HIGH,
    DEFAULT_PRESSURE_TOO_LOW,
    DEFAULT_SYNC_INTERVAL,
    LEGACY_CAP_THERMOSTAT_MODE,
    PAIRED_WITH_APP_VERSION,
)
from .credentials import ClientSlot, CredentialValidator, release_client
from .debounce import SleepCallable
from .domain.alarm import PressureThresholds
from .domain.store import CapabilityStore
from .errors import DeviceConnectionError
from .i18n import (
    MSG_CONNECTING,
    MSG_CREDENTIALS,
    MSG_FORCE_REPAIR,
    MSG_SYNC_ERROR,
    MSG_TOO_OLD,
)
from .port import PlatformPortProto
from .reconciler import StatusReconciler
from .scheduler import SyncScheduler, TimerFactory
from .writer import CapabilityWriteController

_LOGGER = logging.getLogger(__name__)

_DEFAULT_THRESHOLDS = PressureThresholds(
    low=DEFAULT_PRESSURE_TOO_LOW, high=DEFAULT_PRESSURE_TOO_HIGH
)


class NefitEasyDevice:
    """One paired Nefit Easy appliance.

    The device owns its remote client and composes the capability store,
    availability machine, reconciler, write controller and scheduler. The
    host platform drives it through the ``async_*`` lifecycle hooks.
    """

    def __init__(
        self,
        port: PlatformPortProto,
        client_factory: ClientFactory,
        context: DeviceContext | None = None,
        *,
        timer: TimerFactory | None = None,
        debounce_delay: float = DEBOUNCE_RATE,
        debounce_sleep: SleepCallable | None = None,
    ) -> None:
        """Build the engine for ``port``; nothing connects until ``async_init``."""

        self._port = port
        self._client_factory = client_factory
        self.context = context or DeviceContext.from_env()
        self.settings: DeviceSettings | None = None

        serial = port.get_data().get(CONF_SERIAL_NUMBER)
        self.label = mask_identifier(serial) or port.name

        self._slot = ClientSlot(self.label)
        self.store = CapabilityStore(port)
        self.availability = AvailabilityStateMachine(port, label=self.label)
        self.reconciler = StatusReconciler(
            self._get_client,
            self.store,
            port,
            self._thresholds,
            label=self.label,
        )
        self.writer = CapabilityWriteController(
            self._get_client,
            self.store,
            delay=debounce_delay,
            sleep=debounce_sleep,
            label=self.label,
        )
        self.scheduler = SyncScheduler(
            self.reconciler.async_reconcile,
            self.availability,
            self._sync_interval,
            timer=timer,
            error_reason=self._sync_error_reason,
            label=self.label,
        )
        self.credentials = CredentialValidator(
            client_factory,
            self._slot,
            self.availability,
            self.scheduler,
            credential_message=self.context.message(MSG_CREDENTIALS),
            label=self.label,
        )

    @property
    def available(self) -> bool:
        """Return ``True`` when the device is reachable."""

        return self.availability.state.available

    @property
    def client(self) -> RemoteClientProto:
        """Return the active remote client."""

        return self._slot.client

    async def async_init(self) -> None:
        """Load settings, connect and start syncing.

        Raises ``DeviceConnectionError`` when the backend cannot be reached;
        the device then stays unavailable until its settings change.
        """

        port = self._port
        merged = merge_settings(port.get_data(), port.get_settings())
        await port.async_set_settings(merged)
        self.settings = DeviceSettings.from_mapping(merged)
        _LOGGER.info("%s: device init: name = %s", self.label, port.name)
        _LOGGER.debug("%s: settings %s", self.label, redact_settings(merged))

        if not port.has_capability(CAP_OPERATING_MODE):
            _LOGGER.info("%s: device entry too old, needs to be re-added", self.label)
            await self.availability.async_set_unavailable(
                self.context.message(MSG_TOO_OLD)
            )
            return

        if port.has_capability(LEGACY_CAP_THERMOSTAT_MODE):
            try:
                await port.async_remove_capability(LEGACY_CAP_THERMOSTAT_MODE)
            except Exception:
                _LOGGER.exception(
                    "%s: unable to remove %s", self.label, LEGACY_CAP_THERMOSTAT_MODE
                )

        await self.availability.async_set_connecting(
            self.context.message(MSG_CONNECTING)
        )
        try:
            await self._async_connect()
        except DeviceConnectionError as err:
            _LOGGER.info("%s: unable to initialize device: %s", self.label, err)
            await self.availability.async_set_unavailable(str(err))
            raise

        if not port.get_store_value(PAIRED_WITH_APP_VERSION):
            _LOGGER.info("%s: paired with an old version, forcing re-pair", self.label)
            await self.availability.async_set_unavailable(
                self.context.message(MSG_FORCE_REPAIR)
            )
            return

        await self.availability.async_set_available()
        self.scheduler.start()

    async def async_added(self) -> None:
        """Log a freshly paired device."""

        _LOGGER.info("%s: new device added: %s", self.label, self._port.name)

    async def async_deleted(self) -> None:
        """Stop all activity and release the remote client."""

        _LOGGER.info("%s: device deleted: %s", self.label, self._port.name)
        self.scheduler.stop()
        self.writer.cancel()
        await self._slot.async_release()
        await self.availability.async_halt()

    async def async_on_settings(
        self,
        old: Mapping[str, Any],
        new: Mapping[str, Any],
        changed_keys: Iterable[str] | None = None,
    ) -> None:
        """Adopt changed settings, validating new credentials first.

        Raises ``CredentialError`` (or the transport error) when new
        credentials do not work; the previous settings stay in effect.
        """

        if self.availability.halted:
            _LOGGER.debug("%s: ignoring settings change after removal", self.label)
            return
        if changed_keys is None:
            changed = {key for key in new if new.get(key) != old.get(key)}
        else:
            changed = set(changed_keys)
        settings = DeviceSettings.from_mapping(new)
        _LOGGER.debug("%s: settings changed: %s", self.label, sorted(changed))

        if changed & CREDENTIAL_KEYS:
            try:
                await self.credentials.async_validate(settings.connection)
            except Exception:
                _LOGGER.info("%s: unable to validate credential change", self.label)
                raise
        self.settings = settings

    async def async_set_capability(self, capability: str, value: Any) -> bool:
        """Request a user change of ``capability``."""

        return await self.writer.async_set(capability, value)

    async def async_set_target_temperature(self, value: float) -> bool:
        return await self.writer.async_set_target_temperature(value)

    async def async_set_clock_programme(self, enabled: bool) -> bool:
        return await self.writer.async_set_clock_programme(enabled)

    async def async_set_fireplace_mode(self, enabled: bool) -> bool:
        return await self.writer.async_set_fireplace_mode(enabled)

    async def async_set_holiday_mode(self, enabled: bool) -> bool:
        return await self.writer.async_set_holiday_mode(enabled)

    async def async_set_shower_timer(self, enabled: bool) -> bool:
        return await self.writer.async_set_shower_timer(enabled)

    async def async_set_shower_time(self, minutes: int) -> bool:
        return await self.writer.async_set_shower_time(minutes)

    async def _async_connect(self) -> None:
        """Build and connect a client for the current settings."""

        assert self.settings is not None
        client: RemoteClientProto | None = None
        try:
            client = self._client_factory(self.settings.connection)
            await client.connect()
        except Exception as err:
            await release_client(client, self.label)
            raise DeviceConnectionError(str(err) or type(err).__name__) from err
        await self._slot.async_replace(client)

    def _get_client(self) -> RemoteClientProto:
        return self._slot.client

    def _thresholds(self) -> PressureThresholds:
        if self.settings is None:
            return _DEFAULT_THRESHOLDS
        return self.settings.thresholds

    def _sync_interval(self) -> float:
        configured = (
            self.settings.sync_interval if self.settings else DEFAULT_SYNC_INTERVAL
        )
        return self.context.sync_interval(configured)

    def _sync_error_reason(self, message: str) -> str:
        return f"{self.context.message(MSG_SYNC_ERROR)}: {message}"


__all__ = ["NefitEasyDevice"]
