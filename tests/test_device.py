"""Tests for the device lifecycle."""

from __future__ import annotations

import pytest

from conftest import (
    FakeClientFactory,
    FakePort,
    FakeRemoteClient,
    FakeTimer,
    SERIAL,
)
from nefit_easy.backend import ResponseDecodeError
from nefit_easy.config import DeviceContext
from nefit_easy.const import (
    CAP_CLOCK_PROGRAMME,
    CAP_OPERATING_MODE,
    CAP_PRESSURE,
    CAP_TARGET_TEMP,
    CAPABILITY_KINDS,
    LEGACY_CAP_THERMOSTAT_MODE,
)
from nefit_easy.device import NefitEasyDevice
from nefit_easy.errors import CredentialError, DeviceConnectionError


def _device(
    port: FakePort,
    factory: FakeClientFactory,
    timer: FakeTimer,
    context: DeviceContext,
) -> NefitEasyDevice:
    return NefitEasyDevice(port, factory, context, timer=timer, debounce_delay=0)


@pytest.mark.asyncio
async def test_init_connects_and_starts_syncing(
    port: FakePort,
    client_factory: FakeClientFactory,
    remote_client: FakeRemoteClient,
    fake_timer: FakeTimer,
    context: DeviceContext,
) -> None:
    """A healthy device connects, becomes available and polls."""

    port.settings = {"syncInterval": 120, "password": ""}
    device = _device(port, client_factory, fake_timer, context)

    await device.async_init()

    assert port.settings["serialNumber"] == SERIAL
    assert port.settings["password"] == "hunter22"
    assert remote_client.connected
    assert device.client is remote_client
    assert device.available
    assert port.availability == [
        (False, "Connecting to the Nefit backend..."),
        (True, None),
    ]
    assert [handle.delay for handle in fake_timer.pending] == [0]

    await fake_timer.fire()

    assert port.values[CAP_PRESSURE] == 1.6
    assert [handle.delay for handle in fake_timer.pending] == [120]


@pytest.mark.asyncio
async def test_debug_mode_polls_every_ten_seconds(
    port: FakePort,
    client_factory: FakeClientFactory,
    fake_timer: FakeTimer,
) -> None:
    """Debug mode overrides the configured interval."""

    device = _device(port, client_factory, fake_timer, DeviceContext(debug=True))

    await device.async_init()
    await fake_timer.fire()

    assert [handle.delay for handle in fake_timer.pending] == [10]


@pytest.mark.asyncio
async def test_old_device_entry_is_disabled(
    client_factory: FakeClientFactory,
    fake_timer: FakeTimer,
    context: DeviceContext,
) -> None:
    """Devices without the operating mode capability must be re-added."""

    port = FakePort(capabilities=set(CAPABILITY_KINDS) - {CAP_OPERATING_MODE})
    device = _device(port, client_factory, fake_timer, context)

    await device.async_init()

    assert client_factory.created == []
    assert port.availability == [(False, context.message("device.too_old"))]
    assert fake_timer.handles == []


@pytest.mark.asyncio
async def test_legacy_capability_removed(
    client_factory: FakeClientFactory,
    fake_timer: FakeTimer,
    context: DeviceContext,
) -> None:
    """The obsolete thermostat mode capability is dropped on init."""

    port = FakePort(capabilities=set(CAPABILITY_KINDS) | {LEGACY_CAP_THERMOSTAT_MODE})
    device = _device(port, client_factory, fake_timer, context)

    await device.async_init()

    assert port.removed == [LEGACY_CAP_THERMOSTAT_MODE]
    assert device.available


@pytest.mark.asyncio
async def test_connection_failure_is_fatal(
    port: FakePort,
    remote_client: FakeRemoteClient,
    client_factory: FakeClientFactory,
    fake_timer: FakeTimer,
    context: DeviceContext,
) -> None:
    """An unreachable backend raises and leaves the device unavailable."""

    remote_client.connect_error = ConnectionError("no route to host")
    device = _device(port, client_factory, fake_timer, context)

    with pytest.raises(DeviceConnectionError, match="no route to host"):
        await device.async_init()

    assert not device.available
    assert port.availability[-1] == (False, "no route to host")
    assert remote_client.end_calls == 1
    assert fake_timer.handles == []


@pytest.mark.asyncio
async def test_missing_pairing_version_forces_repair(
    client_factory: FakeClientFactory,
    fake_timer: FakeTimer,
    context: DeviceContext,
) -> None:
    """Devices paired by an old version must be paired again."""

    port = FakePort(store={})
    device = _device(port, client_factory, fake_timer, context)

    await device.async_init()

    assert port.availability[-1] == (False, context.message("device.force_repair"))
    assert fake_timer.handles == []


@pytest.mark.asyncio
async def test_sync_failure_reason_is_localised(
    port: FakePort,
    remote_client: FakeRemoteClient,
    client_factory: FakeClientFactory,
    fake_timer: FakeTimer,
    context: DeviceContext,
) -> None:
    """Failed cycles mark the device unavailable with the error message."""

    device = _device(port, client_factory, fake_timer, context)
    await device.async_init()
    remote_client.status_error = TimeoutError("request timed out")

    await fake_timer.fire()

    assert port.availability[-1] == (
        False,
        "Error syncing with the Nefit backend: request timed out",
    )
    assert len(fake_timer.pending) == 1


@pytest.mark.asyncio
async def test_write_hooks_reach_backend(
    port: FakePort,
    remote_client: FakeRemoteClient,
    client_factory: FakeClientFactory,
    fake_timer: FakeTimer,
    context: DeviceContext,
) -> None:
    """Capability writes go through the debounced controller."""

    device = _device(port, client_factory, fake_timer, context)
    await device.async_init()

    assert await device.async_set_target_temperature(21.26) is True
    assert await device.async_set_capability(CAP_CLOCK_PROGRAMME, False) is True

    assert remote_client.writes == [
        ("set_temperature", 21.3),
        ("set_user_mode", "manual"),
    ]
    assert port.values[CAP_TARGET_TEMP] == 21.3


@pytest.mark.asyncio
async def test_deleted_device_stops_everything(
    port: FakePort,
    remote_client: FakeRemoteClient,
    client_factory: FakeClientFactory,
    fake_timer: FakeTimer,
    context: DeviceContext,
) -> None:
    """Removal releases the client and halts availability."""

    device = _device(port, client_factory, fake_timer, context)
    await device.async_init()

    await device.async_deleted()
    await device.availability.async_set_available()

    assert remote_client.end_calls == 1
    assert fake_timer.pending == []
    assert not device.scheduler.running
    assert port.availability[-1] == (False, None)
    assert await device.scheduler.async_sync() is False


@pytest.mark.asyncio
async def test_settings_change_after_removal_is_ignored(
    port: FakePort,
    remote_client: FakeRemoteClient,
    client_factory: FakeClientFactory,
    fake_timer: FakeTimer,
    context: DeviceContext,
) -> None:
    """A removed device neither reconnects nor resumes polling."""

    device = _device(port, client_factory, fake_timer, context)
    await device.async_init()
    await device.async_deleted()
    old = dict(port.settings)

    await device.async_on_settings(old, {**old, "password": "x2"}, ["password"])

    assert client_factory.created == [remote_client]
    assert not device.scheduler.running
    assert fake_timer.pending == []
    assert port.availability[-1] == (False, None)


@pytest.mark.asyncio
async def test_rejected_write_is_reverted_by_next_cycle(
    port: FakePort,
    remote_client: FakeRemoteClient,
    client_factory: FakeClientFactory,
    fake_timer: FakeTimer,
    context: DeviceContext,
) -> None:
    """A platform-side edit the backend refused is overwritten on the next sync."""

    device = _device(port, client_factory, fake_timer, context)
    await device.async_init()
    await device.reconciler.async_reconcile()
    assert port.values[CAP_TARGET_TEMP] == 20.0

    port.values[CAP_TARGET_TEMP] = 23.0
    remote_client.write_status = "error"
    assert await device.async_set_target_temperature(23.0) is False

    await device.reconciler.async_reconcile()

    assert port.values[CAP_TARGET_TEMP] == 20.0


@pytest.mark.asyncio
async def test_credential_change_validates_new_client(
    port: FakePort,
    remote_client: FakeRemoteClient,
    fake_timer: FakeTimer,
    context: DeviceContext,
) -> None:
    """New credentials swap in a fresh client."""

    replacement = FakeRemoteClient()
    factory = FakeClientFactory(remote_client, replacement)
    device = _device(port, factory, fake_timer, context)
    await device.async_init()
    old = dict(port.settings)
    new = {**old, "password": "correct horse", "pressureTooLow": 1.0}

    await device.async_on_settings(old, new, ["password", "pressureTooLow"])

    assert device.client is replacement
    assert remote_client.end_calls == 1
    assert factory.settings[-1].password == "correct horse"
    assert device.settings is not None
    assert device.settings.thresholds.low == 1.0


@pytest.mark.asyncio
async def test_rejected_credentials_keep_previous_settings(
    port: FakePort,
    remote_client: FakeRemoteClient,
    fake_timer: FakeTimer,
    context: DeviceContext,
) -> None:
    """Wrong credentials raise and leave the running client alone."""

    replacement = FakeRemoteClient()
    replacement.status_error = ResponseDecodeError("garbled")
    factory = FakeClientFactory(remote_client, replacement)
    device = _device(port, factory, fake_timer, context)
    await device.async_init()
    old = dict(port.settings)
    new = {**old, "password": "wrong"}

    with pytest.raises(CredentialError, match="Invalid credentials"):
        await device.async_on_settings(old, new)

    assert device.client is remote_client
    assert device.settings is not None
    assert device.settings.connection.password == "hunter22"
    assert replacement.end_calls == 1


@pytest.mark.asyncio
async def test_non_credential_change_skips_validation(
    port: FakePort,
    client_factory: FakeClientFactory,
    fake_timer: FakeTimer,
    context: DeviceContext,
) -> None:
    """Threshold or interval changes are adopted without reconnecting."""

    device = _device(port, client_factory, fake_timer, context)
    await device.async_init()
    old = dict(port.settings)

    await device.async_on_settings(old, {**old, "syncInterval": 300}, ["syncInterval"])
    await fake_timer.fire()

    assert len(client_factory.created) == 1
    assert [handle.delay for handle in fake_timer.pending] == [300]


@pytest.mark.asyncio
async def test_added_device_only_logs(
    port: FakePort,
    client_factory: FakeClientFactory,
    fake_timer: FakeTimer,
    context: DeviceContext,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Adding a device does not connect on its own."""

    device = _device(port, client_factory, fake_timer, context)

    with caplog.at_level("INFO", logger="nefit_easy.device"):
        await device.async_added()

    assert "new device added" in caplog.text
    assert "123...789" in caplog.text
    assert client_factory.created == []
