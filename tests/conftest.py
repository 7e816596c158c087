# ruff: noqa: D100,D101,D102,D103,D104,D105,D106,D107,INP001,E402
from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
import inspect
from typing import Any

import pytest

from nefit_easy.codecs import PressureSnapshot, StatusSnapshot, ToggleSnapshot, WriteResult
from nefit_easy.config import DeviceContext
from nefit_easy.const import (
    CAPABILITY_KINDS,
    CONF_ACCESS_KEY,
    CONF_PASSWORD,
    CONF_SERIAL_NUMBER,
    INTEGRATION_VERSION,
    PAIRED_WITH_APP_VERSION,
)

SERIAL = "123456789"
ACCESS_KEY = "abcdABCD1234efgh"
PASSWORD = "hunter22"


def pytest_configure(config: pytest.Config) -> None:
    """Register custom pytest markers used across the suite."""

    if not config.pluginmanager.hasplugin("pytest_asyncio"):
        config.addinivalue_line(
            "markers", "asyncio: mark test as requiring asyncio event loop support."
        )


def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Execute async tests when pytest-asyncio is unavailable."""

    if pyfuncitem.config.pluginmanager.hasplugin("pytest_asyncio"):
        return None

    testfunction = pyfuncitem.obj
    if not inspect.iscoroutinefunction(testfunction):
        return None

    marker = pyfuncitem.get_closest_marker("asyncio")
    if marker is None:
        return None

    with asyncio.Runner(debug=False) as runner:
        runner.run(testfunction(**pyfuncitem.funcargs))
    return True


class FakePort:
    """In-memory platform port recording everything the engine publishes."""

    def __init__(
        self,
        *,
        name: str = "Thermostat",
        capabilities: set[str] | None = None,
        values: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        settings: dict[str, Any] | None = None,
        store: dict[str, Any] | None = None,
    ) -> None:
        self.name = name
        self.capabilities = set(CAPABILITY_KINDS) if capabilities is None else set(capabilities)
        self.values: dict[str, Any] = dict(values or {})
        self.data: dict[str, Any] = (
            dict(data)
            if data is not None
            else {
                CONF_SERIAL_NUMBER: SERIAL,
                CONF_ACCESS_KEY: ACCESS_KEY,
                CONF_PASSWORD: PASSWORD,
            }
        )
        self.settings: dict[str, Any] = dict(settings or {})
        self.store: dict[str, Any] = (
            dict(store)
            if store is not None
            else {PAIRED_WITH_APP_VERSION: INTEGRATION_VERSION}
        )
        self.set_calls: list[tuple[str, Any]] = []
        self.availability: list[tuple[bool, str | None]] = []
        self.alarms: list[float] = []
        self.removed: list[str] = []
        self.failing: set[str] = set()
        self.saved_settings: list[dict[str, Any]] = []

    def has_capability(self, capability: str) -> bool:
        return capability in self.capabilities

    async def async_remove_capability(self, capability: str) -> None:
        self.removed.append(capability)
        self.capabilities.discard(capability)

    def get_capability_value(self, capability: str) -> Any:
        return self.values.get(capability)

    async def async_set_capability_value(self, capability: str, value: Any) -> None:
        if capability in self.failing:
            raise RuntimeError("capability rejected")
        self.set_calls.append((capability, value))
        self.values[capability] = value

    async def async_set_available(self) -> None:
        self.availability.append((True, None))

    async def async_set_unavailable(self, reason: str | None = None) -> None:
        self.availability.append((False, reason))

    async def async_trigger_pressure_alarm(self, pressure: float) -> None:
        self.alarms.append(pressure)

    def get_data(self) -> Mapping[str, Any]:
        return self.data

    def get_settings(self) -> Mapping[str, Any]:
        return self.settings

    async def async_set_settings(self, settings: Mapping[str, Any]) -> None:
        self.settings = dict(settings)
        self.saved_settings.append(dict(settings))

    def get_store_value(self, key: str) -> Any:
        return self.store.get(key)


class FakeRemoteClient:
    """Remote client returning canned snapshots and recording writes."""

    def __init__(self) -> None:
        self.status_snapshot = StatusSnapshot(
            user_mode="clock",
            in_house_temp=20.46,
            outdoor_temp=7.5,
            boiler_indicator="central heating",
            temp_setpoint=20.0,
            temp_manual_setpoint=18.0,
            fireplace_mode=False,
        )
        self.pressure_snapshot: PressureSnapshot | None = PressureSnapshot(
            pressure=1.6, unit="bar"
        )
        self.holiday_snapshot: ToggleSnapshot | None = ToggleSnapshot(value="off")
        self.shower_snapshot: ToggleSnapshot | None = ToggleSnapshot(value="off")
        self.write_status = "ok"
        self.writes: list[tuple[str, Any]] = []
        self.connect_error: BaseException | None = None
        self.status_error: BaseException | None = None
        self.pressure_error: BaseException | None = None
        self.connected = False
        self.end_calls = 0
        self.status_calls = 0

    async def connect(self) -> None:
        if self.connect_error is not None:
            raise self.connect_error
        self.connected = True

    async def end(self) -> None:
        self.end_calls += 1
        self.connected = False

    async def status(self) -> StatusSnapshot:
        self.status_calls += 1
        if self.status_error is not None:
            raise self.status_error
        return self.status_snapshot

    async def pressure(self) -> PressureSnapshot | None:
        if self.pressure_error is not None:
            raise self.pressure_error
        return self.pressure_snapshot

    async def holiday_mode(self) -> ToggleSnapshot | None:
        return self.holiday_snapshot

    async def shower_timer(self) -> ToggleSnapshot | None:
        return self.shower_snapshot

    async def _write(self, command: str, value: Any) -> WriteResult:
        self.writes.append((command, value))
        return WriteResult(status=self.write_status)

    async def set_temperature(self, value: float) -> WriteResult:
        return await self._write("set_temperature", value)

    async def set_user_mode(self, mode: str) -> WriteResult:
        return await self._write("set_user_mode", mode)

    async def set_fireplace_mode(self, enabled: bool) -> WriteResult:
        return await self._write("set_fireplace_mode", enabled)

    async def set_holiday_mode(self, enabled: bool) -> WriteResult:
        return await self._write("set_holiday_mode", enabled)

    async def set_shower_timer(self, enabled: bool) -> WriteResult:
        return await self._write("set_shower_timer", enabled)

    async def set_shower_time(self, minutes: int) -> WriteResult:
        return await self._write("set_shower_time", minutes)


class FakeClientFactory:
    """Client factory handing out queued clients, then fresh fakes."""

    def __init__(self, *clients: FakeRemoteClient) -> None:
        self.queue = list(clients)
        self.settings: list[Any] = []
        self.created: list[FakeRemoteClient] = []

    def __call__(self, settings: Any) -> FakeRemoteClient:
        self.settings.append(settings)
        client = self.queue.pop(0) if self.queue else FakeRemoteClient()
        self.created.append(client)
        return client


class FakeTransport:
    """Transport returning canned envelopes per path."""

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses: dict[str, Any] = dict(responses or {})
        self.put_results: dict[str, Any] = {}
        self.gets: list[str] = []
        self.puts: list[tuple[str, dict[str, Any]]] = []
        self.connected = False
        self.disconnects = 0

    async def connect(self) -> None:
        self.connected = True

    async def disconnect(self) -> None:
        self.disconnects += 1
        self.connected = False

    async def get(self, path: str) -> Any:
        self.gets.append(path)
        response = self.responses.get(path)
        if isinstance(response, BaseException):
            raise response
        return response

    async def put(self, path: str, payload: Mapping[str, Any]) -> Any:
        self.puts.append((path, dict(payload)))
        result = self.put_results.get(path, {"status": "ok"})
        if isinstance(result, BaseException):
            raise result
        return result


class FakeTimerHandle:
    def __init__(self, delay: float, callback: Callable[[], Awaitable[Any]]) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeTimer:
    """Timer factory that only fires when a test asks it to."""

    def __init__(self) -> None:
        self.handles: list[FakeTimerHandle] = []

    def __call__(
        self, delay: float, callback: Callable[[], Awaitable[Any]]
    ) -> FakeTimerHandle:
        handle = FakeTimerHandle(delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> list[FakeTimerHandle]:
        return [h for h in self.handles if not h.cancelled and not h.fired]

    async def fire(self) -> Any:
        handle = self.pending[0]
        handle.fired = True
        return await handle.callback()


def ui_status_envelope(**overrides: Any) -> dict[str, Any]:
    """Return a uiStatus envelope with sensible clock-mode defaults."""

    value = {
        "UMD": "clock",
        "IHT": "20.46",
        "BAI": "CH",
        "TSP": "20.0",
        "MMT": "18.0",
        "FPA": "off",
    }
    value.update(overrides)
    return {"id": "/ecus/rrc/uiStatus", "type": "uiUpdate", "value": value}


@pytest.fixture
def port() -> FakePort:
    return FakePort()


@pytest.fixture
def remote_client() -> FakeRemoteClient:
    return FakeRemoteClient()


@pytest.fixture
def client_factory(remote_client: FakeRemoteClient) -> FakeClientFactory:
    return FakeClientFactory(remote_client)


@pytest.fixture
def fake_timer() -> FakeTimer:
    return FakeTimer()


@pytest.fixture
def context() -> DeviceContext:
    return DeviceContext(debug=False, language="en")
