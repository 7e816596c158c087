"""Periodic synchronization loop."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
import logging
from typing import Any, Protocol

from .availability import AvailabilityStateMachine

_LOGGER = logging.getLogger(__name__)

SyncCallback = Callable[[], Awaitable[Any]]


class TimerHandle(Protocol):
    """Handle returned by a timer; cancelling it drops the pending call."""

    def cancel(self) -> None:
        """Cancel the pending call."""


TimerFactory = Callable[[float, SyncCallback], TimerHandle]


class LoopTimer:
    """Run coroutine callbacks on the running event loop after a delay."""

    def __init__(self) -> None:
        """Initialise the set of tasks kept alive until they finish."""

        self._tasks: set[asyncio.Task[Any]] = set()

    def __call__(self, delay: float, callback: SyncCallback) -> asyncio.TimerHandle:
        """Schedule ``callback`` ``delay`` seconds from now."""

        loop = asyncio.get_running_loop()

        def _fire() -> None:
            task = loop.create_task(callback())
            self._tasks.add(task)
            task.add_done_callback(self._task_done)

        return loop.call_later(delay, _fire)

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        err = task.exception()
        if err is not None:
            _LOGGER.error("Scheduled sync failed: %s", err, exc_info=err)


@dataclass(slots=True)
class SyncSession:
    """Per-device polling state."""

    syncing: bool = False
    should_sync: bool = False
    started: bool = False
    timer: TimerHandle | None = field(default=None, repr=False)


class SyncScheduler:
    """Drive reconciliation cycles and reflect their outcome as availability.

    At most one cycle runs at a time. A failed cycle only marks the device
    unavailable; the next cycle is scheduled either way.
    """

    def __init__(
        self,
        sync: SyncCallback,
        availability: AvailabilityStateMachine,
        get_interval: Callable[[], float],
        *,
        timer: TimerFactory | None = None,
        error_reason: Callable[[str], str] | None = None,
        label: str = "",
    ) -> None:
        """Initialise an idle scheduler."""

        self._sync = sync
        self._availability = availability
        self._get_interval = get_interval
        self._timer: TimerFactory = timer or LoopTimer()
        self._error_reason = error_reason or (lambda message: message)
        self._label = label
        self.session = SyncSession()

    @property
    def running(self) -> bool:
        """Return ``True`` while cycles are being scheduled."""

        return self.session.started and self.session.should_sync

    def start(self) -> None:
        """Begin polling; later calls are no-ops while polling is active."""

        session = self.session
        session.should_sync = True
        if session.started:
            return
        session.started = True
        _LOGGER.debug("%s: starting sync", self._label)
        self._schedule(0)

    def resume(self) -> None:
        """Restart polling after ``stop`` or a never-started scheduler."""

        session = self.session
        if session.started and session.should_sync:
            return
        session.started = False
        self.start()

    def stop(self) -> None:
        """Stop polling; an in-flight cycle finishes but does not reschedule."""

        session = self.session
        session.should_sync = False
        session.started = False
        if session.timer is not None:
            session.timer.cancel()
            session.timer = None
        _LOGGER.debug("%s: sync stopped", self._label)

    async def async_sync(self) -> bool:
        """Run one cycle; return ``False`` when it was skipped."""

        session = self.session
        if not session.should_sync or session.syncing:
            return False

        session.syncing = True
        _LOGGER.debug("%s: syncing", self._label)
        error: Exception | None = None
        try:
            await self._sync()
        except Exception as err:  # noqa: BLE001 - reflected as unavailability
            error = err
        finally:
            session.syncing = False

        try:
            if error is None:
                await self._availability.async_set_available()
            else:
                message = str(error) or type(error).__name__
                _LOGGER.warning("%s: error syncing: %s", self._label, message)
                await self._availability.async_set_unavailable(
                    self._error_reason(message)
                )
        finally:
            if session.should_sync:
                self._schedule(self._get_interval())
        return True

    def _schedule(self, delay: float) -> None:
        session = self.session
        if session.timer is not None:
            session.timer.cancel()
        session.timer = self._timer(delay, self.async_sync)
        _LOGGER.debug("%s: next sync in %s s", self._label, delay)
