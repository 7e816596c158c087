"""Per-capability debounce helper."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
import logging
from typing import Any, Generic, TypeVar

_LOGGER = logging.getLogger(__name__)

SleepCallable = Callable[[float], Awaitable[Any]]

_ValueT = TypeVar("_ValueT")
_ResultT = TypeVar("_ResultT")


@dataclass(slots=True)
class Debouncer(Generic[_ValueT, _ResultT]):
    """Coalesce rapid calls into one ``action`` run with the latest value.

    Every call restarts the quiet window. When the window elapses the action
    runs once with the most recent value and every caller coalesced into that
    window receives the same result (or exception). A call arriving while the
    action is already running opens a new window.
    """

    action: Callable[[_ValueT], Awaitable[_ResultT]]
    delay: float
    sleep: SleepCallable = asyncio.sleep
    name: str = ""
    _latest: Any = None
    _timer: asyncio.Task[None] | None = None
    _waiters: list[asyncio.Future[_ResultT]] = field(default_factory=list)

    @property
    def pending(self) -> bool:
        """Return ``True`` while a window is open."""

        return self._timer is not None and not self._timer.done()

    async def async_call(self, value: _ValueT) -> _ResultT:
        """Request ``action(value)`` and wait for the coalesced outcome."""

        loop = asyncio.get_running_loop()
        self._latest = value
        waiter: asyncio.Future[_ResultT] = loop.create_future()
        self._waiters.append(waiter)
        if self.pending:
            _LOGGER.debug("%s: coalescing request", self.name)
            self._timer.cancel()
        self._timer = loop.create_task(self._run_after_delay())
        return await waiter

    async def _run_after_delay(self) -> None:
        """Wait out the window, then run the action for the current waiters."""

        await self.sleep(self.delay)
        self._timer = None
        waiters, self._waiters = self._waiters, []
        value, self._latest = self._latest, None
        try:
            result = await self.action(value)
        except asyncio.CancelledError:
            for waiter in waiters:
                if not waiter.done():
                    waiter.cancel()
            raise
        except Exception as err:  # noqa: BLE001 - handed to every waiter
            for waiter in waiters:
                if not waiter.done():
                    waiter.set_exception(err)
            return
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(result)

    def cancel(self) -> None:
        """Drop the open window and cancel everyone waiting on it."""

        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        waiters, self._waiters = self._waiters, []
        for waiter in waiters:
            if not waiter.done():
                waiter.cancel()
        self._latest = None
