"""Coalescing wrapper that collapses bursts of calls into a single action invocation."""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], TimerHandle]


class Phase(str, Enum):
    IDLE = "idle"
    PENDING = "pending"


@dataclass
class DebounceState:
    phase: Phase = Phase.IDLE
    pending_args: tuple[tuple, dict] | None = None
    timer: TimerHandle | None = None
    waiter: asyncio.Future | None = None
    last_fired: float | None = None
    fired_count: int = 0


def _call_later(delay: float, callback: Callable[[], None]) -> TimerHandle:
    return asyncio.get_running_loop().call_later(delay, callback)


class Debouncer:
    """Debounce an async action over a window of ``window`` seconds.

    Leading mode runs the action on the first call of an idle period and
    swallows every call until the calls stop for a full window. Trailing mode
    waits for the calls to stop and then runs the action once with the most
    recent arguments.

    There is a single pending slot per instance, so unrelated calls that arrive
    close together are coalesced as well.
    """

    def __init__(
        self,
        action: Callable[..., Awaitable[Any]],
        window: float,
        leading: bool = False,
        schedule: Scheduler | None = None,
    ):
        self.action = action
        self.window = window
        self.leading = leading
        self._schedule = schedule or _call_later
        self.state = DebounceState()

    async def send(self, *args, **kwargs) -> Any:
        """Submit a call.

        Returns the action's result for the call that triggers it, and ``None``
        for calls that were swallowed or superseded.
        """
        if self.leading:
            return await self._send_leading(args, kwargs)
        return await self._send_trailing(args, kwargs)

    async def _send_leading(self, args: tuple, kwargs: dict) -> Any:
        if self.state.phase is Phase.PENDING:
            logger.debug("Debounced call swallowed while window is open")
            self._arm()
            return None

        self.state.phase = Phase.PENDING
        self._arm()
        return await self._fire(args, kwargs)

    async def _send_trailing(self, args: tuple, kwargs: dict) -> Any:
        state = self.state
        if state.waiter is not None and not state.waiter.done():
            logger.debug("Debounced call superseded by a newer one")
            state.waiter.set_result(None)

        waiter = asyncio.get_running_loop().create_future()
        state.phase = Phase.PENDING
        state.pending_args = (args, kwargs)
        state.waiter = waiter
        self._arm()
        return await waiter

    def _arm(self) -> None:
        if self.state.timer is not None:
            self.state.timer.cancel()
        self.state.timer = self._schedule(self.window, self.timer_fired)

    def timer_fired(self) -> None:
        state = self.state
        state.timer = None
        state.phase = Phase.IDLE

        if self.leading:
            return

        pending, waiter = state.pending_args, state.waiter
        state.pending_args = None
        state.waiter = None
        if pending is None or waiter is None:
            return

        args, kwargs = pending
        task = asyncio.ensure_future(self._fire(args, kwargs))
        task.add_done_callback(lambda t: _transfer(t, waiter))

    async def _fire(self, args: tuple, kwargs: dict) -> Any:
        self.state.last_fired = asyncio.get_running_loop().time()
        self.state.fired_count += 1
        logger.info(f"Firing debounced {getattr(self.action, '__name__', 'action')}")
        return await self.action(*args, **kwargs)


def _transfer(task: asyncio.Task, waiter: asyncio.Future) -> None:
    if task.cancelled():
        waiter.cancel()
        return
    exc = task.exception()
    if waiter.done():
        return
    if exc is not None:
        waiter.set_exception(exc)
    else:
        waiter.set_result(task.result())
