"""Single-writer runtime serialising player commands and timer ticks."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from laundromat_backend.game_logic.errors import SimulationStoppedError
from laundromat_backend.game_logic.scheduler import TickSignal, TickTimer

if TYPE_CHECKING:
    from laundromat_backend.game_logic.commands import Command, CommandOutcome
    from laundromat_backend.game_logic.engine import SimulationEngine
    from laundromat_backend.game_logic.handlers import TickResult
    from laundromat_backend.shared.events import SimulationEvent

logger = logging.getLogger(__name__)

EventSender = Callable[["SimulationEvent"], Awaitable[None]]


@dataclass
class _CommandRequest:
    command: Command
    future: asyncio.Future[CommandOutcome]


@dataclass
class _TickRequest:
    signal: TickSignal | None = None
    future: asyncio.Future[TickResult] | None = field(default=None)


class SimulationRuntime:
    """Drive a :class:`SimulationEngine` from one worker task.

    Commands and timer ticks are put on a single queue and applied strictly
    one at a time, so a tick never interleaves with a command. Events the
    engine publishes while applying an item are broadcast to the registered
    senders once the item has been committed.
    """

    def __init__(
        self,
        engine: SimulationEngine,
        *,
        timer: TickTimer | None = None,
        tick_interval_seconds: float = 1.0,
    ) -> None:
        self._engine = engine
        self._timer = timer or TickTimer(tick_resolution_seconds=tick_interval_seconds)
        self._senders: list[EventSender] = []
        self._queue: asyncio.Queue[_CommandRequest | _TickRequest] | None = None
        self._worker: asyncio.Task[None] | None = None
        self._ticker: asyncio.Task[None] | None = None
        self._pending_events: list[SimulationEvent] = []
        self._stopped = False

    @property
    def engine(self) -> SimulationEngine:
        """Expose the underlying engine for read-only queries."""
        return self._engine

    @property
    def is_running(self) -> bool:
        """Return True while the worker accepts work."""
        return self._worker is not None and not self._stopped

    def add_listener(self, sender: EventSender) -> None:
        """Register a new outbound channel."""
        if sender not in self._senders:
            self._senders.append(sender)

    def remove_listener(self, sender: EventSender) -> None:
        """Remove an outbound channel."""
        with contextlib.suppress(ValueError):
            self._senders.remove(sender)

    async def start(self, *, run_timer: bool = True) -> None:
        """Begin applying queued work and, unless disabled, firing ticks."""
        if self._stopped:
            msg = "A stopped runtime cannot be restarted."
            raise SimulationStoppedError(msg)
        if self._worker is not None:
            return
        self._queue = asyncio.Queue()
        self._engine.subscribe(self._pending_events.append)
        self._worker = asyncio.create_task(self._work_loop())
        if run_timer:
            self._ticker = asyncio.create_task(self._tick_loop())
        logger.info("Simulation runtime started")

    async def stop(self) -> None:
        """Stop ticking and fail any work that has not been applied yet."""
        if self._stopped:
            return
        self._stopped = True
        self._timer.cancel()
        for task in (self._ticker, self._worker):
            if task is not None:
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
        self._engine.unsubscribe(self._pending_events.append)
        self._fail_pending()
        logger.info("Simulation runtime stopped")

    async def submit(self, command: Command) -> CommandOutcome:
        """Queue *command* and wait for the outcome of applying it."""
        queue = self._require_queue()
        future: asyncio.Future[CommandOutcome] = (
            asyncio.get_running_loop().create_future()
        )
        await queue.put(_CommandRequest(command=command, future=future))
        return await future

    async def request_tick(self) -> TickResult:
        """Queue one tick outside the timer and wait for it to be applied."""
        queue = self._require_queue()
        future: asyncio.Future[TickResult] = asyncio.get_running_loop().create_future()
        await queue.put(_TickRequest(future=future))
        return await future

    def _require_queue(self) -> asyncio.Queue[_CommandRequest | _TickRequest]:
        if self._stopped or self._queue is None:
            msg = "Simulation runtime is not running."
            raise SimulationStoppedError(msg)
        return self._queue

    async def _tick_loop(self) -> None:
        async for signal in self._timer.ticks():
            if self._queue is None:
                break
            await self._queue.put(_TickRequest(signal=signal))

    async def _work_loop(self) -> None:
        assert self._queue is not None  # noqa: S101
        while True:
            item = await self._queue.get()
            try:
                self._apply(item)
            except Exception as exc:  # noqa: BLE001
                logger.exception("Failed to apply %s", type(item).__name__)
                if item.future is not None and not item.future.done():
                    item.future.set_exception(exc)
            finally:
                self._queue.task_done()
            events = list(self._pending_events)
            self._pending_events.clear()
            for event in events:
                await self._broadcast(event)

    def _apply(self, item: _CommandRequest | _TickRequest) -> None:
        if isinstance(item, _CommandRequest):
            if item.future.done():
                return
            item.future.set_result(self._engine.dispatch(item.command))
            return
        result = self._engine.tick()
        if item.future is not None and not item.future.done():
            item.future.set_result(result)

    async def _broadcast(self, event: SimulationEvent) -> None:
        for sender in list(self._senders):
            try:
                await sender(event)
            except Exception:  # noqa: BLE001
                logger.warning("Dropping listener after failed delivery", exc_info=True)
                self.remove_listener(sender)

    def _fail_pending(self) -> None:
        if self._queue is None:
            return
        msg = "Simulation runtime stopped."
        while not self._queue.empty():
            item = self._queue.get_nowait()
            if item.future is not None and not item.future.done():
                item.future.set_exception(SimulationStoppedError(msg))
        self._pending_events.clear()


__all__ = ["EventSender", "SimulationRuntime"]
