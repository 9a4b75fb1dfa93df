"""Fixed-period tick driver."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator  # noqa: TC003
from datetime import UTC, datetime

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

DEFAULT_TICK_SECONDS = 1.0


class TickSignal(BaseModel):
    """One firing of the tick timer."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=1)
    fired_at: datetime


class TickTimer:
    """Asynchronous periodic timer yielding one signal per period."""

    def __init__(self, *, tick_resolution_seconds: float = DEFAULT_TICK_SECONDS) -> None:
        if tick_resolution_seconds < 0:
            msg = "Tick resolution must be non-negative."
            raise ValueError(msg)

        self._resolution = tick_resolution_seconds
        self._cancel_event: asyncio.Event | None = None

    @property
    def resolution(self) -> float:
        """Seconds between two signals."""
        return self._resolution

    async def ticks(self, *, max_ticks: int | None = None) -> AsyncIterator[TickSignal]:
        """Yield a signal after every period until cancelled or *max_ticks* fired."""
        if max_ticks is not None and max_ticks < 0:
            msg = "max_ticks must be non-negative."
            raise ValueError(msg)

        loop = asyncio.get_running_loop()
        cancel_event = asyncio.Event()
        self._cancel_event = cancel_event
        started = loop.time()
        fired = 0

        while max_ticks is None or fired < max_ticks:
            # Deadlines are fixed multiples of the period from the first call.
            deadline = started + (fired + 1) * self._resolution
            timeout = max(0.0, deadline - loop.time())
            try:
                await asyncio.wait_for(cancel_event.wait(), timeout=timeout)
            except TimeoutError:
                fired += 1
                yield TickSignal(index=fired, fired_at=datetime.now(tz=UTC))
                continue

            if cancel_event.is_set():
                break

        self._cancel_event = None

    def cancel(self) -> None:
        """Stop the active tick stream, if any."""
        if self._cancel_event is not None:
            self._cancel_event.set()


__all__ = ["DEFAULT_TICK_SECONDS", "TickSignal", "TickTimer"]
