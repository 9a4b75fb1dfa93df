"""Tests for the tick timer."""

import asyncio

import pytest

from laundromat_backend.game_logic.scheduler import TickTimer


def test_tick_timer_fires_requested_number_of_ticks() -> None:
    timer = TickTimer(tick_resolution_seconds=0.0)

    async def collect() -> list[int]:
        return [signal.index async for signal in timer.ticks(max_ticks=3)]

    assert asyncio.run(collect()) == [1, 2, 3]


def test_tick_timer_can_cancel_midway() -> None:
    timer = TickTimer(tick_resolution_seconds=0.0)
    indices: list[int] = []

    async def collect() -> None:
        async for signal in timer.ticks():
            indices.append(signal.index)
            if signal.index == 2:
                timer.cancel()

    asyncio.run(collect())
    assert indices == [1, 2]


def test_tick_timer_rejects_negative_resolution() -> None:
    with pytest.raises(ValueError, match="non-negative"):
        TickTimer(tick_resolution_seconds=-1)


def test_tick_timer_period_excludes_consumer_time() -> None:
    timer = TickTimer(tick_resolution_seconds=0.1)

    async def collect() -> float:
        loop = asyncio.get_running_loop()
        started = loop.time()
        async for _signal in timer.ticks(max_ticks=5):
            await asyncio.sleep(0.08)
        return loop.time() - started

    # Five periods plus the last consumer pause, not five of each.
    assert asyncio.run(collect()) < 0.8
