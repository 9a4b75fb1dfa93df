"""Tests for the single-writer simulation runtime."""

from __future__ import annotations

import asyncio

import pytest

from laundromat_backend.game_logic.commands import (
    LoadLaundryCommand,
    StartMachineCommand,
)
from laundromat_backend.game_logic.configuration import SimulationConfiguration
from laundromat_backend.game_logic.engine import SimulationEngine
from laundromat_backend.game_logic.errors import SimulationStoppedError
from laundromat_backend.game_logic.runtime import SimulationRuntime
from laundromat_backend.shared.enums import FailureReason
from laundromat_backend.shared.events import (
    OrderSettledEvent,
    SimulationEvent,
    TickCompletedEvent,
)


def build_engine(**changes: object) -> SimulationEngine:
    return SimulationEngine(
        SimulationConfiguration.model_validate({"rng_seed": 3, **changes})
    )


def test_commands_are_applied_in_submission_order() -> None:
    engine = build_engine()

    async def scenario() -> list[bool]:
        runtime = SimulationRuntime(engine)
        await runtime.start(run_timer=False)
        outcomes = await asyncio.gather(
            runtime.submit(LoadLaundryCommand(machine_id="W1", amount=3)),
            runtime.submit(StartMachineCommand(machine_id="W1")),
            runtime.submit(LoadLaundryCommand(machine_id="W1", amount=1)),
        )
        await runtime.stop()
        return [outcome.success for outcome in outcomes]

    assert asyncio.run(scenario()) == [True, True, False]
    assert engine.state.machines.get("W1").is_running


def test_rejected_command_resolves_with_reason() -> None:
    engine = build_engine()

    async def scenario() -> FailureReason | None:
        runtime = SimulationRuntime(engine)
        await runtime.start(run_timer=False)
        outcome = await runtime.submit(LoadLaundryCommand(machine_id="W1", amount=9))
        await runtime.stop()
        return outcome.reason

    assert asyncio.run(scenario()) is FailureReason.OVERLOAD


def test_events_are_broadcast_to_listeners() -> None:
    engine = build_engine(require_loading=False, order_duration_range=(1, 2))
    received: list[SimulationEvent] = []

    async def listener(event: SimulationEvent) -> None:
        received.append(event)

    async def scenario() -> None:
        runtime = SimulationRuntime(engine)
        runtime.add_listener(listener)
        await runtime.start(run_timer=False)
        await runtime.submit(StartMachineCommand(machine_id="D1"))
        await runtime.request_tick()
        await runtime.request_tick()
        await runtime.stop()

    asyncio.run(scenario())

    assert isinstance(received[0], OrderSettledEvent)
    assert received[0].machine_id == "D1"
    assert isinstance(received[1], TickCompletedEvent)
    assert received[1].settled_orders == 1


def test_failing_listener_is_dropped() -> None:
    engine = build_engine()
    calls: list[int] = []

    async def broken(event: SimulationEvent) -> None:
        calls.append(event.tick_index)
        msg = "socket closed"
        raise RuntimeError(msg)

    async def scenario() -> None:
        runtime = SimulationRuntime(engine)
        runtime.add_listener(broken)
        await runtime.start(run_timer=False)
        await runtime.request_tick()
        await runtime.request_tick()
        await runtime.request_tick()
        await runtime.stop()

    asyncio.run(scenario())

    assert calls == [1]
    assert engine.ticks_elapsed == 3


def test_timer_drives_ticks() -> None:
    engine = build_engine()

    async def scenario() -> None:
        runtime = SimulationRuntime(engine, tick_interval_seconds=0.0)
        await runtime.start()

        async def wait_for_ticks() -> None:
            while engine.ticks_elapsed < 3:
                await asyncio.sleep(0)

        await asyncio.wait_for(wait_for_ticks(), timeout=5)
        await runtime.stop()

    asyncio.run(scenario())
    assert engine.ticks_elapsed >= 3


def test_no_work_is_applied_after_stop() -> None:
    engine = build_engine()

    async def scenario() -> None:
        runtime = SimulationRuntime(engine)
        await runtime.start(run_timer=False)
        pending = asyncio.create_task(
            runtime.submit(LoadLaundryCommand(machine_id="W1", amount=3))
        )
        await runtime.stop()
        assert not runtime.is_running
        with pytest.raises(SimulationStoppedError):
            await pending
        with pytest.raises(SimulationStoppedError):
            await runtime.submit(LoadLaundryCommand(machine_id="W1", amount=3))
        with pytest.raises(SimulationStoppedError):
            await runtime.start()

    asyncio.run(scenario())
    assert engine.state.machines.get("W1").laundry_load == 0
    assert engine.ticks_elapsed == 0


def test_worker_survives_unexpected_error() -> None:
    engine = build_engine()

    def exploding(event: SimulationEvent) -> None:
        msg = f"listener failed on tick {event.tick_index}"
        raise RuntimeError(msg)

    engine.subscribe(exploding)

    async def scenario() -> tuple[FailureReason | None, bool]:
        runtime = SimulationRuntime(engine)
        await runtime.start(run_timer=False)
        with pytest.raises(RuntimeError):
            await runtime.request_tick()
        outcome = await runtime.submit(StartMachineCommand(machine_id="W1"))
        running = runtime.is_running
        await asyncio.wait_for(runtime.stop(), timeout=5)
        return outcome.reason, running

    reason, running = asyncio.run(scenario())

    assert reason is FailureReason.MISSING_LOAD
    assert running
    assert engine.ticks_elapsed == 1
