from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from laundromat_backend.game_logic.commands import (
    CommandHandler,
    CommandHandlers,
    LoadLaundryCommand,
    StartMachineCommand,
    UpgradeMachineCommand,
)
from laundromat_backend.game_logic.configuration import SimulationConfiguration
from laundromat_backend.game_logic.customers import CustomerGenerator, TimeDerivedIds
from laundromat_backend.game_logic.engine import create_initial_state
from laundromat_backend.game_logic.errors import (
    InsufficientStockError,
    MissingLoadError,
)
from laundromat_backend.game_logic.handlers import (
    LoadLaundryHandlerImpl,
    StartMachineHandlerImpl,
    TickHandlerImpl,
    UpgradeMachineHandlerImpl,
    build_default_handlers,
)
from laundromat_backend.game_logic.state import Customer, SimulationState
from laundromat_backend.shared.enums import ConsumableType, MachineStatus
from laundromat_backend.shared.rng import DeterministicRandomService


def fixed_clock() -> datetime:
    return datetime(2025, 1, 1, tzinfo=UTC)


def build_start_handler(config: SimulationConfiguration) -> StartMachineHandlerImpl:
    rng = DeterministicRandomService(5)
    return StartMachineHandlerImpl(
        configuration=config,
        generator=CustomerGenerator(config, rng_service=rng, clock=fixed_clock),
        rng_service=rng,
    )


def build_tick_handler(config: SimulationConfiguration) -> TickHandlerImpl:
    return TickHandlerImpl(
        configuration=config,
        rng_service=DeterministicRandomService(5),
        review_ids=TimeDerivedIds("R", clock=fixed_clock),
    )


def running_state(
    config: SimulationConfiguration,
    *,
    satisfaction: int = 100,
    duration: int = 40,
    machine_id: str = "W1",
) -> SimulationState:
    state = create_initial_state(config)
    customer = Customer(
        id="C1-1",
        name="Elena",
        requirements=("Stain removal",),
        satisfaction=satisfaction,
        payment=200,
        laundry_amount=3,
    )
    machine = state.machines.get(machine_id).load(3).begin_order(customer, duration)
    return state.with_machine(machine)


def test_load_handler_reports_new_load() -> None:
    config = SimulationConfiguration()
    handler = LoadLaundryHandlerImpl(configuration=config)

    result = handler.handle(
        LoadLaundryCommand(machine_id="W3", amount=8), create_initial_state(config)
    )

    assert result.state.machines.get("W3").laundry_load == 8
    assert result.detail == {"machine_id": "W3", "laundry_load": 8, "capacity": 8}


def test_start_handler_consumes_detergent_by_load() -> None:
    config = SimulationConfiguration()
    state = create_initial_state(config)
    state = state.with_machine(state.machines.get("W1").load(5))

    result = build_start_handler(config).handle(
        StartMachineCommand(machine_id="W1"), state
    )

    machine = result.state.machines.get("W1")
    assert machine.status is MachineStatus.RUNNING
    assert 30 <= machine.time_left < 60
    assert result.detail["detergent_consumed"] == 3
    assert result.state.inventory.available(ConsumableType.DETERGENT) == 47
    assert result.state.economy.total_customers == 1
    assert result.detail["customer"]["id"] == "C1735689600000-1"


def test_start_handler_requires_a_load() -> None:
    config = SimulationConfiguration()

    with pytest.raises(MissingLoadError):
        build_start_handler(config).handle(
            StartMachineCommand(machine_id="W1"), create_initial_state(config)
        )


def test_start_handler_checks_detergent_stock() -> None:
    config = SimulationConfiguration()
    state = create_initial_state(config)
    state = state.with_machine(state.machines.get("W1").load(3)).with_inventory(
        state.inventory.consume(ConsumableType.DETERGENT, 49)
    )

    with pytest.raises(InsufficientStockError):
        build_start_handler(config).handle(StartMachineCommand(machine_id="W1"), state)


def test_start_handler_without_loading_is_unconditional() -> None:
    config = SimulationConfiguration(require_loading=False)

    result = build_start_handler(config).handle(
        StartMachineCommand(machine_id="D1"), create_initial_state(config)
    )

    assert result.state.machines.get("D1").is_running
    assert result.detail["detergent_consumed"] == 0
    assert result.state.inventory.available(ConsumableType.DETERGENT) == 50


def test_upgrade_handler_reports_discarded_load() -> None:
    config = SimulationConfiguration()
    state = create_initial_state(config)
    state = state.with_machine(state.machines.get("W1").load(4))

    result = UpgradeMachineHandlerImpl(configuration=config).handle(
        UpgradeMachineCommand(machine_id="W1"), state
    )

    assert result.detail["discarded_load"] == 4
    assert result.detail["cost"] == 500
    assert result.state.economy.money == 500


def test_tick_advances_running_machine() -> None:
    config = SimulationConfiguration()
    state = running_state(config, duration=40)

    result = build_tick_handler(config).handle(state, tick_index=1)

    machine = result.state.machines.get("W1")
    assert machine.time_left == 39
    assert machine.progress == pytest.approx(2.5)
    assert result.running_machines == 1
    assert result.settlements == ()


def test_tick_without_running_machines_returns_same_state() -> None:
    config = SimulationConfiguration()
    state = create_initial_state(config)

    result = build_tick_handler(config).handle(state, tick_index=1)

    assert result.state is state
    assert result.running_machines == 0


def test_tick_settles_order_on_last_unit() -> None:
    config = SimulationConfiguration()
    state = running_state(config, duration=1)

    result = build_tick_handler(config).handle(state, tick_index=1)

    machine = result.state.machines.get("W1")
    assert machine.status is MachineStatus.IDLE
    assert machine.customer is None
    assert machine.laundry_load == 0
    assert result.state.economy.money == 1200
    assert result.state.economy.reputation == 55
    review = result.state.reviews.entries[0]
    assert review.customer_name == "Elena"
    assert review.rating == 5
    assert review.comment == config.positive_review_comment
    assert review.id == "R1735689600000-1"
    (settlement,) = result.settlements
    assert settlement.quote.payment == 200


def test_settlement_with_low_satisfaction_writes_neutral_review() -> None:
    config = SimulationConfiguration()
    state = running_state(config, satisfaction=60, duration=1)

    result = build_tick_handler(config).handle(state, tick_index=1)

    (settlement,) = result.settlements
    assert settlement.quote.final_satisfaction == 65
    assert settlement.quote.payment == 130
    assert settlement.review.rating == 4
    assert settlement.review.comment == config.neutral_review_comment
    assert result.state.economy.reputation == 53


def test_resampled_reference_keeps_progress_in_bounds() -> None:
    config = SimulationConfiguration(resample_progress_reference=True)
    state = running_state(config, duration=59)
    handler = build_tick_handler(config)

    for index in range(1, 30):
        state = handler.handle(state, tick_index=index).state
        assert 0 <= state.machines.get("W1").progress <= 100


def test_default_handlers_satisfy_handler_protocol() -> None:
    config = SimulationConfiguration(rng_seed=5)
    rng = DeterministicRandomService(5)
    handlers = build_default_handlers(
        config,
        generator=CustomerGenerator(config, rng_service=rng, clock=fixed_clock),
        rng_service=rng,
    )

    assert all(
        isinstance(handler, CommandHandler)
        for handler in (
            handlers.load_laundry,
            handlers.start_machine,
            handlers.buy_inventory,
            handlers.upgrade_machine,
        )
    )

    with pytest.raises(ValidationError):
        CommandHandlers(
            load_laundry=handlers.load_laundry,
            start_machine=object(),
            buy_inventory=handlers.buy_inventory,
            upgrade_machine=handlers.upgrade_machine,
        )
