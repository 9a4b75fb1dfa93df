from __future__ import annotations

import pytest
from pydantic import ValidationError

from laundromat_backend.game_logic.configuration import (
    SimulationConfiguration,
    SimulationDefaults,
    SimulationOverrides,
    build_simulation_configuration,
    get_default_simulation_configuration,
)
from laundromat_backend.shared.enums import ConsumableType, MachineType


def test_default_roster_inventory_and_reviews() -> None:
    config = SimulationConfiguration()

    assert [blueprint.id for blueprint in config.machines] == [
        "W1",
        "W2",
        "W3",
        "D1",
        "D2",
    ]
    w3 = config.machines[2]
    assert (w3.type, w3.level, w3.capacity) == (MachineType.WASHER, 2, 8)
    assert {item.type: item.quantity for item in config.inventory} == {
        ConsumableType.DETERGENT: 50,
        ConsumableType.SOFTENER: 30,
        ConsumableType.BLEACH: 20,
    }
    assert len(config.seed_reviews) == 2
    assert config.starting_money == 1000
    assert config.starting_reputation == 50


def test_defaults_are_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LAUNDROMAT_SIM_STARTING_MONEY", "2500")
    monkeypatch.setenv("LAUNDROMAT_SIM_REQUIRE_LOADING", "false")

    config = SimulationDefaults().to_config()

    assert config.starting_money == 2500
    assert config.require_loading is False
    assert config.rng_seed == 1234


def test_default_configuration_is_cached() -> None:
    assert get_default_simulation_configuration() is get_default_simulation_configuration()
    assert build_simulation_configuration() is get_default_simulation_configuration()


def test_overrides_replace_only_provided_values() -> None:
    config = build_simulation_configuration(
        SimulationOverrides(starting_money=50, capacity_per_upgrade=4)
    )

    assert config.starting_money == 50
    assert config.capacity_per_upgrade == 4
    assert config.upgrade_cost_per_level == 500


def test_overrides_are_revalidated() -> None:
    with pytest.raises(ValidationError):
        SimulationConfiguration().apply(SimulationOverrides(starting_reputation=150))


@pytest.mark.parametrize(
    "changes",
    [
        {"payment_range": (300, 150)},
        {"order_duration_range": (0, 5)},
        {"requirement_count_range": (1, 3)},
        {"customer_names": ()},
    ],
)
def test_invalid_configurations_are_rejected(changes: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        SimulationConfiguration.model_validate(changes)
