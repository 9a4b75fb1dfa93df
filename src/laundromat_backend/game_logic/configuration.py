"""Simulation configuration objects for a laundromat session."""

from __future__ import annotations

from datetime import UTC, datetime
from functools import cache

from pydantic import BaseModel, Field, PositiveInt, model_validator
from pydantic.config import ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from laundromat_backend.game_logic.inventory import InventoryItem
from laundromat_backend.game_logic.reviews import DEFAULT_FEED_LIMIT, Review
from laundromat_backend.shared.enums import ConsumableType, MachineType

IntRange = tuple[int, int]

DEFAULT_CUSTOMER_NAMES: tuple[str, ...] = (
    "Maria",
    "Ivan",
    "Elena",
    "Dmitry",
    "Olga",
    "Sergey",
    "Anastasia",
    "Andrey",
)

DEFAULT_REQUIREMENTS: tuple[str, ...] = (
    "Delicate wash",
    "Quick cycle",
    "Stain removal",
    "Eco mode",
    "Bleaching",
    "Maximum load",
)


class MachineBlueprint(BaseModel):
    """Starting definition of one machine in the roster."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    type: MachineType
    level: PositiveInt = 1
    capacity: int = Field(default=5, ge=0)


def _default_roster() -> tuple[MachineBlueprint, ...]:
    return (
        MachineBlueprint(id="W1", type=MachineType.WASHER),
        MachineBlueprint(id="W2", type=MachineType.WASHER),
        MachineBlueprint(id="W3", type=MachineType.WASHER, level=2, capacity=8),
        MachineBlueprint(id="D1", type=MachineType.DRYER),
        MachineBlueprint(id="D2", type=MachineType.DRYER),
    )


def _default_inventory() -> tuple[InventoryItem, ...]:
    return (
        InventoryItem(
            id="1",
            type=ConsumableType.DETERGENT,
            quantity=50,
            price=100,
            name="Detergent",
        ),
        InventoryItem(
            id="2",
            type=ConsumableType.SOFTENER,
            quantity=30,
            price=150,
            name="Softener",
        ),
        InventoryItem(
            id="3", type=ConsumableType.BLEACH, quantity=20, price=120, name="Bleach"
        ),
    )


def _default_reviews() -> tuple[Review, ...]:
    epoch = datetime(2025, 1, 1, tzinfo=UTC)
    return (
        Review(
            id="1",
            customer_name="Anna M.",
            rating=5,
            comment="Excellent service! The laundry is perfectly clean",
            time="2 hours ago",
            created_at=epoch,
        ),
        Review(
            id="2",
            customer_name="Petr K.",
            rating=4,
            comment="Fast and thorough, but more machines would be nice",
            time="5 hours ago",
            created_at=epoch,
        ),
    )


class SimulationDefaults(BaseSettings):
    """Load default simulation parameters from the environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LAUNDROMAT_SIM_",
        extra="ignore",
    )

    starting_money: int = 1000
    starting_reputation: int = Field(default=50, ge=0)
    reputation_ceiling: int = Field(default=100, ge=0)
    upgrade_cost_per_level: int = Field(default=500, ge=0)
    capacity_per_upgrade: int = Field(default=3, ge=0)
    satisfaction_bonus_per_level: int = Field(default=5, ge=0)
    kg_per_detergent_unit: PositiveInt = 2
    review_feed_limit: PositiveInt = DEFAULT_FEED_LIMIT
    journal_limit: PositiveInt = 500
    require_loading: bool = True
    resample_progress_reference: bool = False
    rng_seed: int | None = Field(default=None)

    def to_config(self) -> SimulationConfiguration:
        """Convert defaults into an immutable configuration object."""
        return SimulationConfiguration.model_validate(self.model_dump())


class SimulationConfiguration(BaseModel):
    """Immutable representation of the rules and starting conditions of a session."""

    model_config = ConfigDict(frozen=True)

    starting_money: int = 1000
    starting_reputation: int = Field(default=50, ge=0)
    reputation_ceiling: int = Field(default=100, ge=0)
    upgrade_cost_per_level: int = Field(default=500, ge=0)
    capacity_per_upgrade: int = Field(default=3, ge=0)
    satisfaction_bonus_per_level: int = Field(default=5, ge=0)
    satisfaction_per_star: PositiveInt = 20
    kg_per_detergent_unit: PositiveInt = 2
    review_feed_limit: PositiveInt = DEFAULT_FEED_LIMIT
    journal_limit: PositiveInt = 500
    require_loading: bool = True
    resample_progress_reference: bool = False
    rng_seed: int | None = None

    customer_names: tuple[str, ...] = DEFAULT_CUSTOMER_NAMES
    customer_requirements: tuple[str, ...] = DEFAULT_REQUIREMENTS
    requirement_count_range: IntRange = (1, 2)
    payment_range: IntRange = (150, 300)
    laundry_amount_range: IntRange = (2, 6)
    order_duration_range: IntRange = (30, 60)

    positive_review_threshold: int = Field(default=80, ge=0, le=100)
    positive_review_comment: str = "Excellent quality!"
    neutral_review_comment: str = "Good, but could be better"

    machines: tuple[MachineBlueprint, ...] = Field(default_factory=_default_roster)
    inventory: tuple[InventoryItem, ...] = Field(default_factory=_default_inventory)
    seed_reviews: tuple[Review, ...] = Field(default_factory=_default_reviews)

    @model_validator(mode="after")
    def _validate_pools_and_ranges(self) -> SimulationConfiguration:
        """Ensure pools are populated and every half-open range is non-empty."""
        if not self.customer_names or not self.customer_requirements:
            msg = "Customer name and requirement pools must not be empty."
            raise ValueError(msg)
        for label, (low, high) in (
            ("payment_range", self.payment_range),
            ("laundry_amount_range", self.laundry_amount_range),
            ("order_duration_range", self.order_duration_range),
        ):
            if low < 0 or high <= low:
                msg = f"{label} must be a non-empty range of non-negative integers."
                raise ValueError(msg)
        if self.order_duration_range[0] < 1:
            msg = "Orders must last at least one tick."
            raise ValueError(msg)
        low, high = self.requirement_count_range
        if low < 1 or high < low or high > 2:  # noqa: PLR2004
            msg = "requirement_count_range must lie within [1, 2]."
            raise ValueError(msg)
        if self.starting_reputation > self.reputation_ceiling:
            msg = "Starting reputation cannot exceed the reputation ceiling."
            raise ValueError(msg)
        ids = [blueprint.id for blueprint in self.machines]
        if len(ids) != len(set(ids)):
            msg = "Machine roster must not contain duplicate ids."
            raise ValueError(msg)
        if len(self.seed_reviews) > self.review_feed_limit:
            msg = "Seed reviews exceed the review feed limit."
            raise ValueError(msg)
        return self

    def apply(self, overrides: SimulationOverrides | None = None) -> SimulationConfiguration:
        """Return a copy of the configuration with *overrides* applied."""
        if overrides is None:
            return self
        return overrides.apply(self)


class SimulationOverrides(BaseModel):
    """Optional session-specific overrides for simulation settings."""

    model_config = ConfigDict(frozen=True)

    starting_money: int | None = None
    starting_reputation: int | None = Field(default=None, ge=0)
    upgrade_cost_per_level: int | None = Field(default=None, ge=0)
    capacity_per_upgrade: int | None = Field(default=None, ge=0)
    require_loading: bool | None = None
    resample_progress_reference: bool | None = None
    rng_seed: int | None = None
    machines: tuple[MachineBlueprint, ...] | None = None
    inventory: tuple[InventoryItem, ...] | None = None
    seed_reviews: tuple[Review, ...] | None = None

    def apply(self, config: SimulationConfiguration) -> SimulationConfiguration:
        """Return a copy of *config* with the provided overrides applied."""
        updates = {
            name: value
            for name, value in dict(self).items()
            if value is not None
        }
        return SimulationConfiguration.model_validate({**dict(config), **updates})


@cache
def get_default_simulation_configuration() -> SimulationConfiguration:
    """Return the cached default simulation configuration."""
    return SimulationDefaults().to_config()


def build_simulation_configuration(
    overrides: SimulationOverrides | None = None,
) -> SimulationConfiguration:
    """Construct a configuration for a session, applying optional overrides."""
    defaults = get_default_simulation_configuration()
    if overrides is None:
        return defaults
    return overrides.apply(defaults)


__all__ = [
    "MachineBlueprint",
    "SimulationConfiguration",
    "SimulationDefaults",
    "SimulationOverrides",
    "build_simulation_configuration",
    "get_default_simulation_configuration",
]
