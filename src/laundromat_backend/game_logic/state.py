"""Machine-centric state containers used by the game logic layer."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, PositiveInt, model_validator
from pydantic.config import ConfigDict

from laundromat_backend.game_logic.economy import EconomyLedger  # noqa: TC001
from laundromat_backend.game_logic.errors import (
    InvalidAmountError,
    MachineBusyError,
    OverloadError,
    UnknownMachineError,
)
from laundromat_backend.game_logic.inventory import InventoryStore  # noqa: TC001
from laundromat_backend.game_logic.reviews import ReviewFeed  # noqa: TC001
from laundromat_backend.shared.enums import MachineStatus, MachineType


class Customer(BaseModel):
    """Ephemeral customer request attached to a running machine."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    requirements: tuple[str, ...] = Field(..., min_length=1, max_length=2)
    satisfaction: int = Field(default=100, ge=0, le=100)
    payment: int = Field(..., ge=0)
    laundry_amount: int = Field(..., ge=0)

    @model_validator(mode="after")
    def _validate_unique_requirements(self) -> Customer:
        """Ensure requirements do not repeat."""
        if len(self.requirements) != len(set(self.requirements)):
            msg = "Customer requirements must be distinct."
            raise ValueError(msg)
        return self


class NoCustomer(BaseModel):
    """Marker for a machine without an active order."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["none"] = "none"


class ActiveCustomer(BaseModel):
    """Customer whose order currently occupies the machine."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["active"] = "active"
    customer: Customer


CustomerSlot = Annotated[NoCustomer | ActiveCustomer, Field(discriminator="kind")]


class Machine(BaseModel):
    """A single washer or dryer and its per-order mutable state."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    type: MachineType
    status: MachineStatus = MachineStatus.IDLE
    progress: float = Field(default=0.0, ge=0, le=100)
    time_left: int = Field(default=0, ge=0)
    duration: int = Field(default=0, ge=0)
    level: PositiveInt = 1
    capacity: int = Field(..., ge=0)
    laundry_load: int = Field(default=0, ge=0)
    occupant: CustomerSlot = Field(default_factory=NoCustomer)

    @model_validator(mode="after")
    def _validate_invariants(self) -> Machine:
        """Ensure load, occupancy and timers agree with the status."""
        if self.laundry_load > self.capacity:
            msg = (
                f"Machine {self.id} holds {self.laundry_load} kg, "
                f"capacity is {self.capacity} kg."
            )
            raise ValueError(msg)
        running = self.status is MachineStatus.RUNNING
        if running != isinstance(self.occupant, ActiveCustomer):
            msg = f"Machine {self.id} must have a customer exactly while running."
            raise ValueError(msg)
        if self.status is MachineStatus.IDLE and (
            self.time_left or self.progress or self.duration
        ):
            msg = f"Idle machine {self.id} cannot carry timers or progress."
            raise ValueError(msg)
        return self

    @property
    def customer(self) -> Customer | None:
        """Return the attached customer, if any."""
        if isinstance(self.occupant, ActiveCustomer):
            return self.occupant.customer
        return None

    @property
    def is_running(self) -> bool:
        """Whether an order currently occupies the machine."""
        return self.status is MachineStatus.RUNNING

    def _evolve(self, **changes: Any) -> Machine:
        return Machine.model_validate({**dict(self), **changes})

    def ensure_idle(self) -> None:
        """Raise :class:`MachineBusyError` unless the machine is idle."""
        if self.status is not MachineStatus.IDLE:
            msg = f"Machine {self.id} is {self.status.value}."
            raise MachineBusyError(
                msg, {"machine_id": self.id, "status": self.status.value}
            )

    def load(self, amount: int) -> Machine:
        """Return the machine holding *amount* kg, replacing any pending load."""
        self.ensure_idle()
        if amount <= 0:
            msg = "Load amount must be positive."
            raise InvalidAmountError(msg, {"machine_id": self.id, "amount": amount})
        if amount > self.capacity:
            msg = f"Maximum {self.capacity} kg for machine {self.id}."
            raise OverloadError(
                msg,
                {"machine_id": self.id, "amount": amount, "capacity": self.capacity},
            )
        return self._evolve(laundry_load=amount)

    def begin_order(self, customer: Customer, duration: int) -> Machine:
        """Return the machine running *customer*'s order for *duration* ticks."""
        self.ensure_idle()
        return self._evolve(
            status=MachineStatus.RUNNING,
            progress=0.0,
            time_left=duration,
            duration=duration,
            occupant=ActiveCustomer(customer=customer),
        )

    def advance(self, reference_duration: int) -> Machine:
        """Return the machine one tick further along its countdown."""
        time_left = self.time_left - 1
        if reference_duration <= 0:
            progress = 100.0
        else:
            progress = 100 - (time_left / reference_duration) * 100
        return self._evolve(
            time_left=time_left,
            progress=min(100.0, max(0.0, progress)),
        )

    def release(self) -> Machine:
        """Return the machine freed after settlement."""
        return self._evolve(
            status=MachineStatus.IDLE,
            progress=0.0,
            time_left=0,
            duration=0,
            occupant=NoCustomer(),
            laundry_load=0,
        )

    def upgrade_cost(self, cost_per_level: int) -> int:
        """Return the price of the next level."""
        return self.level * cost_per_level

    def upgrade(self, capacity_step: int) -> Machine:
        """Return the machine one level up; any pending load is discarded."""
        return self._evolve(
            level=self.level + 1,
            capacity=self.capacity + capacity_step,
            laundry_load=0,
        )


class MachineRegistry(BaseModel):
    """Fixed roster of machines, ordered as created."""

    model_config = ConfigDict(frozen=True)

    machines: tuple[Machine, ...] = Field(default_factory=tuple)

    @model_validator(mode="after")
    def _validate_unique_ids(self) -> MachineRegistry:
        """Ensure that each machine id appears at most once."""
        ids = [machine.id for machine in self.machines]
        if len(ids) != len(set(ids)):
            msg = "Machine roster must not contain duplicate ids."
            raise ValueError(msg)
        return self

    def get(self, machine_id: str) -> Machine:
        """Return the machine registered under *machine_id*."""
        for machine in self.machines:
            if machine.id == machine_id:
                return machine
        msg = f"Unknown machine '{machine_id}'."
        raise UnknownMachineError(msg, {"machine_id": machine_id})

    def replace(self, updated: Machine) -> MachineRegistry:
        """Return a registry with *updated* swapped in for the machine of the same id."""
        self.get(updated.id)
        return MachineRegistry(
            machines=tuple(
                updated if machine.id == updated.id else machine
                for machine in self.machines
            )
        )

    def running(self) -> tuple[Machine, ...]:
        """Return every machine currently running an order."""
        return tuple(machine for machine in self.machines if machine.is_running)


class SimulationState(BaseModel):
    """Aggregate container capturing every mutable simulation attribute."""

    model_config = ConfigDict(frozen=True)

    machines: MachineRegistry
    economy: EconomyLedger
    inventory: InventoryStore
    reviews: ReviewFeed

    def with_machine(self, machine: Machine) -> SimulationState:
        """Return a state with *machine* replaced in the registry."""
        return self.model_copy(update={"machines": self.machines.replace(machine)})

    def with_economy(self, ledger: EconomyLedger) -> SimulationState:
        """Return a state with the ledger replaced by *ledger*."""
        return self.model_copy(update={"economy": ledger})

    def with_inventory(self, store: InventoryStore) -> SimulationState:
        """Return a state with inventory replaced by *store*."""
        return self.model_copy(update={"inventory": store})

    def with_reviews(self, feed: ReviewFeed) -> SimulationState:
        """Return a state with the review feed replaced by *feed*."""
        return self.model_copy(update={"reviews": feed})


__all__ = [
    "ActiveCustomer",
    "Customer",
    "CustomerSlot",
    "Machine",
    "MachineRegistry",
    "NoCustomer",
    "SimulationState",
]
