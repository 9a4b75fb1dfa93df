"""Concrete implementations of the command handlers and the tick pass."""

from __future__ import annotations

from math import ceil

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from laundromat_backend.game_logic.commands import (
    BuyInventoryCommand,
    CommandHandlers,
    HandlerResult,
    LoadLaundryCommand,
    StartMachineCommand,
    UpgradeMachineCommand,
)
from laundromat_backend.game_logic.configuration import (
    SimulationConfiguration,  # noqa: TC001
)
from laundromat_backend.game_logic.customers import CustomerGenerator, TimeDerivedIds
from laundromat_backend.game_logic.economy import SettlementQuote
from laundromat_backend.game_logic.errors import MissingLoadError
from laundromat_backend.game_logic.reviews import Review
from laundromat_backend.game_logic.state import (
    Customer,
    Machine,
    SimulationState,
)
from laundromat_backend.shared.enums import ConsumableType
from laundromat_backend.shared.rng import DeterministicRandomService


class CommandHandlerModel(BaseModel):
    """Base class for concrete handlers using Pydantic for validation."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    configuration: SimulationConfiguration


class LoadLaundryHandlerImpl(CommandHandlerModel):
    """Put laundry into an idle machine without exceeding its capacity."""

    def handle(self, command: LoadLaundryCommand, state: SimulationState) -> HandlerResult:
        """Execute the load transition for the referenced machine."""
        machine = state.machines.get(command.machine_id).load(command.amount)
        return HandlerResult(
            state=state.with_machine(machine),
            detail={
                "machine_id": machine.id,
                "laundry_load": machine.laundry_load,
                "capacity": machine.capacity,
            },
        )


class StartMachineHandlerImpl(CommandHandlerModel):
    """Attach a new customer to an idle machine and start the countdown.

    With loading required the machine must hold laundry and the detergent
    stock must cover ``ceil(load / kg_per_detergent_unit)`` units, which are
    consumed on success. Without loading the start is unconditional.
    """

    generator: CustomerGenerator
    rng_service: DeterministicRandomService

    def detergent_needed(self, machine: Machine) -> int:
        """Return the detergent units an order on *machine* consumes."""
        return ceil(machine.laundry_load / self.configuration.kg_per_detergent_unit)

    def handle(self, command: StartMachineCommand, state: SimulationState) -> HandlerResult:
        """Execute the start transition for the referenced machine."""
        machine = state.machines.get(command.machine_id)
        machine.ensure_idle()

        inventory = state.inventory
        detergent_used = 0
        if self.configuration.require_loading:
            if machine.laundry_load == 0:
                msg = f"Load laundry into machine {machine.id} first."
                raise MissingLoadError(msg, {"machine_id": machine.id})
            detergent_used = self.detergent_needed(machine)
            inventory = inventory.consume(ConsumableType.DETERGENT, detergent_used)

        customer = self.generator.generate()
        duration = self.rng_service.randrange(*self.configuration.order_duration_range)
        started = machine.begin_order(customer, duration)
        updated = (
            state.with_machine(started)
            .with_inventory(inventory)
            .with_economy(state.economy.register_customer())
        )
        return HandlerResult(
            state=updated,
            detail={
                "machine_id": started.id,
                "detergent_consumed": detergent_used,
                "duration": duration,
                "customer": customer.model_dump(mode="json"),
            },
        )


class BuyInventoryHandlerImpl(CommandHandlerModel):
    """Restock an inventory item, paying from the ledger."""

    def handle(self, command: BuyInventoryCommand, state: SimulationState) -> HandlerResult:
        """Execute the purchase of the referenced item."""
        inventory, economy, cost = state.inventory.purchase(
            command.item_id, command.amount, state.economy
        )
        item = inventory.find(command.item_id)
        return HandlerResult(
            state=state.with_inventory(inventory).with_economy(economy),
            detail={
                "item_id": item.id,
                "item_type": item.type.value,
                "amount": command.amount,
                "quantity": item.quantity,
                "cost": cost,
                "money": economy.money,
            },
        )


class UpgradeMachineHandlerImpl(CommandHandlerModel):
    """Raise a machine one level; the pending load is discarded in the process."""

    def handle(
        self, command: UpgradeMachineCommand, state: SimulationState
    ) -> HandlerResult:
        """Execute the upgrade of the referenced machine."""
        machine = state.machines.get(command.machine_id)
        cost = machine.upgrade_cost(self.configuration.upgrade_cost_per_level)
        economy = state.economy.debit(cost)
        upgraded = machine.upgrade(self.configuration.capacity_per_upgrade)
        return HandlerResult(
            state=state.with_machine(upgraded).with_economy(economy),
            detail={
                "machine_id": upgraded.id,
                "cost": cost,
                "level": upgraded.level,
                "capacity": upgraded.capacity,
                "discarded_load": machine.laundry_load,
                "money": economy.money,
            },
        )


class OrderSettlement(BaseModel):
    """Everything produced when one order finishes."""

    model_config = ConfigDict(frozen=True)

    machine_id: str
    customer: Customer
    quote: SettlementQuote
    review: Review


class TickResult(BaseModel):
    """Outcome of a single tick pass over the machine registry."""

    model_config = ConfigDict(frozen=True)

    tick_index: int = Field(..., ge=1)
    state: SimulationState
    running_machines: int = Field(..., ge=0)
    settlements: tuple[OrderSettlement, ...] = Field(default_factory=tuple)


class TickHandlerImpl(CommandHandlerModel):
    """Advance every running machine by one tick, settling finished orders."""

    rng_service: DeterministicRandomService
    review_ids: TimeDerivedIds = Field(default_factory=lambda: TimeDerivedIds("R"))

    def handle(self, state: SimulationState, *, tick_index: int) -> TickResult:
        """Apply the tick-advance or settle transition to each running machine."""
        running = state.machines.running()
        settlements: list[OrderSettlement] = []
        current = state
        for machine in running:
            if machine.time_left - 1 <= 0:
                current, settlement = self.settle(current, machine)
                settlements.append(settlement)
            else:
                advanced = machine.advance(self._reference_duration(machine))
                current = current.with_machine(advanced)
        return TickResult(
            tick_index=tick_index,
            state=current,
            running_machines=len(running),
            settlements=tuple(settlements),
        )

    def _reference_duration(self, machine: Machine) -> int:
        if self.configuration.resample_progress_reference:
            return self.rng_service.randrange(*self.configuration.order_duration_range)
        return machine.duration

    def settle(
        self, state: SimulationState, machine: Machine
    ) -> tuple[SimulationState, OrderSettlement]:
        """Pay for, review and release the order running on *machine*."""
        customer = machine.customer
        if customer is None:
            msg = f"Machine {machine.id} has no order to settle."
            raise ValueError(msg)

        config = self.configuration
        quote = SettlementQuote.for_order(
            customer,
            level=machine.level,
            bonus_per_level=config.satisfaction_bonus_per_level,
            satisfaction_per_star=config.satisfaction_per_star,
        )
        economy = state.economy.credit(quote.payment).adjust_reputation(
            quote.reputation_delta
        )
        comment = (
            config.positive_review_comment
            if quote.final_satisfaction > config.positive_review_threshold
            else config.neutral_review_comment
        )
        review = Review(
            id=self.review_ids.next_id(),
            customer_name=customer.name,
            rating=quote.rating,
            comment=comment,
        )
        updated = (
            state.with_machine(machine.release())
            .with_economy(economy)
            .with_reviews(state.reviews.record(review))
        )
        return updated, OrderSettlement(
            machine_id=machine.id, customer=customer, quote=quote, review=review
        )


def build_default_handlers(
    configuration: SimulationConfiguration,
    *,
    generator: CustomerGenerator,
    rng_service: DeterministicRandomService,
) -> CommandHandlers:
    """Wire the standard handler for every command kind."""
    return CommandHandlers(
        load_laundry=LoadLaundryHandlerImpl(configuration=configuration),
        start_machine=StartMachineHandlerImpl(
            configuration=configuration, generator=generator, rng_service=rng_service
        ),
        buy_inventory=BuyInventoryHandlerImpl(configuration=configuration),
        upgrade_machine=UpgradeMachineHandlerImpl(configuration=configuration),
    )


__all__ = [
    "BuyInventoryHandlerImpl",
    "CommandHandlerModel",
    "LoadLaundryHandlerImpl",
    "OrderSettlement",
    "StartMachineHandlerImpl",
    "TickHandlerImpl",
    "TickResult",
    "UpgradeMachineHandlerImpl",
    "build_default_handlers",
]
