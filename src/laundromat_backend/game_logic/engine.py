"""Simulation engine owning the laundromat state and its transitions."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Iterable
from typing import Any

from pydantic import BaseModel, Field, TypeAdapter
from pydantic.config import ConfigDict

from laundromat_backend.game_logic.commands import (
    BuyInventoryCommand,
    Command,
    CommandHandlers,
    CommandOutcome,
    LoadLaundryCommand,
    StartMachineCommand,
    UpgradeMachineCommand,
)
from laundromat_backend.game_logic.configuration import (
    SimulationConfiguration,
    get_default_simulation_configuration,
)
from laundromat_backend.game_logic.customers import (
    Clock,
    CustomerGenerator,
    TimeDerivedIds,
    utc_clock,
)
from laundromat_backend.game_logic.economy import EconomyLedger
from laundromat_backend.game_logic.errors import SimulationError
from laundromat_backend.game_logic.handlers import (
    TickHandlerImpl,
    TickResult,
    build_default_handlers,
)
from laundromat_backend.game_logic.inventory import InventoryItem, InventoryStore
from laundromat_backend.game_logic.reviews import Review, ReviewFeed
from laundromat_backend.game_logic.state import (
    Machine,
    MachineRegistry,
    SimulationState,
)
from laundromat_backend.shared.enums import CommandKind
from laundromat_backend.shared.events import (
    JournalEntry,
    OrderSettledEvent,
    SimulationEvent,
    TickCompletedEvent,
)
from laundromat_backend.shared.rng import DeterministicRandomService

logger = logging.getLogger(__name__)

EventListener = Callable[[SimulationEvent], None]

COMMAND_ADAPTER: TypeAdapter[Command] = TypeAdapter(Command)


class SimulationSnapshot(BaseModel):
    """Read-only view of everything the presentation layer may query."""

    model_config = ConfigDict(frozen=True)

    ticks_elapsed: int = Field(..., ge=0)
    machines: tuple[Machine, ...]
    economy: EconomyLedger
    inventory: tuple[InventoryItem, ...]
    reviews: tuple[Review, ...]


def create_initial_state(configuration: SimulationConfiguration) -> SimulationState:
    """Build the starting state described by *configuration*."""
    machines = tuple(
        Machine(
            id=blueprint.id,
            type=blueprint.type,
            level=blueprint.level,
            capacity=blueprint.capacity,
        )
        for blueprint in configuration.machines
    )
    return SimulationState(
        machines=MachineRegistry(machines=machines),
        economy=EconomyLedger(
            money=configuration.starting_money,
            reputation=configuration.starting_reputation,
            reputation_ceiling=configuration.reputation_ceiling,
        ),
        inventory=InventoryStore(items=configuration.inventory),
        reviews=ReviewFeed(
            entries=configuration.seed_reviews,
            limit=configuration.review_feed_limit,
        ),
    )


class SimulationEngine:
    """Apply player commands and ticks to an explicitly owned state.

    Every transition is computed on immutable models and committed only when
    it succeeds, so a rejected command leaves the state object untouched. The
    engine is synchronous; serialising access is the caller's concern (see
    :class:`~laundromat_backend.game_logic.runtime.SimulationRuntime`).
    """

    def __init__(  # noqa: PLR0913
        self,
        configuration: SimulationConfiguration | None = None,
        *,
        rng_service: DeterministicRandomService | None = None,
        clock: Clock = utc_clock,
        handlers: CommandHandlers | None = None,
        tick_handler: TickHandlerImpl | None = None,
        state: SimulationState | None = None,
    ) -> None:
        self._configuration = configuration or get_default_simulation_configuration()
        self._rng = rng_service or DeterministicRandomService(
            self._configuration.rng_seed
        )
        generator = CustomerGenerator(
            self._configuration, rng_service=self._rng, clock=clock
        )
        self._handlers = handlers or build_default_handlers(
            self._configuration, generator=generator, rng_service=self._rng
        )
        self._dispatch_table = self._handlers.as_mapping()
        self._tick_handler = tick_handler or TickHandlerImpl(
            configuration=self._configuration,
            rng_service=self._rng,
            review_ids=TimeDerivedIds("R", clock=clock),
        )
        # Committed state and tick count, always replaced together.
        self._head: tuple[SimulationState, int] = (
            state or create_initial_state(self._configuration),
            0,
        )
        self._journal: deque[JournalEntry] = deque(
            maxlen=self._configuration.journal_limit
        )
        self._listeners: list[EventListener] = []

    @property
    def configuration(self) -> SimulationConfiguration:
        """Rules the engine was built with."""
        return self._configuration

    @property
    def state(self) -> SimulationState:
        """Currently committed simulation state."""
        return self._head[0]

    @property
    def machines(self) -> tuple[Machine, ...]:
        """Machines in roster order."""
        return self._head[0].machines.machines

    @property
    def economy(self) -> EconomyLedger:
        """Money, reputation and customer count."""
        return self._head[0].economy

    @property
    def inventory(self) -> tuple[InventoryItem, ...]:
        """Consumable stock."""
        return self._head[0].inventory.items

    @property
    def reviews(self) -> tuple[Review, ...]:
        """Reviews, newest first."""
        return self._head[0].reviews.entries

    @property
    def ticks_elapsed(self) -> int:
        """Number of ticks applied so far."""
        return self._head[1]

    @property
    def journal(self) -> tuple[JournalEntry, ...]:
        """Bounded journal of command outcomes and settlements, oldest first."""
        return tuple(self._journal)

    def snapshot(self) -> SimulationSnapshot:
        """Return the full query surface as one immutable model."""
        state, ticks_elapsed = self._head
        return SimulationSnapshot(
            ticks_elapsed=ticks_elapsed,
            machines=state.machines.machines,
            economy=state.economy,
            inventory=state.inventory.items,
            reviews=state.reviews.entries,
        )

    def subscribe(self, listener: EventListener) -> None:
        """Register *listener* for tick and settlement events."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        """Stop delivering events to *listener*."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def dispatch(self, command: Command | dict[str, Any]) -> CommandOutcome:
        """Apply *command* and return its structured outcome."""
        if isinstance(command, dict):
            command = COMMAND_ADAPTER.validate_python(command)
        kind = CommandKind(command.kind)
        handler = self._dispatch_table[kind]
        state, ticks_elapsed = self._head
        try:
            result = handler(command, state)
        except SimulationError as exc:
            outcome = CommandOutcome.failed(kind, exc)
            logger.debug("Rejected %s: %s", kind.value, exc)
        else:
            self._head = (result.state, ticks_elapsed)
            outcome = CommandOutcome.succeeded(kind, result.detail)
        self._record(
            "command_applied" if outcome.success else "command_rejected",
            message=outcome.message,
            payload=outcome.model_dump(mode="json", exclude={"message"}),
        )
        return outcome

    def load_laundry(self, machine_id: str, amount: int) -> CommandOutcome:
        """Put *amount* kg of laundry into machine *machine_id*."""
        return self.dispatch(LoadLaundryCommand(machine_id=machine_id, amount=amount))

    def start_machine(self, machine_id: str) -> CommandOutcome:
        """Start an order on machine *machine_id*."""
        return self.dispatch(StartMachineCommand(machine_id=machine_id))

    def buy_inventory_item(self, item_id: str, amount: int) -> CommandOutcome:
        """Buy *amount* units of inventory item *item_id*."""
        return self.dispatch(BuyInventoryCommand(item_id=item_id, amount=amount))

    def upgrade_machine(self, machine_id: str) -> CommandOutcome:
        """Upgrade machine *machine_id* by one level."""
        return self.dispatch(UpgradeMachineCommand(machine_id=machine_id))

    def tick(self) -> TickResult:
        """Advance every running machine once and publish the resulting events."""
        state, ticks_elapsed = self._head
        tick_index = ticks_elapsed + 1
        result = self._tick_handler.handle(state, tick_index=tick_index)
        self._head = (result.state, tick_index)

        events: list[SimulationEvent] = []
        for settlement in result.settlements:
            event = OrderSettledEvent(
                tick_index=tick_index,
                machine_id=settlement.machine_id,
                customer_id=settlement.customer.id,
                customer_name=settlement.customer.name,
                payment=settlement.quote.payment,
                final_satisfaction=settlement.quote.final_satisfaction,
                reputation_delta=settlement.quote.reputation_delta,
                review_id=settlement.review.id,
            )
            logger.info(
                "Order on %s settled: %s paid %d",
                event.machine_id,
                event.customer_name,
                event.payment,
            )
            self._record(
                event.type,
                message=f"{event.customer_name} paid {event.payment}",
                payload=event.model_dump(mode="json", exclude={"occurred_at"}),
            )
            events.append(event)
        events.append(
            TickCompletedEvent(
                tick_index=tick_index,
                running_machines=result.running_machines,
                settled_orders=len(result.settlements),
            )
        )
        logger.debug(
            "Tick %d: %d running, %d settled",
            tick_index,
            result.running_machines,
            len(result.settlements),
        )
        self._publish(events)
        return result

    def _record(
        self, event_type: str, *, message: str | None, payload: dict[str, Any]
    ) -> None:
        self._journal.append(
            JournalEntry(
                tick_index=self._head[1],
                event_type=event_type,
                message=message,
                payload=payload,
            )
        )

    def _publish(self, events: Iterable[SimulationEvent]) -> None:
        for event in events:
            for listener in list(self._listeners):
                listener(event)


__all__ = [
    "COMMAND_ADAPTER",
    "EventListener",
    "SimulationEngine",
    "SimulationSnapshot",
    "create_initial_state",
]
