"""Core rules and mechanics that drive the laundromat simulation."""

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
    MachineBlueprint,
    SimulationConfiguration,
    SimulationDefaults,
    SimulationOverrides,
    build_simulation_configuration,
    get_default_simulation_configuration,
)
from laundromat_backend.game_logic.customers import CustomerGenerator
from laundromat_backend.game_logic.economy import EconomyLedger, SettlementQuote
from laundromat_backend.game_logic.engine import (
    SimulationEngine,
    SimulationSnapshot,
    create_initial_state,
)
from laundromat_backend.game_logic.errors import (
    InsufficientFundsError,
    InsufficientStockError,
    InvalidAmountError,
    MachineBusyError,
    MissingLoadError,
    OverloadError,
    SimulationError,
    SimulationStoppedError,
    UnknownItemError,
    UnknownMachineError,
)
from laundromat_backend.game_logic.handlers import (
    BuyInventoryHandlerImpl,
    LoadLaundryHandlerImpl,
    OrderSettlement,
    StartMachineHandlerImpl,
    TickHandlerImpl,
    TickResult,
    UpgradeMachineHandlerImpl,
    build_default_handlers,
)
from laundromat_backend.game_logic.inventory import InventoryItem, InventoryStore
from laundromat_backend.game_logic.reviews import Review, ReviewFeed
from laundromat_backend.game_logic.runtime import SimulationRuntime
from laundromat_backend.game_logic.scheduler import TickSignal, TickTimer
from laundromat_backend.game_logic.state import (
    ActiveCustomer,
    Customer,
    Machine,
    MachineRegistry,
    NoCustomer,
    SimulationState,
)

__all__ = [
    "ActiveCustomer",
    "BuyInventoryCommand",
    "BuyInventoryHandlerImpl",
    "Command",
    "CommandHandlers",
    "CommandOutcome",
    "Customer",
    "CustomerGenerator",
    "EconomyLedger",
    "InsufficientFundsError",
    "InsufficientStockError",
    "InvalidAmountError",
    "InventoryItem",
    "InventoryStore",
    "LoadLaundryCommand",
    "LoadLaundryHandlerImpl",
    "Machine",
    "MachineBlueprint",
    "MachineBusyError",
    "MachineRegistry",
    "MissingLoadError",
    "NoCustomer",
    "OrderSettlement",
    "OverloadError",
    "Review",
    "ReviewFeed",
    "SettlementQuote",
    "SimulationConfiguration",
    "SimulationDefaults",
    "SimulationEngine",
    "SimulationError",
    "SimulationOverrides",
    "SimulationRuntime",
    "SimulationSnapshot",
    "SimulationState",
    "SimulationStoppedError",
    "StartMachineCommand",
    "StartMachineHandlerImpl",
    "TickHandlerImpl",
    "TickResult",
    "TickSignal",
    "TickTimer",
    "UnknownItemError",
    "UnknownMachineError",
    "UpgradeMachineCommand",
    "UpgradeMachineHandlerImpl",
    "build_default_handlers",
    "build_simulation_configuration",
    "create_initial_state",
    "get_default_simulation_configuration",
]
