"""Shared enumerations used across the backend."""

from enum import StrEnum


class MachineType(StrEnum):
    """Kinds of machines installed in the laundromat."""

    WASHER = "washer"
    DRYER = "dryer"


class MachineStatus(StrEnum):
    """Lifecycle status of a single machine."""

    IDLE = "idle"
    RUNNING = "running"
    # Reserved for fault injection; no transition reaches it yet.
    MAINTENANCE = "maintenance"


class ConsumableType(StrEnum):
    """Consumables stocked in the inventory."""

    DETERGENT = "detergent"
    SOFTENER = "softener"
    BLEACH = "bleach"


class CommandKind(StrEnum):
    """Player commands accepted by the simulation engine."""

    LOAD_LAUNDRY = "load_laundry"
    START_MACHINE = "start_machine"
    BUY_INVENTORY = "buy_inventory"
    UPGRADE_MACHINE = "upgrade_machine"


class FailureReason(StrEnum):
    """Named reasons a command can be rejected with."""

    OVERLOAD = "overload"
    MISSING_LOAD = "missing_load"
    INSUFFICIENT_STOCK = "insufficient_stock"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    UNKNOWN_MACHINE = "unknown_machine"
    UNKNOWN_ITEM = "unknown_item"
    MACHINE_BUSY = "machine_busy"
    INVALID_AMOUNT = "invalid_amount"
