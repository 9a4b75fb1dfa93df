"""Shared utilities, shared models and cross-cutting helpers for the backend."""

from laundromat_backend.shared.enums import (
    CommandKind,
    ConsumableType,
    FailureReason,
    MachineStatus,
    MachineType,
)
from laundromat_backend.shared.events import (
    JournalEntry,
    OrderSettledEvent,
    SimulationEvent,
    TickCompletedEvent,
)
from laundromat_backend.shared.rng import DeterministicRandomService

__all__ = [
    "CommandKind",
    "ConsumableType",
    "DeterministicRandomService",
    "FailureReason",
    "JournalEntry",
    "MachineStatus",
    "MachineType",
    "OrderSettledEvent",
    "SimulationEvent",
    "TickCompletedEvent",
]
