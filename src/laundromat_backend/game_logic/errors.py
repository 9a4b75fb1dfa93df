"""Domain failures raised by the simulation core.

Every failure is local and recoverable. Handlers raise these exceptions and
the engine converts them into structured command outcomes, so callers of the
command surface never see them escape.
"""

from __future__ import annotations

from typing import Any, ClassVar

from laundromat_backend.shared.enums import FailureReason


class SimulationError(Exception):
    """Base class for rejected commands."""

    reason: ClassVar[FailureReason]

    def __init__(self, message: str, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.detail = detail or {}


class OverloadError(SimulationError):
    """Raised when a requested load exceeds the machine capacity."""

    reason = FailureReason.OVERLOAD


class MissingLoadError(SimulationError):
    """Raised when a machine is started without any laundry loaded."""

    reason = FailureReason.MISSING_LOAD


class InsufficientStockError(SimulationError):
    """Raised when a consumable is below the amount an action requires."""

    reason = FailureReason.INSUFFICIENT_STOCK


class InsufficientFundsError(SimulationError):
    """Raised when a purchase or upgrade costs more than the current balance."""

    reason = FailureReason.INSUFFICIENT_FUNDS


class UnknownMachineError(SimulationError):
    """Raised when a command references a machine id that does not exist."""

    reason = FailureReason.UNKNOWN_MACHINE


class UnknownItemError(SimulationError):
    """Raised when a command references an inventory item id that does not exist."""

    reason = FailureReason.UNKNOWN_ITEM


class MachineBusyError(SimulationError):
    """Raised when loading or starting a machine that is not idle."""

    reason = FailureReason.MACHINE_BUSY


class InvalidAmountError(SimulationError):
    """Raised when a load or purchase amount is not a positive integer."""

    reason = FailureReason.INVALID_AMOUNT


class SimulationStoppedError(RuntimeError):
    """Raised when work is submitted to a runtime that has been stopped."""


__all__ = [
    "InsufficientFundsError",
    "InsufficientStockError",
    "InvalidAmountError",
    "MachineBusyError",
    "MissingLoadError",
    "OverloadError",
    "SimulationError",
    "SimulationStoppedError",
    "UnknownItemError",
    "UnknownMachineError",
]
