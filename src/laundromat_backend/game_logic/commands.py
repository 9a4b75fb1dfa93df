"""Player command models, outcomes and handler wiring."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Annotated, Any, Literal, Protocol, runtime_checkable

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

from laundromat_backend.game_logic.state import SimulationState  # noqa: TC001
from laundromat_backend.shared.enums import CommandKind, FailureReason

if TYPE_CHECKING:
    from laundromat_backend.game_logic.errors import SimulationError


class LoadLaundryCommand(BaseModel):
    """Put *amount* kg of laundry into an idle machine."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["load_laundry"] = "load_laundry"
    machine_id: str
    amount: int


class StartMachineCommand(BaseModel):
    """Start an order on an idle machine."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["start_machine"] = "start_machine"
    machine_id: str


class BuyInventoryCommand(BaseModel):
    """Buy *amount* units of an inventory item."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["buy_inventory"] = "buy_inventory"
    item_id: str
    amount: int


class UpgradeMachineCommand(BaseModel):
    """Raise a machine by one level."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["upgrade_machine"] = "upgrade_machine"
    machine_id: str


Command = Annotated[
    LoadLaundryCommand
    | StartMachineCommand
    | BuyInventoryCommand
    | UpgradeMachineCommand,
    Field(discriminator="kind"),
]


class CommandOutcome(BaseModel):
    """Structured result of a command: a committed delta or a named failure."""

    model_config = ConfigDict(frozen=True)

    command: CommandKind
    success: bool
    reason: FailureReason | None = None
    message: str | None = None
    detail: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _validate_reason(self) -> CommandOutcome:
        """Ensure exactly the failed outcomes carry a reason."""
        if self.success == (self.reason is not None):
            msg = "Failed outcomes must name a reason; successful ones must not."
            raise ValueError(msg)
        return self

    @classmethod
    def succeeded(
        cls, command: CommandKind, detail: Mapping[str, Any]
    ) -> CommandOutcome:
        """Build a successful outcome carrying the applied delta."""
        return cls(command=command, success=True, detail=dict(detail))

    @classmethod
    def failed(cls, command: CommandKind, error: SimulationError) -> CommandOutcome:
        """Build a failed outcome from a rejected command."""
        return cls(
            command=command,
            success=False,
            reason=error.reason,
            message=str(error),
            detail=dict(error.detail),
        )


class HandlerResult(BaseModel):
    """State produced by a handler together with the delta it reports."""

    model_config = ConfigDict(frozen=True)

    state: SimulationState
    detail: dict[str, Any] = Field(default_factory=dict)


@runtime_checkable
class CommandHandler(Protocol):
    """Protocol implemented by every command handler."""

    def handle(self, command: Any, state: SimulationState) -> HandlerResult:
        """Apply *command* to *state*, raising ``SimulationError`` on rejection."""


class CommandHandlers(BaseModel):
    """Container binding one handler to each command kind."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    load_laundry: CommandHandler
    start_machine: CommandHandler
    buy_inventory: CommandHandler
    upgrade_machine: CommandHandler

    def as_mapping(
        self,
    ) -> Mapping[CommandKind, Callable[[Any, SimulationState], HandlerResult]]:
        """Return the handler callables keyed by command kind."""
        return {
            CommandKind.LOAD_LAUNDRY: self.load_laundry.handle,
            CommandKind.START_MACHINE: self.start_machine.handle,
            CommandKind.BUY_INVENTORY: self.buy_inventory.handle,
            CommandKind.UPGRADE_MACHINE: self.upgrade_machine.handle,
        }


__all__ = [
    "BuyInventoryCommand",
    "Command",
    "CommandHandler",
    "CommandHandlers",
    "CommandOutcome",
    "HandlerResult",
    "LoadLaundryCommand",
    "StartMachineCommand",
    "UpgradeMachineCommand",
]
