"""Pydantic models for the simulation HTTP and WebSocket contract."""

# ruff: noqa: TC001

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, RootModel

from laundromat_backend.game_logic.commands import Command, CommandOutcome
from laundromat_backend.game_logic.economy import EconomyLedger
from laundromat_backend.game_logic.engine import SimulationSnapshot
from laundromat_backend.game_logic.inventory import InventoryItem
from laundromat_backend.game_logic.reviews import Review
from laundromat_backend.game_logic.state import Machine
from laundromat_backend.shared.events import OrderSettledEvent, TickCompletedEvent


class MachinesResponse(BaseModel):
    """Current machine roster."""

    machines: list[Machine]


class InventoryResponse(BaseModel):
    """Current consumable stock."""

    items: list[InventoryItem]


class ReviewsResponse(BaseModel):
    """Review feed, newest first."""

    reviews: list[Review]


class EconomyResponse(BaseModel):
    """Money, reputation and customer count."""

    economy: EconomyLedger


class CommandBody(RootModel[Command]):
    """HTTP body carrying a single player command."""


class CommandRequest(BaseModel):
    """Player command sent over the socket."""

    type: Literal["command"]
    command: Command


class StateRequest(BaseModel):
    """Ad-hoc snapshot request."""

    type: Literal["state"]


class HeartbeatRequest(BaseModel):
    """Heartbeat message for connection keep-alive."""

    type: Literal["heartbeat"]
    nonce: str | None = None


InboundWsMessage = Annotated[
    CommandRequest | StateRequest | HeartbeatRequest,
    Field(discriminator="type"),
]


class StateResponse(BaseModel):
    """Full snapshot, sent on connect and on request."""

    type: Literal["state"] = "state"
    snapshot: SimulationSnapshot


class CommandResultResponse(BaseModel):
    """Outcome of a command submitted by this connection."""

    type: Literal["command_result"] = "command_result"
    outcome: CommandOutcome


class TickResponse(BaseModel):
    """Streamed once per committed tick."""

    type: Literal["tick"] = "tick"
    event: TickCompletedEvent


class OrderSettledResponse(BaseModel):
    """Streamed for every settled order."""

    type: Literal["order_settled"] = "order_settled"
    event: OrderSettledEvent


class HeartbeatAckResponse(BaseModel):
    """Reply to a heartbeat."""

    type: Literal["heartbeat_ack"] = "heartbeat_ack"
    nonce: str | None = None


class ErrorResponse(BaseModel):
    """Structured error payload."""

    type: Literal["error"] = "error"
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


OutboundWsMessage = Annotated[
    StateResponse
    | CommandResultResponse
    | TickResponse
    | OrderSettledResponse
    | HeartbeatAckResponse
    | ErrorResponse,
    Field(discriminator="type"),
]


__all__ = [
    "CommandBody",
    "CommandRequest",
    "CommandResultResponse",
    "EconomyResponse",
    "ErrorResponse",
    "HeartbeatAckResponse",
    "HeartbeatRequest",
    "InboundWsMessage",
    "InventoryResponse",
    "MachinesResponse",
    "OrderSettledResponse",
    "OutboundWsMessage",
    "ReviewsResponse",
    "StateRequest",
    "StateResponse",
    "TickResponse",
]
