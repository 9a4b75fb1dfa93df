"""Event and journal primitives shared across the backend."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class TickCompletedEvent(BaseModel):
    """Published once the tick pass over every running machine has been committed."""

    model_config = ConfigDict(frozen=True)

    type: Literal["tick_completed"] = "tick_completed"
    tick_index: int = Field(..., ge=1)
    running_machines: int = Field(..., ge=0)
    settled_orders: int = Field(..., ge=0)
    occurred_at: datetime = Field(default_factory=_utcnow)


class OrderSettledEvent(BaseModel):
    """Published for every order that reached settlement during a tick."""

    model_config = ConfigDict(frozen=True)

    type: Literal["order_settled"] = "order_settled"
    tick_index: int = Field(..., ge=1)
    machine_id: str = Field(..., min_length=1)
    customer_id: str
    customer_name: str
    payment: int = Field(..., ge=0)
    final_satisfaction: int = Field(..., ge=0, le=100)
    reputation_delta: int = Field(..., ge=0)
    review_id: str
    occurred_at: datetime = Field(default_factory=_utcnow)


SimulationEvent = Annotated[
    TickCompletedEvent | OrderSettledEvent,
    Field(discriminator="type"),
]


class JournalEntry(BaseModel):
    """Represents a single immutable journal line produced by the engine."""

    model_config = ConfigDict(frozen=True)

    tick_index: int = Field(..., ge=0)
    event_type: str = Field(..., min_length=1)
    message: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)
    occurred_at: datetime = Field(default_factory=_utcnow)


__all__ = [
    "JournalEntry",
    "OrderSettledEvent",
    "SimulationEvent",
    "TickCompletedEvent",
]
