"""Models used for API request and response payloads."""

from laundromat_backend.api.models.simulation import (
    CommandBody,
    CommandRequest,
    CommandResultResponse,
    EconomyResponse,
    ErrorResponse,
    HeartbeatAckResponse,
    HeartbeatRequest,
    InboundWsMessage,
    InventoryResponse,
    MachinesResponse,
    OrderSettledResponse,
    OutboundWsMessage,
    ReviewsResponse,
    StateRequest,
    StateResponse,
    TickResponse,
)

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
