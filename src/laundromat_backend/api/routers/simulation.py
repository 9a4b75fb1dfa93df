"""HTTP and WebSocket endpoints for the laundromat simulation."""

from __future__ import annotations

import asyncio
import logging

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from pydantic import BaseModel, TypeAdapter, ValidationError

from laundromat_backend.api.dependencies import get_simulation_service
from laundromat_backend.api.models import (
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
    ReviewsResponse,
    StateRequest,
    StateResponse,
    TickResponse,
)
from laundromat_backend.api.services import SimulationService  # noqa: TC001
from laundromat_backend.game_logic import (
    CommandOutcome,
    SimulationSnapshot,
    SimulationStoppedError,
)
from laundromat_backend.shared.events import (
    JournalEntry,
    OrderSettledEvent,
    SimulationEvent,
    TickCompletedEvent,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["simulation"])

INBOUND_WS_MESSAGE_ADAPTER = TypeAdapter(InboundWsMessage)


@router.get("/simulation/state", response_model=SimulationSnapshot)
async def read_state(
    service: SimulationService = Depends(get_simulation_service),  # noqa: B008
) -> SimulationSnapshot:
    """Return the full simulation snapshot."""

    return service.snapshot()


@router.get("/simulation/machines", response_model=MachinesResponse)
async def read_machines(
    service: SimulationService = Depends(get_simulation_service),  # noqa: B008
) -> MachinesResponse:
    """Return the machine roster."""

    return MachinesResponse(machines=list(service.engine.machines))


@router.get("/simulation/economy", response_model=EconomyResponse)
async def read_economy(
    service: SimulationService = Depends(get_simulation_service),  # noqa: B008
) -> EconomyResponse:
    """Return money, reputation and the customer count."""

    return EconomyResponse(economy=service.engine.economy)


@router.get("/simulation/inventory", response_model=InventoryResponse)
async def read_inventory(
    service: SimulationService = Depends(get_simulation_service),  # noqa: B008
) -> InventoryResponse:
    """Return the consumable stock."""

    return InventoryResponse(items=list(service.engine.inventory))


@router.get("/simulation/reviews", response_model=ReviewsResponse)
async def read_reviews(
    service: SimulationService = Depends(get_simulation_service),  # noqa: B008
) -> ReviewsResponse:
    """Return the review feed, newest first."""

    return ReviewsResponse(reviews=list(service.engine.reviews))


@router.get("/simulation/journal", response_model=list[JournalEntry])
async def read_journal(
    service: SimulationService = Depends(get_simulation_service),  # noqa: B008
) -> list[JournalEntry]:
    """Return the engine journal, oldest first."""

    return list(service.engine.journal)


@router.post("/simulation/commands", response_model=CommandOutcome)
async def submit_command(
    body: CommandBody,
    service: SimulationService = Depends(get_simulation_service),  # noqa: B008
) -> CommandOutcome:
    """Apply a player command and return its outcome."""

    try:
        return await service.submit(body.root)
    except SimulationStoppedError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc


def _event_response(event: SimulationEvent) -> BaseModel:
    if isinstance(event, OrderSettledEvent):
        return OrderSettledResponse(event=event)
    if isinstance(event, TickCompletedEvent):
        return TickResponse(event=event)
    msg = f"Unsupported event: {event!r}"
    raise TypeError(msg)


@router.websocket("/ws/simulation")
async def simulation_socket(
    websocket: WebSocket,
    service: SimulationService = Depends(get_simulation_service),  # noqa: B008
) -> None:
    """WebSocket endpoint that streams ticks and settlements and accepts commands."""
    await websocket.accept()

    send_lock = asyncio.Lock()

    async def send(model: BaseModel) -> None:
        async with send_lock:
            await websocket.send_json(model.model_dump(mode="json"))

    async def forward(event: SimulationEvent) -> None:
        await send(_event_response(event))

    await send(StateResponse(snapshot=service.snapshot()))
    service.add_listener(forward)

    try:
        while True:
            try:
                data = await websocket.receive_json()
            except WebSocketDisconnect:  # pragma: no cover - network event
                break

            try:
                message = INBOUND_WS_MESSAGE_ADAPTER.validate_python(data)
            except ValidationError as exc:
                await send(
                    ErrorResponse(
                        message="Invalid payload",
                        detail={"errors": exc.errors(include_url=False)},
                    )
                )
                continue

            if isinstance(message, HeartbeatRequest):
                await send(HeartbeatAckResponse(nonce=message.nonce))
                continue

            if isinstance(message, StateRequest):
                await send(StateResponse(snapshot=service.snapshot()))
                continue

            if isinstance(message, CommandRequest):
                try:
                    outcome = await service.submit(message.command)
                except SimulationStoppedError as exc:
                    await send(
                        ErrorResponse(
                            message=str(exc),
                            detail={"command": message.command.kind},
                        )
                    )
                    continue
                await send(CommandResultResponse(outcome=outcome))
                continue

            await send(
                ErrorResponse(
                    message="Unsupported message type",
                    detail={"type": getattr(message, "type", None)},
                )
            )
    finally:
        service.remove_listener(forward)
        logger.debug("Simulation socket closed")


__all__ = ["router"]
