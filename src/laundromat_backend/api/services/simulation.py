"""Simulation service exposed to the API layer."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from laundromat_backend.game_logic import (
    SimulationEngine,
    SimulationRuntime,
    SimulationStoppedError,
    TickTimer,
    build_simulation_configuration,
)
from laundromat_backend.settings import BackendSettings, get_settings

if TYPE_CHECKING:
    from laundromat_backend.game_logic import (
        Command,
        CommandOutcome,
        SimulationOverrides,
        SimulationSnapshot,
    )
    from laundromat_backend.game_logic.runtime import EventSender

logger = logging.getLogger(__name__)


class SimulationService:
    """Own one engine and the runtime that drives it while the app is up."""

    def __init__(
        self,
        *,
        engine: SimulationEngine,
        tick_interval_seconds: float = 1.0,
    ) -> None:
        self._engine = engine
        self._tick_interval = tick_interval_seconds
        self._runtime: SimulationRuntime | None = None
        self._senders: list[EventSender] = []

    @classmethod
    def create_default(
        cls,
        settings: BackendSettings | None = None,
        *,
        overrides: SimulationOverrides | None = None,
    ) -> SimulationService:
        """Return a service with a fresh engine built from the defaults and *overrides*."""
        config = settings or get_settings()
        engine = SimulationEngine(build_simulation_configuration(overrides))
        return cls(engine=engine, tick_interval_seconds=config.tick_interval_seconds)

    @property
    def engine(self) -> SimulationEngine:
        """Expose the engine for read-only queries."""
        return self._engine

    @property
    def is_running(self) -> bool:
        """Return True while commands are being accepted."""
        return self._runtime is not None and self._runtime.is_running

    async def start(self) -> None:
        """Start a runtime over the engine, if one is not already active."""
        if self.is_running:
            return
        runtime = SimulationRuntime(
            self._engine,
            timer=TickTimer(tick_resolution_seconds=self._tick_interval),
        )
        for sender in self._senders:
            runtime.add_listener(sender)
        await runtime.start()
        self._runtime = runtime

    async def stop(self) -> None:
        """Stop the active runtime."""
        if self._runtime is not None:
            await self._runtime.stop()
            self._runtime = None

    def add_listener(self, sender: EventSender) -> None:
        """Register an outbound channel for tick and settlement events."""
        if sender not in self._senders:
            self._senders.append(sender)
        if self._runtime is not None:
            self._runtime.add_listener(sender)

    def remove_listener(self, sender: EventSender) -> None:
        """Remove an outbound channel."""
        if sender in self._senders:
            self._senders.remove(sender)
        if self._runtime is not None:
            self._runtime.remove_listener(sender)

    async def submit(self, command: Command) -> CommandOutcome:
        """Apply *command* through the runtime queue."""
        if self._runtime is None:
            msg = "Simulation is not running."
            raise SimulationStoppedError(msg)
        outcome = await self._runtime.submit(command)
        logger.debug("Command %s -> success=%s", outcome.command, outcome.success)
        return outcome

    def snapshot(self) -> SimulationSnapshot:
        """Return the current query surface."""
        return self._engine.snapshot()

    @staticmethod
    def serialize_snapshot(snapshot: SimulationSnapshot) -> dict[str, Any]:
        """Return a JSON-serializable mapping describing *snapshot*."""
        return snapshot.model_dump(mode="json")

    @staticmethod
    def serialize_outcome(outcome: CommandOutcome) -> dict[str, Any]:
        """Return a JSON-serializable mapping describing *outcome*."""
        return outcome.model_dump(mode="json")


__all__ = ["SimulationService"]
