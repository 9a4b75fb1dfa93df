"""Dependency providers for FastAPI routers."""

from __future__ import annotations

from functools import cache

from laundromat_backend.api.services import SimulationService


@cache
def get_simulation_service() -> SimulationService:
    """Return the shared :class:`SimulationService` instance."""

    return SimulationService.create_default()


__all__ = ["get_simulation_service"]
