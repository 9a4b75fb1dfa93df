"""Service layer for API-specific business logic."""

from laundromat_backend.api.services.simulation import SimulationService

__all__ = ["SimulationService"]
