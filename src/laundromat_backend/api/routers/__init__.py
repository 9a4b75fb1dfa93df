"""Route definitions for public HTTP and WebSocket endpoints."""

from laundromat_backend.api.routers.simulation import router as simulation_router

__all__ = ["simulation_router"]
