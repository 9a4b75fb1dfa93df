"""Factory for constructing the FastAPI application."""

from __future__ import annotations

from collections.abc import AsyncIterator  # noqa: TC003
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from laundromat_backend.api.dependencies import get_simulation_service
from laundromat_backend.api.routers import simulation_router
from laundromat_backend.settings import get_settings


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run the simulation for as long as the application is serving."""
    service = app.dependency_overrides.get(
        get_simulation_service, get_simulation_service
    )()
    await service.start()
    try:
        yield
    finally:
        await service.stop()


def create_api() -> FastAPI:
    """Instantiate and configure the FastAPI application."""
    app = FastAPI(title="Laundromat Tycoon API", lifespan=_lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(simulation_router)
    return app


__all__ = ["create_api"]
