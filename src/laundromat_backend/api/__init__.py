"""API layer: HTTP queries, the command endpoint and the simulation socket."""

from laundromat_backend.api.app import create_api

__all__ = ["create_api"]
