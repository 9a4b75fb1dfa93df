"""Test configuration and fixtures for the backend test suite."""

from __future__ import annotations

import pytest

from laundromat_backend.game_logic.configuration import (
    get_default_simulation_configuration,
)
from laundromat_backend.settings import get_settings


@pytest.fixture(autouse=True)
def _mock_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure settings are loaded with predictable values during tests."""
    monkeypatch.setenv("LAUNDROMAT_TICK_INTERVAL_SECONDS", "3600")
    monkeypatch.setenv("LAUNDROMAT_SIM_RNG_SEED", "1234")
    get_settings.cache_clear()
    get_default_simulation_configuration.cache_clear()
    yield
    get_settings.cache_clear()
    get_default_simulation_configuration.cache_clear()
