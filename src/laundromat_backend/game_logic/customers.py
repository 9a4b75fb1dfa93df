"""Random customer generation."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from itertools import count

from laundromat_backend.game_logic.configuration import (
    SimulationConfiguration,  # noqa: TC001
)
from laundromat_backend.game_logic.state import Customer
from laundromat_backend.shared.rng import DeterministicRandomService

Clock = Callable[[], datetime]


def utc_clock() -> datetime:
    """Return the current UTC time."""
    return datetime.now(tz=UTC)


class TimeDerivedIds:
    """Produce unique identifiers from the wall clock plus a sequence number."""

    def __init__(self, prefix: str, *, clock: Clock = utc_clock) -> None:
        self._prefix = prefix
        self._clock = clock
        self._sequence = count(1)

    def next_id(self) -> str:
        """Return the next identifier, e.g. ``C1735689600000-1``."""
        millis = int(self._clock().timestamp() * 1000)
        return f"{self._prefix}{millis}-{next(self._sequence)}"


class CustomerGenerator:
    """Draw customer requests from the configured pools and ranges."""

    def __init__(
        self,
        configuration: SimulationConfiguration,
        *,
        rng_service: DeterministicRandomService | None = None,
        clock: Clock = utc_clock,
    ) -> None:
        self._configuration = configuration
        self._rng = rng_service or DeterministicRandomService(configuration.rng_seed)
        self._ids = TimeDerivedIds("C", clock=clock)

    def generate(self) -> Customer:
        """Return a freshly generated customer with full satisfaction."""
        config = self._configuration
        low, high = config.requirement_count_range
        wanted = self._rng.randrange(low, high + 1)
        requirements = self._rng.draw_distinct(config.customer_requirements, wanted)
        return Customer(
            id=self._ids.next_id(),
            name=self._rng.choice(config.customer_names),
            requirements=requirements,
            satisfaction=100,
            payment=self._rng.randrange(*config.payment_range),
            laundry_amount=self._rng.randrange(*config.laundry_amount_range),
        )


__all__ = ["Clock", "CustomerGenerator", "TimeDerivedIds", "utc_clock"]
