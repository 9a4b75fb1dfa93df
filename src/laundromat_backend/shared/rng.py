"""Deterministic random helpers used across the game logic."""

from __future__ import annotations

from collections.abc import Sequence  # noqa: TC003
from random import Random
from typing import TypeVar

_T = TypeVar("_T")


class DeterministicRandomService:
    """Thin wrapper around :class:`random.Random` providing deterministic utilities."""

    def __init__(self, seed: int | None = None) -> None:
        self._random = Random(seed)  # noqa: S311

    def choice(self, population: Sequence[_T]) -> _T:
        """Return a deterministic choice from *population*."""
        if not population:
            msg = "Cannot choose from an empty population."
            raise ValueError(msg)
        return population[self._random.randrange(len(population))]

    def randrange(self, start: int, stop: int) -> int:
        """Return an integer drawn uniformly from the half-open range ``[start, stop)``."""
        if stop <= start:
            msg = f"Empty range [{start}, {stop})."
            raise ValueError(msg)
        return self._random.randrange(start, stop)

    def draw_distinct(self, population: Sequence[_T], count: int) -> tuple[_T, ...]:
        """Draw *count* times from *population*, keeping only the first of each value.

        Duplicate draws are discarded rather than retried, so fewer than
        *count* items may be returned.
        """
        selected: list[_T] = []
        for _ in range(count):
            candidate = self.choice(population)
            if candidate not in selected:
                selected.append(candidate)
        return tuple(selected)


__all__ = ["DeterministicRandomService"]
