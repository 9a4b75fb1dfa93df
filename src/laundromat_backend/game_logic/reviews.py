"""Bounded, most-recent-first feed of customer reviews."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field, PositiveInt, model_validator
from pydantic.config import ConfigDict

JUST_NOW_LABEL = "just now"
DEFAULT_FEED_LIMIT = 10


class Review(BaseModel):
    """Immutable customer review written at settlement."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    customer_name: str
    rating: int = Field(..., ge=1, le=5)
    comment: str
    time: str = JUST_NOW_LABEL
    created_at: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))


class ReviewFeed(BaseModel):
    """Ordered review history; index 0 is always the newest entry."""

    model_config = ConfigDict(frozen=True)

    entries: tuple[Review, ...] = Field(default_factory=tuple)
    limit: PositiveInt = DEFAULT_FEED_LIMIT

    @model_validator(mode="after")
    def _validate_limit(self) -> ReviewFeed:
        """Ensure the feed never holds more entries than its limit."""
        if len(self.entries) > self.limit:
            msg = f"Review feed holds {len(self.entries)} entries, limit is {self.limit}."
            raise ValueError(msg)
        return self

    def record(self, review: Review) -> ReviewFeed:
        """Return a feed with *review* prepended and the oldest entries evicted."""
        entries = (review, *self.entries)[: self.limit]
        return ReviewFeed(entries=entries, limit=self.limit)

    @property
    def latest(self) -> Review | None:
        """Return the newest review, if any."""
        return self.entries[0] if self.entries else None


__all__ = ["DEFAULT_FEED_LIMIT", "JUST_NOW_LABEL", "Review", "ReviewFeed"]
