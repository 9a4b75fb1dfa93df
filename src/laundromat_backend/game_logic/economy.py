"""Economy ledger holding the funds and reputation scalars."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

from laundromat_backend.game_logic.errors import (
    InsufficientFundsError,
    InvalidAmountError,
)

if TYPE_CHECKING:
    from laundromat_backend.game_logic.state import Customer


class EconomyLedger(BaseModel):
    """Immutable money, reputation and customer counters."""

    model_config = ConfigDict(frozen=True)

    money: int
    reputation: int = Field(default=50, ge=0)
    reputation_ceiling: int = Field(default=100, ge=0)
    total_customers: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _validate_reputation(self) -> EconomyLedger:
        """Ensure reputation stays below its ceiling."""
        if self.reputation > self.reputation_ceiling:
            msg = (
                f"Reputation {self.reputation} exceeds the ceiling "
                f"{self.reputation_ceiling}."
            )
            raise ValueError(msg)
        return self

    def _evolve(self, **changes: Any) -> EconomyLedger:
        return EconomyLedger.model_validate({**dict(self), **changes})

    def can_afford(self, amount: int) -> bool:
        """Return whether the balance covers *amount*."""
        return self.money >= amount

    def credit(self, amount: int) -> EconomyLedger:
        """Return a ledger with *amount* added to the balance."""
        if amount < 0:
            msg = "Credit amount must be non-negative."
            raise InvalidAmountError(msg, {"amount": amount})
        return self._evolve(money=self.money + amount)

    def debit(self, amount: int) -> EconomyLedger:
        """Return a ledger with *amount* removed, refusing to overspend."""
        if amount < 0:
            msg = "Debit amount must be non-negative."
            raise InvalidAmountError(msg, {"amount": amount})
        if not self.can_afford(amount):
            msg = f"Requires {amount}, only {self.money} available."
            raise InsufficientFundsError(
                msg, {"required": amount, "available": self.money}
            )
        return self._evolve(money=self.money - amount)

    def adjust_reputation(self, delta: int) -> EconomyLedger:
        """Return a ledger with *delta* applied, clamped to ``[0, ceiling]``."""
        updated = min(self.reputation_ceiling, max(0, self.reputation + delta))
        return self._evolve(reputation=updated)

    def register_customer(self) -> EconomyLedger:
        """Return a ledger with one more customer served."""
        return self._evolve(total_customers=self.total_customers + 1)


class SettlementQuote(BaseModel):
    """Payment, reputation and rating derived from a finished order."""

    model_config = ConfigDict(frozen=True)

    payment_offer: int = Field(..., ge=0)
    satisfaction_bonus: int = Field(..., ge=0)
    final_satisfaction: int = Field(..., ge=0, le=100)
    payment: int = Field(..., ge=0)
    reputation_delta: int = Field(..., ge=0)
    rating: int = Field(..., ge=1, le=5)

    @classmethod
    def for_order(
        cls,
        customer: Customer,
        *,
        level: int,
        bonus_per_level: int,
        satisfaction_per_star: int,
    ) -> SettlementQuote:
        """Compute the settlement of *customer*'s order on a machine at *level*."""
        bonus = level * bonus_per_level
        final_satisfaction = min(100, customer.satisfaction + bonus)
        payment = customer.payment * final_satisfaction // 100
        reputation_delta = final_satisfaction // satisfaction_per_star
        # Ceiling division keeps a partial star.
        rating = -(-final_satisfaction // satisfaction_per_star)
        return cls(
            payment_offer=customer.payment,
            satisfaction_bonus=bonus,
            final_satisfaction=final_satisfaction,
            payment=payment,
            reputation_delta=reputation_delta,
            rating=min(5, max(1, rating)),
        )


__all__ = ["EconomyLedger", "SettlementQuote"]
