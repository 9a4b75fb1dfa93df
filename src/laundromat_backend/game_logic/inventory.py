"""Inventory store tracking consumable stock."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field, PositiveInt, model_validator
from pydantic.config import ConfigDict

from laundromat_backend.game_logic.errors import (
    InsufficientStockError,
    InvalidAmountError,
    UnknownItemError,
)
from laundromat_backend.shared.enums import ConsumableType  # noqa: TC001

if TYPE_CHECKING:
    from laundromat_backend.game_logic.economy import EconomyLedger


class InventoryItem(BaseModel):
    """Single stock line for one consumable."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    type: ConsumableType
    quantity: int = Field(..., ge=0)
    price: PositiveInt
    name: str | None = None

    def _evolve(self, **changes: Any) -> InventoryItem:
        return InventoryItem.model_validate({**dict(self), **changes})

    def consume(self, amount: int) -> InventoryItem:
        """Return the item with *amount* units removed."""
        if amount < 0:
            msg = "Consumption amount must be non-negative."
            raise InvalidAmountError(msg, {"amount": amount})
        if self.quantity < amount:
            msg = f"Requires {amount} {self.type.value}, only {self.quantity} in stock."
            raise InsufficientStockError(
                msg,
                {
                    "item_type": self.type.value,
                    "required": amount,
                    "available": self.quantity,
                },
            )
        return self._evolve(quantity=self.quantity - amount)

    def restock(self, amount: int) -> InventoryItem:
        """Return the item with *amount* units added."""
        if amount <= 0:
            msg = "Restock amount must be positive."
            raise InvalidAmountError(msg, {"amount": amount})
        return self._evolve(quantity=self.quantity + amount)


class InventoryStore(BaseModel):
    """Immutable collection of stock lines keyed by item id."""

    model_config = ConfigDict(frozen=True)

    items: tuple[InventoryItem, ...] = Field(default_factory=tuple)

    @model_validator(mode="after")
    def _validate_unique_ids(self) -> InventoryStore:
        """Ensure that each item id appears at most once."""
        ids = [item.id for item in self.items]
        if len(ids) != len(set(ids)):
            msg = "Inventory must not contain duplicate item ids."
            raise ValueError(msg)
        return self

    def find(self, item_id: str) -> InventoryItem:
        """Return the item stored under *item_id*."""
        for item in self.items:
            if item.id == item_id:
                return item
        msg = f"Unknown inventory item '{item_id}'."
        raise UnknownItemError(msg, {"item_id": item_id})

    def first_of_type(self, item_type: ConsumableType) -> InventoryItem | None:
        """Return the stock line for *item_type*, if any."""
        return next((item for item in self.items if item.type == item_type), None)

    def available(self, item_type: ConsumableType) -> int:
        """Return how many units of *item_type* can be consumed right now."""
        item = self.first_of_type(item_type)
        return item.quantity if item is not None else 0

    def _replace(self, updated: InventoryItem) -> InventoryStore:
        return InventoryStore(
            items=tuple(updated if item.id == updated.id else item for item in self.items)
        )

    def consume(self, item_type: ConsumableType, amount: int) -> InventoryStore:
        """Return a store with *amount* units of *item_type* consumed."""
        item = self.first_of_type(item_type)
        if item is None:
            msg = f"No {item_type.value} in stock."
            raise InsufficientStockError(
                msg,
                {"item_type": item_type.value, "required": amount, "available": 0},
            )
        return self._replace(item.consume(amount))

    def restock(self, item_id: str, amount: int) -> InventoryStore:
        """Return a store with *amount* units added to *item_id*."""
        return self._replace(self.find(item_id).restock(amount))

    def purchase(
        self, item_id: str, amount: int, ledger: EconomyLedger
    ) -> tuple[InventoryStore, EconomyLedger, int]:
        """Buy *amount* units of *item_id*, paying from *ledger*.

        Returns the updated store, the debited ledger and the total cost.
        Nothing is applied unless both sides succeed.
        """
        item = self.find(item_id)
        if amount <= 0:
            msg = "Purchase amount must be positive."
            raise InvalidAmountError(msg, {"item_id": item_id, "amount": amount})
        cost = item.price * amount
        debited = ledger.debit(cost)
        return self._replace(item.restock(amount)), debited, cost


__all__ = ["InventoryItem", "InventoryStore"]
