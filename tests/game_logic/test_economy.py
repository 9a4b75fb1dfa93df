from __future__ import annotations

import pytest

from laundromat_backend.game_logic.economy import EconomyLedger, SettlementQuote
from laundromat_backend.game_logic.errors import (
    InsufficientFundsError,
    InvalidAmountError,
)
from laundromat_backend.game_logic.state import Customer
from laundromat_backend.shared.enums import FailureReason


def make_customer(*, satisfaction: int = 100, payment: int = 200) -> Customer:
    return Customer(
        id="C1-1",
        name="Maria",
        requirements=("Eco mode",),
        satisfaction=satisfaction,
        payment=payment,
        laundry_amount=3,
    )


def test_debit_and_credit_adjust_money() -> None:
    ledger = EconomyLedger(money=1000)

    assert ledger.debit(500).money == 500
    assert ledger.credit(250).money == 1250
    assert ledger.money == 1000


def test_debit_refuses_to_overspend() -> None:
    ledger = EconomyLedger(money=400)

    with pytest.raises(InsufficientFundsError) as exc_info:
        ledger.debit(500)

    assert exc_info.value.reason is FailureReason.INSUFFICIENT_FUNDS
    assert exc_info.value.detail == {"required": 500, "available": 400}


def test_negative_amounts_are_rejected() -> None:
    ledger = EconomyLedger(money=100)

    with pytest.raises(InvalidAmountError):
        ledger.credit(-1)
    with pytest.raises(InvalidAmountError):
        ledger.debit(-1)


def test_reputation_is_clamped_to_ceiling_and_floor() -> None:
    ledger = EconomyLedger(money=0, reputation=98)

    assert ledger.adjust_reputation(5).reputation == 100
    assert ledger.adjust_reputation(-500).reputation == 0


def test_reputation_above_ceiling_is_invalid() -> None:
    with pytest.raises(ValueError, match="exceeds the ceiling"):
        EconomyLedger(money=0, reputation=120)


def test_register_customer_counts_up() -> None:
    ledger = EconomyLedger(money=0).register_customer().register_customer()

    assert ledger.total_customers == 2


def test_quote_for_full_satisfaction_pays_the_offer() -> None:
    quote = SettlementQuote.for_order(
        make_customer(payment=250),
        level=3,
        bonus_per_level=5,
        satisfaction_per_star=20,
    )

    assert quote.satisfaction_bonus == 15
    assert quote.final_satisfaction == 100
    assert quote.payment == 250
    assert quote.reputation_delta == 5
    assert quote.rating == 5


def test_quote_floors_payment_and_rounds_rating_up() -> None:
    quote = SettlementQuote.for_order(
        make_customer(satisfaction=50, payment=201),
        level=1,
        bonus_per_level=5,
        satisfaction_per_star=20,
    )

    assert quote.final_satisfaction == 55
    assert quote.payment == 110
    assert quote.payment <= quote.payment_offer
    assert quote.reputation_delta == 2
    assert quote.rating == 3


def test_quote_rating_never_drops_below_one() -> None:
    quote = SettlementQuote.for_order(
        make_customer(satisfaction=0, payment=150),
        level=1,
        bonus_per_level=0,
        satisfaction_per_star=20,
    )

    assert quote.payment == 0
    assert quote.rating == 1
