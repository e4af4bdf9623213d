"""Payout amounts for payout reports.

amount_paid = loan_amount * payout_percentage / 100
withheld    = amount_paid * WITHHOLDING_RATE   (TDS, fixed at 10%)
nett_amount = amount_paid - withheld

Loan amount and percentage are stored with two decimal places, so form inputs
are rounded to cents before the derived amounts are worked out from them.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

WITHHOLDING_RATE = 0.10

# Form fields whose change triggers a recomputation
RECALC_FIELDS = frozenset({"loan_amount", "payout_percentage"})

_CENT = Decimal("0.01")


class PayoutInputError(ValueError):
    """Raised for a negative loan amount or a percentage outside [0, 100]."""


@dataclass(frozen=True)
class PayoutAmounts:
    amount_paid: float
    withheld: float
    nett_amount: float

    def as_record_fields(self) -> dict:
        """Column values as stored on a payout report."""
        return {
            "amount_paid": self.amount_paid,
            "less_tds": self.withheld,
            "nett_amount": self.nett_amount,
        }


def to_cents(value: Any) -> float:
    """Round a loan amount or percentage to the two decimals the store keeps."""
    try:
        return float(Decimal(str(value or 0)).quantize(_CENT, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        raise PayoutInputError(f"Not a number: {value!r}") from None


def compute(loan_amount: Any, payout_percentage: Any) -> PayoutAmounts:
    amount = float(loan_amount or 0)
    pct = float(payout_percentage or 0)
    if amount < 0:
        raise PayoutInputError(f"Loan amount must not be negative (got {amount})")
    if not 0 <= pct <= 100:
        raise PayoutInputError(f"Payout percentage must be between 0 and 100 (got {pct})")

    paid = amount * pct / 100
    withheld = paid * WITHHOLDING_RATE
    return PayoutAmounts(amount_paid=paid, withheld=withheld, nett_amount=paid - withheld)


def apply_field_change(form: dict, field: str, value: Any) -> dict:
    """Return a copy of ``form`` with ``field`` set.

    Derived amounts are refreshed only when a calculator input changed, and
    are computed from the rounded inputs that will be saved.
    """
    updated = {**form, field: value}
    if field in RECALC_FIELDS:
        for name in RECALC_FIELDS:
            updated[name] = to_cents(updated.get(name))
        amounts = compute(updated["loan_amount"], updated["payout_percentage"])
        updated.update(amounts.as_record_fields())
    return updated
