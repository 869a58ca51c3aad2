"""Ledger errors and input validation utilities."""
import math
from typing import List, Sequence

from shopledger.models.debt import DebtItem


class LedgerError(Exception):
    """Base class for typed ledger failures."""
    kind = "ledger_error"


class InvalidAmount(LedgerError):
    """Amount is zero, negative, NaN or not a whole number."""
    kind = "invalid_amount"


class Overpayment(InvalidAmount):
    """Payment exceeds what the customer owes."""
    kind = "overpayment"


class InvalidInput(LedgerError):
    """Malformed debt items or mismatched total."""
    kind = "invalid_input"


class NothingToPay(LedgerError):
    """No outstanding debt for the payment target."""
    kind = "nothing_to_pay"


class NotFound(LedgerError):
    """Unknown debt, payment, entry, customer or employee id."""
    kind = "not_found"

    def __init__(self, record_kind: str, record_id: str):
        super().__init__(f"{record_kind} '{record_id}' not found")
        self.record_kind = record_kind
        self.record_id = record_id


class NoBalance(LedgerError):
    """Settlement attempted while the net balance is zero."""
    kind = "no_balance"


def validate_amount(amount) -> int:
    """
    Validate a money amount and return it as an int.

    Rules:
    - must be a real number (bool is rejected)
    - NaN and fractional values are rejected
    - must be strictly positive
    """
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise InvalidAmount(f"Amount must be a number, got {amount!r}")
    if isinstance(amount, float):
        if math.isnan(amount) or math.isinf(amount):
            raise InvalidAmount(f"Amount must be finite, got {amount!r}")
        if not amount.is_integer():
            raise InvalidAmount(f"Amount must be a whole number, got {amount!r}")
        amount = int(amount)
    if amount <= 0:
        raise InvalidAmount(f"Amount must be positive, got {amount}")
    return amount


def validate_debt_items(items: Sequence[DebtItem], total: int) -> List[DebtItem]:
    """
    Validate the itemized lines of a new debt.

    Rules:
    - total must be positive
    - at least one line
    - quantity must be positive, unit price and line total non-negative
    - sum of line totals must equal total
    """
    total = validate_amount(total)

    items = list(items)
    if not items:
        raise InvalidInput("Debt must have at least one item")

    for item in items:
        if item.quantity <= 0:
            raise InvalidInput(
                f"Item '{item.product_name}' has non-positive quantity: {item.quantity}"
            )
        if item.unit_price < 0:
            raise InvalidInput(
                f"Item '{item.product_name}' has negative price: {item.unit_price}"
            )
        if item.line_total < 0:
            raise InvalidInput(
                f"Item '{item.product_name}' has negative line total: {item.line_total}"
            )

    line_sum = sum(item.line_total for item in items)
    if line_sum != total:
        raise InvalidInput(
            f"Debt total ({total}) does not equal sum of line totals ({line_sum})"
        )
    return items
