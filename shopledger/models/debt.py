"""
Debt model - a sale extended to a customer as credit.

Design principles:
- Items and total are snapshotted at sale time and never change
- Only paid_amount moves, and only upwards
- remaining_amount and status are always derived from total/paid_amount
- All amounts are integers in one currency
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field

from shopledger.models.base import LedgerRecord, utcnow


class DebtStatus(str, Enum):
    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"


class DebtItem(BaseModel):
    """One line of the sale, priced at creation time."""
    product_id: str
    product_name: str
    unit_price: int
    quantity: float  # e.g., 2.5 for 2.5 kg
    line_total: int


class Debt(LedgerRecord):
    """
    Money a customer owes for one sale.

    Invariants:
    - remaining_amount == max(0, total - paid_amount)
    - status = unpaid iff paid_amount == 0
    - status = paid iff remaining_amount == 0
    - paid_at is set iff status == paid
    """
    customer_id: str
    customer_name: str  # Snapshot, not re-synced with the directory

    items: List[DebtItem]
    total: int
    paid_amount: int = 0

    updated_at: datetime = Field(default_factory=utcnow)
    paid_at: Optional[datetime] = None

    @computed_field
    @property
    def remaining_amount(self) -> int:
        return max(0, self.total - self.paid_amount)

    @computed_field
    @property
    def status(self) -> DebtStatus:
        if self.remaining_amount == 0:
            return DebtStatus.PAID
        if self.paid_amount == 0:
            return DebtStatus.UNPAID
        return DebtStatus.PARTIAL

    def is_paid(self) -> bool:
        return self.status == DebtStatus.PAID

    def with_payment(self, amount: int, now: datetime) -> "Debt":
        """
        Return a copy with amount added to paid_amount.

        Overpayment is absorbed by the remaining_amount clamp.
        paid_at is stamped only on the transition into paid.
        """
        was_paid = self.is_paid()
        updated = self.model_copy(update={
            "paid_amount": self.paid_amount + amount,
            "updated_at": now,
        })
        if updated.is_paid():
            if not was_paid:
                updated.paid_at = now
        else:
            updated.paid_at = None
        return updated
