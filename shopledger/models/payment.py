from typing import Optional

from shopledger.models.base import LedgerRecord


class Payment(LedgerRecord):
    """
    One customer payment event.

    amount is the full amount handed over; a payment spread over several
    debts does not store the per-debt breakdown. debt_id is only set when
    the payment targeted a single debt directly.
    """
    customer_id: str
    amount: int
    debt_id: Optional[str] = None
