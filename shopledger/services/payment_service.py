"""
PaymentService - applies customer payments to debts.

A customer payment is spread over the customer's outstanding debts
oldest first. All touched debts and the single Payment record are
written in one store transaction, under the customer's lock.
"""

import logging
from datetime import datetime
from typing import Callable, List, Literal, Optional

from shopledger.core.config import settings
from shopledger.models.base import utcnow
from shopledger.models.payment import Payment
from shopledger.repositories.ledger_store import LedgerStore, RecordKind
from shopledger.schemas.debt import PaymentResult
from shopledger.services.allocation import allocate_fifo, sort_oldest_first
from shopledger.services.locks import KeyedLock, customer_locks
from shopledger.utils.ledger_validation import (
    NothingToPay,
    Overpayment,
    validate_amount,
)

logger = logging.getLogger(__name__)

OverpaymentPolicy = Literal["absorb", "reject"]


def _newest_first(payments: List[Payment]) -> List[Payment]:
    return sorted(payments, key=lambda p: (p.created_at, p.id), reverse=True)


class PaymentService:
    def __init__(
        self,
        store: LedgerStore,
        clock: Callable[[], datetime] = utcnow,
        locks: KeyedLock = customer_locks,
        overpayment_policy: Optional[OverpaymentPolicy] = None
    ):
        self.store = store
        self.clock = clock
        self.locks = locks
        self.overpayment_policy = overpayment_policy or settings.OVERPAYMENT_POLICY

    async def pay_customer(self, customer_id: str, amount: int) -> PaymentResult:
        """
        Apply one payment across the customer's outstanding debts, oldest first.

        Raises:
        - InvalidAmount if amount is not a positive whole number
        - NothingToPay if the customer has no outstanding debt
        - Overpayment if amount exceeds the outstanding balance
          and the overpayment policy is "reject"
        """
        amount = validate_amount(amount)

        async with self.locks.hold(customer_id):
            async with self.store.transaction() as tx:
                debts = await tx.list(RecordKind.DEBT, customer_id=customer_id)
                outstanding = sort_oldest_first([d for d in debts if not d.is_paid()])
                if not outstanding:
                    logger.warning("Payment of %d refused: customer %s owes nothing", amount, customer_id)
                    raise NothingToPay(f"Customer '{customer_id}' has no outstanding debt")

                now = self.clock()
                allocation = allocate_fifo(outstanding, amount, now)

                if allocation.leftover > 0 and self.overpayment_policy == "reject":
                    logger.warning(
                        "Payment of %d refused: exceeds outstanding %d of customer %s",
                        amount, allocation.allocated, customer_id
                    )
                    raise Overpayment(
                        f"Payment {amount} exceeds outstanding balance {allocation.allocated}"
                    )

                for debt in allocation.updated_debts:
                    await tx.put(RecordKind.DEBT, debt)

                payment = Payment(customer_id=customer_id, amount=amount, created_at=now)
                await tx.put(RecordKind.PAYMENT, payment)

        if allocation.leftover > 0:
            logger.warning(
                "Payment %s of customer %s left %d unapplied",
                payment.id, customer_id, allocation.leftover
            )
        logger.info(
            "Payment %s of customer %s: amount=%d allocated=%d debts=%d",
            payment.id, customer_id, amount, allocation.allocated, len(allocation.updated_debts)
        )

        return PaymentResult(
            payment=payment,
            allocated=allocation.allocated,
            unapplied=allocation.leftover,
            applied=list(allocation.applied),
            updated_debts=list(allocation.updated_debts),
        )

    async def pay_debt(self, debt_id: str, amount: int) -> PaymentResult:
        """
        Pay one specific debt.

        An amount larger than the debt's remainder is accepted and simply
        settles the debt; the excess is reported as unapplied.
        """
        amount = validate_amount(amount)
        debt = await self.store.get(RecordKind.DEBT, debt_id)

        async with self.locks.hold(debt.customer_id):
            async with self.store.transaction() as tx:
                # Re-read under the lock
                debt = await tx.get(RecordKind.DEBT, debt_id)
                if debt.is_paid():
                    raise NothingToPay(f"Debt '{debt_id}' is already paid")

                now = self.clock()
                applied = min(amount, debt.remaining_amount)
                updated = debt.with_payment(amount, now)
                payment = Payment(
                    customer_id=debt.customer_id,
                    amount=amount,
                    debt_id=debt_id,
                    created_at=now,
                )
                await tx.put(RecordKind.DEBT, updated)
                await tx.put(RecordKind.PAYMENT, payment)

        logger.info(
            "Payment %s on debt %s: amount=%d status=%s",
            payment.id, debt_id, amount, updated.status.value
        )

        return PaymentResult(
            payment=payment,
            allocated=applied,
            unapplied=amount - applied,
            applied=[(debt_id, applied)],
            updated_debts=[updated],
        )

    async def get_payment(self, payment_id: str) -> Payment:
        return await self.store.get(RecordKind.PAYMENT, payment_id)

    async def list_payments(self) -> List[Payment]:
        return _newest_first(await self.store.list(RecordKind.PAYMENT))

    async def list_customer_payments(self, customer_id: str) -> List[Payment]:
        return _newest_first(
            await self.store.list(RecordKind.PAYMENT, customer_id=customer_id)
        )

    async def list_debt_payments(self, debt_id: str) -> List[Payment]:
        """Direct payments made against one debt."""
        return _newest_first(
            await self.store.list(RecordKind.PAYMENT, debt_id=debt_id)
        )
