"""
DebtLedgerService - customer debts and the views derived from them.

Balances are never stored: every read recomputes them from the
persisted debts.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence

from shopledger.models.base import utcnow
from shopledger.models.debt import Debt, DebtItem
from shopledger.repositories.ledger_store import LedgerStore, RecordKind
from shopledger.schemas.debt import CustomerDebtSummary
from shopledger.services.allocation import sort_oldest_first
from shopledger.services.locks import KeyedLock, customer_locks
from shopledger.utils.ledger_validation import validate_debt_items

logger = logging.getLogger(__name__)


class DebtLedgerService:
    def __init__(
        self,
        store: LedgerStore,
        clock: Callable[[], datetime] = utcnow,
        locks: KeyedLock = customer_locks
    ):
        self.store = store
        self.clock = clock
        self.locks = locks

    async def create_debt(
        self,
        customer_id: str,
        customer_name: str,
        items: Sequence[DebtItem],
        total: int
    ) -> Debt:
        """
        Record a sale on credit.

        Raises InvalidAmount for a non-positive total and InvalidInput
        for empty or inconsistent items. Nothing is written on failure.
        """
        items = validate_debt_items(items, total)

        now = self.clock()
        debt = Debt(
            customer_id=customer_id,
            customer_name=customer_name,
            items=items,
            total=total,
            paid_amount=0,
            created_at=now,
            updated_at=now,
        )

        async with self.locks.hold(customer_id):
            async with self.store.transaction() as tx:
                await tx.put(RecordKind.DEBT, debt)

        logger.info(
            "Created debt %s for customer %s: total=%d items=%d",
            debt.id, customer_id, debt.total, len(debt.items)
        )
        return debt

    async def get_debt(self, debt_id: str) -> Debt:
        return await self.store.get(RecordKind.DEBT, debt_id)

    async def list_debts(self, customer_id: Optional[str] = None) -> List[Debt]:
        """All debts, newest first."""
        if customer_id is None:
            debts = await self.store.list(RecordKind.DEBT)
        else:
            debts = await self.store.list(RecordKind.DEBT, customer_id=customer_id)
        return list(reversed(sort_oldest_first(debts)))

    async def list_unpaid_debts(self) -> List[Debt]:
        return [debt for debt in await self.list_debts() if not debt.is_paid()]

    async def outstanding_debts_oldest_first(self, customer_id: str) -> List[Debt]:
        """Non-paid debts of a customer in allocation order."""
        debts = await self.store.list(RecordKind.DEBT, customer_id=customer_id)
        return sort_oldest_first([debt for debt in debts if not debt.is_paid()])

    async def outstanding_balance(self, customer_id: str) -> int:
        """Sum of remaining amounts over the customer's non-paid debts."""
        debts = await self.outstanding_debts_oldest_first(customer_id)
        return sum(debt.remaining_amount for debt in debts)

    async def customers_with_debt(self) -> List[CustomerDebtSummary]:
        """
        Customers that still owe something, largest debt first.

        customer_name is taken from the oldest outstanding debt's snapshot.
        """
        summaries: Dict[str, CustomerDebtSummary] = {}
        for debt in sort_oldest_first(await self.store.list(RecordKind.DEBT)):
            if debt.is_paid():
                continue
            summary = summaries.get(debt.customer_id)
            if summary is None:
                summaries[debt.customer_id] = CustomerDebtSummary(
                    customer_id=debt.customer_id,
                    customer_name=debt.customer_name,
                    total_debt=debt.remaining_amount,
                    debt_count=1,
                )
            else:
                summary.total_debt += debt.remaining_amount
                summary.debt_count += 1

        return sorted(summaries.values(), key=lambda s: s.total_debt, reverse=True)

    async def delete_debt(self, debt_id: str) -> None:
        """Administrative removal; not part of the normal ledger flow."""
        debt = await self.get_debt(debt_id)
        async with self.locks.hold(debt.customer_id):
            async with self.store.transaction() as tx:
                await tx.delete(RecordKind.DEBT, debt_id)
        logger.warning("Deleted debt %s of customer %s", debt_id, debt.customer_id)
