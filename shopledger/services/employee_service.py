"""
EmployeeLedgerService - earnings, advances and the net balance.

The employee ledger is append-only. The net balance is a fold over
every entry of the employee:

    balance = sum(earnings) - sum(debts)
              - sum(admin_to_employee settlements)
              + sum(employee_to_admin settlements)
"""

import logging
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

from shopledger.models.base import utcnow
from shopledger.models.employee import (
    DebtEntry,
    DebtPaymentMethod,
    EarningEntry,
    EarningType,
    EmployeeEntry,
    SettlementDirection,
    signed_amount,
)
from shopledger.repositories.ledger_store import LedgerStore, RecordKind
from shopledger.schemas.employee import EmployeeBalanceSummary
from shopledger.services.locks import KeyedLock, employee_locks
from shopledger.utils.ledger_validation import NotFound, validate_amount

logger = logging.getLogger(__name__)


def net_balance_of(entries: Iterable[EmployeeEntry]) -> int:
    return sum(signed_amount(entry) for entry in entries)


class EmployeeLedgerService:
    def __init__(
        self,
        store: LedgerStore,
        clock: Callable[[], datetime] = utcnow,
        locks: KeyedLock = employee_locks
    ):
        self.store = store
        self.clock = clock
        self.locks = locks

    async def _append(self, entry: EmployeeEntry) -> EmployeeEntry:
        async with self.locks.hold(entry.employee_id):
            async with self.store.transaction() as tx:
                await tx.put(RecordKind.EMPLOYEE_ENTRY, entry)
        logger.info(
            "Recorded %s %s for employee %s: amount=%d",
            entry.kind, entry.id, entry.employee_id, entry.amount
        )
        return entry

    async def add_earning(
        self,
        employee_id: str,
        type: EarningType,
        description: str,
        amount: int,
        employee_name: str = ""
    ) -> EarningEntry:
        amount = validate_amount(amount)
        entry = EarningEntry(
            employee_id=employee_id,
            employee_name=employee_name,
            type=type,
            description=description,
            amount=amount,
            created_at=self.clock(),
        )
        return await self._append(entry)

    async def add_debt(
        self,
        employee_id: str,
        description: str,
        amount: int,
        employee_name: str = ""
    ) -> DebtEntry:
        """Record an advance. It reduces the balance immediately."""
        amount = validate_amount(amount)
        entry = DebtEntry(
            employee_id=employee_id,
            employee_name=employee_name,
            description=description,
            amount=amount,
            is_paid=False,
            created_at=self.clock(),
        )
        return await self._append(entry)

    async def get_entry(self, entry_id: str) -> EmployeeEntry:
        return await self.store.get(RecordKind.EMPLOYEE_ENTRY, entry_id)

    async def mark_debt_paid(self, debt_id: str, method: DebtPaymentMethod) -> DebtEntry:
        """
        Annotate how an advance was recovered.

        The balance does not change: the debt amount was already
        subtracted when the advance was recorded. An advance that is
        already paid is returned as stored.
        """
        entry = await self.get_entry(debt_id)
        if entry.kind != "debt":
            raise NotFound("employee debt", debt_id)

        async with self.locks.hold(entry.employee_id):
            async with self.store.transaction() as tx:
                entry = await tx.get(RecordKind.EMPLOYEE_ENTRY, debt_id)
                if entry.is_paid:
                    logger.info("Employee debt %s is already paid", debt_id)
                    return entry
                entry.is_paid = True
                entry.paid_at = self.clock()
                entry.payment_method = DebtPaymentMethod(method)
                await tx.put(RecordKind.EMPLOYEE_ENTRY, entry)

        logger.info(
            "Employee debt %s of %s marked paid via %s",
            debt_id, entry.employee_id, entry.payment_method.value
        )
        return entry

    async def mark_earning_paid(self, earning_id: str) -> EarningEntry:
        """Annotate an earning as handed over. The balance does not change."""
        entry = await self.get_entry(earning_id)
        if entry.kind != "earning":
            raise NotFound("employee earning", earning_id)

        async with self.locks.hold(entry.employee_id):
            async with self.store.transaction() as tx:
                entry = await tx.get(RecordKind.EMPLOYEE_ENTRY, earning_id)
                if entry.is_paid:
                    logger.info("Employee earning %s is already paid", earning_id)
                    return entry
                entry.is_paid = True
                entry.paid_at = self.clock()
                await tx.put(RecordKind.EMPLOYEE_ENTRY, entry)

        logger.info("Employee earning %s of %s marked paid", earning_id, entry.employee_id)
        return entry

    async def list_entries(self, employee_id: str) -> List[EmployeeEntry]:
        """All entries of an employee, newest first."""
        entries = await self.store.list(RecordKind.EMPLOYEE_ENTRY, employee_id=employee_id)
        return sorted(entries, key=lambda e: (e.created_at, e.id), reverse=True)

    async def list_unpaid_debts(self, employee_id: str) -> List[DebtEntry]:
        return [
            entry for entry in await self.list_entries(employee_id)
            if entry.kind == "debt" and not entry.is_paid
        ]

    async def list_unpaid_earnings(self, employee_id: Optional[str] = None) -> List[EarningEntry]:
        """Earnings not yet handed over, newest first; all employees when no id is given."""
        if employee_id is None:
            entries = await self.store.list(RecordKind.EMPLOYEE_ENTRY, kind="earning")
            entries = sorted(entries, key=lambda e: (e.created_at, e.id), reverse=True)
        else:
            entries = await self.list_entries(employee_id)
        return [entry for entry in entries if entry.kind == "earning" and not entry.is_paid]

    async def total_unpaid_earnings(self, employee_id: str) -> int:
        return sum(entry.amount for entry in await self.list_unpaid_earnings(employee_id))

    async def net_balance(self, employee_id: str) -> int:
        """Signed balance: positive = shop owes employee, negative = employee owes shop."""
        entries = await self.store.list(RecordKind.EMPLOYEE_ENTRY, employee_id=employee_id)
        return net_balance_of(entries)

    async def employee_summaries(self) -> List[EmployeeBalanceSummary]:
        """Totals per employee, largest absolute balance first."""
        summaries: Dict[str, EmployeeBalanceSummary] = {}
        entries = await self.store.list(RecordKind.EMPLOYEE_ENTRY)
        for entry in sorted(entries, key=lambda e: (e.created_at, e.id)):
            summary = summaries.setdefault(
                entry.employee_id,
                EmployeeBalanceSummary(employee_id=entry.employee_id),
            )
            if entry.employee_name:
                summary.employee_name = entry.employee_name

            if entry.kind == "earning":
                summary.total_earnings += entry.amount
            elif entry.kind == "debt":
                summary.total_debts += entry.amount
            elif entry.direction == SettlementDirection.ADMIN_TO_EMPLOYEE:
                summary.total_settlements += entry.amount
            else:
                summary.total_settlements -= entry.amount
            summary.balance += signed_amount(entry)

        return sorted(summaries.values(), key=lambda s: abs(s.balance), reverse=True)

    async def delete_entry(self, entry_id: str) -> None:
        """Administrative removal; not part of the normal ledger flow."""
        entry = await self.get_entry(entry_id)
        async with self.locks.hold(entry.employee_id):
            async with self.store.transaction() as tx:
                await tx.delete(RecordKind.EMPLOYEE_ENTRY, entry_id)
        logger.warning("Deleted %s %s of employee %s", entry.kind, entry_id, entry.employee_id)
