"""
FIFO payment allocation.

Pure calculation: no clock access, no I/O, inputs are never mutated.
The caller sorts debts oldest first and persists the result.

Invariants:
- allocated + leftover == amount
- each debt receives at most its remaining_amount
- debts are visited in the given order and the loop stops
  as soon as nothing is left to allocate
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Sequence, Tuple

from shopledger.models.debt import Debt


@dataclass(frozen=True)
class AllocationResult:
    updated_debts: Tuple[Debt, ...]
    # (debt_id, amount applied) pairs, in allocation order
    applied: Tuple[Tuple[str, int], ...]
    allocated: int
    leftover: int


def sort_oldest_first(debts: Sequence[Debt]) -> List[Debt]:
    """Order by created_at ascending, ties broken by insertion order (id)."""
    return sorted(debts, key=lambda d: (d.created_at, d.id))


def allocate_fifo(debts: Sequence[Debt], amount: int, now: datetime) -> AllocationResult:
    """
    Spread amount over debts in the given order.

    Paid debts are skipped. Returns updated copies of every debt that
    received money, how much was allocated, and what was left over.
    """
    if amount < 0:
        raise ValueError(f"Cannot allocate a negative amount: {amount}")

    remaining = amount
    updated: List[Debt] = []
    applications: List[Tuple[str, int]] = []

    for debt in debts:
        if remaining <= 0:
            break
        if debt.is_paid():
            continue

        applied = min(remaining, debt.remaining_amount)
        updated.append(debt.with_payment(applied, now))
        applications.append((debt.id, applied))
        remaining -= applied

    return AllocationResult(
        updated_debts=tuple(updated),
        applied=tuple(applications),
        allocated=amount - remaining,
        leftover=remaining,
    )
