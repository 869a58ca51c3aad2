"""
Employee ledger entries.

One append-only sequence per employee holding three kinds of entries:
- earning: increases the balance (salary, commission, ...)
- debt: an advance taken by the employee, decreases the balance
- settlement: a cash movement that brings the balance toward zero

Positive balance means the shop owes the employee,
negative balance means the employee owes the shop.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import Field, TypeAdapter

from shopledger.models.base import LedgerRecord


class EarningType(str, Enum):
    SALARY = "salary"
    COMMISSION = "commission"
    BONUS = "bonus"
    OTHER = "other"


class DebtPaymentMethod(str, Enum):
    SEPARATE = "separate"
    SALARY_DEDUCTION = "salary_deduction"


class SettlementDirection(str, Enum):
    ADMIN_TO_EMPLOYEE = "admin_to_employee"  # Pays down a surplus owed to the employee
    EMPLOYEE_TO_ADMIN = "employee_to_admin"  # Pays down a deficit owed by the employee


class EntryBase(LedgerRecord):
    employee_id: str
    employee_name: str = ""
    description: str = ""
    amount: int


class EarningEntry(EntryBase):
    """is_paid records that the earning was handed over; the balance ignores it."""
    kind: Literal["earning"] = "earning"
    type: EarningType
    is_paid: bool = False
    paid_at: Optional[datetime] = None


class DebtEntry(EntryBase):
    """
    An advance. Its amount reduces the balance from creation on;
    is_paid only records how the advance was physically recovered.
    """
    kind: Literal["debt"] = "debt"
    is_paid: bool = False
    payment_method: Optional[DebtPaymentMethod] = None
    paid_at: Optional[datetime] = None


class SettlementEntry(EntryBase):
    kind: Literal["settlement"] = "settlement"
    direction: SettlementDirection


EmployeeEntry = Annotated[
    Union[EarningEntry, DebtEntry, SettlementEntry],
    Field(discriminator="kind")
]

employee_entry_adapter = TypeAdapter(EmployeeEntry)


def signed_amount(entry: EmployeeEntry) -> int:
    """Contribution of one entry to the employee's net balance."""
    if entry.kind == "earning":
        return entry.amount
    if entry.kind == "debt":
        return -entry.amount
    if entry.kind == "settlement":
        if entry.direction == SettlementDirection.ADMIN_TO_EMPLOYEE:
            return -entry.amount
        return entry.amount
    raise ValueError(f"Unknown employee entry kind: {entry.kind!r}")
