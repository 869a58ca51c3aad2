from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from shopledger.models.employee import DebtPaymentMethod, EarningType, SettlementDirection


class EarningCreate(BaseModel):
    type: EarningType
    description: str = ""
    amount: int


class EmployeeDebtCreate(BaseModel):
    description: str = ""
    amount: int


class MarkDebtPaidRequest(BaseModel):
    method: DebtPaymentMethod


class SettlementCreate(BaseModel):
    amount: int
    description: Optional[str] = None
    # Overrides the configured over-settlement policy for this call
    policy: Optional[str] = Field(default=None, pattern="^(allow|clamp|reject)$")


class EmployeeBalanceResponse(BaseModel):
    employee_id: str
    balance: int


class EmployeeBalanceSummary(BaseModel):
    """Per-employee totals behind the net balance."""
    employee_id: str
    employee_name: str = ""
    total_earnings: int = 0
    total_debts: int = 0
    # positive = paid out by the shop, negative = paid in by the employee
    total_settlements: int = 0
    balance: int = 0


class EmployeeEntryResponse(BaseModel):
    """Flat view of any employee ledger entry."""
    id: str = Field(validation_alias="_id", serialization_alias="id")
    kind: str
    employee_id: str
    employee_name: str = ""
    description: str = ""
    amount: int
    created_at: datetime
    # earning
    type: Optional[EarningType] = None
    # earning and debt
    is_paid: Optional[bool] = None
    paid_at: Optional[datetime] = None
    # debt
    payment_method: Optional[DebtPaymentMethod] = None
    # settlement
    direction: Optional[SettlementDirection] = None

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class UnpaidEarningsResponse(BaseModel):
    employee_id: str
    total_unpaid: int
    earnings: List[EmployeeEntryResponse]
