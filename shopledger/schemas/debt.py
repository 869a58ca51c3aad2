from datetime import datetime
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from shopledger.models.debt import Debt, DebtItem, DebtStatus
from shopledger.models.payment import Payment


class DebtItemBase(BaseModel):
    product_id: str
    product_name: str
    unit_price: int
    quantity: float
    line_total: int

    model_config = {"from_attributes": True}

    def to_item(self) -> DebtItem:
        return DebtItem(**self.model_dump())


class DebtCreate(BaseModel):
    customer_id: str
    # Looked up in the customer directory when omitted
    customer_name: Optional[str] = None
    items: List[DebtItemBase]
    total: int


class DebtResponse(BaseModel):
    id: str = Field(validation_alias="_id", serialization_alias="id")
    customer_id: str
    customer_name: str
    items: List[DebtItemBase]
    total: int
    paid_amount: int
    remaining_amount: int
    status: DebtStatus
    created_at: datetime
    updated_at: datetime
    paid_at: Optional[datetime] = None

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class PaymentCreate(BaseModel):
    amount: int


class PaymentResponse(BaseModel):
    id: str = Field(validation_alias="_id", serialization_alias="id")
    customer_id: str
    amount: int
    debt_id: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class PaymentResult(BaseModel):
    """Outcome of one payment action."""
    payment: Payment
    allocated: int
    unapplied: int = 0
    # (debt_id, amount applied) pairs, oldest debt first
    applied: List[Tuple[str, int]] = []
    updated_debts: List[Debt] = []


class PaymentResultResponse(BaseModel):
    payment: PaymentResponse
    allocated: int
    unapplied: int
    applied: List[Tuple[str, int]]
    updated_debts: List[DebtResponse]

    model_config = ConfigDict(from_attributes=True)


class CustomerBalanceResponse(BaseModel):
    customer_id: str
    outstanding: int
    debt_count: int


class CustomerDebtSummary(BaseModel):
    customer_id: str
    customer_name: str
    total_debt: int
    debt_count: int
