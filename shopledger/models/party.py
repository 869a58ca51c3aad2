from datetime import datetime
from typing import Optional

from pydantic import Field

from shopledger.models.base import LedgerRecord, utcnow


class Customer(LedgerRecord):
    name: str
    phone: Optional[str] = None
    address: Optional[str] = None
    updated_at: datetime = Field(default_factory=utcnow)


class Employee(LedgerRecord):
    name: str
    position: str = ""
    phone: Optional[str] = None
    updated_at: datetime = Field(default_factory=utcnow)
