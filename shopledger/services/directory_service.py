"""Customer and employee directory used for name lookups."""

import logging
from typing import List, Optional

from shopledger.models.base import utcnow
from shopledger.models.party import Customer, Employee
from shopledger.repositories.ledger_store import LedgerStore, RecordKind

logger = logging.getLogger(__name__)


class DirectoryService:
    def __init__(self, store: LedgerStore):
        self.store = store

    async def create_customer(
        self,
        name: str,
        phone: Optional[str] = None,
        address: Optional[str] = None
    ) -> Customer:
        customer = Customer(name=name, phone=phone, address=address)
        await self.store.put(RecordKind.CUSTOMER, customer)
        logger.info("Created customer %s", customer.id)
        return customer

    async def get_customer(self, customer_id: str) -> Customer:
        return await self.store.get(RecordKind.CUSTOMER, customer_id)

    async def list_customers(self) -> List[Customer]:
        customers = await self.store.list(RecordKind.CUSTOMER)
        return sorted(customers, key=lambda c: c.name.lower())

    async def update_customer(self, customer_id: str, **changes) -> Customer:
        customer = await self.get_customer(customer_id)
        updates = {k: v for k, v in changes.items() if v is not None}
        updates["updated_at"] = utcnow()
        customer = customer.model_copy(update=updates)
        await self.store.put(RecordKind.CUSTOMER, customer)
        return customer

    async def create_employee(
        self,
        name: str,
        position: str = "",
        phone: Optional[str] = None
    ) -> Employee:
        employee = Employee(name=name, position=position, phone=phone)
        await self.store.put(RecordKind.EMPLOYEE, employee)
        logger.info("Created employee %s", employee.id)
        return employee

    async def get_employee(self, employee_id: str) -> Employee:
        return await self.store.get(RecordKind.EMPLOYEE, employee_id)

    async def list_employees(self) -> List[Employee]:
        employees = await self.store.list(RecordKind.EMPLOYEE)
        return sorted(employees, key=lambda e: e.name.lower())
