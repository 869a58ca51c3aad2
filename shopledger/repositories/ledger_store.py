"""
LedgerStore - keyed record storage behind the ledger services.

Contract:
- get(kind, id) returns a fresh model or raises NotFound
- put(kind, record) upserts by id
- list(kind, **criteria) returns matching records, no ordering guarantee
- delete(kind, id) is administrative only
- transaction() yields a store whose writes become visible together
  on successful exit and are discarded if the block raises
"""

import copy
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel

from shopledger.models.debt import Debt
from shopledger.models.employee import employee_entry_adapter
from shopledger.models.party import Customer, Employee
from shopledger.models.payment import Payment
from shopledger.utils.ledger_validation import NotFound


class RecordKind(str, Enum):
    DEBT = "debts"
    PAYMENT = "payments"
    EMPLOYEE_ENTRY = "employee_entries"
    CUSTOMER = "customers"
    EMPLOYEE = "employees"


_PARSERS: Dict[RecordKind, Callable[[Dict[str, Any]], BaseModel]] = {
    RecordKind.DEBT: Debt.model_validate,
    RecordKind.PAYMENT: Payment.model_validate,
    RecordKind.EMPLOYEE_ENTRY: employee_entry_adapter.validate_python,
    RecordKind.CUSTOMER: Customer.model_validate,
    RecordKind.EMPLOYEE: Employee.model_validate,
}


def parse_record(kind: RecordKind, doc: Dict[str, Any]) -> BaseModel:
    return _PARSERS[kind](doc)


def dump_record(record: BaseModel) -> Dict[str, Any]:
    """Document form of a record, keyed by _id."""
    return record.model_dump(by_alias=True)


def _matches(doc: Dict[str, Any], criteria: Dict[str, Any]) -> bool:
    return all(doc.get(field) == value for field, value in criteria.items())


class LedgerStore(ABC):
    """Abstract record store shared by all ledger services."""

    @abstractmethod
    async def get(self, kind: RecordKind, record_id: str) -> Any:
        ...

    @abstractmethod
    async def put(self, kind: RecordKind, record: BaseModel) -> None:
        ...

    @abstractmethod
    async def list(self, kind: RecordKind, /, **criteria: Any) -> List[Any]:
        ...

    @abstractmethod
    async def delete(self, kind: RecordKind, record_id: str) -> None:
        ...

    @abstractmethod
    def transaction(self):
        """Async context manager yielding a transactional LedgerStore."""
        ...

    async def close(self) -> None:
        return None


class InMemoryLedgerStore(LedgerStore):
    """
    Process-local store.

    Documents are kept as deep copies and re-validated on every read,
    so callers never share mutable state with the store.
    """

    def __init__(self):
        self._data: Dict[RecordKind, Dict[str, Dict[str, Any]]] = {
            kind: {} for kind in RecordKind
        }

    async def get(self, kind: RecordKind, record_id: str) -> Any:
        doc = self._data[kind].get(record_id)
        if doc is None:
            raise NotFound(kind.value, record_id)
        return parse_record(kind, copy.deepcopy(doc))

    async def put(self, kind: RecordKind, record: BaseModel) -> None:
        doc = dump_record(record)
        self._data[kind][doc["_id"]] = copy.deepcopy(doc)

    async def list(self, kind: RecordKind, /, **criteria: Any) -> List[Any]:
        return [
            parse_record(kind, copy.deepcopy(doc))
            for doc in self._data[kind].values()
            if _matches(doc, criteria)
        ]

    async def delete(self, kind: RecordKind, record_id: str) -> None:
        if self._data[kind].pop(record_id, None) is None:
            raise NotFound(kind.value, record_id)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["_MemoryTransaction"]:
        tx = _MemoryTransaction(self)
        yield tx
        tx.commit()

    def _apply(self, writes: Dict[Tuple[RecordKind, str], Optional[Dict[str, Any]]]) -> None:
        for (kind, record_id), doc in writes.items():
            if doc is None:
                self._data[kind].pop(record_id, None)
            else:
                self._data[kind][record_id] = doc


class _MemoryTransaction(LedgerStore):
    """Staged writes over an InMemoryLedgerStore; reads see the staged state."""

    def __init__(self, store: InMemoryLedgerStore):
        self._store = store
        # (kind, id) -> document, or None for a staged delete
        self._writes: Dict[Tuple[RecordKind, str], Optional[Dict[str, Any]]] = {}

    async def get(self, kind: RecordKind, record_id: str) -> Any:
        key = (kind, record_id)
        if key in self._writes:
            doc = self._writes[key]
            if doc is None:
                raise NotFound(kind.value, record_id)
            return parse_record(kind, copy.deepcopy(doc))
        return await self._store.get(kind, record_id)

    async def put(self, kind: RecordKind, record: BaseModel) -> None:
        doc = dump_record(record)
        self._writes[(kind, doc["_id"])] = copy.deepcopy(doc)

    async def list(self, kind: RecordKind, /, **criteria: Any) -> List[Any]:
        docs = dict(self._store._data[kind])
        for (staged_kind, record_id), doc in self._writes.items():
            if staged_kind != kind:
                continue
            if doc is None:
                docs.pop(record_id, None)
            else:
                docs[record_id] = doc
        return [
            parse_record(kind, copy.deepcopy(doc))
            for doc in docs.values()
            if _matches(doc, criteria)
        ]

    async def delete(self, kind: RecordKind, record_id: str) -> None:
        await self.get(kind, record_id)
        self._writes[(kind, record_id)] = None

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["_MemoryTransaction"]:
        # Nested blocks join the outer transaction
        yield self

    def commit(self) -> None:
        self._store._apply(self._writes)
        self._writes = {}
