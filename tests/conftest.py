from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from shopledger.db.session import get_store
from shopledger.main import app
from shopledger.models.debt import DebtItem
from shopledger.repositories.ledger_store import InMemoryLedgerStore
from shopledger.services.debt_service import DebtLedgerService
from shopledger.services.directory_service import DirectoryService
from shopledger.services.employee_service import EmployeeLedgerService
from shopledger.services.locks import KeyedLock
from shopledger.services.payment_service import PaymentService
from shopledger.services.settlement_service import SettlementService


class FakeClock:
    """Deterministic clock: every reading is one second after the previous one."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + timedelta(seconds=1)
        return current


def make_items(*line_totals: int) -> list[DebtItem]:
    """One debt line per total, priced as a single unit."""
    return [
        DebtItem(
            product_id=f"p{index}",
            product_name=f"Product {index}",
            unit_price=line_total,
            quantity=1,
            line_total=line_total,
        )
        for index, line_total in enumerate(line_totals, start=1)
    ]


@pytest.fixture
def store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def customer_locks() -> KeyedLock:
    return KeyedLock()


@pytest.fixture
def employee_locks() -> KeyedLock:
    return KeyedLock()


@pytest.fixture
def debt_service(store, clock, customer_locks) -> DebtLedgerService:
    return DebtLedgerService(store, clock=clock, locks=customer_locks)


@pytest.fixture
def payment_service(store, clock, customer_locks) -> PaymentService:
    return PaymentService(store, clock=clock, locks=customer_locks, overpayment_policy="absorb")


@pytest.fixture
def employee_service(store, clock, employee_locks) -> EmployeeLedgerService:
    return EmployeeLedgerService(store, clock=clock, locks=employee_locks)


@pytest.fixture
def settlement_service(store, clock, employee_locks) -> SettlementService:
    return SettlementService(store, clock=clock, locks=employee_locks, policy="allow")


@pytest.fixture
def directory(store) -> DirectoryService:
    return DirectoryService(store)


@pytest_asyncio.fixture
async def client(store):
    """API client bound to an in-memory store."""
    app.dependency_overrides[get_store] = lambda: store
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def mock_db():
    """Mock motor database: every collection is a MagicMock with async methods."""
    mock_db = MagicMock()
    collections = {}

    def get_collection(name):
        if name not in collections:
            collection = MagicMock()
            collection.find_one = AsyncMock()
            collection.replace_one = AsyncMock()
            collection.delete_one = AsyncMock()
            collection.create_index = AsyncMock()
            collections[name] = collection
        return collections[name]

    mock_db.__getitem__.side_effect = get_collection
    return mock_db
