"""MongoDB implementation of the ledger store, one collection per record kind."""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List, Optional

from motor.motor_asyncio import AsyncIOMotorClientSession, AsyncIOMotorDatabase
from pydantic import BaseModel

from shopledger.repositories.ledger_store import (
    LedgerStore,
    RecordKind,
    dump_record,
    parse_record,
)
from shopledger.utils.ledger_validation import NotFound

logger = logging.getLogger(__name__)


class MongoLedgerStore(LedgerStore):
    """Ledger records in MongoDB."""

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        session: Optional[AsyncIOMotorClientSession] = None,
        use_transactions: bool = True
    ):
        self.db = db
        self.session = session
        self.use_transactions = use_transactions

    def _collection(self, kind: RecordKind):
        return self.db[kind.value]

    async def get(self, kind: RecordKind, record_id: str) -> Any:
        doc = await self._collection(kind).find_one(
            {"_id": record_id},
            session=self.session
        )
        if not doc:
            raise NotFound(kind.value, record_id)
        return parse_record(kind, doc)

    async def put(self, kind: RecordKind, record: BaseModel) -> None:
        doc = dump_record(record)
        await self._collection(kind).replace_one(
            {"_id": doc["_id"]},
            doc,
            upsert=True,
            session=self.session
        )

    async def list(self, kind: RecordKind, /, **criteria: Any) -> List[Any]:
        cursor = self._collection(kind).find(criteria, session=self.session)
        docs = await cursor.to_list(None)
        return [parse_record(kind, doc) for doc in docs]

    async def delete(self, kind: RecordKind, record_id: str) -> None:
        result = await self._collection(kind).delete_one(
            {"_id": record_id},
            session=self.session
        )
        if result.deleted_count == 0:
            raise NotFound(kind.value, record_id)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["MongoLedgerStore"]:
        if self.session is not None or not self.use_transactions:
            yield self
            return

        async with await self.db.client.start_session() as session:
            async with session.start_transaction():
                yield MongoLedgerStore(self.db, session=session, use_transactions=True)


async def create_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create database indexes."""
    # Debt indexes
    await db[RecordKind.DEBT.value].create_index([("customer_id", 1), ("created_at", 1)])

    # Payment indexes
    await db[RecordKind.PAYMENT.value].create_index("customer_id")
    await db[RecordKind.PAYMENT.value].create_index("debt_id")

    # Employee ledger indexes
    await db[RecordKind.EMPLOYEE_ENTRY.value].create_index([("employee_id", 1), ("kind", 1)])

    logger.info("MongoDB indexes ensured on %s", db.name)
