"""
Ledger store lifecycle.

The app opens exactly one store at startup: an in-memory store for
development and tests, or a MongoLedgerStore over a motor client.
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient

from shopledger.core.config import settings
from shopledger.repositories.ledger_store import InMemoryLedgerStore, LedgerStore
from shopledger.repositories.mongo_store import MongoLedgerStore, create_indexes

logger = logging.getLogger(__name__)

_client: Optional[AsyncIOMotorClient] = None
_store: Optional[LedgerStore] = None


async def open_store() -> LedgerStore:
    """Open the configured ledger store backend."""
    global _client, _store
    if settings.LEDGER_STORE == "memory":
        _store = InMemoryLedgerStore()
        logger.info("Using in-memory ledger store")
        return _store

    # tz_aware keeps created_at comparable with the UTC clock
    _client = AsyncIOMotorClient(settings.MONGODB_URI, tz_aware=True)
    db = _client[settings.MONGODB_DB]
    await create_indexes(db)
    _store = MongoLedgerStore(db, use_transactions=settings.MONGODB_TRANSACTIONS)
    logger.info("Connected to MongoDB database %s", settings.MONGODB_DB)
    return _store


async def close_store() -> None:
    global _client, _store
    if _client is not None:
        _client.close()
        _client = None
        logger.info("Disconnected from MongoDB")
    _store = None


async def get_store() -> LedgerStore:
    """Return the active ledger store."""
    if _store is None:
        raise RuntimeError("Ledger store is not open")
    return _store
