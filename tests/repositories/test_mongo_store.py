"""Tests for the MongoDB ledger store against a mocked motor database."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from shopledger.models.debt import Debt
from shopledger.models.payment import Payment
from shopledger.repositories.ledger_store import RecordKind
from shopledger.repositories.mongo_store import MongoLedgerStore, create_indexes
from shopledger.utils.ledger_validation import NotFound
from conftest import make_items


def mock_session(mock_db):
    """Wire db.client.start_session() / session.start_transaction() context managers."""
    session = MagicMock()
    session_cm = MagicMock()
    session_cm.__aenter__.return_value = session
    session_cm.__aexit__.return_value = False
    mock_db.client.start_session = AsyncMock(return_value=session_cm)

    transaction_cm = MagicMock()
    transaction_cm.__aenter__.return_value = None
    transaction_cm.__aexit__.return_value = False
    session.start_transaction.return_value = transaction_cm
    return session


@pytest.mark.asyncio
async def test_get_parses_document(mock_db):
    payment = Payment(customer_id="c1", amount=300)
    mock_db["payments"].find_one.return_value = payment.model_dump(by_alias=True)
    store = MongoLedgerStore(mock_db)

    loaded = await store.get(RecordKind.PAYMENT, payment.id)

    assert loaded == payment
    mock_db["payments"].find_one.assert_called_once_with({"_id": payment.id}, session=None)


@pytest.mark.asyncio
async def test_get_missing_raises(mock_db):
    mock_db["debts"].find_one.return_value = None
    store = MongoLedgerStore(mock_db)

    with pytest.raises(NotFound):
        await store.get(RecordKind.DEBT, "missing")


@pytest.mark.asyncio
async def test_put_replaces_with_upsert(mock_db):
    debt = Debt(customer_id="c1", customer_name="Budi", items=make_items(100), total=100)
    store = MongoLedgerStore(mock_db)

    await store.put(RecordKind.DEBT, debt)

    call = mock_db["debts"].replace_one.call_args
    assert call.args[0] == {"_id": debt.id}
    assert call.args[1]["customer_id"] == "c1"
    assert call.args[1]["remaining_amount"] == 100
    assert call.kwargs["upsert"] is True


@pytest.mark.asyncio
async def test_list_passes_criteria(mock_db):
    payment = Payment(customer_id="c1", amount=300)
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=[payment.model_dump(by_alias=True)])
    mock_db["payments"].find.return_value = cursor
    store = MongoLedgerStore(mock_db)

    payments = await store.list(RecordKind.PAYMENT, customer_id="c1")

    assert payments == [payment]
    mock_db["payments"].find.assert_called_once_with({"customer_id": "c1"}, session=None)


@pytest.mark.asyncio
async def test_delete_missing_raises(mock_db):
    mock_db["payments"].delete_one.return_value = MagicMock(deleted_count=0)
    store = MongoLedgerStore(mock_db)

    with pytest.raises(NotFound):
        await store.delete(RecordKind.PAYMENT, "missing")


@pytest.mark.asyncio
async def test_transaction_binds_session(mock_db):
    session = mock_session(mock_db)
    store = MongoLedgerStore(mock_db)
    payment = Payment(customer_id="c1", amount=300)

    async with store.transaction() as tx:
        assert tx.session is session
        await tx.put(RecordKind.PAYMENT, payment)
        async with tx.transaction() as nested:
            assert nested is tx

    assert mock_db["payments"].replace_one.call_args.kwargs["session"] is session
    session.start_transaction.assert_called_once()


@pytest.mark.asyncio
async def test_transactions_disabled(mock_db):
    mock_db.client.start_session = AsyncMock()
    store = MongoLedgerStore(mock_db, use_transactions=False)

    async with store.transaction() as tx:
        assert tx is store

    mock_db.client.start_session.assert_not_called()


@pytest.mark.asyncio
async def test_create_indexes(mock_db):
    await create_indexes(mock_db)

    mock_db["debts"].create_index.assert_called_once_with([("customer_id", 1), ("created_at", 1)])
    assert mock_db["payments"].create_index.call_count == 2
    mock_db["employee_entries"].create_index.assert_called_once()
