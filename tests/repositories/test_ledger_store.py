"""
Tests for the in-memory ledger store.

Covers:
- get/put/list/delete per record kind
- isolation between stored documents and returned models
- transactions: staged writes, read-your-writes, discard on error
"""

import pytest

from shopledger.models.employee import DebtEntry, EarningEntry, EarningType
from shopledger.models.payment import Payment
from shopledger.repositories.ledger_store import RecordKind
from shopledger.utils.ledger_validation import NotFound


@pytest.mark.asyncio
async def test_put_and_get(store):
    payment = Payment(customer_id="c1", amount=500)

    await store.put(RecordKind.PAYMENT, payment)

    assert await store.get(RecordKind.PAYMENT, payment.id) == payment


@pytest.mark.asyncio
async def test_get_missing(store):
    with pytest.raises(NotFound) as exc_info:
        await store.get(RecordKind.DEBT, "missing")
    assert exc_info.value.record_kind == "debts"


@pytest.mark.asyncio
async def test_put_is_upsert(store):
    payment = Payment(customer_id="c1", amount=500)
    await store.put(RecordKind.PAYMENT, payment)

    await store.put(RecordKind.PAYMENT, payment.model_copy(update={"amount": 700}))

    payments = await store.list(RecordKind.PAYMENT)
    assert [p.amount for p in payments] == [700]


@pytest.mark.asyncio
async def test_list_with_criteria(store):
    await store.put(RecordKind.PAYMENT, Payment(customer_id="c1", amount=1))
    await store.put(RecordKind.PAYMENT, Payment(customer_id="c2", amount=2))

    payments = await store.list(RecordKind.PAYMENT, customer_id="c2")

    assert [p.amount for p in payments] == [2]


@pytest.mark.asyncio
async def test_kinds_are_separate(store):
    await store.put(RecordKind.PAYMENT, Payment(customer_id="c1", amount=1))
    assert await store.list(RecordKind.DEBT) == []


@pytest.mark.asyncio
async def test_employee_entries_parsed_by_kind(store):
    await store.put(RecordKind.EMPLOYEE_ENTRY, EarningEntry(employee_id="e1", type=EarningType.SALARY, amount=10))
    await store.put(RecordKind.EMPLOYEE_ENTRY, DebtEntry(employee_id="e1", amount=5))

    entries = await store.list(RecordKind.EMPLOYEE_ENTRY, employee_id="e1")

    assert sorted(type(e).__name__ for e in entries) == ["DebtEntry", "EarningEntry"]


@pytest.mark.asyncio
async def test_returned_models_are_copies(store):
    payment = Payment(customer_id="c1", amount=500)
    await store.put(RecordKind.PAYMENT, payment)

    payment.amount = 1
    loaded = await store.get(RecordKind.PAYMENT, payment.id)
    loaded.amount = 2

    assert (await store.get(RecordKind.PAYMENT, payment.id)).amount == 500


@pytest.mark.asyncio
async def test_delete(store):
    payment = Payment(customer_id="c1", amount=500)
    await store.put(RecordKind.PAYMENT, payment)

    await store.delete(RecordKind.PAYMENT, payment.id)

    assert await store.list(RecordKind.PAYMENT) == []
    with pytest.raises(NotFound):
        await store.delete(RecordKind.PAYMENT, payment.id)


@pytest.mark.asyncio
async def test_transaction_commits_on_exit(store):
    payment = Payment(customer_id="c1", amount=500)

    async with store.transaction() as tx:
        await tx.put(RecordKind.PAYMENT, payment)
        assert await tx.get(RecordKind.PAYMENT, payment.id) == payment
        assert await store.list(RecordKind.PAYMENT) == []

    assert await store.get(RecordKind.PAYMENT, payment.id) == payment


@pytest.mark.asyncio
async def test_transaction_discarded_on_error(store):
    kept = Payment(customer_id="c1", amount=1)
    await store.put(RecordKind.PAYMENT, kept)

    with pytest.raises(RuntimeError):
        async with store.transaction() as tx:
            await tx.put(RecordKind.PAYMENT, Payment(customer_id="c1", amount=2))
            await tx.delete(RecordKind.PAYMENT, kept.id)
            raise RuntimeError("abort")

    assert [p.amount for p in await store.list(RecordKind.PAYMENT)] == [1]


@pytest.mark.asyncio
async def test_transaction_sees_staged_deletes_and_writes(store):
    first = Payment(customer_id="c1", amount=1)
    second = Payment(customer_id="c1", amount=2)
    await store.put(RecordKind.PAYMENT, first)

    async with store.transaction() as tx:
        await tx.delete(RecordKind.PAYMENT, first.id)
        await tx.put(RecordKind.PAYMENT, second)

        assert [p.amount for p in await tx.list(RecordKind.PAYMENT, customer_id="c1")] == [2]
        with pytest.raises(NotFound):
            await tx.get(RecordKind.PAYMENT, first.id)

        async with tx.transaction() as nested:
            assert nested is tx

    assert [p.amount for p in await store.list(RecordKind.PAYMENT)] == [2]
