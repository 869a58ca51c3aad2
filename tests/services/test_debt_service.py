"""
Tests for the debt ledger service.

Covers:
- debt creation and input rejection
- outstanding balance recomputed from stored debts
- allocation order of outstanding debts
- customers-with-debt summary
"""

import pytest

from shopledger.models.debt import DebtStatus
from shopledger.repositories.ledger_store import RecordKind
from shopledger.utils.ledger_validation import InvalidAmount, InvalidInput, NotFound
from conftest import make_items


@pytest.mark.asyncio
async def test_create_debt(debt_service, store, clock):
    debt = await debt_service.create_debt("c1", "Budi", make_items(3000, 2000), 5000)

    assert debt.total == 5000
    assert debt.paid_amount == 0
    assert debt.status == DebtStatus.UNPAID
    assert debt.created_at == debt.updated_at
    assert debt.paid_at is None

    stored = await store.get(RecordKind.DEBT, debt.id)
    assert stored == debt


@pytest.mark.asyncio
async def test_create_debt_rejects_empty_items(debt_service, store):
    with pytest.raises(InvalidInput):
        await debt_service.create_debt("c1", "Budi", [], 5000)
    assert await store.list(RecordKind.DEBT) == []


@pytest.mark.asyncio
async def test_create_debt_rejects_mismatched_total(debt_service, store):
    with pytest.raises(InvalidInput):
        await debt_service.create_debt("c1", "Budi", make_items(3000), 5000)
    assert await store.list(RecordKind.DEBT) == []


@pytest.mark.asyncio
async def test_create_debt_rejects_non_positive_total(debt_service):
    with pytest.raises(InvalidAmount):
        await debt_service.create_debt("c1", "Budi", make_items(0), 0)


@pytest.mark.asyncio
async def test_get_unknown_debt(debt_service):
    with pytest.raises(NotFound):
        await debt_service.get_debt("missing")


@pytest.mark.asyncio
async def test_outstanding_balance(debt_service, payment_service):
    await debt_service.create_debt("c1", "Budi", make_items(5000), 5000)
    await debt_service.create_debt("c1", "Budi", make_items(3000), 3000)
    await debt_service.create_debt("c2", "Ani", make_items(9000), 9000)

    assert await debt_service.outstanding_balance("c1") == 8000

    await payment_service.pay_customer("c1", 6000)

    assert await debt_service.outstanding_balance("c1") == 2000
    assert await debt_service.outstanding_balance("c2") == 9000
    assert await debt_service.outstanding_balance("nobody") == 0


@pytest.mark.asyncio
async def test_outstanding_balance_is_repeatable(debt_service):
    await debt_service.create_debt("c1", "Budi", make_items(1200), 1200)

    first = await debt_service.outstanding_balance("c1")
    second = await debt_service.outstanding_balance("c1")

    assert first == second == 1200


@pytest.mark.asyncio
async def test_outstanding_balance_matches_stored_debts(debt_service, payment_service, store):
    for total in (1000, 2500, 700):
        await debt_service.create_debt("c1", "Budi", make_items(total), total)
    await payment_service.pay_customer("c1", 1800)

    stored = await store.list(RecordKind.DEBT, customer_id="c1")
    expected = sum(d.remaining_amount for d in stored if d.status != DebtStatus.PAID)
    assert await debt_service.outstanding_balance("c1") == expected == 2400


@pytest.mark.asyncio
async def test_outstanding_debts_oldest_first(debt_service, payment_service):
    oldest = await debt_service.create_debt("c1", "Budi", make_items(100), 100)
    middle = await debt_service.create_debt("c1", "Budi", make_items(9000), 9000)
    newest = await debt_service.create_debt("c1", "Budi", make_items(50), 50)

    debts = await debt_service.outstanding_debts_oldest_first("c1")
    assert [d.id for d in debts] == [oldest.id, middle.id, newest.id]

    await payment_service.pay_customer("c1", 100)

    debts = await debt_service.outstanding_debts_oldest_first("c1")
    assert [d.id for d in debts] == [middle.id, newest.id]


@pytest.mark.asyncio
async def test_list_debts_newest_first(debt_service):
    first = await debt_service.create_debt("c1", "Budi", make_items(100), 100)
    second = await debt_service.create_debt("c2", "Ani", make_items(200), 200)

    assert [d.id for d in await debt_service.list_debts()] == [second.id, first.id]
    assert [d.id for d in await debt_service.list_debts("c1")] == [first.id]


@pytest.mark.asyncio
async def test_list_unpaid_debts(debt_service, payment_service):
    paid = await debt_service.create_debt("c1", "Budi", make_items(100), 100)
    unpaid = await debt_service.create_debt("c2", "Ani", make_items(200), 200)
    await payment_service.pay_debt(paid.id, 100)

    assert [d.id for d in await debt_service.list_unpaid_debts()] == [unpaid.id]


@pytest.mark.asyncio
async def test_customers_with_debt(debt_service, payment_service):
    await debt_service.create_debt("c1", "Budi", make_items(5000), 5000)
    await debt_service.create_debt("c1", "Budi", make_items(3000), 3000)
    await debt_service.create_debt("c2", "Ani", make_items(9000), 9000)
    await debt_service.create_debt("c3", "Dewi", make_items(400), 400)
    await payment_service.pay_customer("c3", 400)
    await payment_service.pay_customer("c1", 1000)

    summaries = await debt_service.customers_with_debt()

    assert [(s.customer_id, s.customer_name, s.total_debt, s.debt_count) for s in summaries] == [
        ("c2", "Ani", 9000, 1),
        ("c1", "Budi", 7000, 2),
    ]


@pytest.mark.asyncio
async def test_delete_debt(debt_service):
    debt = await debt_service.create_debt("c1", "Budi", make_items(100), 100)

    await debt_service.delete_debt(debt.id)

    with pytest.raises(NotFound):
        await debt_service.get_debt(debt.id)
    assert await debt_service.outstanding_balance("c1") == 0
