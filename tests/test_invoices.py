from datetime import date

import pytest
import pytest_asyncio
from sqlalchemy import select

from marine_ops.exceptions import ConflictError, DomainValidationError
from marine_ops.finance.invoices import InvoiceManager, compute_totals
from marine_ops.models import Expense, IncomeRecord
from marine_ops.scrap.lands import LandManager


@pytest.fixture
def manager(db_session):
    return InvoiceManager(db_session)


@pytest_asyncio.fixture
async def stock(db_session):
    lands = LandManager(db_session)
    land = await lands.create_land(land_name="Hamriyah Plot 7", estimated_tonnage=1000.0)
    crane = await lands.add_equipment(land.id, equipment_name="Crawler crane", quantity=1,
                                      estimated_value=20000.0)
    return land, crane


@pytest_asyncio.fixture
async def invoice(manager, stock):
    land, crane = stock
    return await manager.create_invoice(
        [
            {"item_type": "equipment_sale", "description": "Crawler crane", "quantity": 1,
             "unit_price": 20000.0, "land_equipment_id": crane.id},
            {"item_type": "scrap_sale", "description": "HMS 1&2", "quantity": 50, "unit": "tons",
             "unit_price": 300.0, "land_id": land.id},
        ],
        client_name="Emirates Steel", date=date(2024, 5, 1), apply_tax=True,
    )


async def _income(db_session):
    return (await db_session.execute(select(IncomeRecord).order_by(IncomeRecord.id))).scalars().all()


async def _expenses(db_session):
    return (await db_session.execute(select(Expense).order_by(Expense.id))).scalars().all()


def test_totals_apply_tax_only_when_asked():
    items = [{"total_price": 1000.0}, {"total_price": 250.5}]

    assert compute_totals(items, apply_tax=False, tax_rate=5.0) == {
        "subtotal": 1250.5, "tax": 0.0, "total": 1250.5,
    }
    assert compute_totals(items, apply_tax=True, tax_rate=5.0) == {
        "subtotal": 1250.5, "tax": 62.53, "total": 1313.03,
    }


async def test_create_numbers_and_totals_invoice(manager, invoice):
    assert invoice.invoice_number == "INV-2024-001"
    assert invoice.status == "draft"
    assert invoice.tax_rate == 5.0
    assert invoice.subtotal == 35000.0
    assert invoice.tax == 1750.0
    assert invoice.total == 36750.0
    assert [item.total_price for item in invoice.items] == [20000.0, 15000.0]
    assert await manager.next_invoice_number(2024) == "INV-2024-002"
    assert await manager.next_invoice_number(2025) == "INV-2025-001"


async def test_duplicate_number_and_unlinked_stock_items_rejected(manager, invoice):
    with pytest.raises(ConflictError):
        await manager.create_invoice([], invoice_number="INV-2024-001", client_name="Again",
                                     date=date(2024, 5, 2))
    with pytest.raises(DomainValidationError):
        await manager.create_invoice(
            [{"item_type": "scrap_sale", "description": "Loose scrap", "quantity": 5}],
            client_name="Nobody", date=date(2024, 5, 2),
        )


async def test_paying_books_income_and_takes_stock(db_session, manager, invoice, stock):
    land, crane = stock

    paid = await manager.mark_paid(invoice.id, payment_date=date(2024, 5, 10),
                                   payment_method="transfer")

    assert paid.status == "paid"
    [income] = await _income(db_session)
    assert income.amount == 36750.0
    assert income.income_type == "invoice"
    assert income.reference_id == invoice.id
    assert income.income_date == date(2024, 5, 10)
    assert crane.quantity == 0
    assert crane.status == "sold"
    assert land.remaining_tonnage == 950.0
    assert land.scrap_tonnage_sold == 50.0

    with pytest.raises(ConflictError):
        await manager.mark_paid(invoice.id)


async def test_deposit_then_payment_books_balance(db_session, manager, invoice):
    await manager.record_deposit(invoice.id, 10000.0, deposit_date=date(2024, 5, 2),
                                 payment_method="cash")
    paid = await manager.mark_paid(invoice.id, payment_date=date(2024, 5, 20))

    assert paid.balance_due == 26750.0
    assert [(r.income_type, r.amount) for r in await _income(db_session)] == [
        ("deposit", 10000.0), ("invoice", 26750.0),
    ]


async def test_deposit_cannot_exceed_total(manager, invoice):
    with pytest.raises(DomainValidationError):
        await manager.record_deposit(invoice.id, 50000.0)


async def test_keep_deposit_relabels_income(db_session, manager, invoice):
    await manager.record_deposit(invoice.id, 5000.0, deposit_date=date(2024, 5, 2))

    kept = await manager.keep_deposit(invoice.id)

    assert kept.status == "cancelled_deposit_kept"
    [income] = await _income(db_session)
    assert income.income_type == "deposit_kept"
    assert income.amount == 5000.0


async def test_refund_deposit_books_refund_expense(db_session, manager, invoice, stock):
    land, _ = stock
    await manager.record_deposit(invoice.id, 5000.0, deposit_date=date(2024, 5, 2),
                                 payment_method="cash")

    refunded = await manager.refund_deposit(invoice.id, refund_date=date(2024, 5, 9),
                                            notes="buyer withdrew")

    assert refunded.status == "cancelled_refunded"
    [expense] = await _expenses(db_session)
    assert expense.expense_type == "refund"
    assert expense.amount == 5000.0
    assert expense.payment_method == "cash"
    assert expense.reference_id == invoice.id
    assert expense.description.endswith("buyer withdrew")
    assert land.remaining_tonnage == 1000.0

    with pytest.raises(ConflictError):
        await manager.keep_deposit(invoice.id)


async def test_refunding_a_sale_restocks_and_offsets_income(db_session, manager, invoice, stock):
    land, crane = stock
    await manager.mark_paid(invoice.id, payment_date=date(2024, 5, 10))

    refunded = await manager.refund_sale(invoice.id, refund_date=date(2024, 5, 15))

    assert refunded.status == "refunded"
    assert crane.quantity == 1
    assert crane.status == "available"
    assert land.remaining_tonnage == 1000.0
    assert land.scrap_tonnage_sold == 0.0
    income = sum(r.amount for r in await _income(db_session))
    refunds = sum(e.amount for e in await _expenses(db_session))
    assert income == refunds == 36750.0


async def test_only_unpaid_invoices_are_editable(manager, invoice):
    updated = await manager.update_invoice(invoice.id, {"apply_tax": False})
    assert updated.total == 35000.0

    updated = await manager.update_invoice(
        invoice.id, {}, items=[{"description": "Survey", "quantity": 2, "unit_price": 750.0}]
    )
    assert updated.total == 1500.0
    assert len(updated.items) == 1

    await manager.mark_paid(invoice.id)
    with pytest.raises(ConflictError):
        await manager.update_invoice(invoice.id, {"notes": "too late"})


async def test_deleting_paid_invoice_reverses_everything(db_session, manager, invoice, stock):
    land, crane = stock
    await manager.mark_paid(invoice.id, payment_date=date(2024, 5, 10))

    await manager.delete_invoice(invoice.id)

    assert await _income(db_session) == []
    assert crane.quantity == 1
    assert land.remaining_tonnage == 1000.0
    listing = await manager.list_invoices()
    assert listing["invoices"] == []


async def test_listing_totals(manager, invoice):
    second = await manager.create_invoice(
        [{"description": "Towing", "quantity": 1, "unit_price": 4000.0}],
        client_name="Port Authority", date=date(2024, 5, 3), status="sent",
    )
    await manager.record_deposit(second.id, 1000.0)

    listing = await manager.list_invoices()

    assert listing["total_invoiced"] == 36750.0 + 4000.0
    assert listing["total_collected"] == 1000.0
    assert listing["unpaid_count"] == 1
