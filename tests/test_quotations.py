from datetime import date

import pytest
import pytest_asyncio
from sqlalchemy import select

from marine_ops.exceptions import ConflictError, DomainValidationError
from marine_ops.finance import InvoiceManager, QuotationManager
from marine_ops.models import IncomeRecord
from marine_ops.scrap.lands import LandManager


@pytest.fixture
def manager(db_session):
    return QuotationManager(db_session)


@pytest_asyncio.fixture
async def quotation(db_session, manager):
    land = await LandManager(db_session).create_land(land_name="Hamriyah Plot 7", estimated_tonnage=1000.0)
    return await manager.create_quotation(
        [
            {"item_type": "scrap_sale", "description": "HMS 1&2", "quantity": 40, "unit": "tons",
             "unit_price": 300.0, "land_id": land.id},
            {"item_type": "service", "description": "Loading", "quantity": 2, "unit_price": 250.0},
        ],
        client_name="Emirates Steel", date=date(2024, 4, 2), valid_until=date(2024, 4, 30),
        apply_tax=True, status="sent", payment_terms="30% deposit", deposit_percent=30.0,
    )


async def test_create_numbers_and_totals_quotation(manager, quotation):
    assert quotation.quotation_number == "QUO-2024-001"
    assert quotation.subtotal == 12500.0
    assert quotation.tax == 625.0
    assert quotation.total == 13125.0
    assert await manager.next_quotation_number(2024) == "QUO-2024-002"


async def test_quotation_needs_items(manager):
    with pytest.raises(DomainValidationError):
        await manager.create_quotation([], client_name="Port Authority", date=date(2024, 4, 2))


async def test_convert_approved_quotation_into_draft_invoice(db_session, manager, quotation):
    await manager.approve(quotation.id)

    invoice = await manager.convert_to_invoice(quotation.id, invoice_date=date(2024, 4, 10))

    assert invoice.invoice_number == "INV-2024-001"
    assert invoice.status == "draft"
    assert invoice.client_name == "Emirates Steel"
    assert (invoice.subtotal, invoice.tax, invoice.total) == (12500.0, 625.0, 13125.0)
    assert [(item.item_type, item.quantity, item.land_id) for item in invoice.items] == [
        ("scrap_sale", 40, quotation.items[0].land_id),
        ("service", 2, None),
    ]
    assert quotation.status == "converted"
    assert quotation.converted_to_invoice_id == invoice.id
    assert (await db_session.execute(select(IncomeRecord))).scalars().all() == []


async def test_only_approved_quotations_convert(manager, quotation):
    with pytest.raises(ConflictError, match="only approved"):
        await manager.convert_to_invoice(quotation.id)

    await manager.reject(quotation.id)
    with pytest.raises(ConflictError):
        await manager.approve(quotation.id)


async def test_deleting_invoice_reopens_quotation(db_session, manager, quotation):
    await manager.approve(quotation.id)
    invoice = await manager.convert_to_invoice(quotation.id)

    await InvoiceManager(db_session).delete_invoice(invoice.id)

    reopened = await manager.get_quotation(quotation.id)
    await db_session.refresh(reopened)
    assert reopened.status == "approved"
    assert reopened.converted_to_invoice_id is None


async def test_edit_rules(manager, quotation):
    updated = await manager.update_quotation(quotation.id, {"apply_tax": False})
    assert updated.total == 12500.0

    with pytest.raises(DomainValidationError, match="approve and reject"):
        await manager.update_quotation(quotation.id, {"status": "approved"})

    await manager.approve(quotation.id)
    with pytest.raises(ConflictError, match="can no longer be edited"):
        await manager.update_quotation(quotation.id, {"notes": "late change"})


async def test_delete_rules(manager, quotation):
    with pytest.raises(ConflictError, match="cannot be deleted"):
        await manager.delete_quotation(quotation.id)

    await manager.reject(quotation.id)
    await manager.delete_quotation(quotation.id)

    listing = await manager.list_quotations()
    assert listing["quotations"] == []
