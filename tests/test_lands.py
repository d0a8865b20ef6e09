from datetime import date

import pytest
import pytest_asyncio

from marine_ops.equity.ledger import EquityLedger
from marine_ops.exceptions import DomainValidationError
from marine_ops.models import Expense
from marine_ops.scrap.lands import LandManager


@pytest.fixture
def manager(db_session):
    return LandManager(db_session)


@pytest_asyncio.fixture
async def land(manager, companies):
    return await manager.create_land(
        land_name="Hamriyah Plot 7", location="Sharjah", purchase_price=250000.0,
        estimated_tonnage=1000.0, company_id=companies["scrap"].id,
    )


async def test_new_land_has_sold_nothing(land):
    assert land.remaining_tonnage == 1000.0
    assert land.scrap_tonnage_sold == 0.0
    assert land.status == "active"
    assert land.extraction_percent == 0.0


async def test_sales_reduce_remaining_tonnage(manager, land, companies):
    sale = await manager.add_sale(land.id, sale_date=date(2024, 3, 1), buyer_name="Emirates Steel",
                                  quantity_tons=200.0, price_per_ton=150.0)
    await manager.add_sale(land.id, sale_date=date(2024, 3, 8), quantity_tons=50.0,
                           price_per_ton=160.0)

    land = await manager.get_land(land.id)
    assert sale.total_amount == 30000.0
    assert sale.company_id == companies["scrap"].id
    assert land.remaining_tonnage == 750.0
    assert land.scrap_tonnage_sold == 250.0
    assert land.extraction_percent == 25.0


async def test_deleting_sale_restores_tonnage(manager, land):
    sale = await manager.add_sale(land.id, sale_date=date(2024, 3, 1), quantity_tons=200.0,
                                  price_per_ton=150.0)

    await manager.delete_sale(sale.id)

    land = await manager.get_land(land.id)
    assert land.remaining_tonnage == 1000.0
    assert land.scrap_tonnage_sold == 0.0


async def test_oversold_land_goes_negative(manager, land):
    await manager.add_sale(land.id, sale_date=date(2024, 3, 1), quantity_tons=1100.0,
                           price_per_ton=100.0)

    assert (await manager.get_land(land.id)).remaining_tonnage == -100.0


async def test_sale_quantity_must_be_positive(manager, land):
    with pytest.raises(DomainValidationError):
        await manager.add_sale(land.id, sale_date=date(2024, 3, 1), quantity_tons=0.0)


async def test_changing_estimate_recomputes_remaining(manager, land):
    await manager.add_sale(land.id, sale_date=date(2024, 3, 1), quantity_tons=100.0,
                           price_per_ton=150.0)

    land = await manager.update_land(land.id, {"estimated_tonnage": 1200.0})

    assert land.remaining_tonnage == 1100.0


async def test_distribution_info_tracks_owner_withdrawals(db_session, manager, land):
    sale = await manager.add_sale(land.id, sale_date=date(2024, 3, 1), quantity_tons=200.0,
                                  price_per_ton=150.0)
    ledger = EquityLedger(db_session)
    owner = await ledger.create_owner(name="Khalid", ownership_percentage=50.0)
    await ledger.add_distribution(owner_id=owner.id, amount=10000.0,
                                  distribution_date=date(2024, 3, 2),
                                  source_type="scrap_sale", source_id=sale.id)

    info = await manager.sale_distribution_info(sale.id)

    assert info["total_amount"] == 30000.0
    assert info["total_distributed"] == 10000.0
    assert info["remaining"] == 20000.0
    assert info["fully_distributed"] is False

    await ledger.add_distribution(owner_id=owner.id, amount=20000.0,
                                  distribution_date=date(2024, 3, 3),
                                  source_type="scrap_sale", source_id=sale.id)
    assert (await manager.sale_distribution_info(sale.id))["fully_distributed"] is True


async def test_financial_summary(db_session, manager, land):
    await manager.add_equipment(land.id, equipment_name="Crawler crane", estimated_value=40000.0)
    await manager.add_equipment(land.id, equipment_name="Generator", estimated_value=5000.0,
                                sale_price=6500.0, status="sold")
    await manager.add_sale(land.id, sale_date=date(2024, 3, 1), quantity_tons=200.0,
                           price_per_ton=150.0)
    db_session.add(Expense(amount=12000.0, date=date(2024, 2, 1), project_type="land",
                           project_id=land.id))
    await db_session.commit()

    summary = await manager.land_financial_summary(land.id)

    assert summary["equipment_value"] == 46500.0
    assert summary["scrap_revenue"] == 30000.0
    assert summary["total_expenses"] == 12000.0
    assert summary["net_profit"] == 46500.0 + 30000.0 - 250000.0 - 12000.0
    assert summary["extracted_tonnage"] == 200.0
    assert summary["extraction_percent"] == 20.0


async def test_lands_listed_under_parent_company(manager, land, companies):
    assert [l.id for l in await manager.list_lands(company_id=companies["parent"].id)] == [land.id]
    assert await manager.list_lands(company_id=companies["marine"].id) == []
