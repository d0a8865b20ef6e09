from datetime import date

import pytest

from marine_ops.exceptions import DomainValidationError, NotFoundError
from marine_ops.marine.vessels import VesselManager
from marine_ops.models import Expense, OverhaulProject


@pytest.fixture
def manager(db_session):
    return VesselManager(db_session)


async def test_financial_summary_combines_sales_rentals_and_costs(db_session, manager):
    vessel = await manager.create_vessel(name="Sea Falcon", purchase_price=100000.0)
    await manager.record_equipment_sale(
        vessel.id, equipment_name="Main engine", sale_date=date(2024, 2, 1), sale_price=5000.0
    )
    await manager.record_scrap_sale(
        vessel.id, sale_date=date(2024, 2, 10), quantity_tons=20.0, price_per_ton=300.0
    )
    # Only paid rentals that are active or completed earn income
    await manager.create_rental(vessel_id=vessel.id, customer_name="Dubai Dredging",
                                start_date=date(2024, 3, 1), total_amount=8000.0,
                                status="active", payment_status="paid")
    await manager.create_rental(vessel_id=vessel.id, customer_name="Late Payer",
                                start_date=date(2024, 3, 1), total_amount=3000.0,
                                status="completed", payment_status="unpaid")
    await manager.create_rental(vessel_id=vessel.id, customer_name="Cancelled Charter",
                                start_date=date(2024, 3, 1), total_amount=1000.0,
                                status="cancelled", payment_status="paid")

    project = OverhaulProject(vessel_id=vessel.id, project_name="Dry dock", total_spent=0.0)
    db_session.add(project)
    await db_session.flush()
    db_session.add_all([
        Expense(amount=2000.0, date=date(2024, 2, 5), project_type="vessel", project_id=vessel.id),
        Expense(amount=4000.0, date=date(2024, 4, 5), project_type="overhaul", project_id=project.id),
    ])
    await db_session.commit()

    summary = await manager.vessel_financial_summary(vessel.id)

    assert summary["equipment_sales"] == 5000.0
    assert summary["scrap_sales"] == 6000.0
    assert summary["rental_income"] == 8000.0
    assert summary["vessel_expenses"] == 2000.0
    assert summary["overhaul_expenses"] == 4000.0
    assert summary["total_revenue"] == 19000.0
    assert summary["total_costs"] == 106000.0
    assert summary["net_profit_loss"] == -87000.0


async def test_summary_of_bare_vessel_is_zero(manager):
    vessel = await manager.create_vessel(name="Empty Hull")

    summary = await manager.vessel_financial_summary(vessel.id)

    assert summary["purchase_price"] == 0.0
    assert summary["net_profit_loss"] == 0.0


async def test_scrap_sale_total_is_tons_times_price(manager):
    vessel = await manager.create_vessel(name="Rusty Tug")

    sale = await manager.record_scrap_sale(
        vessel.id, sale_date=date(2024, 1, 1), quantity_tons=12.5, price_per_ton=410.0
    )

    assert sale.total_amount == 5125.0


async def test_rejects_unknown_status_and_backwards_rental(manager):
    with pytest.raises(DomainValidationError):
        await manager.create_vessel(name="Ghost", status="sunk")

    vessel = await manager.create_vessel(name="Sea Falcon")
    with pytest.raises(DomainValidationError):
        await manager.create_rental(vessel_id=vessel.id, customer_name="Backwards",
                                    start_date=date(2024, 5, 10), end_date=date(2024, 5, 1))


async def test_missing_vessel_raises_not_found(manager):
    with pytest.raises(NotFoundError):
        await manager.vessel_financial_summary(404)
