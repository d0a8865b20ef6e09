from datetime import date

import pytest_asyncio
from sqlalchemy import select

from marine_ops.models import (
    Expense, LandPurchase, LandScrapSale, OverhaulProject, OverhaulTask, Vessel,
)
from marine_ops.sync import sync_expenses, sync_tonnage


@pytest_asyncio.fixture
async def project(db_session):
    vessel = Vessel(name="Sea Falcon")
    db_session.add(vessel)
    await db_session.flush()
    project = OverhaulProject(vessel_id=vessel.id, project_name="Dry dock 2024", status="in_progress")
    db_session.add(project)
    await db_session.flush()
    db_session.add_all([
        OverhaulTask(project_id=project.id, task_name="Main engine rebuild", status="completed",
                     component_type="main_engine", actual_cost=40000.0, end_date=date(2024, 6, 1)),
        OverhaulTask(project_id=project.id, task_name="Hull blasting", status="completed",
                     component_type="hull", estimated_cost=12000.0),
        OverhaulTask(project_id=project.id, task_name="Radar swap", status="in_progress",
                     actual_cost=8000.0),
        OverhaulTask(project_id=project.id, task_name="Survey", status="completed"),
    ])
    await db_session.commit()
    return project


async def test_sync_expenses_books_missing_task_expenses(db_session, project):
    summary = await sync_expenses(db_session)

    assert summary == {"expenses_created": 2, "total_amount": 52000.0, "projects_updated": 1}
    expenses = (await db_session.execute(select(Expense).order_by(Expense.id))).scalars().all()
    assert [e.description for e in expenses] == [
        "main engine - Main engine rebuild (Completed)",
        "hull - Hull blasting (Auto-generated)",
    ]
    assert expenses[0].date == date(2024, 6, 1)
    assert all(e.status == "paid" and e.project_type == "overhaul" for e in expenses)
    assert project.total_spent == 52000.0


async def test_sync_expenses_is_idempotent(db_session, project):
    await sync_expenses(db_session)

    again = await sync_expenses(db_session)

    assert again["expenses_created"] == 0
    assert again["total_amount"] == 0.0
    assert len((await db_session.execute(select(Expense))).scalars().all()) == 2
    assert project.total_spent == 52000.0


async def test_sync_expenses_keeps_existing_task_expense(db_session, project):
    db_session.add(Expense(project_id=project.id, project_type="overhaul", amount=39000.0,
                           date=date(2024, 6, 2), description="Invoice for main engine rebuild"))
    await db_session.commit()

    summary = await sync_expenses(db_session)

    assert summary["expenses_created"] == 1
    assert project.total_spent == 39000.0 + 12000.0


async def test_sync_tonnage_rewrites_land_totals(db_session):
    drifted = LandPurchase(land_name="Hamriyah Plot 7", estimated_tonnage=1000.0,
                           remaining_tonnage=10.0, scrap_tonnage_sold=0.0)
    oversold = LandPurchase(land_name="Jebel Ali Yard", estimated_tonnage=100.0,
                            remaining_tonnage=100.0)
    db_session.add_all([drifted, oversold])
    await db_session.flush()
    db_session.add_all([
        LandScrapSale(land_id=drifted.id, sale_date=date(2024, 3, 1), quantity_tons=300.0),
        LandScrapSale(land_id=drifted.id, sale_date=date(2024, 3, 2), quantity_tons=150.5),
        LandScrapSale(land_id=oversold.id, sale_date=date(2024, 3, 3), quantity_tons=120.0),
    ])
    await db_session.commit()

    summary = await sync_tonnage(db_session)

    assert summary == {
        "lands_updated": 2,
        "total_estimated": 1100.0,
        "total_remaining": 529.5,
        "total_sold": 570.5,
    }
    assert drifted.remaining_tonnage == 549.5
    assert drifted.scrap_tonnage_sold == 450.5
    assert oversold.remaining_tonnage == -20.0
    assert await sync_tonnage(db_session) == summary
