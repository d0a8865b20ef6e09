from datetime import date

import pytest
import pytest_asyncio
from sqlalchemy import select

from marine_ops.exceptions import DomainValidationError
from marine_ops.marine.overhauls import OverhaulManager, task_expense_description
from marine_ops.marine.vessels import VesselManager
from marine_ops.models import Expense, OverhaulTask


@pytest.fixture
def manager(db_session):
    return OverhaulManager(db_session)


@pytest_asyncio.fixture
async def project(db_session, companies, manager):
    vessel = await VesselManager(db_session).create_vessel(
        name="Sea Falcon", company_id=companies["marine"].id
    )
    return await manager.create_project(
        vessel_id=vessel.id, project_name="2024 dry dock", total_budget=50000.0
    )


async def _expenses(db_session):
    return (await db_session.execute(select(Expense))).scalars().all()


async def test_project_inherits_vessel_company(project, companies):
    assert project.company_id == companies["marine"].id
    assert project.total_spent == 0.0
    assert project.status == "planning"


async def test_completing_task_books_expense_and_updates_spend(db_session, manager, project):
    task = await manager.create_task(
        project.id, task_name="Overhaul main engine", component_type="engine",
        repair_type="major_overhaul", contractor_name="Emirates Marine Works",
        estimated_cost=10000.0,
    )
    assert await _expenses(db_session) == []

    await manager.update_task(task.id, {
        "status": "completed", "actual_cost": 12000.0, "end_date": date(2024, 6, 30),
    })

    [expense] = await _expenses(db_session)
    assert expense.amount == 12000.0
    assert expense.project_type == "overhaul"
    assert expense.project_id == project.id
    assert expense.status == "paid"
    assert expense.date == date(2024, 6, 30)
    assert expense.vendor_name == "Emirates Marine Works"
    assert "Overhaul main engine" in expense.description
    assert (await manager.get_project(project.id)).total_spent == 12000.0


async def test_completing_twice_books_once(db_session, manager, project):
    task = await manager.create_task(project.id, task_name="Hull blasting",
                                     component_type="hull", estimated_cost=3000.0)

    await manager.update_task(task.id, {"status": "completed"})
    await manager.update_task(task.id, {"status": "completed", "description": "second coat"})

    assert len(await _expenses(db_session)) == 1
    assert (await manager.get_project(project.id)).total_spent == 3000.0


async def test_task_created_completed_books_immediately(db_session, manager, project):
    await manager.create_task(project.id, task_name="Radio survey",
                              component_type="radio_equipment", status="completed",
                              actual_cost=800.0)

    [expense] = await _expenses(db_session)
    assert expense.amount == 800.0


async def test_costless_completion_books_nothing(db_session, manager, project):
    task = await manager.create_task(project.id, task_name="Inspection walkthrough")

    await manager.update_task(task.id, {"status": "completed"})

    assert await _expenses(db_session) == []


async def test_summary_reports_budget_use_and_breakdown(manager, project):
    first = await manager.create_task(project.id, task_name="Engine", component_type="engine",
                                      estimated_cost=10000.0)
    await manager.create_task(project.id, task_name="Generator", component_type="generator",
                              estimated_cost=4000.0)
    await manager.create_task(project.id, task_name="Injectors", component_type="engine",
                              estimated_cost=1000.0)
    await manager.update_task(first.id, {"status": "completed", "actual_cost": 12000.0})

    summary = await manager.project_summary(project.id)

    assert summary["total_budget"] == 50000.0
    assert summary["total_spent"] == 12000.0
    assert summary["remaining_budget"] == 38000.0
    assert summary["budget_utilization"] == 24.0
    assert summary["total_estimated_cost"] == 15000.0
    assert summary["completed_tasks"] == 1
    assert summary["total_tasks"] == 3
    assert summary["cost_by_component"] == {"engine": 11000.0, "generator": 4000.0}


async def test_recalculate_picks_up_manual_expenses(db_session, manager, project):
    db_session.add(Expense(amount=2500.0, date=date(2024, 7, 1),
                           project_type="overhaul", project_id=project.id))
    await db_session.commit()

    assert await manager.recalculate_total_spent(project.id) == 2500.0


async def test_rejects_unknown_choices(manager, project):
    with pytest.raises(DomainValidationError):
        await manager.create_task(project.id, task_name="Paint", component_type="paintwork")
    with pytest.raises(DomainValidationError):
        await manager.update_project(project.id, {"status": "abandoned"})
    with pytest.raises(DomainValidationError):
        await manager.create_project(vessel_id=999, project_name="Nowhere")


def test_expense_description_marks_estimates():
    task = OverhaulTask(task_name="Shaft alignment", component_type="propeller_shaft",
                        estimated_cost=900.0)

    assert task_expense_description(task) == "propeller shaft - Shaft alignment (Auto-generated)"

    task.actual_cost = 950.0
    assert task_expense_description(task) == "propeller shaft - Shaft alignment (Completed)"


async def test_vessel_running_costs_stay_out_of_overhaul_spend(db_session, manager, project):
    assert project.vessel_id == project.id
    db_session.add(Expense(amount=500.0, date=date(2024, 7, 1), category="fuel",
                           project_type="vessel", project_id=project.vessel_id))
    await db_session.commit()
    task = await manager.create_task(project.id, task_name="Replace seals", estimated_cost=100.0)

    await manager.update_task(task.id, {"status": "completed"})

    summary = await manager.project_summary(project.id)
    vessel_summary = await VesselManager(db_session).vessel_financial_summary(project.vessel_id)
    assert summary["total_spent"] == 100.0
    assert vessel_summary["overhaul_expenses"] == 100.0
    assert vessel_summary["vessel_expenses"] == 500.0
    assert await manager.recalculate_total_spent(project.id) == 100.0
