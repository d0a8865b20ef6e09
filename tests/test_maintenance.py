from datetime import date

import pytest
import pytest_asyncio

from marine_ops.exceptions import DomainValidationError
from marine_ops.marine.maintenance import MaintenanceManager
from marine_ops.marine.vessels import VesselManager


@pytest.fixture
def manager(db_session):
    return MaintenanceManager(db_session)


@pytest_asyncio.fixture
async def vessel(db_session):
    return await VesselManager(db_session).create_vessel(name="Sea Falcon")


async def test_only_active_vessels_can_be_scheduled(db_session, manager):
    scrapped = await VesselManager(db_session).create_vessel(name="Old Hulk", status="scrapped")

    with pytest.raises(DomainValidationError):
        await manager.create_schedule(vessel_id=scrapped.id, scheduled_date=date(2024, 7, 1))
    with pytest.raises(DomainValidationError):
        await manager.create_schedule(vessel_id=999, scheduled_date=date(2024, 7, 1))


async def test_new_schedule_defaults(manager, vessel):
    schedule = await manager.create_schedule(vessel_id=vessel.id, scheduled_date=date(2024, 7, 1))

    assert schedule.status == "scheduled"
    assert schedule.priority == "medium"
    assert schedule.maintenance_type == "routine"


async def test_mark_overdue_only_touches_past_scheduled_items(manager, vessel):
    past = await manager.create_schedule(vessel_id=vessel.id, scheduled_date=date(2024, 5, 1))
    future = await manager.create_schedule(vessel_id=vessel.id, scheduled_date=date(2024, 7, 1))
    done = await manager.create_schedule(vessel_id=vessel.id, scheduled_date=date(2024, 4, 1),
                                         status="completed")

    changed = await manager.mark_overdue(today=date(2024, 6, 1))

    assert changed == 1
    assert (await manager.get_schedule(past.id)).status == "overdue"
    assert (await manager.get_schedule(future.id)).status == "scheduled"
    assert (await manager.get_schedule(done.id)).status == "completed"
    assert await manager.mark_overdue(today=date(2024, 6, 1)) == 0


async def test_completing_stamps_completed_date(manager, vessel):
    schedule = await manager.create_schedule(vessel_id=vessel.id, scheduled_date=date(2024, 5, 1))

    schedule = await manager.update_schedule(schedule.id, {"status": "completed"})

    assert schedule.completed_date == date.today()


async def test_rejects_unknown_priority(manager, vessel):
    with pytest.raises(DomainValidationError):
        await manager.create_schedule(vessel_id=vessel.id, scheduled_date=date(2024, 5, 1),
                                      priority="urgent")
