from datetime import date

import pytest
import pytest_asyncio

from marine_ops.exceptions import ConflictError, DomainValidationError
from marine_ops.marine.crew import CrewManager, certification_status, salary_total
from marine_ops.marine.vessels import VesselManager

TODAY = date(2024, 6, 1)


@pytest.fixture
def manager(db_session):
    return CrewManager(db_session)


@pytest_asyncio.fixture
async def employee(manager):
    return await manager.create_employee(
        employee_code="EMP-001", full_name="Rashid Al Mansoori", position="Chief Engineer",
        salary=9000.0, salary_type="monthly",
    )


@pytest.mark.parametrize("expiry, expected", [
    (date(2024, 5, 31), "expired"),
    (date(2024, 6, 1), "expired"),
    (date(2024, 6, 2), "expiring_soon"),
    (date(2024, 7, 1), "expiring_soon"),
    (date(2024, 7, 2), "valid"),
])
def test_certification_status_windows(expiry, expected):
    assert certification_status(expiry, today=TODAY, window_days=30) == expected


def test_salary_total_adds_bonuses_and_subtracts_deductions():
    assert salary_total(5000.0, 500.0, 200.0) == 5300.0
    assert salary_total(5000.0, None, None) == 5000.0


async def test_employee_codes_are_unique(manager, employee):
    with pytest.raises(ConflictError):
        await manager.create_employee(employee_code="EMP-001", full_name="Someone Else")


async def test_certification_listing_counts_expired_and_expiring(manager, employee):
    for name, expiry in (
        ("STCW Basic Safety", date(2024, 5, 1)),
        ("GMDSS Operator", date(2024, 6, 20)),
        ("Engine Watch", date(2025, 6, 1)),
    ):
        await manager.create_certification(employee_id=employee.id, certification_name=name,
                                           expiry_date=expiry)

    listing = await manager.list_certifications(employee_id=employee.id, today=TODAY)

    assert listing["total"] == 3
    assert listing["expired"] == 1
    assert listing["expiring_soon"] == 1
    assert [status for _, status in listing["certifications"]] == [
        "expired", "expiring_soon", "valid",
    ]


async def test_certification_cannot_expire_before_issue(manager, employee):
    with pytest.raises(DomainValidationError):
        await manager.create_certification(
            employee_id=employee.id, certification_name="Backwards",
            issue_date=date(2024, 6, 1), expiry_date=date(2024, 1, 1),
        )


async def test_salary_total_is_derived_on_create_and_update(manager, employee):
    payment = await manager.record_salary_payment(
        employee_id=employee.id, payment_date=date(2024, 5, 31), period="2024-05",
        base_amount=9000.0, bonuses=1000.0, deductions=250.0, total_amount=1.0,
    )
    assert payment.total_amount == 9750.0

    payment = await manager.update_salary_payment(payment.id, {"deductions": 0.0})
    assert payment.total_amount == 10000.0

    listing = await manager.list_salary_payments(employee_id=employee.id)
    assert listing["total_paid"] == 10000.0


async def test_assignment_counts_by_status(db_session, manager, employee):
    vessel = await VesselManager(db_session).create_vessel(name="Sea Falcon")
    await manager.create_assignment(vessel_id=vessel.id, employee_id=employee.id,
                                    role="Chief Engineer", assignment_date=date(2024, 1, 1),
                                    status="active")
    await manager.create_assignment(vessel_id=vessel.id, employee_id=employee.id,
                                    role="Relief", assignment_date=date(2024, 8, 1))

    listing = await manager.list_assignments(vessel_id=vessel.id)

    assert listing["total"] == 2
    assert listing["active"] == 1
    assert listing["scheduled"] == 1
    assert listing["completed"] == 0


async def test_assignment_rejects_missing_vessel_and_bad_dates(db_session, manager, employee):
    with pytest.raises(DomainValidationError):
        await manager.create_assignment(vessel_id=321, employee_id=employee.id,
                                        assignment_date=date(2024, 1, 1))

    vessel = await VesselManager(db_session).create_vessel(name="Sea Falcon")
    with pytest.raises(DomainValidationError):
        await manager.create_assignment(vessel_id=vessel.id, employee_id=employee.id,
                                        assignment_date=date(2024, 2, 1),
                                        end_date=date(2024, 1, 1))
