"""
Employees, crew assignments, certifications and salary payments.
"""

from collections import Counter
from datetime import date, timedelta
from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from marine_ops.models.crew import Employee, CrewAssignment, CrewCertification, SalaryPayment
from marine_ops.models.vessel import Vessel
from marine_ops.repository import Repository
from marine_ops.tenancy import company_scope
from marine_ops.exceptions import ConflictError, DomainValidationError
from marine_ops.config import config
import logging

logger = logging.getLogger(__name__)


def certification_status(expiry_date: date, today: Optional[date] = None,
                         window_days: Optional[int] = None) -> str:
    """
    Classify a certificate by its expiry date.

    Returns:
        ``expired`` from the expiry date on, ``expiring_soon`` when
        it falls within the warning window, otherwise ``valid``
    """
    today = today or date.today()
    window = config.cert_expiry_warning_days if window_days is None else window_days

    if expiry_date <= today:
        return "expired"
    if expiry_date <= today + timedelta(days=window):
        return "expiring_soon"
    return "valid"


def salary_total(base_amount: float, bonuses: float = 0.0, deductions: float = 0.0) -> float:
    return round((base_amount or 0.0) + (bonuses or 0.0) - (deductions or 0.0), 2)


class CrewManager:
    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.employees = Repository(db_session, Employee)
        self.assignments = Repository(db_session, CrewAssignment, "Crew assignment")
        self.certifications = Repository(db_session, CrewCertification, "Certification")
        self.salaries = Repository(db_session, SalaryPayment, "Salary payment")

    # Employees

    async def get_employee(self, employee_id: int) -> Employee:
        return await self.employees.get(employee_id)

    async def list_employees(self, status: Optional[str] = None,
                             company_id: Optional[int] = None) -> List[Employee]:
        criteria = []
        if status:
            criteria.append(Employee.status == status)
        scope = await company_scope(self.db, company_id)
        if scope is not None:
            criteria.append(Employee.company_id.in_(scope))
        return await self.employees.list(*criteria, order_by=Employee.full_name)

    async def create_employee(self, **values) -> Employee:
        existing = await self.db.scalar(
            select(Employee).where(Employee.employee_code == values["employee_code"])
        )
        if existing:
            raise ConflictError(f"Employee code {values['employee_code']} is already in use")

        employee = await self.employees.create(**values)
        await self.db.commit()
        logger.info(f"Created employee {employee.employee_code}: {employee.full_name}")
        return employee

    async def update_employee(self, employee_id: int, changes: Dict) -> Employee:
        employee = await self.employees.update(employee_id, changes)
        await self.db.commit()
        return employee

    async def delete_employee(self, employee_id: int) -> None:
        await self.employees.delete(employee_id)
        await self.db.commit()

    # Assignments

    async def list_assignments(self, vessel_id: Optional[int] = None,
                               status: Optional[str] = None) -> Dict:
        """Assignments plus counts by status."""
        criteria = []
        if vessel_id is not None:
            criteria.append(CrewAssignment.vessel_id == vessel_id)
        if status:
            criteria.append(CrewAssignment.status == status)
        assignments = await self.assignments.list(
            *criteria, order_by=CrewAssignment.assignment_date.desc()
        )
        counts = Counter(assignment.status for assignment in assignments)
        return {
            "assignments": assignments,
            "total": len(assignments),
            "active": counts.get("active", 0),
            "scheduled": counts.get("scheduled", 0),
            "completed": counts.get("completed", 0),
        }

    async def create_assignment(self, **values) -> CrewAssignment:
        if await self.db.get(Vessel, values["vessel_id"]) is None:
            raise DomainValidationError(f"Vessel {values['vessel_id']} does not exist")
        await self.employees.get(values["employee_id"])
        if values.get("end_date") and values["end_date"] < values["assignment_date"]:
            raise DomainValidationError("Assignment ends before it starts")

        assignment = await self.assignments.create(**values)
        await self.db.commit()
        logger.info(
            f"Assigned employee {assignment.employee_id} to vessel {assignment.vessel_id}"
        )
        return assignment

    async def update_assignment(self, assignment_id: int, changes: Dict) -> CrewAssignment:
        assignment = await self.assignments.update(assignment_id, changes)
        await self.db.commit()
        return assignment

    async def delete_assignment(self, assignment_id: int) -> None:
        await self.assignments.delete(assignment_id)
        await self.db.commit()

    # Certifications

    async def list_certifications(self, employee_id: Optional[int] = None,
                                  today: Optional[date] = None) -> Dict:
        """Certifications annotated with their status, plus expired and expiring counts."""
        criteria = []
        if employee_id is not None:
            criteria.append(CrewCertification.employee_id == employee_id)
        certifications = await self.certifications.list(
            *criteria, order_by=CrewCertification.expiry_date
        )

        today = today or date.today()
        rows = [
            (certification, certification_status(certification.expiry_date, today))
            for certification in certifications
        ]
        return {
            "certifications": rows,
            "total": len(rows),
            "expired": sum(1 for _, status in rows if status == "expired"),
            "expiring_soon": sum(1 for _, status in rows if status == "expiring_soon"),
        }

    async def create_certification(self, **values) -> CrewCertification:
        await self.employees.get(values["employee_id"])
        if values.get("issue_date") and values["issue_date"] > values["expiry_date"]:
            raise DomainValidationError("Certificate expires before it was issued")
        certification = await self.certifications.create(**values)
        await self.db.commit()
        return certification

    async def update_certification(self, certification_id: int, changes: Dict) -> CrewCertification:
        certification = await self.certifications.update(certification_id, changes)
        await self.db.commit()
        return certification

    async def delete_certification(self, certification_id: int) -> None:
        await self.certifications.delete(certification_id)
        await self.db.commit()

    # Salaries

    async def list_salary_payments(self, employee_id: Optional[int] = None) -> Dict:
        criteria = []
        if employee_id is not None:
            criteria.append(SalaryPayment.employee_id == employee_id)
        payments = await self.salaries.list(*criteria, order_by=SalaryPayment.payment_date.desc())
        return {
            "payments": payments,
            "total_paid": round(sum(payment.total_amount or 0.0 for payment in payments), 2),
        }

    async def record_salary_payment(self, **values) -> SalaryPayment:
        """Record a payslip; the total is always derived from its components."""
        await self.employees.get(values["employee_id"])
        values["total_amount"] = salary_total(
            values.get("base_amount", 0.0), values.get("bonuses", 0.0), values.get("deductions", 0.0)
        )
        payment = await self.salaries.create(**values)
        await self.db.commit()
        logger.info(f"Salary payment {payment.total_amount} to employee {payment.employee_id}")
        return payment

    async def update_salary_payment(self, payment_id: int, changes: Dict) -> SalaryPayment:
        payment = await self.salaries.get(payment_id)
        for field, value in changes.items():
            setattr(payment, field, value)
        payment.total_amount = salary_total(payment.base_amount, payment.bonuses, payment.deductions)
        await self.db.commit()
        return payment

    async def delete_salary_payment(self, payment_id: int) -> None:
        await self.salaries.delete(payment_id)
        await self.db.commit()
