"""
Overhaul projects and tasks.

Completing a task books its cost as a paid expense against the project and
refreshes the project's ``total_spent``. The same expense shape is produced
by the expense reconciliation job, which relies on the task name appearing
in the expense description.
"""

from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from marine_ops.models.overhaul import (
    OverhaulProject, OverhaulTask, PROJECT_STATUSES, TASK_STATUSES,
    COMPONENT_TYPES, REPAIR_TYPES,
)
from marine_ops.models.vessel import Vessel
from marine_ops.models.finance import Expense
from marine_ops.repository import Repository
from marine_ops.tenancy import company_scope
from marine_ops.exceptions import DomainValidationError
import logging

logger = logging.getLogger(__name__)

# Expenses booked against an overhaul project; "vessel" expenses are keyed by vessel id
OVERHAUL_PROJECT_TYPE = "overhaul"


def task_expense_description(task: OverhaulTask) -> str:
    """Description for the expense booked when ``task`` completes."""
    component = (task.component_type or "other").replace("_", " ")
    suffix = "(Completed)" if task.actual_cost else "(Auto-generated)"
    return f"{component} - {task.task_name} {suffix}"


def build_task_expense(task: OverhaulTask, expense_date: Optional[date] = None) -> Optional[Expense]:
    """
    Build the paid expense for a completed task.

    Returns None when the task has no positive cost to book.
    """
    amount = task.cost
    if not amount or amount <= 0:
        return None

    expense_date = expense_date or task.end_date or date.today()
    return Expense(
        project_id=task.project_id,
        project_type=OVERHAUL_PROJECT_TYPE,
        company_id=task.company_id,
        expense_type="overhaul",
        date=expense_date,
        category=task.repair_type or "maintenance",
        description=task_expense_description(task),
        vendor_name=task.contractor_name,
        amount=amount,
        status="paid",
        paid_date=expense_date,
        payment_method="cash",
    )


async def recalculate_total_spent(db: AsyncSession, project_id: int) -> float:
    """Rewrite ``total_spent`` on a project from its expenses and return it."""
    total = await db.scalar(
        select(func.coalesce(func.sum(Expense.amount), 0.0)).where(
            Expense.project_id == project_id,
            Expense.project_type == OVERHAUL_PROJECT_TYPE,
        )
    )
    project = await db.get(OverhaulProject, project_id)
    if project is not None:
        project.total_spent = float(total or 0.0)
    return float(total or 0.0)


class OverhaulManager:
    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.projects = Repository(db_session, OverhaulProject, "Overhaul project")
        self.tasks = Repository(db_session, OverhaulTask, "Overhaul task")

    # Projects

    async def get_project(self, project_id: int) -> OverhaulProject:
        return await self.projects.get(project_id)

    async def list_projects(self, status: Optional[str] = None, vessel_id: Optional[int] = None,
                            company_id: Optional[int] = None) -> List[OverhaulProject]:
        criteria = []
        if status:
            criteria.append(OverhaulProject.status == status)
        if vessel_id is not None:
            criteria.append(OverhaulProject.vessel_id == vessel_id)
        scope = await company_scope(self.db, company_id)
        if scope is not None:
            criteria.append(OverhaulProject.company_id.in_(scope))
        return await self.projects.list(*criteria, order_by=OverhaulProject.created_at.desc())

    async def create_project(self, **values) -> OverhaulProject:
        self._check_choice("project status", values.get("status"), PROJECT_STATUSES)
        vessel = await self.db.get(Vessel, values["vessel_id"])
        if vessel is None:
            raise DomainValidationError(f"Vessel {values['vessel_id']} does not exist")
        values.setdefault("company_id", vessel.company_id)

        project = await self.projects.create(total_spent=0.0, **values)
        await self.db.commit()
        logger.info(f"Created overhaul project {project.id} for vessel {vessel.id}")
        return project

    async def update_project(self, project_id: int, changes: Dict) -> OverhaulProject:
        self._check_choice("project status", changes.get("status"), PROJECT_STATUSES)
        project = await self.projects.update(project_id, changes)
        await self.db.commit()
        return project

    async def delete_project(self, project_id: int) -> None:
        await self.projects.delete(project_id)
        await self.db.commit()
        logger.info(f"Deleted overhaul project {project_id}")

    async def recalculate_total_spent(self, project_id: int) -> float:
        await self.projects.get(project_id)
        total = await recalculate_total_spent(self.db, project_id)
        await self.db.commit()
        return total

    # Tasks

    async def list_tasks(self, project_id: int) -> List[OverhaulTask]:
        await self.projects.get(project_id)
        return await self.tasks.list(OverhaulTask.project_id == project_id, order_by=OverhaulTask.id)

    async def create_task(self, project_id: int, **values) -> OverhaulTask:
        project = await self.projects.get(project_id)
        self._check_task_values(values)
        values.setdefault("company_id", project.company_id)

        task = await self.tasks.create(project_id=project_id, **values)
        if task.status == "completed":
            await self._book_completion(task)
        await self.db.commit()
        return task

    async def update_task(self, task_id: int, changes: Dict) -> OverhaulTask:
        """Update a task, booking its expense when it transitions to completed."""
        self._check_task_values(changes)
        task = await self.tasks.get(task_id)
        was_completed = task.status == "completed"

        for field, value in changes.items():
            setattr(task, field, value)
        await self.db.flush()

        if task.status == "completed" and not was_completed:
            await self._book_completion(task)

        await self.db.commit()
        return task

    async def delete_task(self, task_id: int) -> None:
        await self.tasks.delete(task_id)
        await self.db.commit()

    async def _book_completion(self, task: OverhaulTask):
        expense = build_task_expense(task)
        if expense is None:
            logger.info(f"Task {task.id} completed without a cost, no expense booked")
            return

        self.db.add(expense)
        await self.db.flush()
        total = await recalculate_total_spent(self.db, task.project_id)
        logger.info(
            f"Task {task.id} completed: booked expense {expense.id} of {expense.amount}, "
            f"project {task.project_id} spent now {total}"
        )

    def _check_task_values(self, values: Dict):
        self._check_choice("task status", values.get("status"), TASK_STATUSES)
        self._check_choice("component type", values.get("component_type"), COMPONENT_TYPES)
        self._check_choice("repair type", values.get("repair_type"), REPAIR_TYPES)

    @staticmethod
    def _check_choice(label: str, value: Optional[str], choices):
        if value is not None and value not in choices:
            raise DomainValidationError(f"Unknown {label}: {value}")

    # Summary

    async def project_summary(self, project_id: int) -> Dict:
        """Budget usage and task breakdown for one project."""
        project = await self.projects.get(project_id)
        tasks = await self.tasks.list(OverhaulTask.project_id == project_id)

        budget = project.total_budget or 0.0
        spent = project.total_spent or 0.0

        by_component = defaultdict(float)
        for task in tasks:
            by_component[task.component_type] += task.estimated_cost or 0.0

        return {
            "project_id": project.id,
            "project_name": project.project_name,
            "status": project.status,
            "total_budget": budget,
            "total_spent": spent,
            "remaining_budget": budget - spent,
            "budget_utilization": round(spent / budget * 100, 1) if budget > 0 else 0.0,
            "total_estimated_cost": sum(task.estimated_cost or 0.0 for task in tasks),
            "completed_tasks": sum(1 for task in tasks if task.status == "completed"),
            "total_tasks": len(tasks),
            "cost_by_component": dict(by_component),
        }
