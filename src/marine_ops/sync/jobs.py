"""
Reconciliation jobs.

Both jobs re-read source rows and rewrite the derived values, so running
them again on unchanged data changes nothing.
"""

import logging
from typing import Dict

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from marine_ops.models.overhaul import OverhaulTask
from marine_ops.models.finance import Expense
from marine_ops.models.scrap import LandPurchase
from marine_ops.marine.overhauls import (
    OVERHAUL_PROJECT_TYPE, build_task_expense, recalculate_total_spent,
)
from marine_ops.scrap.lands import recompute_land_tonnage

logger = logging.getLogger(__name__)


async def _task_has_expense(db: AsyncSession, task: OverhaulTask) -> bool:
    existing = await db.scalar(
        select(Expense.id)
        .where(
            Expense.project_id == task.project_id,
            Expense.project_type == OVERHAUL_PROJECT_TYPE,
            Expense.description.icontains(task.task_name, autoescape=True),
        )
        .limit(1)
    )
    return existing is not None


async def sync_expenses(db: AsyncSession) -> Dict:
    """
    Book an expense for every completed, costed overhaul task that lacks one
    and refresh ``total_spent`` on their projects.

    Returns:
        Dict: ``expenses_created``, ``total_amount`` and ``projects_updated``
    """
    logger.info("Starting expense sync")
    result = await db.execute(
        select(OverhaulTask)
        .where(
            OverhaulTask.status == "completed",
            or_(OverhaulTask.actual_cost > 0, OverhaulTask.estimated_cost > 0),
        )
        .order_by(OverhaulTask.id)
    )
    tasks = result.scalars().all()

    expenses_created = 0
    total_amount = 0.0
    for task in tasks:
        if await _task_has_expense(db, task):
            continue

        expense = build_task_expense(task)
        if expense is None:
            continue
        db.add(expense)
        await db.flush()

        expenses_created += 1
        total_amount += expense.amount
        logger.info(f"Booked {expense.amount} for completed task {task.id} ({task.task_name})")

    project_ids = sorted({task.project_id for task in tasks})
    for project_id in project_ids:
        await recalculate_total_spent(db, project_id)

    await db.commit()
    summary = {
        "expenses_created": expenses_created,
        "total_amount": round(total_amount, 2),
        "projects_updated": len(project_ids),
    }
    logger.info(f"Expense sync finished: {summary}")
    return summary


async def sync_tonnage(db: AsyncSession) -> Dict:
    """
    Recompute remaining and sold tonnage for every land from its scrap sales.

    Returns:
        Dict: ``lands_updated`` and the estimated, remaining and sold totals
    """
    logger.info("Starting tonnage sync")
    lands = (await db.execute(select(LandPurchase).order_by(LandPurchase.id))).scalars().all()

    total_estimated = 0.0
    total_remaining = 0.0
    total_sold = 0.0
    for land in lands:
        sold = await recompute_land_tonnage(db, land)
        total_estimated += land.estimated_tonnage or 0.0
        total_remaining += land.remaining_tonnage
        total_sold += sold

    await db.commit()
    summary = {
        "lands_updated": len(lands),
        "total_estimated": round(total_estimated, 3),
        "total_remaining": round(total_remaining, 3),
        "total_sold": round(total_sold, 3),
    }
    logger.info(f"Tonnage sync finished: {summary}")
    return summary
