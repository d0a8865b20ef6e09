from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from marine_ops.api.deps import require_permission
from marine_ops.db import get_db_session
from marine_ops.models import User
from marine_ops.sync import sync_expenses, sync_tonnage
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/sync/expenses")
async def run_expense_sync(
    user: User = Depends(require_permission("sync", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    """Book missing expenses for completed overhaul tasks"""
    logger.info(f"Expense sync requested by user {user.id}")
    return await sync_expenses(db)


@router.post("/sync/tonnage")
async def run_tonnage_sync(
    user: User = Depends(require_permission("sync", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    """Recompute remaining tonnage of every land from its sales"""
    logger.info(f"Tonnage sync requested by user {user.id}")
    return await sync_tonnage(db)
