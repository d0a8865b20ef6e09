from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from marine_ops.api.deps import require_permission, hides_totals
from marine_ops.db import get_db_session
from marine_ops.finance import ReportBuilder
from marine_ops.models import User

router = APIRouter()


@router.get("")
async def dashboard_overview(
    user: User = Depends(require_permission("dashboard", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    """Headline figures; financial totals are null for roles that may not see them"""
    return await ReportBuilder(db).dashboard_overview(hide_totals=hides_totals(user, "dashboard"))
