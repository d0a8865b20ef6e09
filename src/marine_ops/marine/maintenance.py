"""
Vessel maintenance scheduling.
"""

from datetime import date
from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import update
from marine_ops.models.maintenance import (
    MaintenanceSchedule, MAINTENANCE_TYPES, PRIORITIES, MAINTENANCE_STATUSES,
)
from marine_ops.models.vessel import Vessel
from marine_ops.repository import Repository
from marine_ops.exceptions import DomainValidationError
import logging

logger = logging.getLogger(__name__)


class MaintenanceManager:
    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.schedules = Repository(db_session, MaintenanceSchedule, "Maintenance schedule")

    async def list_schedules(self, vessel_id: Optional[int] = None,
                             status: Optional[str] = None) -> List[MaintenanceSchedule]:
        criteria = []
        if vessel_id is not None:
            criteria.append(MaintenanceSchedule.vessel_id == vessel_id)
        if status:
            criteria.append(MaintenanceSchedule.status == status)
        return await self.schedules.list(*criteria, order_by=MaintenanceSchedule.scheduled_date)

    async def get_schedule(self, schedule_id: int) -> MaintenanceSchedule:
        return await self.schedules.get(schedule_id)

    async def create_schedule(self, **values) -> MaintenanceSchedule:
        """Schedule maintenance for an active vessel."""
        vessel = await self.db.get(Vessel, values["vessel_id"])
        if vessel is None:
            raise DomainValidationError(f"Vessel {values['vessel_id']} does not exist")
        if vessel.status != "active":
            raise DomainValidationError(
                f"Vessel {vessel.id} is {vessel.status}; only active vessels can be scheduled"
            )

        values.setdefault("status", "scheduled")
        values.setdefault("priority", "medium")
        self._check_values(values)

        schedule = await self.schedules.create(**values)
        await self.db.commit()
        logger.info(f"Scheduled {schedule.maintenance_type} maintenance for vessel {vessel.id}")
        return schedule

    async def update_schedule(self, schedule_id: int, changes: Dict) -> MaintenanceSchedule:
        self._check_values(changes)
        if changes.get("status") == "completed" and not changes.get("completed_date"):
            changes["completed_date"] = date.today()
        schedule = await self.schedules.update(schedule_id, changes)
        await self.db.commit()
        return schedule

    async def delete_schedule(self, schedule_id: int) -> None:
        await self.schedules.delete(schedule_id)
        await self.db.commit()

    async def mark_overdue(self, today: Optional[date] = None) -> int:
        """Flag scheduled items whose date has passed; returns how many changed."""
        today = today or date.today()
        result = await self.db.execute(
            update(MaintenanceSchedule)
            .where(
                MaintenanceSchedule.status == "scheduled",
                MaintenanceSchedule.scheduled_date < today,
            )
            .values(status="overdue")
            .execution_options(synchronize_session="fetch")
        )
        await self.db.commit()
        if result.rowcount:
            logger.info(f"Marked {result.rowcount} maintenance items overdue")
        return result.rowcount

    @staticmethod
    def _check_values(values: Dict):
        checks = (
            ("maintenance type", values.get("maintenance_type"), MAINTENANCE_TYPES),
            ("priority", values.get("priority"), PRIORITIES),
            ("status", values.get("status"), MAINTENANCE_STATUSES),
        )
        for label, value, choices in checks:
            if value is not None and value not in choices:
                raise DomainValidationError(f"Unknown maintenance {label}: {value}")
