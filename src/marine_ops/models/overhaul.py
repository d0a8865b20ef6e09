"""
Vessel overhaul projects and their tasks.

``total_spent`` on a project is denormalized from the expenses booked
against it and is rewritten whenever a task completes or the expense sync
runs.
"""

from sqlalchemy import Column, Integer, String, Float, Date, Text, ForeignKey
from .base import Base, TimestampMixin

PROJECT_STATUSES = ("planning", "in_progress", "on_hold", "completed", "cancelled")
TASK_STATUSES = ("pending", "in_progress", "on_hold", "completed")
COMPONENT_TYPES = (
    "engine", "generator", "radio_equipment", "navigation_equipment", "hull",
    "propeller_shaft", "safety_equipment", "accommodation", "reclassification", "other",
)
REPAIR_TYPES = (
    "top_overhaul", "major_overhaul", "complete_replacement", "repair",
    "maintenance", "inspection", "upgrade", "reclassification",
)


class OverhaulProject(TimestampMixin, Base):
    __tablename__ = "vessel_overhaul_projects"

    id = Column(Integer, primary_key=True, index=True)
    vessel_id = Column(Integer, ForeignKey("vessels.id", ondelete="CASCADE"), nullable=False, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"), index=True)
    project_name = Column(String(255), nullable=False)
    description = Column(Text)
    start_date = Column(Date)
    end_date = Column(Date)
    status = Column(String(20), nullable=False, default="planning")
    total_budget = Column(Float)
    total_spent = Column(Float, nullable=False, default=0.0)

    def __repr__(self):
        return f"<OverhaulProject(id={self.id}, name='{self.project_name}', status='{self.status}')>"


class OverhaulTask(TimestampMixin, Base):
    __tablename__ = "overhaul_tasks"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("vessel_overhaul_projects.id", ondelete="CASCADE"), nullable=False, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"))
    task_name = Column(String(255), nullable=False)
    component_type = Column(String(50), nullable=False, default="engine")
    repair_type = Column(String(50), nullable=False, default="maintenance")
    contractor_name = Column(String(255))
    description = Column(Text)
    start_date = Column(Date)
    end_date = Column(Date)
    estimated_cost = Column(Float)
    actual_cost = Column(Float)
    status = Column(String(20), nullable=False, default="pending")

    @property
    def cost(self) -> float:
        """Actual cost when known, otherwise the estimate."""
        return self.actual_cost or self.estimated_cost or 0.0
