"""
Scheduled vessel maintenance.
"""

from sqlalchemy import Column, Integer, String, Float, Date, Text, ForeignKey
from .base import Base, TimestampMixin

MAINTENANCE_TYPES = ("routine", "preventive", "corrective", "emergency", "inspection")
PRIORITIES = ("low", "medium", "high", "critical")
MAINTENANCE_STATUSES = ("scheduled", "in_progress", "completed", "overdue", "cancelled")


class MaintenanceSchedule(TimestampMixin, Base):
    __tablename__ = "maintenance_schedules"

    id = Column(Integer, primary_key=True, index=True)
    vessel_id = Column(Integer, ForeignKey("vessels.id", ondelete="CASCADE"), nullable=False, index=True)
    maintenance_type = Column(String(30), nullable=False, default="routine")
    description = Column(Text)
    scheduled_date = Column(Date, nullable=False, index=True)
    completed_date = Column(Date)
    estimated_cost = Column(Float)
    actual_cost = Column(Float)
    priority = Column(String(20), nullable=False, default="medium")
    status = Column(String(20), nullable=False, default="scheduled")
    notes = Column(Text)
