"""
Employee, crew and payroll models.
"""

from sqlalchemy import Column, Integer, String, Float, Date, Text, ForeignKey
from .base import Base, TimestampMixin


class Employee(TimestampMixin, Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"), index=True)
    employee_code = Column(String(50), nullable=False, unique=True)
    full_name = Column(String(255), nullable=False)
    position = Column(String(100))
    department = Column(String(100))
    hire_date = Column(Date)
    salary = Column(Float)
    salary_type = Column(String(20))  # monthly, daily, hourly
    status = Column(String(20), nullable=False, default="active")  # active, inactive, terminated
    email = Column(String(255))
    phone = Column(String(50))
    address = Column(Text)
    emergency_contact = Column(String(255))
    emergency_phone = Column(String(50))

    def __repr__(self):
        return f"<Employee(id={self.id}, code='{self.employee_code}', name='{self.full_name}')>"


class CrewAssignment(TimestampMixin, Base):
    __tablename__ = "crew_assignments"

    id = Column(Integer, primary_key=True, index=True)
    vessel_id = Column(Integer, ForeignKey("vessels.id", ondelete="CASCADE"), nullable=False, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String(100))
    assignment_date = Column(Date, nullable=False)
    end_date = Column(Date)
    status = Column(String(20), nullable=False, default="scheduled")  # scheduled, active, completed
    notes = Column(Text)


class CrewCertification(TimestampMixin, Base):
    __tablename__ = "crew_certifications"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    certification_name = Column(String(255), nullable=False)
    certificate_number = Column(String(100))
    issuing_authority = Column(String(255))
    issue_date = Column(Date)
    expiry_date = Column(Date, nullable=False, index=True)


class SalaryPayment(TimestampMixin, Base):
    __tablename__ = "salary_payments"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    payment_date = Column(Date, nullable=False)
    period = Column(String(20))  # e.g. 2024-05
    base_amount = Column(Float, nullable=False, default=0.0)
    bonuses = Column(Float, nullable=False, default=0.0)
    deductions = Column(Float, nullable=False, default=0.0)
    total_amount = Column(Float, nullable=False, default=0.0)
    payment_method = Column(String(50))
    paid_by_owner_id = Column(Integer, ForeignKey("owners.id", ondelete="SET NULL"), index=True)
    notes = Column(Text)
