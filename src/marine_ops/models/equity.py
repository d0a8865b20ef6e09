"""
Owner equity models.

Tracks who put money into the business and who took money out:
direct capital contributions and withdrawals, distributions taken out of
specific sales, and per-owner splits of a single expense payment.
"""

from sqlalchemy import Column, Integer, String, Float, Date, Text, ForeignKey
from .base import Base, TimestampMixin


class Owner(TimestampMixin, Base):
    __tablename__ = "owners"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255))
    phone = Column(String(50))
    ownership_percentage = Column(Float, nullable=False, default=50.0)
    initial_capital = Column(Float, nullable=False, default=0.0)
    status = Column(String(20), nullable=False, default="active")  # active, inactive

    def __repr__(self):
        return f"<Owner(id={self.id}, name='{self.name}')>"


class CapitalContribution(TimestampMixin, Base):
    __tablename__ = "capital_contributions"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("owners.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    contribution_date = Column(Date, nullable=False)
    contribution_type = Column(String(50), default="cash")
    description = Column(Text)


class CapitalWithdrawal(TimestampMixin, Base):
    __tablename__ = "capital_withdrawals"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("owners.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    withdrawal_date = Column(Date, nullable=False)
    withdrawal_type = Column(String(50), default="cash")
    description = Column(Text)


class OwnerDistribution(TimestampMixin, Base):
    """Money an owner took out of a specific sale (``source_type``/``source_id``)."""
    __tablename__ = "owner_distributions"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("owners.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    distribution_date = Column(Date, nullable=False)
    source_type = Column(String(50), nullable=False)  # scrap_sale, equipment_sale, vessel_scrap_sale
    source_id = Column(Integer, index=True)
    status = Column(String(20), nullable=False, default="taken")
    description = Column(Text)


class PaymentSplit(TimestampMixin, Base):
    __tablename__ = "payment_splits"

    id = Column(Integer, primary_key=True, index=True)
    expense_id = Column(Integer, ForeignKey("expenses.id", ondelete="CASCADE"), nullable=False, index=True)
    owner_id = Column(Integer, ForeignKey("owners.id", ondelete="CASCADE"), nullable=False, index=True)
    amount_paid = Column(Float, nullable=False, default=0.0)
    payment_date = Column(Date)
