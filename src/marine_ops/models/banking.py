"""
Bank account models.

Income, expenses and invoice payments name the account the money moved
through; transfers move money between accounts or out of the business,
and manual balance records capture what the bank statement says so the
calculated balance can be reconciled against it.
"""

from sqlalchemy import Column, Integer, String, Float, Date, Text, ForeignKey
from .base import Base, TimestampMixin

ACCOUNT_TYPES = ("current", "savings", "cash", "other")
TRANSFER_TYPES = ("transfer", "withdrawal", "owner_draw", "fee")


class BankAccount(TimestampMixin, Base):
    __tablename__ = "bank_accounts"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"), index=True)
    account_name = Column(String(255), nullable=False, unique=True)
    bank_name = Column(String(255))
    account_number = Column(String(100))
    account_type = Column(String(20), nullable=False, default="current")
    currency = Column(String(10), nullable=False, default="AED")
    opening_balance = Column(Float, nullable=False, default=0.0)
    opening_date = Column(Date)
    status = Column(String(20), nullable=False, default="active")  # active, closed

    def __repr__(self):
        return f"<BankAccount(id={self.id}, name='{self.account_name}')>"


class BankTransfer(TimestampMixin, Base):
    """Money leaving an account, optionally landing in another one."""
    __tablename__ = "bank_transfers"

    id = Column(Integer, primary_key=True, index=True)
    from_account_id = Column(Integer, ForeignKey("bank_accounts.id", ondelete="CASCADE"),
                             nullable=False, index=True)
    to_account_id = Column(Integer, ForeignKey("bank_accounts.id", ondelete="SET NULL"), index=True)
    amount = Column(Float, nullable=False)
    transfer_date = Column(Date, nullable=False)
    transfer_type = Column(String(20), nullable=False, default="transfer")
    description = Column(Text)


class BankBalanceRecord(TimestampMixin, Base):
    """Balance read off a bank statement on a given day."""
    __tablename__ = "bank_balance_records"

    id = Column(Integer, primary_key=True, index=True)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id", ondelete="CASCADE"),
                             nullable=False, index=True)
    recorded_date = Column(Date, nullable=False)
    manual_balance = Column(Float, nullable=False)
    notes = Column(Text)
