"""
Finance models: expenses, income records, invoices and quotations.

Expenses and income are attached loosely to the thing they concern through
``project_type``/``project_id`` (expenses) or ``source_type``/``reference_id``
(income) rather than hard foreign keys, so one table covers vessels,
overhauls, lands and general overhead.
"""

from sqlalchemy import Column, Integer, String, Float, Date, Text, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin

EXPENSE_STATUSES = ("pending", "approved", "paid", "rejected")
PROJECT_TYPES = ("vessel", "overhaul", "land", "general", "other")
INVOICE_STATUSES = (
    "draft", "sent", "deposit_paid", "paid", "overdue", "cancelled",
    "cancelled_refunded", "cancelled_deposit_kept", "refunded",
)
ITEM_TYPES = ("equipment_sale", "scrap_sale", "vessel_rental", "service", "other")
QUOTATION_STATUSES = ("draft", "sent", "approved", "rejected", "converted", "expired")


class Expense(TimestampMixin, Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"), index=True)
    expense_type = Column(String(100), nullable=False, default="general")
    category = Column(String(100))
    amount = Column(Float, nullable=False)
    date = Column(Date, nullable=False, index=True)
    vendor_name = Column(String(255))

    # What the expense was spent on
    project_id = Column(Integer, index=True)
    project_type = Column(String(20), index=True)

    description = Column(Text)
    payment_method = Column(String(50))
    status = Column(String(20), nullable=False, default="pending")
    paid_date = Column(Date)
    paid_by_owner_id = Column(Integer, ForeignKey("owners.id", ondelete="SET NULL"), index=True)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id", ondelete="SET NULL"), index=True)
    reference_id = Column(Integer, index=True)  # invoice id for refund rows

    def __repr__(self):
        return f"<Expense(id={self.id}, amount={self.amount}, status='{self.status}')>"


class IncomeRecord(TimestampMixin, Base):
    __tablename__ = "income_records"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"), index=True)
    income_date = Column(Date, nullable=False, index=True)
    income_type = Column(String(50), nullable=False)  # invoice, deposit_kept, rental, other
    source_type = Column(String(50))
    amount = Column(Float, nullable=False)
    description = Column(Text)
    payment_method = Column(String(50))
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id", ondelete="SET NULL"), index=True)
    reference_id = Column(Integer, index=True)


class Invoice(TimestampMixin, Base):
    """
    Sales (``income``) or purchase (``expense``) invoice.

    Paying an income invoice books an income record and takes the sold
    equipment and scrap tonnage out of stock; the cancellation and refund
    states record what happened to any deposit.
    """
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    invoice_number = Column(String(50), nullable=False, unique=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"), index=True)
    invoice_type = Column(String(20), nullable=False, default="income")

    client_name = Column(String(255), nullable=False)
    client_address = Column(Text)
    client_phone = Column(String(50))
    client_email = Column(String(255))

    date = Column(Date, nullable=False)
    due_date = Column(Date)

    # Amounts
    subtotal = Column(Float, nullable=False, default=0.0)
    apply_tax = Column(Boolean, nullable=False, default=False)
    tax_rate = Column(Float, nullable=False, default=0.0)
    tax = Column(Float, nullable=False, default=0.0)
    total = Column(Float, nullable=False, default=0.0)

    status = Column(String(30), nullable=False, default="draft")
    payment_date = Column(Date)
    payment_method = Column(String(50))
    payment_bank_account_id = Column(Integer, ForeignKey("bank_accounts.id", ondelete="SET NULL"))

    # Deposit
    deposit_amount = Column(Float, nullable=False, default=0.0)
    deposit_date = Column(Date)
    deposit_payment_method = Column(String(50))
    deposit_bank_account_id = Column(Integer, ForeignKey("bank_accounts.id", ondelete="SET NULL"))
    deposit_refund_bank_account_id = Column(Integer, ForeignKey("bank_accounts.id", ondelete="SET NULL"))

    notes = Column(Text)

    items = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="InvoiceItem.id",
    )

    @property
    def balance_due(self) -> float:
        return round(self.total - (self.deposit_amount or 0.0), 2)

    def __repr__(self):
        return f"<Invoice(id={self.id}, number='{self.invoice_number}', status='{self.status}')>"


class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    item_type = Column(String(30), nullable=False, default="other")
    description = Column(Text, nullable=False)
    quantity = Column(Float, nullable=False, default=1.0)
    unit = Column(String(20))  # pcs, tons, days
    unit_price = Column(Float, nullable=False, default=0.0)
    total_price = Column(Float, nullable=False, default=0.0)

    # Stock links, set for equipment_sale and scrap_sale items
    land_equipment_id = Column(Integer, ForeignKey("land_equipment.id", ondelete="SET NULL"))
    land_id = Column(Integer, ForeignKey("land_purchases.id", ondelete="SET NULL"))

    invoice = relationship("Invoice", back_populates="items")


class Quotation(TimestampMixin, Base):
    """
    Price offer to a client.

    An approved quotation is converted into a draft invoice carrying the
    same line items; ``converted_to_invoice_id`` points at that invoice.
    """
    __tablename__ = "quotations"

    id = Column(Integer, primary_key=True, index=True)
    quotation_number = Column(String(50), nullable=False, unique=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"), index=True)

    client_name = Column(String(255), nullable=False)
    client_address = Column(Text)
    client_phone = Column(String(50))
    client_email = Column(String(255))

    date = Column(Date, nullable=False)
    valid_until = Column(Date)

    subtotal = Column(Float, nullable=False, default=0.0)
    apply_tax = Column(Boolean, nullable=False, default=False)
    tax_rate = Column(Float, nullable=False, default=0.0)
    tax = Column(Float, nullable=False, default=0.0)
    total = Column(Float, nullable=False, default=0.0)

    status = Column(String(20), nullable=False, default="draft")
    payment_terms = Column(Text)
    deposit_percent = Column(Float)
    notes = Column(Text)
    converted_to_invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="SET NULL"), index=True)

    items = relationship(
        "QuotationItem",
        back_populates="quotation",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="QuotationItem.id",
    )

    def __repr__(self):
        return f"<Quotation(id={self.id}, number='{self.quotation_number}', status='{self.status}')>"


class QuotationItem(Base):
    __tablename__ = "quotation_items"

    id = Column(Integer, primary_key=True, index=True)
    quotation_id = Column(Integer, ForeignKey("quotations.id", ondelete="CASCADE"), nullable=False, index=True)
    item_type = Column(String(30), nullable=False, default="other")
    description = Column(Text, nullable=False)
    quantity = Column(Float, nullable=False, default=1.0)
    unit = Column(String(20))
    unit_price = Column(Float, nullable=False, default=0.0)
    total_price = Column(Float, nullable=False, default=0.0)

    land_equipment_id = Column(Integer, ForeignKey("land_equipment.id", ondelete="SET NULL"))
    land_id = Column(Integer, ForeignKey("land_purchases.id", ondelete="SET NULL"))

    quotation = relationship("Quotation", back_populates="items")
