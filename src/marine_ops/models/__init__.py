"""
Marine Ops Database Models

This package contains all SQLAlchemy models for the operations dashboard:
- Company, User: Tenancy and logins
- Vessel: Vessels, their rentals and sales
- Overhaul: Overhaul projects and tasks
- Crew: Employees, assignments, certifications and payroll
- Maintenance: Scheduled maintenance
- Scrap: Land purchases, scrap sales and land equipment
- Finance: Expenses, income, invoices and quotations
- Banking: Bank accounts, transfers and statement balances
- Equity: Owners and their capital movements
"""

from .base import Base
from .company import Company, User
from .equity import Owner, CapitalContribution, CapitalWithdrawal, OwnerDistribution, PaymentSplit
from .vessel import Vessel, VesselScrapSale, VesselEquipmentSale, VesselRental
from .overhaul import OverhaulProject, OverhaulTask
from .crew import Employee, CrewAssignment, CrewCertification, SalaryPayment
from .maintenance import MaintenanceSchedule
from .scrap import LandPurchase, LandScrapSale, LandEquipment
from .finance import Expense, IncomeRecord, Invoice, InvoiceItem, Quotation, QuotationItem
from .banking import BankAccount, BankTransfer, BankBalanceRecord

__all__ = [
    "Base",
    "Company",
    "User",
    "Owner",
    "CapitalContribution",
    "CapitalWithdrawal",
    "OwnerDistribution",
    "PaymentSplit",
    "Vessel",
    "VesselScrapSale",
    "VesselEquipmentSale",
    "VesselRental",
    "OverhaulProject",
    "OverhaulTask",
    "Employee",
    "CrewAssignment",
    "CrewCertification",
    "SalaryPayment",
    "MaintenanceSchedule",
    "LandPurchase",
    "LandScrapSale",
    "LandEquipment",
    "Expense",
    "IncomeRecord",
    "Invoice",
    "InvoiceItem",
    "Quotation",
    "QuotationItem",
    "BankAccount",
    "BankTransfer",
    "BankBalanceRecord",
]
