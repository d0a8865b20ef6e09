"""
Finance: bank accounts, expenses, income, invoices, quotations, imports and reports.
"""

from .banking import BankAccountManager, check_bank_account
from .expenses import ExpenseManager, IncomeManager, expense_totals
from .importer import ExpenseImporter, ImportResult
from .invoices import InvoiceManager
from .quotations import QuotationManager
from .reports import ReportBuilder

__all__ = [
    "BankAccountManager",
    "check_bank_account",
    "ExpenseManager",
    "IncomeManager",
    "expense_totals",
    "ExpenseImporter",
    "ImportResult",
    "InvoiceManager",
    "QuotationManager",
    "ReportBuilder",
]
