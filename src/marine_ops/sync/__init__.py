"""
Reconciliation jobs for denormalized totals.
"""

from .jobs import sync_expenses, sync_tonnage

__all__ = ["sync_expenses", "sync_tonnage"]
