"""
Owner equity: capital movements, distributions and expense payment splits.
"""

from .ledger import EquityLedger
from .splits import PaymentSplitManager, split_balance

__all__ = ["EquityLedger", "PaymentSplitManager", "split_balance"]
