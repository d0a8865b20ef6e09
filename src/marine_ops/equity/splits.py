"""
Per-owner splits of a single expense payment.
"""

from datetime import date
from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from marine_ops.models.equity import Owner, PaymentSplit
from marine_ops.models.finance import Expense
from marine_ops.exceptions import NotFoundError, DomainValidationError
import logging

logger = logging.getLogger(__name__)

BALANCE_TOLERANCE = 0.01


def split_balance(total_amount: float, splits: List[Dict]) -> Dict:
    """
    Compare what owners paid against the expense amount.

    Args:
        total_amount: Expense amount
        splits: Dicts carrying ``amount_paid``

    Returns:
        Dict with ``total_paid``, ``remaining``, ``is_balanced`` and a
        ``message`` describing any gap
    """
    total_paid = round(sum(split.get("amount_paid") or 0.0 for split in splits), 2)
    remaining = round(total_amount - total_paid, 2)
    is_balanced = abs(remaining) < BALANCE_TOLERANCE

    if is_balanced:
        message = None
    elif remaining > 0:
        message = f"{remaining:,.2f} still needs to be assigned to an owner"
    else:
        message = f"Total paid exceeds amount by {abs(remaining):,.2f}"

    return {
        "total_amount": total_amount,
        "total_paid": total_paid,
        "remaining": remaining,
        "is_balanced": is_balanced,
        "message": message,
    }


class PaymentSplitManager:
    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def list_splits(self, expense_id: int) -> List[PaymentSplit]:
        result = await self.db.execute(
            select(PaymentSplit).where(PaymentSplit.expense_id == expense_id).order_by(PaymentSplit.id)
        )
        return result.scalars().all()

    async def replace_splits(self, expense_id: int, splits: List[Dict],
                             payment_date: Optional[date] = None) -> Dict:
        """
        Swap the owner splits of an expense for a new set.

        Unbalanced splits are stored; the returned balance flags them.
        """
        expense = await self.db.get(Expense, expense_id)
        if expense is None:
            raise NotFoundError.for_entity("Expense", expense_id)

        owner_ids = {split["owner_id"] for split in splits}
        if owner_ids:
            found = set((await self.db.execute(
                select(Owner.id).where(Owner.id.in_(owner_ids))
            )).scalars().all())
            missing = sorted(owner_ids - found)
            if missing:
                raise NotFoundError(f"Owners not found: {', '.join(str(i) for i in missing)}")
        if any((split.get("amount_paid") or 0.0) < 0 for split in splits):
            raise DomainValidationError("Split amounts cannot be negative")

        await self.db.execute(delete(PaymentSplit).where(PaymentSplit.expense_id == expense_id))
        payment_date = payment_date or expense.paid_date or expense.date
        rows = [
            PaymentSplit(
                expense_id=expense_id,
                owner_id=split["owner_id"],
                amount_paid=split.get("amount_paid") or 0.0,
                payment_date=payment_date,
            )
            for split in splits
            if (split.get("amount_paid") or 0.0) > 0
        ]
        self.db.add_all(rows)
        await self.db.commit()

        balance = split_balance(expense.amount, splits)
        if not balance["is_balanced"]:
            logger.warning(f"Expense {expense_id} splits unbalanced: {balance['message']}")
        logger.info(f"Stored {len(rows)} payment splits for expense {expense_id}")
        return {"splits": rows, "balance": balance}
