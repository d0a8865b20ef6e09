"""
Owner equity ledger.

For each active owner the ledger adds up everything they put into the
business (capital, vessel purchases, expenses and salaries paid from their
own pocket) and everything they took out (withdrawals and distributions).
"""

from collections import defaultdict
from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from marine_ops.models.equity import (
    Owner, CapitalContribution, CapitalWithdrawal, OwnerDistribution, PaymentSplit,
)
from marine_ops.models.finance import Expense
from marine_ops.models.crew import SalaryPayment
from marine_ops.models.vessel import Vessel
from marine_ops.repository import Repository
from marine_ops.exceptions import DomainValidationError
import logging

logger = logging.getLogger(__name__)

# Equity gap below which two owners count as balanced
BALANCE_THRESHOLD = 1000.0


async def _totals_by_owner(db: AsyncSession, owner_column, amount_column, *criteria) -> Dict[int, float]:
    totals = defaultdict(float)
    result = await db.execute(
        select(owner_column, amount_column).where(owner_column.is_not(None), *criteria)
    )
    for owner_id, amount in result.all():
        totals[owner_id] += amount or 0.0
    return totals


class EquityLedger:
    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.owners = Repository(db_session, Owner)
        self.contributions = Repository(db_session, CapitalContribution, "Contribution")
        self.withdrawals = Repository(db_session, CapitalWithdrawal, "Withdrawal")
        self.distributions = Repository(db_session, OwnerDistribution, "Distribution")

    # Owners

    async def list_owners(self, status: Optional[str] = None) -> List[Owner]:
        criteria = [Owner.status == status] if status else []
        return await self.owners.list(*criteria, order_by=Owner.name)

    async def get_owner(self, owner_id: int) -> Owner:
        return await self.owners.get(owner_id)

    async def create_owner(self, **values) -> Owner:
        self._check_percentage(values.get("ownership_percentage"))
        owner = await self.owners.create(**values)
        await self.db.commit()
        logger.info(f"Created owner {owner.id}: {owner.name}")
        return owner

    async def update_owner(self, owner_id: int, changes: Dict) -> Owner:
        self._check_percentage(changes.get("ownership_percentage"))
        owner = await self.owners.update(owner_id, changes)
        await self.db.commit()
        return owner

    async def delete_owner(self, owner_id: int) -> None:
        await self.owners.delete(owner_id)
        await self.db.commit()

    @staticmethod
    def _check_percentage(value: Optional[float]):
        if value is not None and not 0 <= value <= 100:
            raise DomainValidationError("Ownership percentage must be between 0 and 100")

    # Capital movements

    async def list_contributions(self, owner_id: Optional[int] = None) -> List[CapitalContribution]:
        criteria = [CapitalContribution.owner_id == owner_id] if owner_id else []
        return await self.contributions.list(
            *criteria, order_by=CapitalContribution.contribution_date.desc()
        )

    async def add_contribution(self, **values) -> CapitalContribution:
        await self.owners.get(values["owner_id"])
        self._check_amount(values.get("amount"))
        contribution = await self.contributions.create(**values)
        await self.db.commit()
        logger.info(f"Owner {contribution.owner_id} contributed {contribution.amount}")
        return contribution

    async def delete_contribution(self, contribution_id: int) -> None:
        await self.contributions.delete(contribution_id)
        await self.db.commit()

    async def list_withdrawals(self, owner_id: Optional[int] = None) -> List[CapitalWithdrawal]:
        criteria = [CapitalWithdrawal.owner_id == owner_id] if owner_id else []
        return await self.withdrawals.list(
            *criteria, order_by=CapitalWithdrawal.withdrawal_date.desc()
        )

    async def add_withdrawal(self, **values) -> CapitalWithdrawal:
        await self.owners.get(values["owner_id"])
        self._check_amount(values.get("amount"))
        withdrawal = await self.withdrawals.create(**values)
        await self.db.commit()
        logger.info(f"Owner {withdrawal.owner_id} withdrew {withdrawal.amount}")
        return withdrawal

    async def delete_withdrawal(self, withdrawal_id: int) -> None:
        await self.withdrawals.delete(withdrawal_id)
        await self.db.commit()

    async def list_distributions(self, owner_id: Optional[int] = None,
                                 source_type: Optional[str] = None,
                                 source_id: Optional[int] = None) -> List[OwnerDistribution]:
        criteria = []
        if owner_id:
            criteria.append(OwnerDistribution.owner_id == owner_id)
        if source_type:
            criteria.append(OwnerDistribution.source_type == source_type)
        if source_id:
            criteria.append(OwnerDistribution.source_id == source_id)
        return await self.distributions.list(
            *criteria, order_by=OwnerDistribution.distribution_date.desc()
        )

    async def add_distribution(self, **values) -> OwnerDistribution:
        await self.owners.get(values["owner_id"])
        self._check_amount(values.get("amount"))
        distribution = await self.distributions.create(**values)
        await self.db.commit()
        logger.info(
            f"Owner {distribution.owner_id} took {distribution.amount} "
            f"from {distribution.source_type} {distribution.source_id}"
        )
        return distribution

    async def delete_distribution(self, distribution_id: int) -> None:
        await self.distributions.delete(distribution_id)
        await self.db.commit()

    @staticmethod
    def _check_amount(amount: Optional[float]):
        if amount is None or amount <= 0:
            raise DomainValidationError("Amount must be positive")

    # Summary

    async def owner_equity_summary(self) -> Dict:
        """
        Equity position of every active owner.

        Returns:
            Dict with per-owner ``owners`` rows, ``total_investment``,
            ``fair_share`` and, for exactly two owners, a ``balance`` verdict
        """
        owners = await self.owners.list(Owner.status == "active", order_by=Owner.name)

        contributions = await _totals_by_owner(
            self.db, CapitalContribution.owner_id, CapitalContribution.amount
        )
        withdrawals = await _totals_by_owner(
            self.db, CapitalWithdrawal.owner_id, CapitalWithdrawal.amount
        )
        distributions = await _totals_by_owner(
            self.db, OwnerDistribution.owner_id, OwnerDistribution.amount
        )
        vessel_purchases = await _totals_by_owner(
            self.db, Vessel.paid_by_owner_id, Vessel.purchase_price
        )
        salaries = await _totals_by_owner(
            self.db, SalaryPayment.paid_by_owner_id, SalaryPayment.total_amount
        )
        split_payments = await _totals_by_owner(
            self.db, PaymentSplit.owner_id, PaymentSplit.amount_paid
        )

        # Expenses with splits are attributed through the splits only
        split_expense_ids = select(PaymentSplit.expense_id).distinct()
        direct_expenses = await _totals_by_owner(
            self.db, Expense.paid_by_owner_id, Expense.amount,
            Expense.id.not_in(split_expense_ids),
        )

        rows = []
        for owner in owners:
            total_contributions = (owner.initial_capital or 0.0) + contributions[owner.id]
            expenses_paid = direct_expenses[owner.id] + split_payments[owner.id]
            total_invested = (
                total_contributions + vessel_purchases[owner.id] + expenses_paid + salaries[owner.id]
            )
            net_withdrawals = withdrawals[owner.id] + distributions[owner.id]
            rows.append({
                "owner_id": owner.id,
                "name": owner.name,
                "ownership_percentage": owner.ownership_percentage,
                "total_contributions": round(total_contributions, 2),
                "vessel_purchases_paid": round(vessel_purchases[owner.id], 2),
                "expenses_paid": round(expenses_paid, 2),
                "salaries_paid": round(salaries[owner.id], 2),
                "total_invested": round(total_invested, 2),
                "net_withdrawals": round(net_withdrawals, 2),
                "current_equity": round(total_invested - net_withdrawals, 2),
            })

        total_investment = round(sum(row["total_invested"] for row in rows), 2)
        summary = {
            "owners": rows,
            "total_investment": total_investment,
            "fair_share": round(total_investment / len(rows), 2) if rows else 0.0,
            "balance": None,
        }

        if len(rows) == 2:
            gap = round(abs(rows[0]["current_equity"] - rows[1]["current_equity"]), 2)
            balanced = gap < BALANCE_THRESHOLD
            summary["balance"] = {
                "difference": gap,
                "is_balanced": balanced,
                "message": (
                    "Owners are balanced - contributions are approximately equal."
                    if balanced
                    else f"Difference: {gap:,.2f} - Consider balancing contributions."
                ),
            }
        return summary
