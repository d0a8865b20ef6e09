"""
Expense and income bookkeeping.
"""

from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from marine_ops.models.finance import Expense, IncomeRecord, EXPENSE_STATUSES, PROJECT_TYPES
from marine_ops.models.equity import PaymentSplit
from marine_ops.finance.banking import check_bank_account
from marine_ops.repository import Repository
from marine_ops.tenancy import company_scope
from marine_ops.exceptions import DomainValidationError
import logging

logger = logging.getLogger(__name__)


def expense_totals(expenses: List[Expense]) -> Dict[str, float]:
    """All, paid and pending totals over a list of expenses."""
    totals = {"total": 0.0, "paid": 0.0, "pending": 0.0}
    for expense in expenses:
        amount = expense.amount or 0.0
        totals["total"] += amount
        if expense.status == "paid":
            totals["paid"] += amount
        elif expense.status == "pending":
            totals["pending"] += amount
    return {key: round(value, 2) for key, value in totals.items()}


class ExpenseManager:
    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.expenses = Repository(db_session, Expense)

    async def get_expense(self, expense_id: int) -> Expense:
        return await self.expenses.get(expense_id)

    async def list_expenses(self, company_id: Optional[int] = None, status: Optional[str] = None,
                            project_type: Optional[str] = None, project_id: Optional[int] = None,
                            date_from: Optional[date] = None,
                            date_to: Optional[date] = None) -> Dict:
        """Filtered expenses with their totals."""
        criteria = []
        scope = await company_scope(self.db, company_id)
        if scope is not None:
            criteria.append(Expense.company_id.in_(scope))
        if status:
            criteria.append(Expense.status == status)
        if project_type:
            criteria.append(Expense.project_type == project_type)
        if project_id is not None:
            criteria.append(Expense.project_id == project_id)
        if date_from:
            criteria.append(Expense.date >= date_from)
        if date_to:
            criteria.append(Expense.date <= date_to)

        expenses = await self.expenses.list(*criteria, order_by=Expense.date.desc())
        return {"expenses": expenses, "totals": expense_totals(expenses)}

    async def create_expense(self, **values) -> Expense:
        self._check_values(values)
        await check_bank_account(self.db, values.get("bank_account_id"))
        if values.get("status") == "paid" and not values.get("paid_date"):
            values["paid_date"] = values["date"]
        expense = await self.expenses.create(**values)
        await self.db.commit()
        logger.info(f"Recorded expense {expense.id}: {expense.amount} ({expense.category})")
        return expense

    async def update_expense(self, expense_id: int, changes: Dict) -> Expense:
        self._check_values(changes)
        await check_bank_account(self.db, changes.get("bank_account_id"))
        expense = await self.expenses.get(expense_id)
        if changes.get("status") == "paid" and not (changes.get("paid_date") or expense.paid_date):
            changes["paid_date"] = date.today()
        for field, value in changes.items():
            setattr(expense, field, value)
        await self.db.commit()
        return expense

    async def delete_expense(self, expense_id: int) -> None:
        await self.expenses.delete(expense_id)
        await self.db.commit()
        logger.info(f"Deleted expense {expense_id}")

    async def expense_splits(self, expense_id: int) -> List[PaymentSplit]:
        await self.expenses.get(expense_id)
        result = await self.db.execute(
            select(PaymentSplit).where(PaymentSplit.expense_id == expense_id).order_by(PaymentSplit.id)
        )
        return result.scalars().all()

    @staticmethod
    def _check_values(values: Dict):
        if values.get("status") is not None and values["status"] not in EXPENSE_STATUSES:
            raise DomainValidationError(f"Unknown expense status: {values['status']}")
        if values.get("project_type") is not None and values["project_type"] not in PROJECT_TYPES:
            raise DomainValidationError(f"Unknown project type: {values['project_type']}")
        if values.get("amount") is not None and values["amount"] <= 0:
            raise DomainValidationError("Expense amount must be positive")


class IncomeManager:
    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.records = Repository(db_session, IncomeRecord, "Income record")

    async def list_income(self, company_id: Optional[int] = None, income_type: Optional[str] = None,
                          date_from: Optional[date] = None,
                          date_to: Optional[date] = None) -> Dict:
        """Income records with the total and a breakdown by income type."""
        criteria = []
        scope = await company_scope(self.db, company_id)
        if scope is not None:
            criteria.append(IncomeRecord.company_id.in_(scope))
        if income_type:
            criteria.append(IncomeRecord.income_type == income_type)
        if date_from:
            criteria.append(IncomeRecord.income_date >= date_from)
        if date_to:
            criteria.append(IncomeRecord.income_date <= date_to)

        records = await self.records.list(*criteria, order_by=IncomeRecord.income_date.desc())
        by_type = defaultdict(float)
        for record in records:
            by_type[record.income_type] += record.amount or 0.0

        return {
            "records": records,
            "total": round(sum(by_type.values()), 2),
            "by_type": {key: round(value, 2) for key, value in by_type.items()},
        }

    async def get_income(self, income_id: int) -> IncomeRecord:
        return await self.records.get(income_id)

    async def create_income(self, **values) -> IncomeRecord:
        if values.get("amount") is not None and values["amount"] <= 0:
            raise DomainValidationError("Income amount must be positive")
        await check_bank_account(self.db, values.get("bank_account_id"))
        record = await self.records.create(**values)
        await self.db.commit()
        logger.info(f"Recorded {record.income_type} income {record.id}: {record.amount}")
        return record

    async def update_income(self, income_id: int, changes: Dict) -> IncomeRecord:
        await check_bank_account(self.db, changes.get("bank_account_id"))
        record = await self.records.update(income_id, changes)
        await self.db.commit()
        return record

    async def delete_income(self, income_id: int) -> None:
        await self.records.delete(income_id)
        await self.db.commit()
