"""
Bank accounts, transfers between them and statement reconciliation.

The calculated balance of an account is::

    opening_balance + income + transfers in - paid expenses - transfers out

A statement balance recorded by hand is compared against it; the
difference is the account's variance.
"""

from datetime import date
from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from marine_ops.models.banking import BankAccount, BankTransfer, BankBalanceRecord, ACCOUNT_TYPES, TRANSFER_TYPES
from marine_ops.models.finance import Expense, IncomeRecord
from marine_ops.repository import Repository
from marine_ops.tenancy import company_scope
from marine_ops.exceptions import ConflictError, DomainValidationError, NotFoundError
import logging

logger = logging.getLogger(__name__)

# Differences below half a fil count as reconciled
RECONCILE_TOLERANCE = 0.005


async def check_bank_account(db: AsyncSession, account_id: Optional[int]) -> Optional[int]:
    """Make sure money is booked against an existing, open account."""
    if account_id is None:
        return None
    account = await db.get(BankAccount, account_id)
    if account is None:
        raise NotFoundError.for_entity("Bank account", account_id)
    if account.status != "active":
        raise DomainValidationError(f"Bank account {account.account_name} is closed")
    return account_id


class BankAccountManager:
    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.accounts = Repository(db_session, BankAccount, "Bank account")
        self.transfers = Repository(db_session, BankTransfer, "Bank transfer")

    async def get_account(self, account_id: int) -> BankAccount:
        return await self.accounts.get(account_id)

    async def list_accounts(self, company_id: Optional[int] = None,
                            status: Optional[str] = "active") -> List[BankAccount]:
        criteria = []
        if status:
            criteria.append(BankAccount.status == status)
        scope = await company_scope(self.db, company_id)
        if scope is not None:
            criteria.append(BankAccount.company_id.in_(scope))
        return await self.accounts.list(*criteria, order_by=BankAccount.account_name)

    async def create_account(self, **values) -> BankAccount:
        self._check_values(values)
        await self._check_name_free(values["account_name"])
        account = await self.accounts.create(**values)
        await self.db.commit()
        logger.info(f"Opened bank account {account.account_name} with {account.opening_balance}")
        return account

    async def update_account(self, account_id: int, changes: Dict) -> BankAccount:
        self._check_values(changes)
        account = await self.accounts.get(account_id)
        if changes.get("account_name") and changes["account_name"] != account.account_name:
            await self._check_name_free(changes["account_name"])
        for field, value in changes.items():
            setattr(account, field, value)
        await self.db.commit()
        return account

    async def delete_account(self, account_id: int) -> None:
        """Delete an account nothing was ever booked against; close it otherwise."""
        account = await self.accounts.get(account_id)
        booked = await self.db.scalar(select(func.count(IncomeRecord.id)).where(
            IncomeRecord.bank_account_id == account_id))
        booked += await self.db.scalar(select(func.count(Expense.id)).where(
            Expense.bank_account_id == account_id))
        booked += await self.db.scalar(select(func.count(BankTransfer.id)).where(
            or_(BankTransfer.from_account_id == account_id, BankTransfer.to_account_id == account_id)))
        if booked:
            raise ConflictError(f"Bank account {account.account_name} has {booked} movements; close it instead")

        await self.db.delete(account)
        await self.db.commit()
        logger.info(f"Deleted bank account {account.account_name}")

    async def record_transfer(self, from_account_id: int, amount: float,
                              transfer_date: Optional[date] = None,
                              to_account_id: Optional[int] = None,
                              transfer_type: str = "transfer",
                              description: Optional[str] = None) -> BankTransfer:
        """Move money out of an account, into another one when ``to_account_id`` is set."""
        if amount <= 0:
            raise DomainValidationError("Transfer amount must be positive")
        if transfer_type not in TRANSFER_TYPES:
            raise DomainValidationError(f"Unknown transfer type: {transfer_type}")
        if to_account_id is not None and to_account_id == from_account_id:
            raise DomainValidationError("Cannot transfer to the same account")
        await check_bank_account(self.db, from_account_id)
        await check_bank_account(self.db, to_account_id)

        transfer = await self.transfers.create(
            from_account_id=from_account_id,
            to_account_id=to_account_id,
            amount=amount,
            transfer_date=transfer_date or date.today(),
            transfer_type=transfer_type,
            description=description,
        )
        await self.db.commit()
        logger.info(f"Transfer of {amount} out of account {from_account_id}")
        return transfer

    async def list_transfers(self, account_id: int) -> List[BankTransfer]:
        await self.accounts.get(account_id)
        return await self.transfers.list(
            or_(BankTransfer.from_account_id == account_id, BankTransfer.to_account_id == account_id),
            order_by=BankTransfer.transfer_date.desc(),
        )

    async def record_statement_balance(self, account_id: int, manual_balance: float,
                                       recorded_date: Optional[date] = None,
                                       notes: Optional[str] = None) -> Dict:
        """Store the balance shown by the bank and return the refreshed reconciliation."""
        await self.accounts.get(account_id)
        self.db.add(BankBalanceRecord(
            bank_account_id=account_id,
            recorded_date=recorded_date or date.today(),
            manual_balance=manual_balance,
            notes=notes,
        ))
        await self.db.commit()
        return await self.account_balance(account_id)

    async def account_balance(self, account_id: int) -> Dict:
        account = await self.accounts.get(account_id)

        total_income = await self._sum(IncomeRecord.amount, IncomeRecord.bank_account_id == account_id)
        total_expenses = await self._sum(
            Expense.amount, Expense.bank_account_id == account_id, Expense.status == "paid"
        )
        total_withdrawals = await self._sum(BankTransfer.amount, BankTransfer.from_account_id == account_id)
        total_transfers_in = await self._sum(BankTransfer.amount, BankTransfer.to_account_id == account_id)
        calculated = round(
            (account.opening_balance or 0.0) + total_income + total_transfers_in
            - total_expenses - total_withdrawals, 2
        )

        result = await self.db.execute(
            select(BankBalanceRecord)
            .where(BankBalanceRecord.bank_account_id == account_id)
            .order_by(BankBalanceRecord.recorded_date.desc(), BankBalanceRecord.id.desc())
            .limit(1)
        )
        latest = result.scalar_one_or_none()
        if latest is None:
            variance, reconciliation = 0.0, "pending"
        else:
            variance = round(latest.manual_balance - calculated, 2)
            reconciliation = "reconciled" if abs(variance) < RECONCILE_TOLERANCE else "variance"

        return {
            "account_id": account.id,
            "account_name": account.account_name,
            "bank_name": account.bank_name,
            "account_number": account.account_number,
            "currency": account.currency,
            "status": account.status,
            "opening_balance": account.opening_balance or 0.0,
            "total_income": total_income,
            "total_expenses": total_expenses,
            "total_withdrawals": total_withdrawals,
            "total_transfers_in": total_transfers_in,
            "calculated_balance": calculated,
            "latest_manual_balance": latest.manual_balance if latest else None,
            "last_reconciled_date": latest.recorded_date if latest else None,
            "variance": variance,
            "reconciliation": reconciliation,
        }

    async def balances(self, company_id: Optional[int] = None) -> List[Dict]:
        """Reconciliation figures for every open account."""
        accounts = await self.list_accounts(company_id=company_id)
        return [await self.account_balance(account.id) for account in accounts]

    async def _sum(self, column, *criteria) -> float:
        total = await self.db.scalar(select(func.coalesce(func.sum(column), 0.0)).where(*criteria))
        return round(total or 0.0, 2)

    async def _check_name_free(self, account_name: str):
        if await self.db.scalar(select(BankAccount.id).where(BankAccount.account_name == account_name)):
            raise ConflictError(f"Bank account {account_name} already exists")

    @staticmethod
    def _check_values(values: Dict):
        if values.get("account_type") is not None and values["account_type"] not in ACCOUNT_TYPES:
            raise DomainValidationError(f"Unknown account type: {values['account_type']}")
        if values.get("status") is not None and values["status"] not in ("active", "closed"):
            raise DomainValidationError(f"Unknown account status: {values['status']}")
