from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from marine_ops.api.deps import require_permission
from marine_ops.api.equity.models import (
    OwnerCreate, OwnerUpdate, OwnerResponse,
    ContributionCreate, ContributionResponse,
    WithdrawalCreate, WithdrawalResponse,
    DistributionCreate, DistributionResponse,
    SplitRequest, SplitResponse, SplitResult, EquitySummary,
)
from marine_ops.db import get_db_session
from marine_ops.equity import EquityLedger, PaymentSplitManager, split_balance
from marine_ops.finance import ExpenseManager
from marine_ops.models import User

router = APIRouter()


@router.get("/owners", response_model=List[OwnerResponse])
async def list_owners(
    status: Optional[str] = None,
    _: User = Depends(require_permission("equity", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await EquityLedger(db).list_owners(status=status)


@router.post("/owners", response_model=OwnerResponse, status_code=status.HTTP_201_CREATED)
async def create_owner(
    owner_data: OwnerCreate,
    _: User = Depends(require_permission("equity", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    return await EquityLedger(db).create_owner(**owner_data.model_dump())


@router.put("/owners/{owner_id}", response_model=OwnerResponse)
async def update_owner(
    owner_id: int,
    owner_data: OwnerUpdate,
    _: User = Depends(require_permission("equity", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    return await EquityLedger(db).update_owner(owner_id, owner_data.model_dump(exclude_unset=True))


@router.delete("/owners/{owner_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_owner(
    owner_id: int,
    _: User = Depends(require_permission("equity", "delete")),
    db: AsyncSession = Depends(get_db_session)
):
    await EquityLedger(db).delete_owner(owner_id)


@router.get("/summary", response_model=EquitySummary)
async def owner_equity_summary(
    _: User = Depends(require_permission("equity", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    """Invested, withdrawn and current equity per active owner"""
    return await EquityLedger(db).owner_equity_summary()


@router.get("/contributions", response_model=List[ContributionResponse])
async def list_contributions(
    owner_id: Optional[int] = None,
    _: User = Depends(require_permission("equity", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await EquityLedger(db).list_contributions(owner_id)


@router.post("/contributions", response_model=ContributionResponse,
             status_code=status.HTTP_201_CREATED)
async def add_contribution(
    contribution_data: ContributionCreate,
    _: User = Depends(require_permission("equity", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    return await EquityLedger(db).add_contribution(**contribution_data.model_dump())


@router.delete("/contributions/{contribution_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contribution(
    contribution_id: int,
    _: User = Depends(require_permission("equity", "delete")),
    db: AsyncSession = Depends(get_db_session)
):
    await EquityLedger(db).delete_contribution(contribution_id)


@router.get("/withdrawals", response_model=List[WithdrawalResponse])
async def list_withdrawals(
    owner_id: Optional[int] = None,
    _: User = Depends(require_permission("equity", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await EquityLedger(db).list_withdrawals(owner_id)


@router.post("/withdrawals", response_model=WithdrawalResponse, status_code=status.HTTP_201_CREATED)
async def add_withdrawal(
    withdrawal_data: WithdrawalCreate,
    _: User = Depends(require_permission("equity", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    return await EquityLedger(db).add_withdrawal(**withdrawal_data.model_dump())


@router.delete("/withdrawals/{withdrawal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_withdrawal(
    withdrawal_id: int,
    _: User = Depends(require_permission("equity", "delete")),
    db: AsyncSession = Depends(get_db_session)
):
    await EquityLedger(db).delete_withdrawal(withdrawal_id)


@router.get("/distributions", response_model=List[DistributionResponse])
async def list_distributions(
    owner_id: Optional[int] = None,
    source_type: Optional[str] = None,
    source_id: Optional[int] = None,
    _: User = Depends(require_permission("equity", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await EquityLedger(db).list_distributions(
        owner_id=owner_id, source_type=source_type, source_id=source_id
    )


@router.post("/distributions", response_model=DistributionResponse,
             status_code=status.HTTP_201_CREATED)
async def add_distribution(
    distribution_data: DistributionCreate,
    _: User = Depends(require_permission("equity", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    return await EquityLedger(db).add_distribution(**distribution_data.model_dump())


@router.delete("/distributions/{distribution_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_distribution(
    distribution_id: int,
    _: User = Depends(require_permission("equity", "delete")),
    db: AsyncSession = Depends(get_db_session)
):
    await EquityLedger(db).delete_distribution(distribution_id)


@router.get("/expenses/{expense_id}/splits", response_model=SplitResult)
async def list_expense_splits(
    expense_id: int,
    _: User = Depends(require_permission("finance.expenses", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    expense = await ExpenseManager(db).get_expense(expense_id)
    splits = await PaymentSplitManager(db).list_splits(expense_id)
    balance = split_balance(expense.amount, [{"amount_paid": s.amount_paid} for s in splits])
    return {"splits": splits, "balance": balance}


@router.put("/expenses/{expense_id}/splits", response_model=SplitResult)
async def replace_expense_splits(
    expense_id: int,
    split_data: SplitRequest,
    _: User = Depends(require_permission("finance.expenses", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    """Replace the owner payment splits of an expense; unbalanced sets are flagged"""
    return await PaymentSplitManager(db).replace_splits(
        expense_id,
        [split.model_dump() for split in split_data.splits],
        payment_date=split_data.payment_date,
    )
