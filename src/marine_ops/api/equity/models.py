from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from datetime import date


class OwnerCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[str] = None
    phone: Optional[str] = None
    ownership_percentage: float = Field(50.0, ge=0, le=100)
    initial_capital: float = Field(0.0, ge=0)
    status: str = "active"


class OwnerUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = None
    phone: Optional[str] = None
    ownership_percentage: Optional[float] = Field(None, ge=0, le=100)
    initial_capital: Optional[float] = Field(None, ge=0)
    status: Optional[str] = None


class OwnerResponse(OwnerCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)


class ContributionCreate(BaseModel):
    owner_id: int
    amount: float = Field(..., gt=0)
    contribution_date: date
    contribution_type: str = "cash"
    description: Optional[str] = None


class ContributionResponse(ContributionCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)


class WithdrawalCreate(BaseModel):
    owner_id: int
    amount: float = Field(..., gt=0)
    withdrawal_date: date
    withdrawal_type: str = "cash"
    description: Optional[str] = None


class WithdrawalResponse(WithdrawalCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)


class DistributionCreate(BaseModel):
    owner_id: int
    amount: float = Field(..., gt=0)
    distribution_date: date
    source_type: str = Field(..., min_length=1, max_length=50)
    source_id: Optional[int] = None
    status: str = "taken"
    description: Optional[str] = None


class DistributionResponse(DistributionCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)


class SplitIn(BaseModel):
    owner_id: int
    amount_paid: float


class SplitRequest(BaseModel):
    splits: List[SplitIn]
    payment_date: Optional[date] = None


class SplitResponse(BaseModel):
    id: int
    expense_id: int
    owner_id: int
    amount_paid: float
    payment_date: Optional[date] = None

    model_config = ConfigDict(from_attributes=True)


class SplitBalance(BaseModel):
    total_amount: float
    total_paid: float
    remaining: float
    is_balanced: bool
    message: Optional[str] = None


class SplitResult(BaseModel):
    splits: List[SplitResponse]
    balance: SplitBalance


class OwnerEquity(BaseModel):
    owner_id: int
    name: str
    ownership_percentage: float
    total_contributions: float
    vessel_purchases_paid: float
    expenses_paid: float
    salaries_paid: float
    total_invested: float
    net_withdrawals: float
    current_equity: float


class EquityBalance(BaseModel):
    difference: float
    is_balanced: bool
    message: str


class EquitySummary(BaseModel):
    owners: List[OwnerEquity]
    total_investment: float
    fair_share: float
    balance: Optional[EquityBalance] = None
