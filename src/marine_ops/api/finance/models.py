from pydantic import BaseModel, Field, ConfigDict
from typing import Dict, List, Optional
import datetime as dt
from enum import Enum


class ExpenseStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    APPROVED = "approved"
    REJECTED = "rejected"


class ExpenseCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    company_id: Optional[int] = None
    expense_type: str = "general"
    category: Optional[str] = None
    amount: float = Field(..., gt=0)
    date: dt.date
    vendor_name: Optional[str] = None
    project_id: Optional[int] = None
    project_type: Optional[str] = None
    description: Optional[str] = None
    payment_method: Optional[str] = None
    status: ExpenseStatus = ExpenseStatus.PENDING
    paid_date: Optional[dt.date] = None
    paid_by_owner_id: Optional[int] = None
    bank_account_id: Optional[int] = None


class ExpenseUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    company_id: Optional[int] = None
    expense_type: Optional[str] = None
    category: Optional[str] = None
    amount: Optional[float] = Field(None, gt=0)
    date: Optional[dt.date] = None
    vendor_name: Optional[str] = None
    project_id: Optional[int] = None
    project_type: Optional[str] = None
    description: Optional[str] = None
    payment_method: Optional[str] = None
    status: Optional[ExpenseStatus] = None
    paid_date: Optional[dt.date] = None
    paid_by_owner_id: Optional[int] = None
    bank_account_id: Optional[int] = None


class ExpenseResponse(BaseModel):
    id: int
    company_id: Optional[int] = None
    expense_type: str
    category: Optional[str] = None
    amount: float
    date: dt.date
    vendor_name: Optional[str] = None
    project_id: Optional[int] = None
    project_type: Optional[str] = None
    description: Optional[str] = None
    payment_method: Optional[str] = None
    status: str
    paid_date: Optional[dt.date] = None
    paid_by_owner_id: Optional[int] = None
    bank_account_id: Optional[int] = None
    reference_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class ExpenseTotals(BaseModel):
    total: float
    paid: float
    pending: float


class ExpenseList(BaseModel):
    expenses: List[ExpenseResponse]
    totals: ExpenseTotals


class IncomeCreate(BaseModel):
    company_id: Optional[int] = None
    income_date: dt.date
    income_type: str = Field(..., min_length=1, max_length=50)
    source_type: Optional[str] = None
    amount: float = Field(..., gt=0)
    description: Optional[str] = None
    payment_method: Optional[str] = None
    bank_account_id: Optional[int] = None
    reference_id: Optional[int] = None


class IncomeUpdate(BaseModel):
    company_id: Optional[int] = None
    income_date: Optional[dt.date] = None
    income_type: Optional[str] = Field(None, min_length=1, max_length=50)
    source_type: Optional[str] = None
    amount: Optional[float] = Field(None, gt=0)
    description: Optional[str] = None
    payment_method: Optional[str] = None
    bank_account_id: Optional[int] = None


class IncomeResponse(IncomeCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)


class IncomeList(BaseModel):
    records: List[IncomeResponse]
    total: float
    by_type: Dict[str, float]


# Invoices

class InvoiceItemIn(BaseModel):
    item_type: str = "other"
    description: str = Field(..., min_length=1)
    quantity: float = Field(1.0, ge=0)
    unit: Optional[str] = None
    unit_price: float = Field(0.0, ge=0)
    land_equipment_id: Optional[int] = None
    land_id: Optional[int] = None


class InvoiceItemResponse(InvoiceItemIn):
    id: int
    total_price: float

    model_config = ConfigDict(from_attributes=True)


class InvoiceCreate(BaseModel):
    invoice_number: Optional[str] = None
    company_id: Optional[int] = None
    invoice_type: str = "income"
    client_name: str = Field(..., min_length=1, max_length=255)
    client_address: Optional[str] = None
    client_phone: Optional[str] = None
    client_email: Optional[str] = None
    date: dt.date
    due_date: Optional[dt.date] = None
    apply_tax: bool = False
    tax_rate: Optional[float] = Field(None, ge=0, le=100)
    status: str = "draft"
    payment_bank_account_id: Optional[int] = None
    notes: Optional[str] = None
    items: List[InvoiceItemIn] = Field(default_factory=list)


class InvoiceUpdate(BaseModel):
    client_name: Optional[str] = Field(None, min_length=1, max_length=255)
    client_address: Optional[str] = None
    client_phone: Optional[str] = None
    client_email: Optional[str] = None
    date: Optional[dt.date] = None
    due_date: Optional[dt.date] = None
    apply_tax: Optional[bool] = None
    tax_rate: Optional[float] = Field(None, ge=0, le=100)
    status: Optional[str] = None
    payment_bank_account_id: Optional[int] = None
    notes: Optional[str] = None
    items: Optional[List[InvoiceItemIn]] = None


class InvoiceResponse(BaseModel):
    id: int
    invoice_number: str
    company_id: Optional[int] = None
    invoice_type: str
    client_name: str
    client_address: Optional[str] = None
    client_phone: Optional[str] = None
    client_email: Optional[str] = None
    date: dt.date
    due_date: Optional[dt.date] = None
    subtotal: float
    apply_tax: bool
    tax_rate: float
    tax: float
    total: float
    status: str
    payment_date: Optional[dt.date] = None
    payment_method: Optional[str] = None
    payment_bank_account_id: Optional[int] = None
    deposit_amount: float = 0.0
    deposit_date: Optional[dt.date] = None
    deposit_payment_method: Optional[str] = None
    deposit_bank_account_id: Optional[int] = None
    deposit_refund_bank_account_id: Optional[int] = None
    balance_due: float
    notes: Optional[str] = None
    items: List[InvoiceItemResponse] = []

    model_config = ConfigDict(from_attributes=True)


class InvoiceList(BaseModel):
    invoices: List[InvoiceResponse]
    total_invoiced: float
    total_collected: float
    unpaid_count: int


class PaymentRequest(BaseModel):
    payment_date: Optional[dt.date] = None
    payment_method: Optional[str] = None
    bank_account_id: Optional[int] = None


class DepositRequest(BaseModel):
    amount: float = Field(..., gt=0)
    deposit_date: Optional[dt.date] = None
    payment_method: Optional[str] = None
    bank_account_id: Optional[int] = None


class RefundRequest(BaseModel):
    refund_date: Optional[dt.date] = None
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    bank_account_id: Optional[int] = None


# Bank accounts

class BankAccountCreate(BaseModel):
    company_id: Optional[int] = None
    account_name: str = Field(..., min_length=1, max_length=255)
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    account_type: str = "current"
    currency: str = Field("AED", min_length=3, max_length=10)
    opening_balance: float = 0.0
    opening_date: Optional[dt.date] = None


class BankAccountUpdate(BaseModel):
    company_id: Optional[int] = None
    account_name: Optional[str] = Field(None, min_length=1, max_length=255)
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    account_type: Optional[str] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=10)
    opening_balance: Optional[float] = None
    opening_date: Optional[dt.date] = None
    status: Optional[str] = Field(None, pattern="^(active|closed)$")


class BankAccountResponse(BankAccountCreate):
    id: int
    status: str

    model_config = ConfigDict(from_attributes=True)


class AccountBalance(BaseModel):
    account_id: int
    account_name: str
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    currency: str
    status: str
    opening_balance: float
    total_income: float
    total_expenses: float
    total_withdrawals: float
    total_transfers_in: float
    calculated_balance: float
    latest_manual_balance: Optional[float] = None
    last_reconciled_date: Optional[dt.date] = None
    variance: float
    reconciliation: str


class TransferCreate(BaseModel):
    from_account_id: int
    to_account_id: Optional[int] = None
    amount: float = Field(..., gt=0)
    transfer_date: Optional[dt.date] = None
    transfer_type: str = "transfer"
    description: Optional[str] = None


class TransferResponse(BaseModel):
    id: int
    from_account_id: int
    to_account_id: Optional[int] = None
    amount: float
    transfer_date: dt.date
    transfer_type: str
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class StatementBalanceRequest(BaseModel):
    manual_balance: float
    recorded_date: Optional[dt.date] = None
    notes: Optional[str] = None


# Quotations

class QuotationCreate(BaseModel):
    quotation_number: Optional[str] = None
    company_id: Optional[int] = None
    client_name: str = Field(..., min_length=1, max_length=255)
    client_address: Optional[str] = None
    client_phone: Optional[str] = None
    client_email: Optional[str] = None
    date: dt.date
    valid_until: Optional[dt.date] = None
    apply_tax: bool = False
    tax_rate: Optional[float] = Field(None, ge=0, le=100)
    status: str = "draft"
    payment_terms: Optional[str] = None
    deposit_percent: Optional[float] = Field(None, ge=0, le=100)
    notes: Optional[str] = None
    items: List[InvoiceItemIn] = Field(..., min_length=1)


class QuotationUpdate(BaseModel):
    client_name: Optional[str] = Field(None, min_length=1, max_length=255)
    client_address: Optional[str] = None
    client_phone: Optional[str] = None
    client_email: Optional[str] = None
    date: Optional[dt.date] = None
    valid_until: Optional[dt.date] = None
    apply_tax: Optional[bool] = None
    tax_rate: Optional[float] = Field(None, ge=0, le=100)
    status: Optional[str] = None
    payment_terms: Optional[str] = None
    deposit_percent: Optional[float] = Field(None, ge=0, le=100)
    notes: Optional[str] = None
    items: Optional[List[InvoiceItemIn]] = None


class QuotationResponse(BaseModel):
    id: int
    quotation_number: str
    company_id: Optional[int] = None
    client_name: str
    client_address: Optional[str] = None
    client_phone: Optional[str] = None
    client_email: Optional[str] = None
    date: dt.date
    valid_until: Optional[dt.date] = None
    subtotal: float
    apply_tax: bool
    tax_rate: float
    tax: float
    total: float
    status: str
    payment_terms: Optional[str] = None
    deposit_percent: Optional[float] = None
    notes: Optional[str] = None
    converted_to_invoice_id: Optional[int] = None
    items: List[InvoiceItemResponse] = []

    model_config = ConfigDict(from_attributes=True)


class QuotationList(BaseModel):
    quotations: List[QuotationResponse]
    approved_count: int
    pending_count: int
    converted_value: float


class ConvertRequest(BaseModel):
    invoice_date: Optional[dt.date] = None


# Reports

class MonthRow(BaseModel):
    month: str
    income: float
    expenses: float
    profit: float
    margin: float


class MonthlySummary(BaseModel):
    year: int
    months: List[MonthRow]
    totals: Dict[str, float]


class CompanyProfitLoss(BaseModel):
    company_id: Optional[int] = None
    company_name: str
    income: float
    expenses: float
    net: float


class CashflowEvent(BaseModel):
    date: dt.date
    amount: float
    description: str
    direction: str


class CashflowReport(BaseModel):
    date_from: dt.date
    date_to: dt.date
    cash_in: float
    cash_out: float
    net: float
    events: List[CashflowEvent]


class ImportResponse(BaseModel):
    success: int
    failed: int
    skipped: int
    errors: List[str]
