import json
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession
from marine_ops.api.deps import require_permission
from marine_ops.api.finance.models import (
    ExpenseCreate, ExpenseUpdate, ExpenseResponse, ExpenseList,
    IncomeCreate, IncomeUpdate, IncomeResponse, IncomeList,
    InvoiceCreate, InvoiceUpdate, InvoiceResponse, InvoiceList,
    PaymentRequest, DepositRequest, RefundRequest,
    BankAccountCreate, BankAccountUpdate, BankAccountResponse, AccountBalance,
    TransferCreate, TransferResponse, StatementBalanceRequest,
    QuotationCreate, QuotationUpdate, QuotationResponse, QuotationList, ConvertRequest,
    MonthlySummary, CompanyProfitLoss, CashflowReport, ImportResponse,
)
from marine_ops.db import get_db_session
from marine_ops.finance import (
    BankAccountManager, ExpenseManager, IncomeManager, InvoiceManager, QuotationManager, ReportBuilder,
)
from marine_ops.finance.importer import ExpenseImporter, DEFAULT_STATUS, DEFAULT_PAYMENT_METHOD
from marine_ops.models import User

router = APIRouter()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


# Expenses

@router.get("/expenses", response_model=ExpenseList)
async def list_expenses(
    company_id: Optional[int] = None,
    status: Optional[str] = None,
    project_type: Optional[str] = None,
    project_id: Optional[int] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    _: User = Depends(require_permission("finance.expenses", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    """Filtered expenses with total, paid and pending sums"""
    return await ExpenseManager(db).list_expenses(
        company_id=company_id, status=status, project_type=project_type,
        project_id=project_id, date_from=date_from, date_to=date_to,
    )


@router.post("/expenses", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense_data: ExpenseCreate,
    _: User = Depends(require_permission("finance.expenses", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    return await ExpenseManager(db).create_expense(**expense_data.model_dump())


@router.get("/expenses/{expense_id}", response_model=ExpenseResponse)
async def get_expense(
    expense_id: int,
    _: User = Depends(require_permission("finance.expenses", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await ExpenseManager(db).get_expense(expense_id)


@router.put("/expenses/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    expense_id: int,
    expense_data: ExpenseUpdate,
    _: User = Depends(require_permission("finance.expenses", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    return await ExpenseManager(db).update_expense(
        expense_id, expense_data.model_dump(exclude_unset=True)
    )


@router.delete("/expenses/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(
    expense_id: int,
    _: User = Depends(require_permission("finance.expenses", "delete")),
    db: AsyncSession = Depends(get_db_session)
):
    await ExpenseManager(db).delete_expense(expense_id)


@router.post("/import/preview")
async def preview_expense_import(
    file: UploadFile = File(...),
    _: User = Depends(require_permission("finance.expenses", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    """Detected columns, guessed mapping and sample rows of an upload"""
    content = await file.read()
    return ExpenseImporter(db).preview(content, file.filename or "")


@router.post("/import", response_model=ImportResponse)
async def import_expenses(
    file: UploadFile = File(...),
    mapping: Optional[str] = Form(None),
    default_status: str = Form(DEFAULT_STATUS),
    default_payment_method: str = Form(DEFAULT_PAYMENT_METHOD),
    company_id: Optional[int] = Form(None),
    _: User = Depends(require_permission("finance.expenses", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    """Import expenses from a CSV or XLSX upload; ``mapping`` is a JSON column-to-field object"""
    column_mapping = None
    if mapping:
        try:
            column_mapping = json.loads(mapping)
        except json.JSONDecodeError:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                                detail="mapping must be a JSON object")
        if not isinstance(column_mapping, dict):
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                                detail="mapping must be a JSON object")

    content = await file.read()
    result = await ExpenseImporter(db).import_expenses(
        content,
        file.filename or "",
        mapping=column_mapping,
        default_status=default_status,
        default_payment_method=default_payment_method,
        company_id=company_id,
    )
    return result.to_dict()


# Income

@router.get("/income", response_model=IncomeList)
async def list_income(
    company_id: Optional[int] = None,
    income_type: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    _: User = Depends(require_permission("finance.income", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await IncomeManager(db).list_income(
        company_id=company_id, income_type=income_type, date_from=date_from, date_to=date_to
    )


@router.post("/income", response_model=IncomeResponse, status_code=status.HTTP_201_CREATED)
async def create_income(
    income_data: IncomeCreate,
    _: User = Depends(require_permission("finance.income", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    return await IncomeManager(db).create_income(**income_data.model_dump())


@router.put("/income/{income_id}", response_model=IncomeResponse)
async def update_income(
    income_id: int,
    income_data: IncomeUpdate,
    _: User = Depends(require_permission("finance.income", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    return await IncomeManager(db).update_income(income_id, income_data.model_dump(exclude_unset=True))


@router.delete("/income/{income_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_income(
    income_id: int,
    _: User = Depends(require_permission("finance.income", "delete")),
    db: AsyncSession = Depends(get_db_session)
):
    await IncomeManager(db).delete_income(income_id)


# Invoices

@router.get("/invoices", response_model=InvoiceList)
async def list_invoices(
    status: Optional[str] = None,
    invoice_type: Optional[str] = None,
    company_id: Optional[int] = None,
    _: User = Depends(require_permission("finance.invoices", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await InvoiceManager(db).list_invoices(
        status=status, invoice_type=invoice_type, company_id=company_id
    )


@router.get("/invoices/next-number")
async def next_invoice_number(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    _: User = Depends(require_permission("finance.invoices", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    return {"invoice_number": await InvoiceManager(db).next_invoice_number(year)}


@router.post("/invoices", response_model=InvoiceResponse, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    invoice_data: InvoiceCreate,
    _: User = Depends(require_permission("finance.invoices", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    items = [item.model_dump() for item in invoice_data.items]
    values = invoice_data.model_dump(exclude={"items"}, exclude_none=True)
    return await InvoiceManager(db).create_invoice(items, **values)


@router.get("/invoices/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(
    invoice_id: int,
    _: User = Depends(require_permission("finance.invoices", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await InvoiceManager(db).get_invoice(invoice_id)


@router.put("/invoices/{invoice_id}", response_model=InvoiceResponse)
async def update_invoice(
    invoice_id: int,
    invoice_data: InvoiceUpdate,
    _: User = Depends(require_permission("finance.invoices", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    items = None
    if invoice_data.items is not None:
        items = [item.model_dump() for item in invoice_data.items]
    changes = invoice_data.model_dump(exclude={"items"}, exclude_unset=True)
    return await InvoiceManager(db).update_invoice(invoice_id, changes, items=items)


@router.delete("/invoices/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invoice(
    invoice_id: int,
    _: User = Depends(require_permission("finance.invoices", "delete")),
    db: AsyncSession = Depends(get_db_session)
):
    """Delete an invoice, reversing its income, refunds and stock movements"""
    await InvoiceManager(db).delete_invoice(invoice_id)


@router.post("/invoices/{invoice_id}/pay", response_model=InvoiceResponse)
async def mark_invoice_paid(
    invoice_id: int,
    payment: PaymentRequest,
    _: User = Depends(require_permission("finance.invoices", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    return await InvoiceManager(db).mark_paid(
        invoice_id, payment_date=payment.payment_date, payment_method=payment.payment_method,
        bank_account_id=payment.bank_account_id,
    )


@router.post("/invoices/{invoice_id}/deposit", response_model=InvoiceResponse)
async def record_invoice_deposit(
    invoice_id: int,
    deposit: DepositRequest,
    _: User = Depends(require_permission("finance.invoices", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    return await InvoiceManager(db).record_deposit(
        invoice_id, deposit.amount, deposit_date=deposit.deposit_date,
        payment_method=deposit.payment_method, bank_account_id=deposit.bank_account_id,
    )


@router.post("/invoices/{invoice_id}/refund-deposit", response_model=InvoiceResponse)
async def refund_invoice_deposit(
    invoice_id: int,
    refund: RefundRequest,
    _: User = Depends(require_permission("finance.invoices", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    return await InvoiceManager(db).refund_deposit(
        invoice_id, refund_date=refund.refund_date,
        payment_method=refund.payment_method, notes=refund.notes,
        bank_account_id=refund.bank_account_id,
    )


@router.post("/invoices/{invoice_id}/keep-deposit", response_model=InvoiceResponse)
async def keep_invoice_deposit(
    invoice_id: int,
    _: User = Depends(require_permission("finance.invoices", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    return await InvoiceManager(db).keep_deposit(invoice_id)


@router.post("/invoices/{invoice_id}/refund", response_model=InvoiceResponse)
async def refund_invoice_sale(
    invoice_id: int,
    refund: RefundRequest,
    _: User = Depends(require_permission("finance.invoices", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    return await InvoiceManager(db).refund_sale(
        invoice_id, refund_date=refund.refund_date, notes=refund.notes,
        bank_account_id=refund.bank_account_id,
    )


# Bank accounts

@router.get("/bank-accounts", response_model=List[BankAccountResponse])
async def list_bank_accounts(
    company_id: Optional[int] = None,
    status: Optional[str] = Query("active", pattern="^(active|closed)$"),
    _: User = Depends(require_permission("finance.bank_accounts", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await BankAccountManager(db).list_accounts(company_id=company_id, status=status)


@router.post("/bank-accounts", response_model=BankAccountResponse, status_code=status.HTTP_201_CREATED)
async def create_bank_account(
    account_data: BankAccountCreate,
    _: User = Depends(require_permission("finance.bank_accounts", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    return await BankAccountManager(db).create_account(**account_data.model_dump())


@router.get("/bank-accounts/balances", response_model=List[AccountBalance])
async def bank_account_balances(
    company_id: Optional[int] = None,
    _: User = Depends(require_permission("finance.bank_accounts", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    """Calculated balance, last statement balance and variance of every open account"""
    return await BankAccountManager(db).balances(company_id=company_id)


@router.post("/bank-accounts/transfers", response_model=TransferResponse, status_code=status.HTTP_201_CREATED)
async def record_bank_transfer(
    transfer_data: TransferCreate,
    _: User = Depends(require_permission("finance.bank_accounts", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    """Record a withdrawal, or a transfer when ``to_account_id`` is given"""
    return await BankAccountManager(db).record_transfer(**transfer_data.model_dump())


@router.get("/bank-accounts/{account_id}", response_model=AccountBalance)
async def get_bank_account_balance(
    account_id: int,
    _: User = Depends(require_permission("finance.bank_accounts", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await BankAccountManager(db).account_balance(account_id)


@router.put("/bank-accounts/{account_id}", response_model=BankAccountResponse)
async def update_bank_account(
    account_id: int,
    account_data: BankAccountUpdate,
    _: User = Depends(require_permission("finance.bank_accounts", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    return await BankAccountManager(db).update_account(account_id, account_data.model_dump(exclude_unset=True))


@router.delete("/bank-accounts/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_bank_account(
    account_id: int,
    _: User = Depends(require_permission("finance.bank_accounts", "delete")),
    db: AsyncSession = Depends(get_db_session)
):
    await BankAccountManager(db).delete_account(account_id)


@router.get("/bank-accounts/{account_id}/transfers", response_model=List[TransferResponse])
async def list_bank_transfers(
    account_id: int,
    _: User = Depends(require_permission("finance.bank_accounts", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await BankAccountManager(db).list_transfers(account_id)


@router.post("/bank-accounts/{account_id}/reconcile", response_model=AccountBalance)
async def reconcile_bank_account(
    account_id: int,
    statement: StatementBalanceRequest,
    _: User = Depends(require_permission("finance.bank_accounts", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    """Record the balance shown on the bank statement"""
    return await BankAccountManager(db).record_statement_balance(
        account_id, statement.manual_balance,
        recorded_date=statement.recorded_date, notes=statement.notes,
    )


# Quotations

@router.get("/quotations", response_model=QuotationList)
async def list_quotations(
    status: Optional[str] = None,
    company_id: Optional[int] = None,
    _: User = Depends(require_permission("finance.quotations", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await QuotationManager(db).list_quotations(status=status, company_id=company_id)


@router.post("/quotations", response_model=QuotationResponse, status_code=status.HTTP_201_CREATED)
async def create_quotation(
    quotation_data: QuotationCreate,
    _: User = Depends(require_permission("finance.quotations", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    items = [item.model_dump() for item in quotation_data.items]
    values = quotation_data.model_dump(exclude={"items"}, exclude_none=True)
    return await QuotationManager(db).create_quotation(items, **values)


@router.get("/quotations/{quotation_id}", response_model=QuotationResponse)
async def get_quotation(
    quotation_id: int,
    _: User = Depends(require_permission("finance.quotations", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await QuotationManager(db).get_quotation(quotation_id)


@router.put("/quotations/{quotation_id}", response_model=QuotationResponse)
async def update_quotation(
    quotation_id: int,
    quotation_data: QuotationUpdate,
    _: User = Depends(require_permission("finance.quotations", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    items = None
    if quotation_data.items is not None:
        items = [item.model_dump() for item in quotation_data.items]
    changes = quotation_data.model_dump(exclude={"items"}, exclude_unset=True)
    return await QuotationManager(db).update_quotation(quotation_id, changes, items=items)


@router.delete("/quotations/{quotation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_quotation(
    quotation_id: int,
    _: User = Depends(require_permission("finance.quotations", "delete")),
    db: AsyncSession = Depends(get_db_session)
):
    await QuotationManager(db).delete_quotation(quotation_id)


@router.post("/quotations/{quotation_id}/approve", response_model=QuotationResponse)
async def approve_quotation(
    quotation_id: int,
    _: User = Depends(require_permission("finance.quotations", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    return await QuotationManager(db).approve(quotation_id)


@router.post("/quotations/{quotation_id}/reject", response_model=QuotationResponse)
async def reject_quotation(
    quotation_id: int,
    _: User = Depends(require_permission("finance.quotations", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    return await QuotationManager(db).reject(quotation_id)


@router.post("/quotations/{quotation_id}/convert", response_model=InvoiceResponse,
             status_code=status.HTTP_201_CREATED)
async def convert_quotation(
    quotation_id: int,
    conversion: ConvertRequest,
    _: User = Depends(require_permission("finance.quotations", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    """Turn an approved quotation into a draft invoice"""
    return await QuotationManager(db).convert_to_invoice(quotation_id, invoice_date=conversion.invoice_date)


# Reports

@router.get("/reports/monthly", response_model=MonthlySummary)
async def monthly_summary(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    _: User = Depends(require_permission("finance.reports", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await ReportBuilder(db).monthly_summary(year or date.today().year)


@router.get("/reports/by-company", response_model=List[CompanyProfitLoss])
async def profit_loss_by_company(
    _: User = Depends(require_permission("finance.reports", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await ReportBuilder(db).profit_loss_by_company()


@router.get("/reports/cashflow", response_model=CashflowReport)
async def cashflow(
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    direction: Optional[str] = Query(None, pattern="^(in|out)$"),
    _: User = Depends(require_permission("finance.reports", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await ReportBuilder(db).cashflow(date_from, date_to, direction)


@router.get("/reports/cashflow/export")
async def export_cashflow(
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    direction: Optional[str] = Query(None, pattern="^(in|out)$"),
    _: User = Depends(require_permission("finance.reports", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    """Cashflow report as an Excel workbook"""
    builder = ReportBuilder(db)
    report = await builder.cashflow(date_from, date_to, direction)
    filename = f"cashflow_{report['date_from']}_{report['date_to']}.xlsx"
    return Response(
        content=builder.cashflow_workbook(report),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
