from datetime import date

import pytest
import pytest_asyncio
from sqlalchemy import select

from marine_ops.exceptions import ConflictError, DomainValidationError, NotFoundError
from marine_ops.finance import BankAccountManager, ExpenseManager, IncomeManager, InvoiceManager
from marine_ops.models import Expense, IncomeRecord


@pytest.fixture
def banks(db_session):
    return BankAccountManager(db_session)


@pytest_asyncio.fixture
async def accounts(banks):
    operating = await banks.create_account(account_name="ENBD Operating", bank_name="Emirates NBD",
                                           account_number="1015-883201", opening_balance=10000.0,
                                           opening_date=date(2024, 1, 1))
    petty = await banks.create_account(account_name="Yard Petty Cash", account_type="cash")
    return operating, petty


async def test_balance_follows_income_expenses_and_transfers(db_session, banks, accounts):
    operating, petty = accounts
    await IncomeManager(db_session).create_income(
        income_date=date(2024, 2, 1), income_type="rental", amount=2000.0, bank_account_id=operating.id,
    )
    expenses = ExpenseManager(db_session)
    await expenses.create_expense(amount=500.0, date=date(2024, 2, 3), category="fuel",
                                  status="paid", bank_account_id=operating.id)
    await expenses.create_expense(amount=300.0, date=date(2024, 2, 4), category="rope",
                                  bank_account_id=operating.id)
    await banks.record_transfer(operating.id, 1000.0, transfer_date=date(2024, 2, 5),
                                to_account_id=petty.id)

    balance = await banks.account_balance(operating.id)
    petty_balance = await banks.account_balance(petty.id)

    assert balance["total_income"] == 2000.0
    assert balance["total_expenses"] == 500.0
    assert balance["total_withdrawals"] == 1000.0
    assert balance["calculated_balance"] == 10500.0
    assert balance["reconciliation"] == "pending"
    assert petty_balance["total_transfers_in"] == 1000.0
    assert petty_balance["calculated_balance"] == 1000.0


async def test_statement_balance_reports_variance(banks, accounts):
    operating, _ = accounts

    short = await banks.record_statement_balance(operating.id, 9950.0, recorded_date=date(2024, 3, 1))
    matched = await banks.record_statement_balance(operating.id, 10000.0, recorded_date=date(2024, 3, 2))

    assert short["variance"] == -50.0
    assert short["reconciliation"] == "variance"
    assert matched["latest_manual_balance"] == 10000.0
    assert matched["last_reconciled_date"] == date(2024, 3, 2)
    assert matched["reconciliation"] == "reconciled"


async def test_invoice_money_lands_on_chosen_accounts(db_session, banks, accounts):
    operating, petty = accounts
    invoices = InvoiceManager(db_session)
    invoice = await invoices.create_invoice(
        [{"description": "Harbour towing", "quantity": 1, "unit_price": 1000.0}],
        client_name="Port Authority", date=date(2024, 5, 1), apply_tax=True,
    )

    await invoices.record_deposit(invoice.id, 300.0, deposit_date=date(2024, 5, 2),
                                  bank_account_id=petty.id)
    await invoices.mark_paid(invoice.id, payment_date=date(2024, 5, 20), bank_account_id=operating.id)
    await invoices.refund_sale(invoice.id, refund_date=date(2024, 6, 1))

    income = (await db_session.execute(select(IncomeRecord).order_by(IncomeRecord.id))).scalars().all()
    assert [(row.income_type, row.amount, row.bank_account_id) for row in income] == [
        ("deposit", 300.0, petty.id),
        ("invoice", 750.0, operating.id),
    ]
    [refund] = (await db_session.execute(select(Expense))).scalars().all()
    assert refund.bank_account_id == operating.id
    assert invoice.payment_bank_account_id == operating.id
    assert (await banks.account_balance(operating.id))["calculated_balance"] == 10000.0 + 750.0 - 1050.0


async def test_deposit_refund_defaults_to_deposit_account(db_session, accounts):
    _, petty = accounts
    invoices = InvoiceManager(db_session)
    invoice = await invoices.create_invoice(
        [{"description": "Scrap survey", "quantity": 1, "unit_price": 800.0}],
        client_name="Emirates Steel", date=date(2024, 5, 1),
    )
    await invoices.record_deposit(invoice.id, 200.0, bank_account_id=petty.id)

    await invoices.refund_deposit(invoice.id, refund_date=date(2024, 5, 10))

    [refund] = (await db_session.execute(select(Expense))).scalars().all()
    assert refund.bank_account_id == petty.id
    assert invoice.deposit_refund_bank_account_id == petty.id


async def test_closed_or_unknown_accounts_are_rejected(db_session, banks, accounts):
    operating, _ = accounts
    await banks.update_account(operating.id, {"status": "closed"})
    income = IncomeManager(db_session)

    with pytest.raises(DomainValidationError, match="closed"):
        await income.create_income(income_date=date(2024, 2, 1), income_type="other",
                                   amount=10.0, bank_account_id=operating.id)
    with pytest.raises(NotFoundError):
        await income.create_income(income_date=date(2024, 2, 1), income_type="other",
                                   amount=10.0, bank_account_id=999)
    assert [a.account_name for a in await banks.list_accounts()] == ["Yard Petty Cash"]


async def test_transfer_validation(banks, accounts):
    operating, _ = accounts

    with pytest.raises(DomainValidationError):
        await banks.record_transfer(operating.id, 100.0, to_account_id=operating.id)
    with pytest.raises(DomainValidationError):
        await banks.record_transfer(operating.id, 0.0)


async def test_only_untouched_accounts_can_be_deleted(banks, accounts):
    operating, petty = accounts
    await banks.record_transfer(operating.id, 50.0, transfer_type="fee")

    with pytest.raises(ConflictError, match="close it instead"):
        await banks.delete_account(operating.id)
    await banks.delete_account(petty.id)

    with pytest.raises(NotFoundError):
        await banks.get_account(petty.id)


async def test_account_names_are_unique(banks, accounts):
    with pytest.raises(ConflictError):
        await banks.create_account(account_name="ENBD Operating")
