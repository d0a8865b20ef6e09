import io
from datetime import date

import pandas as pd
import pytest
from sqlalchemy import select

from marine_ops.exceptions import DomainValidationError
from marine_ops.finance.importer import (
    ExpenseImporter,
    clean_amount,
    detect_header_row,
    guess_column_mapping,
    parse_date,
)
from marine_ops.models import Expense

STATEMENT_CSV = (
    "Emirates NBD Account Statement\n"
    "Account: 1012-3344-01\n"
    "Date,Description,Amount (AED),Vendor\n"
    '2024-03-01,Bunker fuel,"1,200.00",ADNOC Distribution\n'
    "2024-03-02,Spare parts,350,Marine Supply LLC\n"
    ",Missing date,100,Nobody\n"
    "2024-03-04,Zero value,0,Nobody\n"
).encode()


def test_guess_mapping_from_headers():
    mapping = guess_column_mapping(["Txn Date", "Description", "Amount (AED)", "Supplier", "Notes"])

    assert mapping == {
        "Txn Date": "date",
        "Description": "description",
        "Amount (AED)": "amount",
        "Supplier": "vendor_name",
        "Notes": "skip",
    }


def test_guess_mapping_uses_each_field_once():
    mapping = guess_column_mapping(["Total", "Amount"])

    assert mapping == {"Total": "amount", "Amount": "skip"}


def test_clean_amount_strips_currency_and_separators():
    assert clean_amount("AED 1,250.50") == 1250.5
    assert clean_amount("-75") == -75.0
    assert clean_amount("n/a") == 0.0


def test_parse_date():
    assert parse_date("2024-03-15") == date(2024, 3, 15)
    assert parse_date("") is None
    assert parse_date("not a date") is None


def test_header_row_found_below_title_lines():
    frame = pd.DataFrame([
        ["Statement", "", ""],
        ["", "", ""],
        ["Date", "Details", "Amount"],
        ["2024-01-01", "Fuel", "100"],
    ])

    assert detect_header_row(frame) == 2


async def test_preview_reports_columns_and_guesses(db_session):
    preview = ExpenseImporter(db_session).preview(STATEMENT_CSV, "statement.csv")

    assert preview["columns"] == ["Date", "Description", "Amount (AED)", "Vendor"]
    assert preview["mapping"]["Amount (AED)"] == "amount"
    assert preview["row_count"] == 4
    assert preview["sample"][0]["Description"] == "Bunker fuel"


async def test_import_inserts_valid_rows_and_skips_the_rest(db_session, companies):
    result = await ExpenseImporter(db_session).import_expenses(
        STATEMENT_CSV, "statement.csv", company_id=companies["marine"].id
    )

    assert result.to_dict() == {"success": 2, "failed": 0, "skipped": 2, "errors": []}

    expenses = (await db_session.execute(select(Expense).order_by(Expense.date))).scalars().all()
    assert [e.amount for e in expenses] == [1200.0, 350.0]
    fuel = expenses[0]
    assert fuel.date == date(2024, 3, 1)
    assert fuel.vendor_name == "ADNOC Distribution"
    assert fuel.status == "paid"
    assert fuel.paid_date == date(2024, 3, 1)
    assert fuel.payment_method == "transfer"
    assert fuel.company_id == companies["marine"].id


async def test_import_applies_mapping_overrides_and_defaults(db_session):
    result = await ExpenseImporter(db_session).import_expenses(
        STATEMENT_CSV, "statement.csv",
        mapping={"Vendor": "description", "Description": "category"},
        default_status="pending", default_payment_method="cash",
    )

    assert result.success == 2
    fuel = await db_session.scalar(select(Expense).where(Expense.amount == 1200.0))
    assert fuel.description == "ADNOC Distribution"
    assert fuel.category == "Bunker fuel"
    assert fuel.vendor_name is None
    assert fuel.status == "pending"
    assert fuel.paid_date is None
    assert fuel.payment_method == "cash"


async def test_import_reads_excel(db_session):
    buffer = io.BytesIO()
    pd.DataFrame({
        "Date": ["2024-04-01", "2024-04-02"],
        "Category": ["Fuel", "Crew"],
        "Total": ["500", "750.25"],
    }).to_excel(buffer, index=False)

    result = await ExpenseImporter(db_session).import_expenses(buffer.getvalue(), "ledger.xlsx")

    assert result.success == 2
    total = sum(e.amount for e in (await db_session.execute(select(Expense))).scalars())
    assert total == 1250.25


async def test_import_requires_date_and_amount_columns(db_session):
    importer = ExpenseImporter(db_session)
    frame = importer.load(b"Date,Notes\n2024-01-01,hello\n", "notes.csv")

    with pytest.raises(DomainValidationError):
        importer.transform(frame, guess_column_mapping(list(frame.columns)))


async def test_unsupported_file_type(db_session):
    with pytest.raises(DomainValidationError):
        ExpenseImporter(db_session).load(b"%PDF-1.4", "statement.pdf")
