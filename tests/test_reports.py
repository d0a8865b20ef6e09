import io
from datetime import date

import pandas as pd
import pytest
import pytest_asyncio

from marine_ops.finance.reports import ReportBuilder
from marine_ops.models import Expense, IncomeRecord, Vessel, VesselScrapSale


@pytest.fixture
def reports(db_session):
    return ReportBuilder(db_session)


@pytest_asyncio.fixture
async def ledger(db_session, companies):
    marine, scrap = companies["marine"].id, companies["scrap"].id
    db_session.add_all([
        IncomeRecord(company_id=marine, income_date=date(2024, 1, 15), income_type="invoice",
                     amount=10000.0, description="Towing job"),
        IncomeRecord(company_id=scrap, income_date=date(2024, 3, 5), income_type="invoice",
                     amount=4000.0, description="HMS sale"),
        Expense(company_id=marine, date=date(2024, 1, 20), amount=2500.0, status="paid",
                description="Bunker fuel"),
        Expense(company_id=marine, date=date(2024, 1, 25), amount=900.0, status="pending",
                description="Unpaid spares"),
        Expense(company_id=None, date=date(2024, 3, 1), amount=600.0, status="paid",
                expense_type="bank_charges"),
    ])
    await db_session.commit()


async def test_monthly_summary_counts_paid_expenses_only(reports, ledger):
    summary = await reports.monthly_summary(2024)

    assert len(summary["months"]) == 12
    january, february, march = summary["months"][:3]
    assert january == {"month": "2024-01", "income": 10000.0, "expenses": 2500.0,
                       "profit": 7500.0, "margin": 75.0}
    assert february["income"] == february["expenses"] == 0.0
    assert february["margin"] == 0.0
    assert march["profit"] == 3400.0
    assert summary["totals"] == {"income": 14000.0, "expenses": 3100.0,
                                 "profit": 10900.0, "margin": 77.9}


async def test_profit_and_loss_by_company(reports, ledger):
    rows = {row["company_name"]: row for row in await reports.profit_loss_by_company()}

    assert rows["Gulf Marine"]["income"] == 10000.0
    assert rows["Gulf Marine"]["expenses"] == 2500.0
    assert rows["Gulf Marine"]["net"] == 7500.0
    assert rows["Gulf Scrap"]["net"] == 4000.0
    assert rows["Gulf Holdings"]["net"] == 0.0
    assert rows["Unassigned"] == {"company_id": None, "company_name": "Unassigned",
                                  "income": 0.0, "expenses": 600.0, "net": -600.0}


async def test_cashflow_window_and_direction(reports, ledger):
    report = await reports.cashflow(date(2024, 1, 1), date(2024, 1, 31))

    assert report["cash_in"] == 10000.0
    assert report["cash_out"] == 2500.0
    assert report["net"] == 7500.0
    assert [e["date"] for e in report["events"]] == [date(2024, 1, 20), date(2024, 1, 15)]

    outgoing = await reports.cashflow(date(2024, 1, 1), date(2024, 3, 31), direction="out")
    assert outgoing["cash_in"] == 0.0
    assert outgoing["cash_out"] == 3100.0
    assert {e["description"] for e in outgoing["events"]} == {"Bunker fuel", "bank_charges"}


async def test_cashflow_workbook_has_summary_and_transactions(reports, ledger):
    report = await reports.cashflow(date(2024, 1, 1), date(2024, 3, 31))

    sheets = pd.read_excel(io.BytesIO(reports.cashflow_workbook(report)), sheet_name=None,
                           engine="openpyxl")

    assert list(sheets) == ["Summary", "Cashflow"]
    summary = dict(zip(sheets["Summary"]["Item"], sheets["Summary"]["Value"]))
    assert float(summary["Net Cash"]) == 10900.0
    transactions = sheets["Cashflow"]
    assert len(transactions) == 4
    assert set(transactions["Type"]) == {"Cash In", "Cash Out"}


async def _fleet(db_session):
    vessel = Vessel(name="Sea Falcon", purchase_price=100000.0)
    db_session.add(vessel)
    await db_session.flush()
    db_session.add_all([
        VesselScrapSale(vessel_id=vessel.id, sale_date=date(2024, 2, 1), quantity_tons=100.0,
                        price_per_ton=250.0, total_amount=25000.0),
        Expense(date=date(2024, 2, 2), amount=3000.0, project_type="overhaul", project_id=1),
    ])
    await db_session.commit()


async def test_dashboard_overview(db_session, reports):
    await _fleet(db_session)

    overview = await reports.dashboard_overview()

    financials = overview["financials"]
    assert financials["total_income"] == 25000.0
    assert financials["vessel_scrap"] == 25000.0
    assert financials["total_expenses"] == 103000.0
    assert financials["overhaul_expenses"] == 3000.0
    assert financials["net_profit"] == -78000.0
    assert overview["counts"]["vessels"] == 1
    assert overview["counts"]["active_vessels"] == 1
    assert overview["recent_vessels"][0]["name"] == "Sea Falcon"


async def test_dashboard_hides_totals(db_session, reports):
    await _fleet(db_session)

    overview = await reports.dashboard_overview(hide_totals=True)

    assert set(overview["financials"].values()) == {None}
    assert overview["counts"]["vessels"] == 1
