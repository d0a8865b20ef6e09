"""
Financial reporting.

All reports read raw rows and aggregate in Python so the same code runs on
PostgreSQL and SQLite. Income comes from ``income_records`` plus the sale
tables; cash out is paid expenses.
"""

import io
import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, List, Optional

import pandas as pd
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from marine_ops.models.company import Company
from marine_ops.models.crew import Employee, SalaryPayment
from marine_ops.models.finance import Expense, IncomeRecord
from marine_ops.models.overhaul import OverhaulProject
from marine_ops.models.scrap import LandPurchase, LandScrapSale
from marine_ops.models.vessel import Vessel, VesselScrapSale, VesselEquipmentSale, VesselRental
from marine_ops.marine.vessels import EARNING_RENTAL_STATUSES

logger = logging.getLogger(__name__)

DEFAULT_CASHFLOW_DAYS = 30
RECENT_LIMIT = 5


def month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


class ReportBuilder:
    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def _sum(self, column, *criteria) -> float:
        total = await self.db.scalar(select(func.coalesce(func.sum(column), 0.0)).where(*criteria))
        return float(total or 0.0)

    async def _count(self, model, *criteria) -> int:
        return await self.db.scalar(select(func.count(model.id)).where(*criteria)) or 0

    async def monthly_summary(self, year: int) -> Dict:
        """
        Income, expenses and profit per month of ``year``.

        Returns:
            Dict with ``months`` (twelve ``YYYY-MM`` rows, empty months
            included) and yearly ``totals``
        """
        start, end = date(year, 1, 1), date(year, 12, 31)
        income_rows = (await self.db.execute(
            select(IncomeRecord.income_date, IncomeRecord.amount)
            .where(IncomeRecord.income_date >= start, IncomeRecord.income_date <= end)
        )).all()
        expense_rows = (await self.db.execute(
            select(Expense.date, Expense.amount)
            .where(Expense.status == "paid", Expense.date >= start, Expense.date <= end)
        )).all()

        income = defaultdict(float)
        expenses = defaultdict(float)
        for day, amount in income_rows:
            income[month_key(day)] += amount or 0.0
        for day, amount in expense_rows:
            expenses[month_key(day)] += amount or 0.0

        months = []
        for month in range(1, 13):
            key = f"{year:04d}-{month:02d}"
            month_income = round(income[key], 2)
            month_expenses = round(expenses[key], 2)
            profit = round(month_income - month_expenses, 2)
            months.append({
                "month": key,
                "income": month_income,
                "expenses": month_expenses,
                "profit": profit,
                "margin": round(profit / month_income * 100, 1) if month_income > 0 else 0.0,
            })

        total_income = round(sum(row["income"] for row in months), 2)
        total_expenses = round(sum(row["expenses"] for row in months), 2)
        total_profit = round(total_income - total_expenses, 2)
        return {
            "year": year,
            "months": months,
            "totals": {
                "income": total_income,
                "expenses": total_expenses,
                "profit": total_profit,
                "margin": round(total_profit / total_income * 100, 1) if total_income > 0 else 0.0,
            },
        }

    async def profit_loss_by_company(self) -> List[Dict]:
        """Income, paid expenses and net result per company."""
        companies = (await self.db.execute(select(Company).order_by(Company.name))).scalars().all()

        income = defaultdict(float)
        for company_id, amount in (await self.db.execute(
            select(IncomeRecord.company_id, IncomeRecord.amount)
        )).all():
            income[company_id] += amount or 0.0

        expenses = defaultdict(float)
        for company_id, amount in (await self.db.execute(
            select(Expense.company_id, Expense.amount).where(Expense.status == "paid")
        )).all():
            expenses[company_id] += amount or 0.0

        rows = []
        for company in companies:
            rows.append({
                "company_id": company.id,
                "company_name": company.name,
                "income": round(income[company.id], 2),
                "expenses": round(expenses[company.id], 2),
                "net": round(income[company.id] - expenses[company.id], 2),
            })
        if income.get(None) or expenses.get(None):
            rows.append({
                "company_id": None,
                "company_name": "Unassigned",
                "income": round(income[None], 2),
                "expenses": round(expenses[None], 2),
                "net": round(income[None] - expenses[None], 2),
            })
        return rows

    async def cashflow(self, date_from: Optional[date] = None, date_to: Optional[date] = None,
                       direction: Optional[str] = None) -> Dict:
        """Cash in and cash out events over a period, newest first."""
        date_to = date_to or date.today()
        date_from = date_from or date_to - timedelta(days=DEFAULT_CASHFLOW_DAYS)

        events = []
        if direction in (None, "in"):
            for record in (await self.db.execute(
                select(IncomeRecord).where(
                    IncomeRecord.income_date >= date_from, IncomeRecord.income_date <= date_to
                )
            )).scalars():
                events.append({
                    "date": record.income_date,
                    "amount": record.amount or 0.0,
                    "description": record.description or record.source_type or "Income",
                    "direction": "in",
                })
        if direction in (None, "out"):
            for expense in (await self.db.execute(
                select(Expense).where(
                    Expense.status == "paid", Expense.date >= date_from, Expense.date <= date_to
                )
            )).scalars():
                events.append({
                    "date": expense.date,
                    "amount": expense.amount or 0.0,
                    "description": expense.description or expense.expense_type or expense.category or "Expense",
                    "direction": "out",
                })

        events.sort(key=lambda event: event["date"], reverse=True)
        cash_in = round(sum(e["amount"] for e in events if e["direction"] == "in"), 2)
        cash_out = round(sum(e["amount"] for e in events if e["direction"] == "out"), 2)
        return {
            "date_from": date_from,
            "date_to": date_to,
            "cash_in": cash_in,
            "cash_out": cash_out,
            "net": round(cash_in - cash_out, 2),
            "events": events,
        }

    def cashflow_workbook(self, report: Dict) -> bytes:
        """Render a cashflow report as an Excel workbook."""
        summary = pd.DataFrame([
            {"Item": "Period", "Value": f"{report['date_from']} to {report['date_to']}"},
            {"Item": "Total Cash In", "Value": report["cash_in"]},
            {"Item": "Total Cash Out", "Value": report["cash_out"]},
            {"Item": "Net Cash", "Value": report["net"]},
        ])
        transactions = pd.DataFrame(
            [
                {
                    "Date": event["date"],
                    "Description": event["description"],
                    "Type": "Cash In" if event["direction"] == "in" else "Cash Out",
                    "Amount": event["amount"],
                }
                for event in report["events"]
            ],
            columns=["Date", "Description", "Type", "Amount"],
        )

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            summary.to_excel(writer, sheet_name="Summary", index=False)
            transactions.to_excel(writer, sheet_name="Cashflow", index=False)
        return buffer.getvalue()

    async def dashboard_overview(self, hide_totals: bool = False) -> Dict:
        """
        Headline figures for the landing page.

        Args:
            hide_totals: Blank out every financial total, leaving counts and lists
        """
        equipment_sales = await self._sum(VesselEquipmentSale.sale_price)
        vessel_scrap = await self._sum(VesselScrapSale.total_amount)
        land_scrap = await self._sum(LandScrapSale.total_amount)
        rental_income = await self._sum(
            VesselRental.total_amount,
            VesselRental.payment_status == "paid",
            VesselRental.status.in_(EARNING_RENTAL_STATUSES),
        )
        vessel_purchases = await self._sum(Vessel.purchase_price)
        salaries = await self._sum(SalaryPayment.total_amount)
        expenses = await self._sum(Expense.amount)
        overhaul_expenses = await self._sum(Expense.amount, Expense.project_type == "overhaul")

        total_income = equipment_sales + vessel_scrap + land_scrap + rental_income
        total_expenses = vessel_purchases + salaries + expenses

        financials = {
            "total_income": total_income,
            "equipment_sales": equipment_sales,
            "vessel_scrap": vessel_scrap,
            "land_scrap": land_scrap,
            "rental_income": rental_income,
            "total_expenses": total_expenses,
            "vessel_purchases": vessel_purchases,
            "salaries": salaries,
            "expenses": expenses,
            "overhaul_expenses": overhaul_expenses,
            "net_profit": total_income - total_expenses,
        }
        if hide_totals:
            financials = {key: None for key in financials}

        recent_vessels = (await self.db.execute(
            select(Vessel).order_by(Vessel.created_at.desc()).limit(RECENT_LIMIT)
        )).scalars().all()
        recent_lands = (await self.db.execute(
            select(LandPurchase).order_by(LandPurchase.created_at.desc()).limit(RECENT_LIMIT)
        )).scalars().all()
        active_overhauls = (await self.db.execute(
            select(OverhaulProject, Vessel.name)
            .outerjoin(Vessel, Vessel.id == OverhaulProject.vessel_id)
            .where(OverhaulProject.status == "in_progress")
            .order_by(OverhaulProject.start_date.desc())
            .limit(RECENT_LIMIT)
        )).all()

        return {
            "financials": financials,
            "counts": {
                "vessels": await self._count(Vessel),
                "active_vessels": await self._count(Vessel, Vessel.status == "active"),
                "lands": await self._count(LandPurchase),
                "active_employees": await self._count(Employee, Employee.status == "active"),
                "active_rentals": await self._count(VesselRental, VesselRental.status == "active"),
                "active_overhauls": await self._count(
                    OverhaulProject, OverhaulProject.status == "in_progress"
                ),
            },
            "recent_vessels": [
                {"id": vessel.id, "name": vessel.name, "status": vessel.status}
                for vessel in recent_vessels
            ],
            "recent_lands": [
                {
                    "id": land.id,
                    "land_name": land.land_name,
                    "status": land.status,
                    "remaining_tonnage": land.remaining_tonnage,
                }
                for land in recent_lands
            ],
            "active_overhauls": [
                {
                    "id": project.id,
                    "project_name": project.project_name,
                    "vessel_name": vessel_name,
                    "total_budget": None if hide_totals else project.total_budget,
                    "total_spent": None if hide_totals else project.total_spent,
                }
                for project, vessel_name in active_overhauls
            ],
        }
