"""
Vessel registry, vessel sales and rentals.

Also computes the per-vessel profit and loss used by the vessel detail
view: what the vessel brought in (equipment, scrap, paid rentals) against
what it cost (purchase, direct expenses, overhaul expenses).
"""

from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from marine_ops.models.vessel import (
    Vessel, VesselScrapSale, VesselEquipmentSale, VesselRental, VESSEL_STATUSES,
)
from marine_ops.models.overhaul import OverhaulProject
from marine_ops.models.finance import Expense
from marine_ops.repository import Repository
from marine_ops.tenancy import company_scope, apply_scope
from marine_ops.exceptions import DomainValidationError
import logging

logger = logging.getLogger(__name__)

# Rentals that count as earned income once paid
EARNING_RENTAL_STATUSES = ("active", "completed")


class VesselManager:
    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.vessels = Repository(db_session, Vessel)
        self.scrap_sales = Repository(db_session, VesselScrapSale, "Vessel scrap sale")
        self.equipment_sales = Repository(db_session, VesselEquipmentSale, "Vessel equipment sale")
        self.rentals = Repository(db_session, VesselRental, "Rental")

    # Vessels

    async def get_vessel(self, vessel_id: int) -> Vessel:
        return await self.vessels.get(vessel_id)

    async def list_vessels(self, status: Optional[str] = None,
                           company_id: Optional[int] = None) -> List[Vessel]:
        criteria = []
        if status:
            criteria.append(Vessel.status == status)
        scope = await company_scope(self.db, company_id)
        if scope is not None:
            criteria.append(Vessel.company_id.in_(scope))
        return await self.vessels.list(*criteria, order_by=Vessel.created_at.desc())

    async def create_vessel(self, **values) -> Vessel:
        self._check_status(values.get("status"))
        vessel = await self.vessels.create(**values)
        await self.db.commit()
        logger.info(f"Registered vessel {vessel.id}: {vessel.name}")
        return vessel

    async def update_vessel(self, vessel_id: int, changes: Dict) -> Vessel:
        self._check_status(changes.get("status"))
        vessel = await self.vessels.update(vessel_id, changes)
        await self.db.commit()
        return vessel

    async def delete_vessel(self, vessel_id: int) -> None:
        await self.vessels.delete(vessel_id)
        await self.db.commit()
        logger.info(f"Deleted vessel {vessel_id}")

    @staticmethod
    def _check_status(status: Optional[str]):
        if status is not None and status not in VESSEL_STATUSES:
            raise DomainValidationError(f"Unknown vessel status: {status}")

    # Sales

    async def record_scrap_sale(self, vessel_id: int, **values) -> VesselScrapSale:
        """Record scrap sold off a vessel; the total is tons times price."""
        await self.vessels.get(vessel_id)
        quantity = values.get("quantity_tons") or 0.0
        price = values.get("price_per_ton") or 0.0
        sale = await self.scrap_sales.create(
            vessel_id=vessel_id,
            total_amount=round(quantity * price, 2),
            **values,
        )
        await self.db.commit()
        logger.info(f"Vessel {vessel_id} scrap sale: {quantity}t for {sale.total_amount}")
        return sale

    async def list_scrap_sales(self, vessel_id: int) -> List[VesselScrapSale]:
        return await self.scrap_sales.list(
            VesselScrapSale.vessel_id == vessel_id, order_by=VesselScrapSale.sale_date.desc()
        )

    async def delete_scrap_sale(self, sale_id: int) -> None:
        await self.scrap_sales.delete(sale_id)
        await self.db.commit()

    async def record_equipment_sale(self, vessel_id: int, **values) -> VesselEquipmentSale:
        await self.vessels.get(vessel_id)
        sale = await self.equipment_sales.create(vessel_id=vessel_id, **values)
        await self.db.commit()
        logger.info(f"Vessel {vessel_id} equipment sale: {sale.equipment_name} for {sale.sale_price}")
        return sale

    async def list_equipment_sales(self, vessel_id: int) -> List[VesselEquipmentSale]:
        return await self.equipment_sales.list(
            VesselEquipmentSale.vessel_id == vessel_id,
            order_by=VesselEquipmentSale.sale_date.desc(),
        )

    async def delete_equipment_sale(self, sale_id: int) -> None:
        await self.equipment_sales.delete(sale_id)
        await self.db.commit()

    # Rentals

    async def list_rentals(self, vessel_id: Optional[int] = None,
                           status: Optional[str] = None) -> List[VesselRental]:
        criteria = []
        if vessel_id is not None:
            criteria.append(VesselRental.vessel_id == vessel_id)
        if status:
            criteria.append(VesselRental.status == status)
        return await self.rentals.list(*criteria, order_by=VesselRental.start_date.desc())

    async def create_rental(self, **values) -> VesselRental:
        await self.vessels.get(values["vessel_id"])
        if values.get("end_date") and values["end_date"] < values["start_date"]:
            raise DomainValidationError("Rental end date is before its start date")
        rental = await self.rentals.create(**values)
        await self.db.commit()
        return rental

    async def update_rental(self, rental_id: int, changes: Dict) -> VesselRental:
        rental = await self.rentals.update(rental_id, changes)
        await self.db.commit()
        return rental

    async def delete_rental(self, rental_id: int) -> None:
        await self.rentals.delete(rental_id)
        await self.db.commit()

    # Summary

    async def _sum(self, column, *criteria) -> float:
        total = await self.db.scalar(select(func.coalesce(func.sum(column), 0.0)).where(*criteria))
        return float(total or 0.0)

    async def vessel_financial_summary(self, vessel_id: int) -> Dict:
        """
        Profit and loss for one vessel.

        Returns:
            Dict with the revenue and cost components, their totals and
            ``net_profit_loss``
        """
        vessel = await self.vessels.get(vessel_id)

        equipment_sales = await self._sum(
            VesselEquipmentSale.sale_price, VesselEquipmentSale.vessel_id == vessel_id
        )
        scrap_sales = await self._sum(
            VesselScrapSale.total_amount, VesselScrapSale.vessel_id == vessel_id
        )
        rental_income = await self._sum(
            VesselRental.total_amount,
            VesselRental.vessel_id == vessel_id,
            VesselRental.status.in_(EARNING_RENTAL_STATUSES),
            VesselRental.payment_status == "paid",
        )
        vessel_expenses = await self._sum(
            Expense.amount, Expense.project_type == "vessel", Expense.project_id == vessel_id
        )

        project_ids = (await self.db.execute(
            select(OverhaulProject.id).where(OverhaulProject.vessel_id == vessel_id)
        )).scalars().all()
        overhaul_expenses = 0.0
        if project_ids:
            overhaul_expenses = await self._sum(
                Expense.amount,
                Expense.project_type == "overhaul",
                Expense.project_id.in_(project_ids),
            )

        purchase_price = vessel.purchase_price or 0.0
        total_revenue = equipment_sales + scrap_sales + rental_income
        total_costs = purchase_price + vessel_expenses + overhaul_expenses

        return {
            "vessel_id": vessel.id,
            "vessel_name": vessel.name,
            "purchase_price": purchase_price,
            "equipment_sales": equipment_sales,
            "scrap_sales": scrap_sales,
            "rental_income": rental_income,
            "vessel_expenses": vessel_expenses,
            "overhaul_expenses": overhaul_expenses,
            "total_revenue": total_revenue,
            "total_costs": total_costs,
            "net_profit_loss": total_revenue - total_costs,
        }
