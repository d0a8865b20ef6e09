"""
Scrap land purchases, their scrap sales and salvaged equipment.

``remaining_tonnage`` and ``scrap_tonnage_sold`` on a land are derived from
its scrap sales and are recomputed whenever a sale is added or removed,
the same way the tonnage reconciliation job does for every land.
"""

from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from marine_ops.models.scrap import (
    LandPurchase, LandScrapSale, LandEquipment, LAND_STATUSES, EQUIPMENT_STATUSES,
)
from marine_ops.models.finance import Expense
from marine_ops.models.equity import OwnerDistribution
from marine_ops.repository import Repository
from marine_ops.tenancy import company_scope
from marine_ops.exceptions import DomainValidationError
import logging

logger = logging.getLogger(__name__)


async def sold_tonnage(db: AsyncSession, land_id: int) -> float:
    total = await db.scalar(
        select(func.coalesce(func.sum(LandScrapSale.quantity_tons), 0.0))
        .where(LandScrapSale.land_id == land_id)
    )
    return float(total or 0.0)


async def recompute_land_tonnage(db: AsyncSession, land: LandPurchase) -> float:
    """
    Rewrite a land's remaining and sold tonnage from its scrap sales.

    Returns:
        float: Tons sold from the land
    """
    sold = await sold_tonnage(db, land.id)
    land.remaining_tonnage = (land.estimated_tonnage or 0.0) - sold
    land.scrap_tonnage_sold = sold
    return sold


class LandManager:
    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.lands = Repository(db_session, LandPurchase, "Land")
        self.sales = Repository(db_session, LandScrapSale, "Scrap sale")
        self.equipment = Repository(db_session, LandEquipment, "Equipment")

    # Lands

    async def get_land(self, land_id: int) -> LandPurchase:
        return await self.lands.get(land_id)

    async def list_lands(self, status: Optional[str] = None,
                         company_id: Optional[int] = None) -> List[LandPurchase]:
        criteria = []
        if status:
            criteria.append(LandPurchase.status == status)
        scope = await company_scope(self.db, company_id)
        if scope is not None:
            criteria.append(LandPurchase.company_id.in_(scope))
        return await self.lands.list(*criteria, order_by=LandPurchase.created_at.desc())

    async def create_land(self, **values) -> LandPurchase:
        self._check_choice("land status", values.get("status"), LAND_STATUSES)
        land = await self.lands.create(**values)
        await self.db.commit()
        logger.info(f"Registered land {land.id}: {land.land_name} ({land.estimated_tonnage}t estimated)")
        return land

    async def update_land(self, land_id: int, changes: Dict) -> LandPurchase:
        self._check_choice("land status", changes.get("status"), LAND_STATUSES)
        land = await self.lands.update(land_id, changes)
        if "estimated_tonnage" in changes:
            await recompute_land_tonnage(self.db, land)
        await self.db.commit()
        return land

    async def delete_land(self, land_id: int) -> None:
        await self.lands.delete(land_id)
        await self.db.commit()
        logger.info(f"Deleted land {land_id}")

    # Scrap sales

    async def list_sales(self, land_id: int) -> List[LandScrapSale]:
        return await self.sales.list(
            LandScrapSale.land_id == land_id, order_by=LandScrapSale.sale_date.desc()
        )

    async def add_sale(self, land_id: int, **values) -> LandScrapSale:
        """Record a scrap sale and refresh the land's tonnage."""
        land = await self.lands.get(land_id)
        quantity = values.get("quantity_tons") or 0.0
        if quantity <= 0:
            raise DomainValidationError("Sale quantity must be positive")

        values.setdefault("company_id", land.company_id)
        sale = await self.sales.create(
            land_id=land_id,
            total_amount=round(quantity * (values.get("price_per_ton") or 0.0), 2),
            **values,
        )
        await recompute_land_tonnage(self.db, land)
        await self.db.commit()

        logger.info(
            f"Land {land_id} sold {quantity}t for {sale.total_amount}, "
            f"{land.remaining_tonnage}t remaining"
        )
        return sale

    async def delete_sale(self, sale_id: int) -> None:
        sale = await self.sales.delete(sale_id)
        land = await self.lands.get(sale.land_id)
        await recompute_land_tonnage(self.db, land)
        await self.db.commit()

    async def sale_distribution_info(self, sale_id: int) -> Dict:
        """How much of a scrap sale's proceeds owners have already taken out."""
        sale = await self.sales.get(sale_id)
        distributed = await self.db.scalar(
            select(func.coalesce(func.sum(OwnerDistribution.amount), 0.0)).where(
                OwnerDistribution.source_type == "scrap_sale",
                OwnerDistribution.source_id == sale.id,
            )
        )
        distributed = float(distributed or 0.0)
        remaining = (sale.total_amount or 0.0) - distributed
        return {
            "sale_id": sale.id,
            "total_amount": sale.total_amount or 0.0,
            "total_distributed": distributed,
            "remaining": remaining,
            "fully_distributed": remaining <= 0,
        }

    # Equipment

    async def list_equipment(self, land_id: Optional[int] = None,
                             status: Optional[str] = None) -> List[LandEquipment]:
        criteria = []
        if land_id is not None:
            criteria.append(LandEquipment.land_id == land_id)
        if status:
            criteria.append(LandEquipment.status == status)
        return await self.equipment.list(*criteria, order_by=LandEquipment.id)

    async def add_equipment(self, land_id: int, **values) -> LandEquipment:
        await self.lands.get(land_id)
        self._check_choice("equipment status", values.get("status"), EQUIPMENT_STATUSES)
        item = await self.equipment.create(land_id=land_id, **values)
        await self.db.commit()
        return item

    async def update_equipment(self, equipment_id: int, changes: Dict) -> LandEquipment:
        self._check_choice("equipment status", changes.get("status"), EQUIPMENT_STATUSES)
        item = await self.equipment.update(equipment_id, changes)
        await self.db.commit()
        return item

    async def delete_equipment(self, equipment_id: int) -> None:
        await self.equipment.delete(equipment_id)
        await self.db.commit()

    @staticmethod
    def _check_choice(label: str, value: Optional[str], choices):
        if value is not None and value not in choices:
            raise DomainValidationError(f"Unknown {label}: {value}")

    # Summary

    async def land_financial_summary(self, land_id: int) -> Dict:
        """Profit, loss and extraction progress for one land."""
        land = await self.lands.get(land_id)
        equipment = await self.equipment.list(LandEquipment.land_id == land_id)
        sales = await self.sales.list(LandScrapSale.land_id == land_id)
        expenses = await self.db.scalar(
            select(func.coalesce(func.sum(Expense.amount), 0.0)).where(
                Expense.project_type == "land", Expense.project_id == land_id
            )
        )

        equipment_value = sum(item.value for item in equipment)
        scrap_revenue = sum(sale.total_amount or 0.0 for sale in sales)
        purchase_price = land.purchase_price or 0.0
        expenses = float(expenses or 0.0)

        return {
            "land_id": land.id,
            "land_name": land.land_name,
            "purchase_price": purchase_price,
            "equipment_value": equipment_value,
            "scrap_revenue": scrap_revenue,
            "total_expenses": expenses,
            "net_profit": equipment_value + scrap_revenue - purchase_price - expenses,
            "estimated_tonnage": land.estimated_tonnage or 0.0,
            "remaining_tonnage": land.remaining_tonnage or 0.0,
            "extracted_tonnage": land.extracted_tonnage,
            "extraction_percent": land.extraction_percent,
        }
