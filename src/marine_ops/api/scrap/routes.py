from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from marine_ops.api.deps import require_permission
from marine_ops.api.scrap.models import (
    LandCreate, LandUpdate, LandResponse, LandSaleCreate, LandSaleResponse,
    DistributionInfo, EquipmentCreate, EquipmentUpdate, EquipmentResponse,
    LandFinancialSummary,
)
from marine_ops.db import get_db_session
from marine_ops.models import User
from marine_ops.scrap import LandManager

router = APIRouter()


@router.get("/lands", response_model=List[LandResponse])
async def list_lands(
    status: Optional[str] = None,
    company_id: Optional[int] = None,
    _: User = Depends(require_permission("scrap.lands", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await LandManager(db).list_lands(status=status, company_id=company_id)


@router.post("/lands", response_model=LandResponse, status_code=status.HTTP_201_CREATED)
async def create_land(
    land_data: LandCreate,
    _: User = Depends(require_permission("scrap.lands", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    """Register a land purchase; remaining tonnage starts at the estimate"""
    return await LandManager(db).create_land(**land_data.model_dump(exclude_none=True))


@router.get("/lands/{land_id}", response_model=LandResponse)
async def get_land(
    land_id: int,
    _: User = Depends(require_permission("scrap.lands", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await LandManager(db).get_land(land_id)


@router.put("/lands/{land_id}", response_model=LandResponse)
async def update_land(
    land_id: int,
    land_data: LandUpdate,
    _: User = Depends(require_permission("scrap.lands", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    return await LandManager(db).update_land(land_id, land_data.model_dump(exclude_unset=True))


@router.delete("/lands/{land_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_land(
    land_id: int,
    _: User = Depends(require_permission("scrap.lands", "delete")),
    db: AsyncSession = Depends(get_db_session)
):
    await LandManager(db).delete_land(land_id)


@router.get("/lands/{land_id}/summary", response_model=LandFinancialSummary)
async def land_financial_summary(
    land_id: int,
    _: User = Depends(require_permission("scrap.lands", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await LandManager(db).land_financial_summary(land_id)


@router.get("/lands/{land_id}/sales", response_model=List[LandSaleResponse])
async def list_land_sales(
    land_id: int,
    _: User = Depends(require_permission("scrap.lands", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await LandManager(db).list_sales(land_id)


@router.post("/lands/{land_id}/sales", response_model=LandSaleResponse,
             status_code=status.HTTP_201_CREATED)
async def add_land_sale(
    land_id: int,
    sale_data: LandSaleCreate,
    _: User = Depends(require_permission("scrap.lands", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    """Record a scrap sale and refresh the land's tonnage"""
    return await LandManager(db).add_sale(land_id, **sale_data.model_dump())


@router.delete("/sales/{sale_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_land_sale(
    sale_id: int,
    _: User = Depends(require_permission("scrap.lands", "delete")),
    db: AsyncSession = Depends(get_db_session)
):
    await LandManager(db).delete_sale(sale_id)


@router.get("/sales/{sale_id}/distribution-info", response_model=DistributionInfo)
async def sale_distribution_info(
    sale_id: int,
    _: User = Depends(require_permission("equity", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await LandManager(db).sale_distribution_info(sale_id)


@router.get("/equipment", response_model=List[EquipmentResponse])
async def list_equipment(
    land_id: Optional[int] = None,
    status: Optional[str] = None,
    _: User = Depends(require_permission("scrap.equipment", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await LandManager(db).list_equipment(land_id=land_id, status=status)


@router.post("/lands/{land_id}/equipment", response_model=EquipmentResponse,
             status_code=status.HTTP_201_CREATED)
async def add_equipment(
    land_id: int,
    equipment_data: EquipmentCreate,
    _: User = Depends(require_permission("scrap.equipment", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    return await LandManager(db).add_equipment(land_id, **equipment_data.model_dump())


@router.put("/equipment/{equipment_id}", response_model=EquipmentResponse)
async def update_equipment(
    equipment_id: int,
    equipment_data: EquipmentUpdate,
    _: User = Depends(require_permission("scrap.equipment", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    return await LandManager(db).update_equipment(
        equipment_id, equipment_data.model_dump(exclude_unset=True)
    )


@router.delete("/equipment/{equipment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_equipment(
    equipment_id: int,
    _: User = Depends(require_permission("scrap.equipment", "delete")),
    db: AsyncSession = Depends(get_db_session)
):
    await LandManager(db).delete_equipment(equipment_id)
