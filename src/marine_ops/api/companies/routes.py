from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from marine_ops.api.companies.models import CompanyCreate, CompanyUpdate, CompanyResponse
from marine_ops.api.deps import require_permission
from marine_ops.db import get_db_session
from marine_ops.models import User
from marine_ops.tenancy import CompanyManager

router = APIRouter()


@router.get("", response_model=List[CompanyResponse])
async def list_companies(
    type: Optional[str] = None,
    _: User = Depends(require_permission("companies", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await CompanyManager(db).list_companies(company_type=type)


@router.post("", response_model=CompanyResponse, status_code=status.HTTP_201_CREATED)
async def create_company(
    company_data: CompanyCreate,
    _: User = Depends(require_permission("companies", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    return await CompanyManager(db).create_company(
        name=company_data.name,
        company_type=company_data.type,
        parent_id=company_data.parent_id,
    )


@router.get("/{company_id}", response_model=CompanyResponse)
async def get_company(
    company_id: int,
    _: User = Depends(require_permission("companies", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await CompanyManager(db).get(company_id)


@router.put("/{company_id}", response_model=CompanyResponse)
async def update_company(
    company_id: int,
    company_data: CompanyUpdate,
    _: User = Depends(require_permission("companies", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    return await CompanyManager(db).update_company(
        company_id, **company_data.model_dump(exclude_unset=True)
    )


@router.delete("/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_company(
    company_id: int,
    _: User = Depends(require_permission("companies", "delete")),
    db: AsyncSession = Depends(get_db_session)
):
    """Delete a company; 409 while it still has subsidiaries"""
    await CompanyManager(db).delete_company(company_id)
