"""
Company tree management and tenant scoping.

Companies form a two-level tree: a ``parent`` holding company and its
``marine`` and ``scrap`` subsidiaries. Listing endpoints that take a
``company_id`` show the records of that company and of its direct children.
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from marine_ops.models.company import Company, COMPANY_TYPES
from marine_ops.exceptions import NotFoundError, ConflictError, DomainValidationError
import logging

logger = logging.getLogger(__name__)


async def company_scope(db: AsyncSession, company_id: Optional[int]) -> Optional[List[int]]:
    """
    Resolve the set of company ids visible under ``company_id``.

    Returns None when no company filter applies.
    """
    if company_id is None:
        return None

    result = await db.execute(select(Company.id).where(Company.parent_id == company_id))
    return [company_id, *result.scalars().all()]


def apply_scope(query, column, scope: Optional[List[int]]):
    """Restrict ``query`` to rows whose ``column`` falls in ``scope``."""
    if scope is None:
        return query
    return query.where(column.in_(scope))


class CompanyManager:
    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def get(self, company_id: int) -> Company:
        company = await self.db.get(Company, company_id)
        if not company:
            raise NotFoundError.for_entity("Company", company_id)
        return company

    async def list_companies(self, company_type: Optional[str] = None) -> List[Company]:
        query = select(Company).order_by(Company.name)
        if company_type:
            query = query.where(Company.type == company_type)
        result = await self.db.execute(query)
        return result.scalars().all()

    async def create_company(self, name: str, company_type: str,
                             parent_id: Optional[int] = None) -> Company:
        """Create a company, checking the name is free and the parent exists."""
        if company_type not in COMPANY_TYPES:
            raise DomainValidationError(f"Unknown company type: {company_type}")

        existing = await self.db.scalar(select(Company).where(Company.name == name))
        if existing:
            raise ConflictError(f"Company '{name}' already exists")

        if parent_id is not None:
            await self.get(parent_id)

        company = Company(name=name, type=company_type, parent_id=parent_id)
        self.db.add(company)
        await self.db.commit()
        await self.db.refresh(company)

        logger.info(f"Created {company_type} company: {name}")
        return company

    async def update_company(self, company_id: int, **changes) -> Company:
        company = await self.get(company_id)

        if changes.get("type") and changes["type"] not in COMPANY_TYPES:
            raise DomainValidationError(f"Unknown company type: {changes['type']}")
        if changes.get("parent_id") == company_id:
            raise DomainValidationError("A company cannot be its own parent")
        if changes.get("parent_id") is not None:
            await self.get(changes["parent_id"])

        for field, value in changes.items():
            setattr(company, field, value)

        await self.db.commit()
        await self.db.refresh(company)
        return company

    async def delete_company(self, company_id: int) -> None:
        """Delete a company that no longer has subsidiaries."""
        company = await self.get(company_id)

        children = await self.db.scalar(
            select(func.count(Company.id)).where(Company.parent_id == company_id)
        )
        if children:
            raise ConflictError(
                f"Company {company_id} still has {children} subsidiaries"
            )

        await self.db.delete(company)
        await self.db.commit()
        logger.info(f"Deleted company {company_id}")
