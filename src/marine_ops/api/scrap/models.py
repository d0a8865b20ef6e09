from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import date


class LandCreate(BaseModel):
    land_name: str = Field(..., min_length=1, max_length=255)
    company_id: Optional[int] = None
    location: Optional[str] = None
    purchase_price: Optional[float] = Field(None, ge=0)
    purchase_date: Optional[date] = None
    paid_by_owner_id: Optional[int] = None
    estimated_tonnage: Optional[float] = Field(None, ge=0)
    remaining_tonnage: Optional[float] = Field(None, ge=0)
    status: str = "active"
    notes: Optional[str] = None


class LandUpdate(BaseModel):
    land_name: Optional[str] = Field(None, min_length=1, max_length=255)
    company_id: Optional[int] = None
    location: Optional[str] = None
    purchase_price: Optional[float] = Field(None, ge=0)
    purchase_date: Optional[date] = None
    paid_by_owner_id: Optional[int] = None
    estimated_tonnage: Optional[float] = Field(None, ge=0)
    status: Optional[str] = None
    notes: Optional[str] = None


class LandResponse(BaseModel):
    id: int
    land_name: str
    company_id: Optional[int] = None
    location: Optional[str] = None
    purchase_price: Optional[float] = None
    purchase_date: Optional[date] = None
    paid_by_owner_id: Optional[int] = None
    estimated_tonnage: Optional[float] = None
    remaining_tonnage: Optional[float] = None
    scrap_tonnage_sold: float = 0.0
    status: str
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class LandSaleCreate(BaseModel):
    sale_date: date
    buyer_name: Optional[str] = None
    quantity_tons: float = Field(..., gt=0)
    price_per_ton: float = Field(..., ge=0)
    notes: Optional[str] = None


class LandSaleResponse(LandSaleCreate):
    id: int
    land_id: int
    company_id: Optional[int] = None
    total_amount: float

    model_config = ConfigDict(from_attributes=True)


class DistributionInfo(BaseModel):
    sale_id: int
    total_amount: float
    total_distributed: float
    remaining: float
    fully_distributed: bool


class EquipmentCreate(BaseModel):
    equipment_name: str = Field(..., min_length=1, max_length=255)
    quantity: int = Field(1, ge=0)
    estimated_value: Optional[float] = Field(None, ge=0)
    sale_price: Optional[float] = Field(None, ge=0)
    status: str = "available"
    notes: Optional[str] = None


class EquipmentUpdate(BaseModel):
    equipment_name: Optional[str] = Field(None, min_length=1, max_length=255)
    quantity: Optional[int] = Field(None, ge=0)
    estimated_value: Optional[float] = Field(None, ge=0)
    sale_price: Optional[float] = Field(None, ge=0)
    status: Optional[str] = None
    notes: Optional[str] = None


class EquipmentResponse(EquipmentCreate):
    id: int
    land_id: int

    model_config = ConfigDict(from_attributes=True)


class LandFinancialSummary(BaseModel):
    land_id: int
    land_name: str
    purchase_price: float
    equipment_value: float
    scrap_revenue: float
    total_expenses: float
    net_profit: float
    estimated_tonnage: float
    remaining_tonnage: float
    extracted_tonnage: float
    extraction_percent: float
