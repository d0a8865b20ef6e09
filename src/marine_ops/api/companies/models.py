from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime
from enum import Enum


class CompanyType(str, Enum):
    PARENT = "parent"
    MARINE = "marine"
    SCRAP = "scrap"


class CompanyCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: str = Field(..., min_length=1, max_length=255)
    type: CompanyType
    parent_id: Optional[int] = None


class CompanyUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[CompanyType] = None
    parent_id: Optional[int] = None


class CompanyResponse(BaseModel):
    id: int
    name: str
    type: str
    parent_id: Optional[int] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
