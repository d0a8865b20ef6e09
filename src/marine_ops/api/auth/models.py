from pydantic import BaseModel, EmailStr, Field, ConfigDict
from typing import Dict, Optional
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    ACCOUNTANT = "accountant"
    HR = "hr"
    STOREKEEPER = "storekeeper"


class UserCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=8)
    role: Role = Role.STOREKEEPER
    phone: Optional[str] = None


class UserUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    password: Optional[str] = Field(None, min_length=8)
    role: Optional[Role] = None
    phone: Optional[str] = None
    is_active: Optional[bool] = None


class UserLogin(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    id: int
    email: str
    full_name: str
    role: str
    phone: Optional[str] = None
    is_active: bool = True
    last_login: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProfileResponse(UserResponse):
    permissions: Dict[str, Dict[str, bool]]


class Token(BaseModel):
    access_token: str
    token_type: str
    expires_in: int
    user: UserResponse
