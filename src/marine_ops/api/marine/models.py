from pydantic import BaseModel, Field, ConfigDict
from typing import Dict, List, Optional
from datetime import date, datetime
from enum import Enum


class VesselStatus(str, Enum):
    ACTIVE = "active"
    SCRAPPING = "scrapping"
    SCRAPPED = "scrapped"
    UNDER_OVERHAUL = "under_overhaul"
    SOLD = "sold"


class VesselBase(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: str = Field(..., min_length=1, max_length=255)
    company_id: Optional[int] = None
    vessel_type: Optional[str] = None
    purchase_price: Optional[float] = Field(None, ge=0)
    purchase_date: Optional[date] = None
    paid_by_owner_id: Optional[int] = None
    status: VesselStatus = VesselStatus.ACTIVE
    current_location: Optional[str] = None
    tonnage: Optional[float] = Field(None, ge=0)
    year_built: Optional[int] = None
    classification_status: Optional[str] = None
    notes: Optional[str] = None


class VesselCreate(VesselBase):
    pass


class VesselUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    company_id: Optional[int] = None
    vessel_type: Optional[str] = None
    purchase_price: Optional[float] = Field(None, ge=0)
    purchase_date: Optional[date] = None
    paid_by_owner_id: Optional[int] = None
    status: Optional[VesselStatus] = None
    current_location: Optional[str] = None
    tonnage: Optional[float] = Field(None, ge=0)
    year_built: Optional[int] = None
    classification_status: Optional[str] = None
    notes: Optional[str] = None


class VesselResponse(VesselBase):
    id: int
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ScrapSaleCreate(BaseModel):
    sale_date: date
    buyer_name: Optional[str] = None
    quantity_tons: float = Field(..., gt=0)
    price_per_ton: float = Field(..., ge=0)
    notes: Optional[str] = None


class ScrapSaleResponse(ScrapSaleCreate):
    id: int
    vessel_id: int
    total_amount: float

    model_config = ConfigDict(from_attributes=True)


class EquipmentSaleCreate(BaseModel):
    equipment_name: str = Field(..., min_length=1, max_length=255)
    sale_date: date
    buyer_name: Optional[str] = None
    sale_price: float = Field(..., ge=0)
    notes: Optional[str] = None


class EquipmentSaleResponse(EquipmentSaleCreate):
    id: int
    vessel_id: int

    model_config = ConfigDict(from_attributes=True)


class VesselFinancialSummary(BaseModel):
    vessel_id: int
    vessel_name: str
    purchase_price: float
    equipment_sales: float
    scrap_sales: float
    rental_income: float
    vessel_expenses: float
    overhaul_expenses: float
    total_revenue: float
    total_costs: float
    net_profit_loss: float


class RentalStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"


class RentalCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    vessel_id: int
    customer_name: str = Field(..., min_length=1, max_length=255)
    start_date: date
    end_date: Optional[date] = None
    total_amount: float = Field(0.0, ge=0)
    status: RentalStatus = RentalStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    notes: Optional[str] = None


class RentalUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    customer_name: Optional[str] = Field(None, min_length=1, max_length=255)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    total_amount: Optional[float] = Field(None, ge=0)
    status: Optional[RentalStatus] = None
    payment_status: Optional[PaymentStatus] = None
    notes: Optional[str] = None


class RentalResponse(BaseModel):
    id: int
    vessel_id: int
    customer_name: str
    start_date: date
    end_date: Optional[date] = None
    total_amount: float
    status: str
    payment_status: str
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# Overhauls

class ProjectCreate(BaseModel):
    vessel_id: int
    project_name: str = Field(..., min_length=1, max_length=255)
    company_id: Optional[int] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: str = "planning"
    total_budget: Optional[float] = Field(None, ge=0)


class ProjectUpdate(BaseModel):
    project_name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[str] = None
    total_budget: Optional[float] = Field(None, ge=0)


class ProjectResponse(BaseModel):
    id: int
    vessel_id: int
    company_id: Optional[int] = None
    project_name: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: str
    total_budget: Optional[float] = None
    total_spent: float

    model_config = ConfigDict(from_attributes=True)


class TaskCreate(BaseModel):
    task_name: str = Field(..., min_length=1, max_length=255)
    component_type: str = "engine"
    repair_type: str = "maintenance"
    contractor_name: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    estimated_cost: Optional[float] = Field(None, ge=0)
    actual_cost: Optional[float] = Field(None, ge=0)
    status: str = "pending"


class TaskUpdate(BaseModel):
    task_name: Optional[str] = Field(None, min_length=1, max_length=255)
    component_type: Optional[str] = None
    repair_type: Optional[str] = None
    contractor_name: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    estimated_cost: Optional[float] = Field(None, ge=0)
    actual_cost: Optional[float] = Field(None, ge=0)
    status: Optional[str] = None


class TaskResponse(TaskCreate):
    id: int
    project_id: int

    model_config = ConfigDict(from_attributes=True)


class ProjectSummary(BaseModel):
    project_id: int
    project_name: str
    status: str
    total_budget: float
    total_spent: float
    remaining_budget: float
    budget_utilization: float
    total_estimated_cost: float
    completed_tasks: int
    total_tasks: int
    cost_by_component: Dict[str, float]


# Crew and HR

class EmployeeCreate(BaseModel):
    employee_code: str = Field(..., min_length=1, max_length=50)
    full_name: str = Field(..., min_length=1, max_length=255)
    company_id: Optional[int] = None
    position: Optional[str] = None
    department: Optional[str] = None
    hire_date: Optional[date] = None
    salary: Optional[float] = Field(None, ge=0)
    salary_type: Optional[str] = None
    status: str = "active"
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    emergency_contact: Optional[str] = None
    emergency_phone: Optional[str] = None


class EmployeeUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    company_id: Optional[int] = None
    position: Optional[str] = None
    department: Optional[str] = None
    salary: Optional[float] = Field(None, ge=0)
    salary_type: Optional[str] = None
    status: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    emergency_contact: Optional[str] = None
    emergency_phone: Optional[str] = None


class EmployeeResponse(EmployeeCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)


class AssignmentCreate(BaseModel):
    vessel_id: int
    employee_id: int
    role: Optional[str] = None
    assignment_date: date
    end_date: Optional[date] = None
    status: str = "scheduled"
    notes: Optional[str] = None


class AssignmentUpdate(BaseModel):
    role: Optional[str] = None
    end_date: Optional[date] = None
    status: Optional[str] = None
    notes: Optional[str] = None


class AssignmentResponse(AssignmentCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)


class AssignmentList(BaseModel):
    assignments: List[AssignmentResponse]
    total: int
    active: int
    scheduled: int
    completed: int


class CertificationCreate(BaseModel):
    employee_id: int
    certification_name: str = Field(..., min_length=1, max_length=255)
    certificate_number: Optional[str] = None
    issuing_authority: Optional[str] = None
    issue_date: Optional[date] = None
    expiry_date: date


class CertificationUpdate(BaseModel):
    certification_name: Optional[str] = Field(None, min_length=1, max_length=255)
    certificate_number: Optional[str] = None
    issuing_authority: Optional[str] = None
    issue_date: Optional[date] = None
    expiry_date: Optional[date] = None


class CertificationResponse(CertificationCreate):
    id: int
    status: Optional[str] = None  # valid, expiring_soon, expired

    model_config = ConfigDict(from_attributes=True)


class CertificationList(BaseModel):
    certifications: List[CertificationResponse]
    total: int
    expired: int
    expiring_soon: int


class SalaryPaymentCreate(BaseModel):
    employee_id: int
    payment_date: date
    period: Optional[str] = None
    base_amount: float = Field(..., ge=0)
    bonuses: float = Field(0.0, ge=0)
    deductions: float = Field(0.0, ge=0)
    payment_method: Optional[str] = None
    paid_by_owner_id: Optional[int] = None
    notes: Optional[str] = None


class SalaryPaymentUpdate(BaseModel):
    payment_date: Optional[date] = None
    period: Optional[str] = None
    base_amount: Optional[float] = Field(None, ge=0)
    bonuses: Optional[float] = Field(None, ge=0)
    deductions: Optional[float] = Field(None, ge=0)
    payment_method: Optional[str] = None
    paid_by_owner_id: Optional[int] = None
    notes: Optional[str] = None


class SalaryPaymentResponse(SalaryPaymentCreate):
    id: int
    total_amount: float

    model_config = ConfigDict(from_attributes=True)


class SalaryPaymentList(BaseModel):
    payments: List[SalaryPaymentResponse]
    total_paid: float


# Maintenance

class MaintenanceCreate(BaseModel):
    vessel_id: int
    maintenance_type: str = "routine"
    description: Optional[str] = None
    scheduled_date: date
    estimated_cost: Optional[float] = Field(None, ge=0)
    priority: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None


class MaintenanceUpdate(BaseModel):
    maintenance_type: Optional[str] = None
    description: Optional[str] = None
    scheduled_date: Optional[date] = None
    completed_date: Optional[date] = None
    estimated_cost: Optional[float] = Field(None, ge=0)
    actual_cost: Optional[float] = Field(None, ge=0)
    priority: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None


class MaintenanceResponse(BaseModel):
    id: int
    vessel_id: int
    maintenance_type: str
    description: Optional[str] = None
    scheduled_date: date
    completed_date: Optional[date] = None
    estimated_cost: Optional[float] = None
    actual_cost: Optional[float] = None
    priority: str
    status: str
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
