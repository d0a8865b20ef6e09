from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from marine_ops.api.deps import require_permission
from marine_ops.api.marine.models import (
    VesselCreate, VesselUpdate, VesselResponse, VesselFinancialSummary,
    ScrapSaleCreate, ScrapSaleResponse, EquipmentSaleCreate, EquipmentSaleResponse,
    RentalCreate, RentalUpdate, RentalResponse,
    ProjectCreate, ProjectUpdate, ProjectResponse, ProjectSummary,
    TaskCreate, TaskUpdate, TaskResponse,
    EmployeeCreate, EmployeeUpdate, EmployeeResponse,
    AssignmentCreate, AssignmentUpdate, AssignmentResponse, AssignmentList,
    CertificationCreate, CertificationUpdate, CertificationResponse, CertificationList,
    SalaryPaymentCreate, SalaryPaymentUpdate, SalaryPaymentResponse, SalaryPaymentList,
    MaintenanceCreate, MaintenanceUpdate, MaintenanceResponse,
)
from marine_ops.db import get_db_session
from marine_ops.marine import (
    VesselManager, OverhaulManager, CrewManager, MaintenanceManager, certification_status
)
from marine_ops.models import User

router = APIRouter()


# Vessels

@router.get("/vessels", response_model=List[VesselResponse])
async def list_vessels(
    status: Optional[str] = None,
    company_id: Optional[int] = None,
    _: User = Depends(require_permission("marine.vessels", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await VesselManager(db).list_vessels(status=status, company_id=company_id)


@router.post("/vessels", response_model=VesselResponse, status_code=status.HTTP_201_CREATED)
async def create_vessel(
    vessel_data: VesselCreate,
    _: User = Depends(require_permission("marine.vessels", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    return await VesselManager(db).create_vessel(**vessel_data.model_dump())


@router.get("/vessels/{vessel_id}", response_model=VesselResponse)
async def get_vessel(
    vessel_id: int,
    _: User = Depends(require_permission("marine.vessels", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await VesselManager(db).get_vessel(vessel_id)


@router.put("/vessels/{vessel_id}", response_model=VesselResponse)
async def update_vessel(
    vessel_id: int,
    vessel_data: VesselUpdate,
    _: User = Depends(require_permission("marine.vessels", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    return await VesselManager(db).update_vessel(vessel_id, vessel_data.model_dump(exclude_unset=True))


@router.delete("/vessels/{vessel_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vessel(
    vessel_id: int,
    _: User = Depends(require_permission("marine.vessels", "delete")),
    db: AsyncSession = Depends(get_db_session)
):
    await VesselManager(db).delete_vessel(vessel_id)


@router.get("/vessels/{vessel_id}/financial-summary", response_model=VesselFinancialSummary)
async def vessel_financial_summary(
    vessel_id: int,
    _: User = Depends(require_permission("marine.vessels", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    """Revenue, costs and net profit/loss for a vessel"""
    return await VesselManager(db).vessel_financial_summary(vessel_id)


@router.get("/vessels/{vessel_id}/scrap-sales", response_model=List[ScrapSaleResponse])
async def list_vessel_scrap_sales(
    vessel_id: int,
    _: User = Depends(require_permission("marine.vessels", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await VesselManager(db).list_scrap_sales(vessel_id)


@router.post("/vessels/{vessel_id}/scrap-sales", response_model=ScrapSaleResponse,
             status_code=status.HTTP_201_CREATED)
async def record_vessel_scrap_sale(
    vessel_id: int,
    sale_data: ScrapSaleCreate,
    _: User = Depends(require_permission("marine.vessels", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    return await VesselManager(db).record_scrap_sale(vessel_id, **sale_data.model_dump())


@router.delete("/scrap-sales/{sale_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vessel_scrap_sale(
    sale_id: int,
    _: User = Depends(require_permission("marine.vessels", "delete")),
    db: AsyncSession = Depends(get_db_session)
):
    await VesselManager(db).delete_scrap_sale(sale_id)


@router.get("/vessels/{vessel_id}/equipment-sales", response_model=List[EquipmentSaleResponse])
async def list_vessel_equipment_sales(
    vessel_id: int,
    _: User = Depends(require_permission("marine.vessels", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await VesselManager(db).list_equipment_sales(vessel_id)


@router.post("/vessels/{vessel_id}/equipment-sales", response_model=EquipmentSaleResponse,
             status_code=status.HTTP_201_CREATED)
async def record_vessel_equipment_sale(
    vessel_id: int,
    sale_data: EquipmentSaleCreate,
    _: User = Depends(require_permission("marine.vessels", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    return await VesselManager(db).record_equipment_sale(vessel_id, **sale_data.model_dump())


@router.delete("/equipment-sales/{sale_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vessel_equipment_sale(
    sale_id: int,
    _: User = Depends(require_permission("marine.vessels", "delete")),
    db: AsyncSession = Depends(get_db_session)
):
    await VesselManager(db).delete_equipment_sale(sale_id)


# Rentals

@router.get("/rentals", response_model=List[RentalResponse])
async def list_rentals(
    vessel_id: Optional[int] = None,
    status: Optional[str] = None,
    _: User = Depends(require_permission("marine.rentals", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await VesselManager(db).list_rentals(vessel_id=vessel_id, status=status)


@router.post("/rentals", response_model=RentalResponse, status_code=status.HTTP_201_CREATED)
async def create_rental(
    rental_data: RentalCreate,
    _: User = Depends(require_permission("marine.rentals", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    return await VesselManager(db).create_rental(**rental_data.model_dump())


@router.put("/rentals/{rental_id}", response_model=RentalResponse)
async def update_rental(
    rental_id: int,
    rental_data: RentalUpdate,
    _: User = Depends(require_permission("marine.rentals", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    return await VesselManager(db).update_rental(rental_id, rental_data.model_dump(exclude_unset=True))


@router.delete("/rentals/{rental_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_rental(
    rental_id: int,
    _: User = Depends(require_permission("marine.rentals", "delete")),
    db: AsyncSession = Depends(get_db_session)
):
    await VesselManager(db).delete_rental(rental_id)


# Overhauls

@router.get("/overhauls", response_model=List[ProjectResponse])
async def list_overhaul_projects(
    status: Optional[str] = None,
    vessel_id: Optional[int] = None,
    company_id: Optional[int] = None,
    _: User = Depends(require_permission("marine.overhauls", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await OverhaulManager(db).list_projects(
        status=status, vessel_id=vessel_id, company_id=company_id
    )


@router.post("/overhauls", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_overhaul_project(
    project_data: ProjectCreate,
    _: User = Depends(require_permission("marine.overhauls", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    return await OverhaulManager(db).create_project(**project_data.model_dump(exclude_none=True))


@router.get("/overhauls/{project_id}", response_model=ProjectResponse)
async def get_overhaul_project(
    project_id: int,
    _: User = Depends(require_permission("marine.overhauls", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await OverhaulManager(db).get_project(project_id)


@router.put("/overhauls/{project_id}", response_model=ProjectResponse)
async def update_overhaul_project(
    project_id: int,
    project_data: ProjectUpdate,
    _: User = Depends(require_permission("marine.overhauls", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    return await OverhaulManager(db).update_project(
        project_id, project_data.model_dump(exclude_unset=True)
    )


@router.delete("/overhauls/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_overhaul_project(
    project_id: int,
    _: User = Depends(require_permission("marine.overhauls", "delete")),
    db: AsyncSession = Depends(get_db_session)
):
    await OverhaulManager(db).delete_project(project_id)


@router.get("/overhauls/{project_id}/summary", response_model=ProjectSummary)
async def overhaul_project_summary(
    project_id: int,
    _: User = Depends(require_permission("marine.overhauls", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    """Budget utilization and task breakdown"""
    return await OverhaulManager(db).project_summary(project_id)


@router.post("/overhauls/{project_id}/recalculate")
async def recalculate_overhaul_spend(
    project_id: int,
    _: User = Depends(require_permission("marine.overhauls", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    """Recompute total_spent from booked expenses"""
    total = await OverhaulManager(db).recalculate_total_spent(project_id)
    return {"project_id": project_id, "total_spent": total}


@router.get("/overhauls/{project_id}/tasks", response_model=List[TaskResponse])
async def list_overhaul_tasks(
    project_id: int,
    _: User = Depends(require_permission("marine.overhauls", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await OverhaulManager(db).list_tasks(project_id)


@router.post("/overhauls/{project_id}/tasks", response_model=TaskResponse,
             status_code=status.HTTP_201_CREATED)
async def create_overhaul_task(
    project_id: int,
    task_data: TaskCreate,
    _: User = Depends(require_permission("marine.overhauls", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    return await OverhaulManager(db).create_task(project_id, **task_data.model_dump())


@router.put("/tasks/{task_id}", response_model=TaskResponse)
async def update_overhaul_task(
    task_id: int,
    task_data: TaskUpdate,
    _: User = Depends(require_permission("marine.overhauls", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    """Update a task; completing it books the task cost as an expense"""
    return await OverhaulManager(db).update_task(task_id, task_data.model_dump(exclude_unset=True))


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_overhaul_task(
    task_id: int,
    _: User = Depends(require_permission("marine.overhauls", "delete")),
    db: AsyncSession = Depends(get_db_session)
):
    await OverhaulManager(db).delete_task(task_id)


# Employees and salaries

@router.get("/employees", response_model=List[EmployeeResponse])
async def list_employees(
    status: Optional[str] = None,
    company_id: Optional[int] = None,
    _: User = Depends(require_permission("hr.employees", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await CrewManager(db).list_employees(status=status, company_id=company_id)


@router.post("/employees", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    employee_data: EmployeeCreate,
    _: User = Depends(require_permission("hr.employees", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    return await CrewManager(db).create_employee(**employee_data.model_dump())


@router.get("/employees/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: int,
    _: User = Depends(require_permission("hr.employees", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await CrewManager(db).get_employee(employee_id)


@router.put("/employees/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: int,
    employee_data: EmployeeUpdate,
    _: User = Depends(require_permission("hr.employees", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    return await CrewManager(db).update_employee(
        employee_id, employee_data.model_dump(exclude_unset=True)
    )


@router.delete("/employees/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(
    employee_id: int,
    _: User = Depends(require_permission("hr.employees", "delete")),
    db: AsyncSession = Depends(get_db_session)
):
    await CrewManager(db).delete_employee(employee_id)


@router.get("/salaries", response_model=SalaryPaymentList)
async def list_salary_payments(
    employee_id: Optional[int] = None,
    _: User = Depends(require_permission("hr.salaries", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await CrewManager(db).list_salary_payments(employee_id=employee_id)


@router.post("/salaries", response_model=SalaryPaymentResponse, status_code=status.HTTP_201_CREATED)
async def record_salary_payment(
    payment_data: SalaryPaymentCreate,
    _: User = Depends(require_permission("hr.salaries", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    return await CrewManager(db).record_salary_payment(**payment_data.model_dump())


@router.put("/salaries/{payment_id}", response_model=SalaryPaymentResponse)
async def update_salary_payment(
    payment_id: int,
    payment_data: SalaryPaymentUpdate,
    _: User = Depends(require_permission("hr.salaries", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    return await CrewManager(db).update_salary_payment(
        payment_id, payment_data.model_dump(exclude_unset=True)
    )


@router.delete("/salaries/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_salary_payment(
    payment_id: int,
    _: User = Depends(require_permission("hr.salaries", "delete")),
    db: AsyncSession = Depends(get_db_session)
):
    await CrewManager(db).delete_salary_payment(payment_id)


# Crew

@router.get("/crew/assignments", response_model=AssignmentList)
async def list_crew_assignments(
    vessel_id: Optional[int] = None,
    status: Optional[str] = None,
    _: User = Depends(require_permission("marine.crew", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await CrewManager(db).list_assignments(vessel_id=vessel_id, status=status)


@router.post("/crew/assignments", response_model=AssignmentResponse,
             status_code=status.HTTP_201_CREATED)
async def create_crew_assignment(
    assignment_data: AssignmentCreate,
    _: User = Depends(require_permission("marine.crew", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    return await CrewManager(db).create_assignment(**assignment_data.model_dump())


@router.put("/crew/assignments/{assignment_id}", response_model=AssignmentResponse)
async def update_crew_assignment(
    assignment_id: int,
    assignment_data: AssignmentUpdate,
    _: User = Depends(require_permission("marine.crew", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    return await CrewManager(db).update_assignment(
        assignment_id, assignment_data.model_dump(exclude_unset=True)
    )


@router.delete("/crew/assignments/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_crew_assignment(
    assignment_id: int,
    _: User = Depends(require_permission("marine.crew", "delete")),
    db: AsyncSession = Depends(get_db_session)
):
    await CrewManager(db).delete_assignment(assignment_id)


@router.get("/crew/certifications", response_model=CertificationList)
async def list_crew_certifications(
    employee_id: Optional[int] = None,
    _: User = Depends(require_permission("marine.crew", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    """Certifications with expiry status and expired/expiring counts"""
    listing = await CrewManager(db).list_certifications(employee_id=employee_id)
    listing["certifications"] = [
        CertificationResponse.model_validate(certification).model_copy(update={"status": cert_status})
        for certification, cert_status in listing["certifications"]
    ]
    return listing


@router.post("/crew/certifications", response_model=CertificationResponse,
             status_code=status.HTTP_201_CREATED)
async def create_crew_certification(
    certification_data: CertificationCreate,
    _: User = Depends(require_permission("marine.crew", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    certification = await CrewManager(db).create_certification(**certification_data.model_dump())
    return CertificationResponse.model_validate(certification).model_copy(
        update={"status": certification_status(certification.expiry_date)}
    )


@router.put("/crew/certifications/{certification_id}", response_model=CertificationResponse)
async def update_crew_certification(
    certification_id: int,
    certification_data: CertificationUpdate,
    _: User = Depends(require_permission("marine.crew", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    certification = await CrewManager(db).update_certification(
        certification_id, certification_data.model_dump(exclude_unset=True)
    )
    return CertificationResponse.model_validate(certification).model_copy(
        update={"status": certification_status(certification.expiry_date)}
    )


@router.delete("/crew/certifications/{certification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_crew_certification(
    certification_id: int,
    _: User = Depends(require_permission("marine.crew", "delete")),
    db: AsyncSession = Depends(get_db_session)
):
    await CrewManager(db).delete_certification(certification_id)


# Maintenance

@router.get("/maintenance", response_model=List[MaintenanceResponse])
async def list_maintenance(
    vessel_id: Optional[int] = None,
    status: Optional[str] = None,
    _: User = Depends(require_permission("marine.maintenance", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await MaintenanceManager(db).list_schedules(vessel_id=vessel_id, status=status)


@router.post("/maintenance", response_model=MaintenanceResponse, status_code=status.HTTP_201_CREATED)
async def schedule_maintenance(
    schedule_data: MaintenanceCreate,
    _: User = Depends(require_permission("marine.maintenance", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    return await MaintenanceManager(db).create_schedule(**schedule_data.model_dump(exclude_none=True))


@router.put("/maintenance/{schedule_id}", response_model=MaintenanceResponse)
async def update_maintenance(
    schedule_id: int,
    schedule_data: MaintenanceUpdate,
    _: User = Depends(require_permission("marine.maintenance", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    return await MaintenanceManager(db).update_schedule(
        schedule_id, schedule_data.model_dump(exclude_unset=True)
    )


@router.delete("/maintenance/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_maintenance(
    schedule_id: int,
    _: User = Depends(require_permission("marine.maintenance", "delete")),
    db: AsyncSession = Depends(get_db_session)
):
    await MaintenanceManager(db).delete_schedule(schedule_id)


@router.post("/maintenance/mark-overdue")
async def mark_maintenance_overdue(
    today: Optional[date] = Query(None),
    _: User = Depends(require_permission("marine.maintenance", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    """Flag scheduled maintenance whose date has passed"""
    updated = await MaintenanceManager(db).mark_overdue(today)
    return {"updated": updated}
