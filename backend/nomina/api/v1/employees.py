import uuid

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import select

from nomina.api.deps import DB, CurrentUser, ManagerOrAdmin
from nomina.core.database import commit_or_rollback
from nomina.models.employee import Employee
from nomina.schemas.employee import EmployeeCreate, EmployeeUpdate, EmployeeOut

router = APIRouter(prefix="/employees", tags=["employees"])


async def get_employee_or_404(db, employee_id: uuid.UUID) -> Employee:
    employee = await db.get(Employee, employee_id)
    if employee is None:
        raise HTTPException(status_code=404, detail="Empleado no encontrado")
    return employee


@router.get("", response_model=list[EmployeeOut])
async def list_employees(current_user: CurrentUser, db: DB, include_inactive: bool = False):
    query = select(Employee)
    if not include_inactive:
        query = query.where(Employee.is_active == True)
    result = await db.execute(query.order_by(Employee.name))
    return result.scalars().all()


@router.post("", response_model=EmployeeOut, status_code=status.HTTP_201_CREATED)
async def create_employee(payload: EmployeeCreate, current_user: ManagerOrAdmin, db: DB):
    employee = Employee(**payload.model_dump())
    db.add(employee)
    await commit_or_rollback(db, "alta de empleado")
    await db.refresh(employee)
    return employee


@router.get("/{employee_id}", response_model=EmployeeOut)
async def get_employee(employee_id: uuid.UUID, current_user: CurrentUser, db: DB):
    return await get_employee_or_404(db, employee_id)


@router.put("/{employee_id}", response_model=EmployeeOut)
async def update_employee(
    employee_id: uuid.UUID, payload: EmployeeUpdate, current_user: ManagerOrAdmin, db: DB
):
    employee = await get_employee_or_404(db, employee_id)
    # Cambiar sueldo u horario no recalcula asistencias ya cargadas
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(employee, field, value)
    await commit_or_rollback(db, "edición de empleado")
    await db.refresh(employee)
    return employee
