"""
Asistencias – fichajes del calendario con su movimiento de nómina vinculado
"""
import uuid
from datetime import date

from fastapi import APIRouter, HTTPException, Response, status

from nomina.api.deps import DB, CurrentUser, ManagerOrAdmin
from nomina.api.v1.employees import get_employee_or_404
from nomina.models.employee import Employee
from nomina.schemas.attendance import (
    AccrualBreakdownOut, AttendanceCreate, AttendanceUpdate, AttendanceOut,
    AttendancePreviewRequest, AttendancePreviewOut, AttendanceMonthSummary,
)
from nomina.services.attendance_service import AttendanceService

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.post("/preview", response_model=AttendancePreviewOut)
async def preview_attendance(payload: AttendancePreviewRequest, current_user: CurrentUser, db: DB):
    """Desglose del monto antes de guardar (no escribe nada)."""
    employee = await get_employee_or_404(db, payload.employee_id)
    preview = await AttendanceService(db).preview(
        employee, payload.date, payload.check_in, payload.check_out, payload.is_holiday,
    )
    return AttendancePreviewOut(
        breakdown=AccrualBreakdownOut(**preview.result.as_meta()),
        amount=preview.result.amount,
        is_late=preview.is_late,
        is_holiday=preview.is_holiday,
        is_future=preview.is_future,
        worked_hours=preview.worked_hours,
        standard_hours=preview.standard_hours,
        overtime_hours=preview.overtime_hours,
    )


@router.get("/summary", response_model=AttendanceMonthSummary)
async def month_summary(employee_id: uuid.UUID, month: date, current_user: CurrentUser, db: DB):
    await get_employee_or_404(db, employee_id)
    summary = await AttendanceService(db).month_summary(employee_id, month)
    return AttendanceMonthSummary.model_validate(summary)


@router.get("", response_model=list[AttendanceOut])
async def list_attendance(
    current_user: CurrentUser,
    db: DB,
    employee_id: uuid.UUID | None = None,
    from_date: date | None = None,
    to_date: date | None = None,
):
    return await AttendanceService(db).list_attendance(employee_id, from_date, to_date)


@router.post("", response_model=AttendanceOut, status_code=status.HTTP_201_CREATED)
async def create_attendance(payload: AttendanceCreate, current_user: ManagerOrAdmin, db: DB):
    """
    Registra una asistencia. Si el empleado acumula y la fecha no es futura,
    en la misma transacción se crea el movimiento ASISTENCIA vinculado.
    Reenviar el mismo `id` devuelve el registro existente.
    """
    employee = await db.get(Employee, payload.employee_id)
    return await AttendanceService(db).record_attendance(employee, payload, current_user.name)


@router.get("/{record_id}", response_model=AttendanceOut)
async def get_attendance(record_id: uuid.UUID, current_user: CurrentUser, db: DB):
    record = await AttendanceService(db).get_attendance(record_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Asistencia no encontrada")
    return record


@router.put("/{record_id}", response_model=AttendanceOut)
async def update_attendance(
    record_id: uuid.UUID, payload: AttendanceUpdate, current_user: ManagerOrAdmin, db: DB
):
    service = AttendanceService(db)
    record = await service.get_attendance(record_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Asistencia no encontrada")
    return await service.update_attendance(record, payload, current_user.name)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_attendance(record_id: uuid.UUID, current_user: ManagerOrAdmin, db: DB):
    # Borrar algo ya borrado no es error
    await AttendanceService(db).delete_attendance(record_id, current_user.name)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
