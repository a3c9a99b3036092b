"""
Libro de nómina – movimientos, anulación, cierre de ciclo y saldo pendiente
"""
import uuid
from datetime import date

from fastapi import APIRouter, HTTPException, status

from nomina.api.deps import DB, CurrentUser, ManagerOrAdmin
from nomina.api.v1.employees import get_employee_or_404
from nomina.models.payroll import PayrollMovement
from nomina.schemas.payroll import (
    BalanceOut, PayrollMovementCreate, PayrollMovementOut, PayrollResetRequest, PayrollVoidRequest,
)
from nomina.services.balance_service import BalanceService
from nomina.services.ledger_service import PayrollLedger

router = APIRouter(prefix="/payroll", tags=["payroll"])


@router.get("/movements", response_model=list[PayrollMovementOut])
async def list_movements(
    employee_id: uuid.UUID,
    current_user: CurrentUser,
    db: DB,
    include_voided: bool = True,
):
    await get_employee_or_404(db, employee_id)
    return await PayrollLedger(db).list_movements(employee_id, include_voided)


@router.post("/movements", response_model=PayrollMovementOut, status_code=status.HTTP_201_CREATED)
async def create_movement(payload: PayrollMovementCreate, current_user: ManagerOrAdmin, db: DB):
    """Pago, descuento, bono, ajuste o feriado cargado a mano."""
    await get_employee_or_404(db, payload.employee_id)
    return await PayrollLedger(db).add_movement(
        employee_id=payload.employee_id,
        type=payload.type,
        amount=payload.amount,
        date=payload.date,
        description=payload.description,
        created_by=current_user.name,
        commit=True,
    )


@router.post("/movements/{movement_id}/void", response_model=PayrollMovementOut)
async def void_movement(
    movement_id: uuid.UUID, payload: PayrollVoidRequest, current_user: ManagerOrAdmin, db: DB
):
    movement = await db.get(PayrollMovement, movement_id)
    if movement is None:
        raise HTTPException(status_code=404, detail="Movimiento no encontrado")
    return await PayrollLedger(db).void_movement(movement, payload.reason, current_user.name)


@router.post("/employees/{employee_id}/reset", response_model=PayrollMovementOut)
async def reset_cycle(
    employee_id: uuid.UUID, payload: PayrollResetRequest, current_user: ManagerOrAdmin, db: DB
):
    """Concretar nómina: marca REINICIO, nuevo inicio de ciclo y saldo en cero."""
    employee = await get_employee_or_404(db, employee_id)
    return await PayrollLedger(db).reset_cycle(employee, payload.new_start_date, current_user.name)


@router.get("/employees/{employee_id}/balance", response_model=BalanceOut)
async def pending_balance(
    employee_id: uuid.UUID, current_user: CurrentUser, db: DB, until: date | None = None
):
    employee = await get_employee_or_404(db, employee_id)
    summary = await BalanceService(db).pending_balance(employee, until)
    return BalanceOut.model_validate(summary)
