"""
PayrollLedger: libro de movimientos de nómina por empleado.

Solo se agrega o se anula; un movimiento anulado queda para auditoría con
status ANULADO y una nota en la descripción. Los métodos no hacen commit salvo
que se indique: quien llama arma la transacción completa (asistencia +
movimiento) y la confirma con commit_or_rollback.
"""
import logging
import uuid
from datetime import date
from typing import TYPE_CHECKING, Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from nomina.core.database import commit_or_rollback
from nomina.core.exceptions import LedgerError
from nomina.models.attendance import AttendanceRecord
from nomina.models.audit import AuditLog
from nomina.models.payroll import (
    DEBIT_TYPES, MOVEMENT_TYPES, STATUS_ACTIVE, STATUS_VOIDED, PayrollMovement,
)
from nomina.utils.number_locale import format_money

if TYPE_CHECKING:
    from nomina.models.employee import Employee

logger = logging.getLogger(__name__)

ATTENDANCE_DELETED_NOTE = "Asistencia borrada desde Calendario"

_PATCHABLE_FIELDS = ("amount", "description", "status", "date", "meta")


def signed_amount(movement_type: str, amount: float) -> float:
    """PAGO y DESCUENTO restan; REINICIO es solo una marca."""
    if movement_type == "REINICIO":
        return 0.0
    if movement_type in DEBIT_TYPES:
        return -abs(float(amount))
    return float(amount)


class PayrollLedger:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add_movement(
        self,
        *,
        employee_id: uuid.UUID,
        type: str,
        amount: float,
        date: date,
        description: str = "",
        created_by: str | None = None,
        attendance_id: uuid.UUID | None = None,
        meta: dict[str, Any] | None = None,
        commit: bool = False,
    ) -> PayrollMovement:
        if type not in MOVEMENT_TYPES:
            raise LedgerError(f"Tipo de movimiento desconocido: {type}")

        if attendance_id is not None:
            existing = await self.get_active_by_attendance_id(attendance_id)
            if existing is not None:
                raise LedgerError(
                    f"La asistencia {attendance_id} ya tiene un movimiento activo ({existing.id})"
                )

        movement = PayrollMovement(
            id=uuid.uuid4(),
            employee_id=employee_id,
            attendance_id=attendance_id,
            type=type,
            amount=signed_amount(type, amount),
            date=date,
            description=description,
            status=STATUS_ACTIVE,
            created_by=created_by,
            meta=meta,
        )
        self.db.add(movement)
        logger.info(
            "[PAYROLL] Movimiento %s %s por %s para empleado %s (asistencia=%s)",
            movement.id, type, format_money(movement.amount), employee_id, attendance_id,
        )

        if commit:
            await commit_or_rollback(self.db, "alta de movimiento")
            await self.db.refresh(movement)
        return movement

    async def list_movements(
        self, employee_id: uuid.UUID, include_voided: bool = True
    ) -> list[PayrollMovement]:
        """Historial del empleado, el más reciente primero."""
        query = select(PayrollMovement).where(PayrollMovement.employee_id == employee_id)
        if not include_voided:
            query = query.where(PayrollMovement.status == STATUS_ACTIVE)
        result = await self.db.execute(
            query.order_by(PayrollMovement.created_at.desc(), PayrollMovement.date.desc())
        )
        return list(result.scalars().all())

    async def get_active_by_attendance_id(self, attendance_id: uuid.UUID) -> PayrollMovement | None:
        result = await self.db.execute(
            select(PayrollMovement)
            .where(
                PayrollMovement.attendance_id == attendance_id,
                PayrollMovement.status == STATUS_ACTIVE,
            )
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def update_movement_by_attendance_id(
        self, attendance_id: uuid.UUID, **changes: Any
    ) -> PayrollMovement | None:
        """Parchea solo los campos recibidos. Sin movimiento vinculado: no-op."""
        unknown = set(changes) - set(_PATCHABLE_FIELDS)
        if unknown:
            raise LedgerError(f"Campos no editables en un movimiento: {sorted(unknown)}")

        movement = await self.get_active_by_attendance_id(attendance_id)
        if movement is None:
            return None

        for field, value in changes.items():
            if value is None:
                continue
            if field == "amount":
                value = signed_amount(movement.type, value)
            setattr(movement, field, value)
        return movement

    async def void_movement_by_attendance_id(
        self, attendance_id: uuid.UUID, note: str = ATTENDANCE_DELETED_NOTE
    ) -> PayrollMovement | None:
        """Anula el movimiento vinculado. Ya anulado o inexistente: no-op."""
        movement = await self.get_active_by_attendance_id(attendance_id)
        if movement is None:
            return None

        movement.status = STATUS_VOIDED
        movement.description = note
        logger.info("[PAYROLL] Movimiento %s anulado (asistencia %s)", movement.id, attendance_id)
        return movement

    async def void_movement(
        self, movement: PayrollMovement, reason: str, user_name: str | None = None
    ) -> PayrollMovement:
        """Anulación manual con motivo. Repetirla no cambia nada."""
        if movement.status == STATUS_VOIDED:
            return movement

        old_values = {"status": movement.status, "description": movement.description}
        movement.status = STATUS_VOIDED
        movement.description = f"{movement.description} (ANULADO: {reason})"

        self.db.add(AuditLog(
            entity_type="payroll_movement",
            entity_id=movement.id,
            action="void",
            user_name=user_name,
            old_values=old_values,
            new_values={"status": movement.status, "description": movement.description},
        ))
        await commit_or_rollback(self.db, "anulación de movimiento")
        await self.db.refresh(movement)
        logger.info("[PAYROLL] Movimiento %s anulado manualmente: %s", movement.id, reason)
        return movement

    async def reset_cycle(
        self, employee: "Employee", new_start_date: date, user_name: str | None = None
    ) -> PayrollMovement:
        """Concreta la nómina: marca REINICIO y arranca un ciclo nuevo.

        Las asistencias impagas anteriores al nuevo inicio quedan pagadas y el
        saldo arrastrado vuelve a cero.
        """
        marker = await self.add_movement(
            employee_id=employee.id,
            type="REINICIO",
            amount=0,
            date=new_start_date,
            description=f"Nómina Concretada (Nuevo ciclo: {new_start_date.isoformat()})",
            created_by=user_name,
        )

        employee.payroll_start_date = new_start_date
        employee.balance = 0

        await self.db.execute(
            update(AttendanceRecord)
            .where(
                AttendanceRecord.employee_id == employee.id,
                AttendanceRecord.paid == False,  # noqa: E712
                AttendanceRecord.date < new_start_date,
            )
            .values(paid=True)
        )

        await commit_or_rollback(self.db, "reinicio de ciclo")
        await self.db.refresh(marker)
        await self.db.refresh(employee)
        return marker
