"""
AttendanceService: alta, edición y baja de asistencias con su movimiento de nómina.

Reglas de vínculo con el libro:
- Empleado que acumula (no DIARIO) + fecha no futura → un único movimiento
  ASISTENCIA con el monto del turno y el desglose en meta.
- Editar la asistencia parchea ese movimiento; borrarla o pasarla a fecha
  futura lo anula.
- Asistencia y movimiento se confirman en el mismo commit.
"""
import calendar
import logging
import uuid
from dataclasses import dataclass
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from nomina.core.config import settings
from nomina.core.database import commit_or_rollback
from nomina.core.exceptions import AttendanceValidationError
from nomina.models.attendance import STATUS_CONFIRMED, STATUS_SCHEDULED, AttendanceRecord
from nomina.models.audit import AuditLog
from nomina.models.employee import Employee
from nomina.models.holiday import is_holiday as is_holiday_date
from nomina.models.sanction import Sanction
from nomina.schemas.attendance import AttendanceCreate, AttendanceUpdate
from nomina.services.accrual_calculator import (
    AccrualInput, AccrualResult, compute_accrual, is_late_arrival,
)
from nomina.services.ledger_service import PayrollLedger
from nomina.utils.number_locale import round_half_up
from nomina.utils.time_math import local_today

logger = logging.getLogger(__name__)

REASON_OVERTIME = "Horas Extras"
REASON_REGULAR = "Turno Regular"
SYSTEM_USER = "SYSTEM"
RESCHEDULED_NOTE = "Asistencia reprogramada a fecha futura"


@dataclass
class AttendancePreview:
    result: AccrualResult
    is_late: bool
    is_holiday: bool
    is_future: bool

    @property
    def worked_hours(self) -> float:
        return round(self.result.worked_minutes / 60, 2)

    @property
    def standard_hours(self) -> float:
        return round(self.result.official_minutes / 60, 2)

    @property
    def overtime_hours(self) -> float:
        return self.result.overtime_hours


@dataclass
class MonthSummary:
    employee_id: uuid.UUID
    month: date
    total_debt: float
    total_paid: float
    total_hours: float
    records: int


def shift_description(day: date, check_in: str, check_out: str) -> str:
    return f"Jornada trabajada {day.strftime('%d/%m/%Y')} ({check_in} - {check_out})"


def late_sanction_description(check_in: str) -> str:
    return (
        f"Llegada tarde detectada automáticamente (>{settings.LATE_GRACE_MINUTES}min). "
        f"Ingreso: {check_in}"
    )


def _audit_values(record: AttendanceRecord) -> dict:
    return {
        "date": record.date.isoformat(),
        "check_in": record.check_in,
        "check_out": record.check_out,
        "overtime_amount": float(record.overtime_amount or 0),
        "is_holiday": record.is_holiday,
        "paid": record.paid,
        "status": record.status,
    }


class AttendanceService:

    def __init__(self, db: AsyncSession, today: date | None = None):
        self.db = db
        self.ledger = PayrollLedger(db)
        self._today = today

    @property
    def today(self) -> date:
        return self._today or local_today(settings.TIMEZONE)

    # ── Cálculo ──────────────────────────────────────────────────────────────

    async def _resolve_holiday(self, day: date, explicit: bool | None) -> bool:
        if explicit is not None:
            return explicit
        return await is_holiday_date(self.db, day)

    def compute(self, employee: Employee, check_in: str, check_out: str, holiday: bool) -> AccrualResult:
        return compute_accrual(AccrualInput(
            salary_amount=employee.salary_amount,
            salary_period=employee.salary_period,
            official_start=employee.official_start,
            official_end=employee.official_end,
            worked_start=check_in,
            worked_end=check_out,
            is_holiday=holiday,
            holiday_factor=settings.HOLIDAY_FACTOR,
            overtime_factor=settings.OVERTIME_FACTOR,
        ))

    def detect_late(self, employee: Employee, check_in: str) -> bool:
        return is_late_arrival(
            employee.official_start,
            check_in,
            grace_minutes=settings.LATE_GRACE_MINUTES,
            max_late_minutes=settings.LATE_MAX_MINUTES,
        )

    async def preview(
        self,
        employee: Employee,
        day: date,
        check_in: str,
        check_out: str,
        is_holiday: bool | None = None,
    ) -> AttendancePreview:
        """Lo que se mostraría en el formulario antes de guardar. No escribe nada."""
        holiday = await self._resolve_holiday(day, is_holiday)
        result = self.compute(employee, check_in, check_out, holiday)
        return AttendancePreview(
            result=result,
            is_late=self.detect_late(employee, check_in),
            is_holiday=holiday,
            is_future=day > self.today,
        )

    # ── Alta ─────────────────────────────────────────────────────────────────

    async def record_attendance(
        self,
        employee: Employee | None,
        payload: AttendanceCreate,
        user_name: str | None = None,
    ) -> AttendanceRecord:
        if payload.id is not None:
            existing = await self.db.get(AttendanceRecord, payload.id)
            if existing is not None:
                # Reintento del cliente: no se escribe nada nuevo
                logger.info("[CALENDAR_ENTRY] Reintento de alta %s, se devuelve el existente", payload.id)
                return existing

        if employee is None:
            raise AttendanceValidationError("Empleado no encontrado")
        if not payload.check_in or not payload.check_out:
            raise AttendanceValidationError("Debe indicar hora de entrada y de salida")

        holiday = await self._resolve_holiday(payload.date, payload.is_holiday)
        result = self.compute(employee, payload.check_in, payload.check_out, holiday)
        if result.worked_minutes <= 0:
            raise AttendanceValidationError("La jornada trabajada debe durar más de 0 minutos")

        confirmed = payload.date <= self.today
        record = AttendanceRecord(
            id=payload.id or uuid.uuid4(),
            employee_id=employee.id,
            date=payload.date,
            check_in=payload.check_in,
            check_out=payload.check_out,
            overtime_hours=result.overtime_hours,
            overtime_amount=result.amount,
            reason=payload.reason or (REASON_OVERTIME if result.extra_minutes > 0 else REASON_REGULAR),
            paid=False,
            is_holiday=holiday,
            status=STATUS_CONFIRMED if confirmed else STATUS_SCHEDULED,
            created_by=user_name,
        )
        self.db.add(record)

        if confirmed and self.detect_late(employee, payload.check_in):
            self.db.add(Sanction(
                employee_id=employee.id,
                date=payload.date,
                type="LLEGADA_TARDE",
                description=late_sanction_description(payload.check_in),
                amount=0,
                status="APPROVED",
                created_by=SYSTEM_USER,
            ))
            logger.info("[CALENDAR_ENTRY] Llegada tarde de %s el %s (%s)", employee.name, payload.date, payload.check_in)

        if confirmed and employee.accrues_to_ledger:
            meta = result.as_meta()
            meta.update(checkIn=payload.check_in, checkOut=payload.check_out)
            await self.ledger.add_movement(
                employee_id=employee.id,
                type="ASISTENCIA",
                amount=result.amount,
                date=payload.date,
                description=shift_description(payload.date, payload.check_in, payload.check_out),
                created_by=user_name,
                attendance_id=record.id,
                meta=meta,
            )

        await commit_or_rollback(self.db, "alta de asistencia")
        await self.db.refresh(record)

        logger.info(
            "[CALENDAR_ENTRY] %s %s %s-%s: %s min trabajados, %s extra, monto %s (feriado=%s, status=%s)",
            employee.name, payload.date, payload.check_in, payload.check_out,
            result.worked_minutes, result.extra_minutes, result.amount, holiday, record.status,
        )
        return record

    # ── Edición ──────────────────────────────────────────────────────────────

    async def update_attendance(
        self,
        record: AttendanceRecord,
        payload: AttendanceUpdate,
        user_name: str | None = None,
    ) -> AttendanceRecord:
        employee = await self.db.get(Employee, record.employee_id)
        if employee is None:
            raise AttendanceValidationError("Empleado no encontrado")

        old_values = _audit_values(record)
        data = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}

        # Se valida antes de tocar el registro
        result: AccrualResult | None = None
        if any(k in data for k in ("date", "check_in", "check_out", "is_holiday")):
            day = data.get("date", record.date)
            if "is_holiday" in data:
                holiday = data["is_holiday"]
            elif "date" in data:
                holiday = await is_holiday_date(self.db, day)
            else:
                holiday = record.is_holiday
            result = self.compute(
                employee,
                data.get("check_in", record.check_in),
                data.get("check_out", record.check_out),
                holiday,
            )
            if result.worked_minutes <= 0:
                raise AttendanceValidationError("La jornada trabajada debe durar más de 0 minutos")

        for field in ("date", "check_in", "check_out", "reason", "paid"):
            if field in data:
                setattr(record, field, data[field])

        if result is not None:
            record.is_holiday = result.is_holiday
            record.overtime_hours = result.overtime_hours
            record.overtime_amount = result.amount

        manual_amount = data.get("overtime_amount")
        if manual_amount is not None and round_half_up(manual_amount) != round_half_up(float(record.overtime_amount or 0)):
            if record.original_amount is None:
                record.original_amount = record.overtime_amount
            record.overtime_amount = manual_amount
            record.manually_modified_by = user_name

        if record.status == STATUS_CONFIRMED and record.date > self.today:
            # Una fecha futura no devenga: el movimiento se anula
            record.status = STATUS_SCHEDULED
            await self.ledger.void_movement_by_attendance_id(record.id, note=RESCHEDULED_NOTE)
        else:
            if record.status == STATUS_SCHEDULED and record.date <= self.today:
                record.status = STATUS_CONFIRMED
                await self._warn_if_unlinked(record, employee)

            meta = None
            if result is not None:
                meta = result.as_meta()
                meta.update(checkIn=record.check_in, checkOut=record.check_out)
            await self.ledger.update_movement_by_attendance_id(
                record.id,
                amount=float(record.overtime_amount),
                description=shift_description(record.date, record.check_in, record.check_out),
                date=record.date,
                meta=meta,
            )

        self.db.add(AuditLog(
            entity_type="attendance",
            entity_id=record.id,
            action="update",
            user_name=user_name,
            old_values=old_values,
            new_values=_audit_values(record),
        ))
        await commit_or_rollback(self.db, "edición de asistencia")
        await self.db.refresh(record)
        return record

    # ── Baja ─────────────────────────────────────────────────────────────────

    async def delete_attendance(self, record_id: uuid.UUID, user_name: str | None = None) -> bool:
        """Borra la asistencia y anula su movimiento. Ya borrada: devuelve False."""
        record = await self.db.get(AttendanceRecord, record_id)

        voided = await self.ledger.void_movement_by_attendance_id(record_id)

        if record is None:
            if voided is not None:
                # Movimiento huérfano de una baja anterior incompleta
                await commit_or_rollback(self.db, "anulación de movimiento huérfano")
            return False

        self.db.add(AuditLog(
            entity_type="attendance",
            entity_id=record.id,
            action="delete",
            user_name=user_name,
            old_values=_audit_values(record),
            new_values={"voided_movement": str(voided.id) if voided else None},
        ))
        await self.db.delete(record)
        await commit_or_rollback(self.db, "baja de asistencia")
        logger.info("[CALENDAR_ENTRY] Asistencia %s borrada por %s", record_id, user_name)
        return True

    # ── Lectura ──────────────────────────────────────────────────────────────

    async def _warn_if_unlinked(self, record: AttendanceRecord, employee: Employee | None) -> None:
        if employee is None or not employee.accrues_to_ledger:
            return
        if await self.ledger.get_active_by_attendance_id(record.id) is None:
            logger.warning(
                "Asistencia %s (%s) confirmada sin movimiento en el libro",
                record.id, record.date,
            )

    async def confirm_due_records(self) -> list[AttendanceRecord]:
        """SCHEDULED con fecha <= hoy pasa a CONFIRMED. Repetirlo no cambia nada.

        No genera movimientos: una asistencia programada que se confirma sola
        queda sin movimiento en el libro.
        """
        result = await self.db.execute(
            select(AttendanceRecord)
            .options(selectinload(AttendanceRecord.employee))
            .where(
                AttendanceRecord.status == STATUS_SCHEDULED,
                AttendanceRecord.date <= self.today,
            )
        )
        due = list(result.scalars().all())
        if not due:
            return []

        for record in due:
            record.status = STATUS_CONFIRMED
            await self._warn_if_unlinked(record, record.employee)

        await commit_or_rollback(self.db, "confirmación de asistencias")
        logger.info("Confirmadas %d asistencias programadas", len(due))
        return due

    async def get_attendance(self, record_id: uuid.UUID) -> AttendanceRecord | None:
        await self.confirm_due_records()
        return await self.db.get(AttendanceRecord, record_id)

    async def list_attendance(
        self,
        employee_id: uuid.UUID | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> list[AttendanceRecord]:
        await self.confirm_due_records()

        query = select(AttendanceRecord)
        if employee_id is not None:
            query = query.where(AttendanceRecord.employee_id == employee_id)
        if from_date is not None:
            query = query.where(AttendanceRecord.date >= from_date)
        if to_date is not None:
            query = query.where(AttendanceRecord.date <= to_date)
        result = await self.db.execute(
            query.order_by(AttendanceRecord.date.desc(), AttendanceRecord.check_in.desc())
        )
        return list(result.scalars().all())

    async def month_summary(self, employee_id: uuid.UUID, month: date) -> MonthSummary:
        """Deuda (impago), pagado y horas extra del mes."""
        first = month.replace(day=1)
        last = month.replace(day=calendar.monthrange(month.year, month.month)[1])
        records = await self.list_attendance(employee_id, first, last)

        total_debt = sum(float(r.overtime_amount or 0) for r in records if not r.paid)
        total_paid = sum(float(r.overtime_amount or 0) for r in records if r.paid)
        total_hours = sum(float(r.overtime_hours or 0) for r in records)

        return MonthSummary(
            employee_id=employee_id,
            month=first,
            total_debt=round(total_debt, 2),
            total_paid=round(total_paid, 2),
            total_hours=round(total_hours, 2),
            records=len(records),
        )
