"""
Tests de AttendanceService: vínculo asistencia ↔ movimiento, tardanza,
confirmación automática, baja con anulación y transacción única.
"""
import logging
import uuid
from datetime import date

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from nomina.core.exceptions import AttendanceValidationError, LedgerPersistenceError
from nomina.models.attendance import AttendanceRecord
from nomina.models.audit import AuditLog
from nomina.models.holiday import Holiday
from nomina.models.payroll import PayrollMovement
from nomina.models.sanction import Sanction
from nomina.schemas.attendance import AttendanceCreate, AttendanceUpdate
from nomina.services.attendance_service import AttendanceService
from nomina.services.balance_service import BalanceService
from tests.conftest import TODAY


def payload(employee, day=date(2025, 9, 10), check_in="09:00", check_out="19:00", **extra):
    return AttendanceCreate(
        employee_id=employee.id, date=day, check_in=check_in, check_out=check_out, **extra,
    )


async def movements_for(db, attendance_id) -> list[PayrollMovement]:
    result = await db.execute(
        select(PayrollMovement).where(PayrollMovement.attendance_id == attendance_id)
    )
    return list(result.scalars().all())


async def count(db, model) -> int:
    return (await db.execute(select(func.count(model.id)))).scalar()


# ── Alta ─────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_record_creates_linked_movement(db, employee):
    svc = AttendanceService(db, today=TODAY)
    record = await svc.record_attendance(employee, payload(employee), "Encargada")

    assert record.status == "CONFIRMED"
    assert float(record.overtime_amount) == 12500
    assert float(record.overtime_hours) == pytest.approx(2.0)
    assert record.reason == "Horas Extras"
    assert record.created_by == "Encargada"

    movs = await movements_for(db, record.id)
    assert len(movs) == 1
    mov = movs[0]
    assert mov.type == "ASISTENCIA"
    assert float(mov.amount) == 12500
    assert mov.status == "ACTIVE"
    assert mov.description == "Jornada trabajada 10/09/2025 (09:00 - 19:00)"
    assert mov.meta["dailyBase"] == pytest.approx(10000)
    assert mov.meta["extraMinutes"] == 120
    assert mov.meta["checkIn"] == "09:00"


@pytest.mark.asyncio
async def test_regular_shift_reason(db, employee):
    record = await AttendanceService(db, today=TODAY).record_attendance(
        employee, payload(employee, check_out="17:00"), "Encargada",
    )
    assert record.reason == "Turno Regular"
    assert float(record.overtime_amount) == 10000


@pytest.mark.asyncio
async def test_daily_paid_employee_gets_no_movement(db, daily_employee):
    record = await AttendanceService(db, today=TODAY).record_attendance(
        daily_employee, payload(daily_employee, check_out="17:00"), "Encargada",
    )
    assert float(record.overtime_amount) == 20000
    assert await movements_for(db, record.id) == []


@pytest.mark.asyncio
async def test_future_attendance_is_scheduled_without_movement(db, employee):
    record = await AttendanceService(db, today=TODAY).record_attendance(
        employee, payload(employee, day=date(2025, 9, 20), check_in="09:45"), "Encargada",
    )
    assert record.status == "SCHEDULED"
    assert await movements_for(db, record.id) == []
    # Programada: tampoco se sanciona la tardanza
    assert await count(db, Sanction) == 0


@pytest.mark.asyncio
async def test_late_arrival_creates_sanction(db, employee):
    await AttendanceService(db, today=TODAY).record_attendance(
        employee, payload(employee, check_in="09:30", check_out="17:00"), "Encargada",
    )
    sanctions = (await db.execute(select(Sanction))).scalars().all()
    assert len(sanctions) == 1
    s = sanctions[0]
    assert s.type == "LLEGADA_TARDE"
    assert float(s.amount) == 0
    assert s.created_by == "SYSTEM"
    assert s.status == "APPROVED"
    assert s.description == "Llegada tarde detectada automáticamente (>10min). Ingreso: 09:30"


@pytest.mark.asyncio
async def test_holiday_from_calendar_doubles_amount(db, employee):
    db.add(Holiday(date=date(2025, 9, 10), name="Feriado de prueba"))
    await db.commit()

    record = await AttendanceService(db, today=TODAY).record_attendance(
        employee, payload(employee), "Encargada",
    )
    assert record.is_holiday is True
    assert float(record.overtime_amount) == 25000


@pytest.mark.asyncio
async def test_explicit_holiday_flag_wins_over_calendar(db, employee):
    db.add(Holiday(date=date(2025, 9, 10)))
    await db.commit()

    record = await AttendanceService(db, today=TODAY).record_attendance(
        employee, payload(employee, is_holiday=False), "Encargada",
    )
    assert record.is_holiday is False
    assert float(record.overtime_amount) == 12500


@pytest.mark.asyncio
async def test_retry_with_same_id_does_not_duplicate(db, employee):
    svc = AttendanceService(db, today=TODAY)
    client_id = uuid.uuid4()
    first = await svc.record_attendance(employee, payload(employee, id=client_id), "Encargada")
    second = await svc.record_attendance(employee, payload(employee, id=client_id), "Encargada")

    assert first.id == second.id == client_id
    assert await count(db, AttendanceRecord) == 1
    assert len(await movements_for(db, client_id)) == 1


@pytest.mark.asyncio
async def test_missing_employee_rejected(db, employee):
    with pytest.raises(AttendanceValidationError):
        await AttendanceService(db, today=TODAY).record_attendance(None, payload(employee), "Encargada")


@pytest.mark.asyncio
async def test_zero_length_shift_rejected(db, employee):
    with pytest.raises(AttendanceValidationError):
        await AttendanceService(db, today=TODAY).record_attendance(
            employee, payload(employee, check_in="10:00", check_out="10:00"), "Encargada",
        )
    assert await count(db, AttendanceRecord) == 0


@pytest.mark.asyncio
async def test_persistence_failure_rolls_back_both_writes(db, employee, monkeypatch):
    async def failing_commit():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "commit", failing_commit)
    with pytest.raises(LedgerPersistenceError):
        await AttendanceService(db, today=TODAY).record_attendance(
            employee, payload(employee), "Encargada",
        )
    monkeypatch.undo()

    assert await count(db, AttendanceRecord) == 0
    assert await count(db, PayrollMovement) == 0


# ── Edición ──────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_update_times_patches_linked_movement(db, employee):
    svc = AttendanceService(db, today=TODAY)
    record = await svc.record_attendance(employee, payload(employee, check_out="17:00"), "Encargada")

    record = await svc.update_attendance(record, AttendanceUpdate(check_out="19:00"), "Admin")

    assert float(record.overtime_amount) == 12500
    mov = (await movements_for(db, record.id))[0]
    assert float(mov.amount) == 12500
    assert mov.description == "Jornada trabajada 10/09/2025 (09:00 - 19:00)"
    assert mov.meta["workedMinutes"] == 600

    audits = (await db.execute(select(AuditLog).where(AuditLog.entity_id == record.id))).scalars().all()
    assert [a.action for a in audits] == ["update"]


@pytest.mark.asyncio
async def test_manual_amount_override(db, employee):
    svc = AttendanceService(db, today=TODAY)
    record = await svc.record_attendance(employee, payload(employee, check_out="17:00"), "Encargada")

    record = await svc.update_attendance(record, AttendanceUpdate(overtime_amount=11000), "Admin")

    assert float(record.overtime_amount) == 11000
    assert float(record.original_amount) == 10000
    assert record.manually_modified_by == "Admin"
    mov = (await movements_for(db, record.id))[0]
    assert float(mov.amount) == 11000


@pytest.mark.asyncio
async def test_update_with_invalid_times_leaves_record_untouched(db, employee):
    svc = AttendanceService(db, today=TODAY)
    record = await svc.record_attendance(employee, payload(employee, check_out="17:00"), "Encargada")

    with pytest.raises(AttendanceValidationError):
        await svc.update_attendance(record, AttendanceUpdate(check_in="17:00"), "Admin")
    assert record.check_in == "09:00"


@pytest.mark.asyncio
async def test_moving_to_future_date_voids_linked_movement(db, employee):
    svc = AttendanceService(db, today=TODAY)
    record = await svc.record_attendance(employee, payload(employee, day=TODAY, check_out="17:00"), "Encargada")

    record = await svc.update_attendance(record, AttendanceUpdate(date=date(2025, 9, 25)), "Admin")

    assert record.status == "SCHEDULED"
    movs = await movements_for(db, record.id)
    assert len(movs) == 1
    assert movs[0].status == "ANULADO"
    assert movs[0].description == "Asistencia reprogramada a fecha futura"
    summary = await BalanceService(db).pending_balance(employee)
    assert summary.ledger_total == 0


@pytest.mark.asyncio
async def test_moving_to_past_date_confirms_and_warns(db, employee, caplog):
    svc = AttendanceService(db, today=TODAY)
    record = await svc.record_attendance(employee, payload(employee, day=date(2025, 9, 20)), "Encargada")
    assert record.status == "SCHEDULED"

    caplog.set_level(logging.WARNING)
    record = await svc.update_attendance(record, AttendanceUpdate(date=date(2025, 9, 12)), "Admin")

    assert record.status == "CONFIRMED"
    assert await movements_for(db, record.id) == []
    assert "confirmada sin movimiento" in caplog.text


# ── Baja ─────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_delete_voids_linked_movement(db, employee):
    svc = AttendanceService(db, today=TODAY)
    record = await svc.record_attendance(employee, payload(employee), "Encargada")
    record_id = record.id

    assert await svc.delete_attendance(record_id, "Admin") is True
    # Borrar otra vez no es error
    assert await svc.delete_attendance(record_id, "Admin") is False

    assert await db.get(AttendanceRecord, record_id) is None
    movs = await movements_for(db, record_id)
    assert len(movs) == 1
    assert movs[0].status == "ANULADO"
    assert movs[0].description == "Asistencia borrada desde Calendario"


# ── Confirmación automática ──────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_sweep_confirms_due_records_without_movement(db, employee):
    record = await AttendanceService(db, today=TODAY).record_attendance(
        employee, payload(employee, day=date(2025, 9, 20)), "Encargada",
    )
    assert record.status == "SCHEDULED"

    later = AttendanceService(db, today=date(2025, 9, 21))
    promoted = await later.confirm_due_records()
    assert [r.id for r in promoted] == [record.id]
    await db.refresh(record)
    assert record.status == "CONFIRMED"
    assert await movements_for(db, record.id) == []

    assert await later.confirm_due_records() == []


@pytest.mark.asyncio
async def test_sweep_leaves_future_records_scheduled(db, employee):
    svc = AttendanceService(db, today=TODAY)
    record = await svc.record_attendance(employee, payload(employee, day=date(2025, 9, 20)), "Encargada")

    records = await svc.list_attendance(employee.id)
    assert [r.id for r in records] == [record.id]
    assert records[0].status == "SCHEDULED"


# ── Lectura ──────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_list_orders_by_date_desc(db, employee):
    svc = AttendanceService(db, today=TODAY)
    for day in (date(2025, 9, 1), date(2025, 9, 3), date(2025, 9, 2)):
        await svc.record_attendance(employee, payload(employee, day=day, check_out="17:00"), "Encargada")

    records = await svc.list_attendance(employee.id, from_date=date(2025, 9, 2))
    assert [r.date for r in records] == [date(2025, 9, 3), date(2025, 9, 2)]


@pytest.mark.asyncio
async def test_month_summary(db, employee):
    svc = AttendanceService(db, today=TODAY)
    paid = await svc.record_attendance(employee, payload(employee, day=date(2025, 9, 1)), "Encargada")
    await svc.record_attendance(employee, payload(employee, day=date(2025, 9, 2), check_out="17:00"), "Encargada")
    await svc.record_attendance(employee, payload(employee, day=date(2025, 8, 29)), "Encargada")
    await svc.update_attendance(paid, AttendanceUpdate(paid=True), "Admin")

    summary = await svc.month_summary(employee.id, date(2025, 9, 18))
    assert summary.month == date(2025, 9, 1)
    assert summary.records == 2
    assert summary.total_paid == pytest.approx(12500)
    assert summary.total_debt == pytest.approx(10000)
    assert summary.total_hours == pytest.approx(2.0)


@pytest.mark.asyncio
async def test_preview_does_not_write(db, employee):
    preview = await AttendanceService(db, today=TODAY).preview(
        employee, date(2025, 9, 10), "09:20", "19:00",
    )
    assert preview.is_late is True
    assert preview.is_future is False
    assert preview.result.worked_minutes == 580
    assert preview.worked_hours == pytest.approx(9.67)
    assert preview.standard_hours == pytest.approx(8.0)
    assert await count(db, AttendanceRecord) == 0
