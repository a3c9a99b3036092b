"""
AccrualAggregator: saldo pendiente de un empleado.

Todas las pantallas que muestran "saldo pendiente" llaman acá; el total se
recalcula siempre desde el libro, nunca se guarda.
"""
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from nomina.models.payroll import STATUS_ACTIVE, PayrollMovement
from nomina.models.sanction import Sanction

if TYPE_CHECKING:
    from nomina.models.employee import Employee


@dataclass
class BalanceSummary:
    employee_id: object
    cycle_start: date | None
    until: date | None
    ledger_total: float
    sanctions_total: float
    carried_balance: float

    @property
    def pending(self) -> float:
        return round(self.ledger_total - self.sanctions_total + self.carried_balance, 2)


class BalanceService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def cycle_start(self, employee: "Employee") -> date | None:
        """Inicio del ciclo: la última marca REINICIO o payroll_start_date."""
        result = await self.db.execute(
            select(func.max(PayrollMovement.date)).where(
                PayrollMovement.employee_id == employee.id,
                PayrollMovement.type == "REINICIO",
                PayrollMovement.status == STATUS_ACTIVE,
            )
        )
        last_reset = result.scalar()
        candidates = [d for d in (employee.payroll_start_date, last_reset) if d is not None]
        return max(candidates) if candidates else None

    async def pending_balance(self, employee: "Employee", until: date | None = None) -> BalanceSummary:
        start = await self.cycle_start(employee)

        ledger_query = select(func.coalesce(func.sum(PayrollMovement.amount), 0)).where(
            PayrollMovement.employee_id == employee.id,
            PayrollMovement.status == STATUS_ACTIVE,
            PayrollMovement.type != "REINICIO",
        )
        # Sanciones DESCUENTO se restan al vuelo, no pasan por el libro
        sanction_query = select(func.coalesce(func.sum(Sanction.amount), 0)).where(
            Sanction.employee_id == employee.id,
            Sanction.type == "DESCUENTO",
            Sanction.deleted_at.is_(None),
        )
        if start is not None:
            ledger_query = ledger_query.where(PayrollMovement.date >= start)
            sanction_query = sanction_query.where(Sanction.date >= start)
        if until is not None:
            ledger_query = ledger_query.where(PayrollMovement.date <= until)
            sanction_query = sanction_query.where(Sanction.date <= until)

        ledger_total = float((await self.db.execute(ledger_query)).scalar() or 0)
        sanctions_total = float((await self.db.execute(sanction_query)).scalar() or 0)

        return BalanceSummary(
            employee_id=employee.id,
            cycle_start=start,
            until=until,
            ledger_total=ledger_total,
            sanctions_total=sanctions_total,
            carried_balance=float(employee.balance or 0),
        )
