"""
AccrualCalculator: convierte un fichaje (entrada/salida) en el monto devengado.

Fuente única de la cuenta para la vista previa, el libro de movimientos y los
reportes: todos consumen el mismo AccrualResult, nadie recalcula partes.
"""
import math
from dataclasses import dataclass
from typing import Any

from nomina.utils.number_locale import normalize_salary, round_half_up
from nomina.utils.time_math import duration_minutes, minutes_of


PERIOD_DIVISORS = {
    "monthly":  30,
    "biweekly": 15,
    "weekly":   7,
    "daily":    1,
}

DEFAULT_HOLIDAY_FACTOR = 2.0
DEFAULT_OVERTIME_FACTOR = 1.0


@dataclass(frozen=True)
class AccrualInput:
    salary_amount: Any
    salary_period: str
    official_start: str | None
    official_end: str | None
    worked_start: str | None
    worked_end: str | None
    is_holiday: bool = False
    holiday_factor: float = DEFAULT_HOLIDAY_FACTOR
    overtime_factor: float = DEFAULT_OVERTIME_FACTOR


@dataclass(frozen=True)
class AccrualResult:
    daily_base: float
    official_minutes: int
    worked_minutes: int
    minute_value: float
    amount: int
    base_minutes: int = 0
    extra_minutes: int = 0
    base_amount: float = 0.0
    extra_amount: float = 0.0
    is_holiday: bool = False
    holiday_factor: float = DEFAULT_HOLIDAY_FACTOR

    @property
    def overtime_hours(self) -> float:
        return round(max(0, self.worked_minutes - self.official_minutes) / 60, 2)

    def as_meta(self) -> dict[str, Any]:
        """Desglose tal como se guarda en PayrollMovement.meta."""
        return {
            "dailyBase": self.daily_base,
            "officialMinutes": self.official_minutes,
            "workedMinutes": self.worked_minutes,
            "minuteValue": self.minute_value,
            "amount": self.amount,
            "baseMinutes": self.base_minutes,
            "extraMinutes": self.extra_minutes,
            "baseAmount": self.base_amount,
            "extraAmount": self.extra_amount,
            "isHoliday": self.is_holiday,
            "holidayFactor": self.holiday_factor,
        }


def daily_base_for(salary: float, salary_period: str) -> float:
    # Período desconocido = sueldo diario
    return salary / PERIOD_DIVISORS.get(salary_period, 1)


def _zero_result(
    data: AccrualInput, daily_base: float, official_minutes: int, worked_minutes: int,
) -> AccrualResult:
    return AccrualResult(
        daily_base=daily_base,
        official_minutes=max(official_minutes, 0),
        worked_minutes=max(worked_minutes, 0),
        minute_value=0.0,
        amount=0,
        is_holiday=data.is_holiday,
        holiday_factor=data.holiday_factor,
    )


def compute_accrual(data: AccrualInput) -> AccrualResult:
    salary = normalize_salary(data.salary_amount)
    daily_base = daily_base_for(salary, data.salary_period)

    official_minutes = duration_minutes(data.official_start, data.official_end)
    worked_minutes = duration_minutes(data.worked_start, data.worked_end)

    if official_minutes <= 0 or worked_minutes <= 0:
        return _zero_result(data, daily_base, official_minutes, worked_minutes)

    minute_value = daily_base / official_minutes

    base_minutes = min(worked_minutes, official_minutes)
    extra_minutes = max(worked_minutes - official_minutes, 0)

    base_amount = base_minutes * minute_value
    extra_amount = extra_minutes * minute_value * data.overtime_factor

    total = base_amount + extra_amount
    if data.is_holiday:
        total = total * data.holiday_factor
    # Un sueldo desmedido desborda el float
    if not math.isfinite(total):
        return _zero_result(data, daily_base, official_minutes, worked_minutes)

    # Sin tope de "un día de sueldo"
    return AccrualResult(
        daily_base=daily_base,
        official_minutes=official_minutes,
        worked_minutes=worked_minutes,
        minute_value=minute_value,
        amount=round_half_up(total),
        base_minutes=base_minutes,
        extra_minutes=extra_minutes,
        base_amount=base_amount,
        extra_amount=extra_amount,
        is_holiday=data.is_holiday,
        holiday_factor=data.holiday_factor,
    )


def is_late_arrival(
    scheduled_start: str | None,
    actual_start: str | None,
    grace_minutes: int = 10,
    max_late_minutes: int = 240,
) -> bool:
    """Tardanza = más de `grace_minutes` tarde pero menos de `max_late_minutes`.

    Pasado el tope se asume un error de carga, no una llegada tarde.
    """
    scheduled = minutes_of(scheduled_start)
    actual = minutes_of(actual_start)
    return scheduled + grace_minutes < actual < scheduled + max_late_minutes
