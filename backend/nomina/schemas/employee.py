from pydantic import BaseModel, Field, field_validator
from typing import Literal
import uuid
from datetime import date, datetime

from nomina.utils.number_locale import to_locale_string

HHMM_PATTERN = r"^\d{1,2}:\d{2}$"

PaymentModality = Literal["MENSUAL", "QUINCENAL", "SEMANAL", "DIARIO"]


class EmployeeOut(BaseModel):
    id: uuid.UUID
    name: str
    position: str | None
    salary_amount: str
    payment_modality: str | None
    salary_period: str
    accrues_to_ledger: bool
    schedule_start: str | None
    schedule_end: str | None
    payroll_start_date: date | None
    balance: float
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class EmployeeCreate(BaseModel):
    name: str = Field(min_length=1)
    position: str | None = None
    # Acepta 300000 o "$ 300.000,00"; se guarda como texto es-AR
    salary_amount: str | int | float = "0"
    payment_modality: PaymentModality | None = "MENSUAL"
    schedule_start: str | None = Field(default=None, pattern=HHMM_PATTERN)
    schedule_end: str | None = Field(default=None, pattern=HHMM_PATTERN)
    payroll_start_date: date | None = None
    balance: float = 0

    @field_validator("salary_amount", mode="after")
    @classmethod
    def _salary_as_text(cls, v):
        return to_locale_string(v)


class EmployeeUpdate(BaseModel):
    name: str | None = None
    position: str | None = None
    salary_amount: str | int | float | None = None
    payment_modality: PaymentModality | None = None
    schedule_start: str | None = Field(default=None, pattern=HHMM_PATTERN)
    schedule_end: str | None = Field(default=None, pattern=HHMM_PATTERN)
    payroll_start_date: date | None = None
    balance: float | None = None
    is_active: bool | None = None

    @field_validator("salary_amount", mode="after")
    @classmethod
    def _salary_as_text(cls, v):
        return None if v is None else to_locale_string(v)
