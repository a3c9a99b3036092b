from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
import uuid
from datetime import date as Date, datetime as DateTime
from typing import Optional

from nomina.schemas.employee import HHMM_PATTERN

CAMEL_CONFIG = {"alias_generator": to_camel, "populate_by_name": True, "from_attributes": True}


class AttendanceCreate(BaseModel):
    # Opcional: si el cliente reintenta con el mismo id no se duplica nada
    id: Optional[uuid.UUID] = None
    employee_id: uuid.UUID
    date: Date
    check_in: str = Field(pattern=HHMM_PATTERN)
    check_out: str = Field(pattern=HHMM_PATTERN)
    reason: Optional[str] = None
    is_holiday: Optional[bool] = None   # None = según calendario de feriados

    model_config = CAMEL_CONFIG


class AttendanceUpdate(BaseModel):
    date: Optional[Date] = None
    check_in: Optional[str] = Field(default=None, pattern=HHMM_PATTERN)
    check_out: Optional[str] = Field(default=None, pattern=HHMM_PATTERN)
    reason: Optional[str] = None
    paid: Optional[bool] = None
    is_holiday: Optional[bool] = None
    overtime_amount: Optional[float] = None   # ajuste manual del monto

    model_config = CAMEL_CONFIG


class AttendanceOut(BaseModel):
    id: uuid.UUID
    employee_id: uuid.UUID
    date: Date
    check_in: str
    check_out: str
    overtime_hours: float
    overtime_amount: float
    reason: Optional[str]
    paid: bool
    is_holiday: bool
    created_by: Optional[str]
    status: str
    manually_modified_by: Optional[str]
    original_amount: Optional[float]
    created_at: DateTime

    model_config = CAMEL_CONFIG


class AttendancePreviewRequest(BaseModel):
    employee_id: uuid.UUID
    date: Date
    check_in: str = Field(pattern=HHMM_PATTERN)
    check_out: str = Field(pattern=HHMM_PATTERN)
    is_holiday: Optional[bool] = None

    model_config = CAMEL_CONFIG


class AccrualBreakdownOut(BaseModel):
    daily_base: float
    official_minutes: int
    worked_minutes: int
    minute_value: float
    amount: int
    base_minutes: int
    extra_minutes: int
    base_amount: float
    extra_amount: float
    is_holiday: bool
    holiday_factor: float

    model_config = CAMEL_CONFIG


class AttendancePreviewOut(BaseModel):
    breakdown: AccrualBreakdownOut
    amount: int
    is_late: bool
    is_holiday: bool
    is_future: bool
    worked_hours: float
    standard_hours: float
    overtime_hours: float

    model_config = CAMEL_CONFIG


class AttendanceMonthSummary(BaseModel):
    employee_id: uuid.UUID
    month: Date
    total_debt: float
    total_paid: float
    total_hours: float
    records: int

    model_config = CAMEL_CONFIG
