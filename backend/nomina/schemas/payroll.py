from pydantic import BaseModel, Field
import uuid
from datetime import date, datetime
from typing import Any, Literal, Optional


class PayrollMovementOut(BaseModel):
    id: uuid.UUID
    employee_id: uuid.UUID
    attendance_id: uuid.UUID | None
    type: str
    amount: float
    date: date
    description: str
    created_by: str | None
    created_at: datetime
    status: str
    meta: dict[str, Any] | None

    model_config = {"from_attributes": True}


class PayrollMovementCreate(BaseModel):
    """Movimiento manual. ASISTENCIA y REINICIO los genera el sistema."""
    employee_id: uuid.UUID
    type: Literal["PAGO", "DESCUENTO", "BONO", "AJUSTE", "FERIADO"]
    amount: float
    date: date
    description: str = ""


class PayrollVoidRequest(BaseModel):
    reason: str = Field(min_length=1)


class PayrollResetRequest(BaseModel):
    new_start_date: date


class BalanceOut(BaseModel):
    employee_id: uuid.UUID
    cycle_start: Optional[date]
    until: Optional[date]
    ledger_total: float
    sanctions_total: float
    carried_balance: float
    pending: float

    model_config = {"from_attributes": True}
