from pydantic import BaseModel
import uuid
from datetime import date, datetime
from typing import Literal

SanctionType = Literal[
    "APERCIBIMIENTO", "SUSPENSION", "DESCUENTO", "STRIKE",
    "LLEGADA_TARDE", "FALTA_INJUSTIFICADA", "CONDUCTA", "OTRO",
]


class SanctionCreate(BaseModel):
    employee_id: uuid.UUID
    date: date
    type: SanctionType
    description: str = ""
    amount: float = 0
    status: Literal["PENDING_APPROVAL", "APPROVED", "REJECTED"] = "PENDING_APPROVAL"


class SanctionOut(BaseModel):
    id: uuid.UUID
    employee_id: uuid.UUID
    date: date
    type: str
    description: str
    amount: float
    status: str
    created_by: str | None
    deleted_at: datetime | None
    deleted_by: str | None
    created_at: datetime

    model_config = {"from_attributes": True}
