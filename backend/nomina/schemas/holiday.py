from pydantic import BaseModel
import uuid
from datetime import date as Date, datetime as DateTime


class HolidayCreate(BaseModel):
    date: Date
    name: str = "Feriado"


class HolidayOut(BaseModel):
    id: uuid.UUID
    date: Date
    name: str
    created_at: DateTime

    model_config = {"from_attributes": True}
