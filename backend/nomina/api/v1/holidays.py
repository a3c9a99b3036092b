from datetime import date

from fastapi import APIRouter, HTTPException, Response, status
from sqlalchemy import select

from nomina.api.deps import DB, CurrentUser, ManagerOrAdmin
from nomina.core.database import commit_or_rollback
from nomina.models.holiday import Holiday
from nomina.schemas.holiday import HolidayCreate, HolidayOut

router = APIRouter(prefix="/holidays", tags=["holidays"])


@router.get("", response_model=list[HolidayOut])
async def list_holidays(current_user: CurrentUser, db: DB, year: int | None = None):
    query = select(Holiday)
    if year:
        query = query.where(Holiday.date >= date(year, 1, 1), Holiday.date <= date(year, 12, 31))
    result = await db.execute(query.order_by(Holiday.date))
    return result.scalars().all()


@router.post("", response_model=HolidayOut, status_code=status.HTTP_201_CREATED)
async def create_holiday(payload: HolidayCreate, current_user: ManagerOrAdmin, db: DB):
    existing = await db.execute(select(Holiday).where(Holiday.date == payload.date))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="Ya existe un feriado en esa fecha")
    holiday = Holiday(date=payload.date, name=payload.name)
    db.add(holiday)
    await commit_or_rollback(db, "alta de feriado")
    await db.refresh(holiday)
    return holiday


@router.delete("/{holiday_date}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_holiday(holiday_date: date, current_user: ManagerOrAdmin, db: DB):
    # Las asistencias ya cargadas conservan su marca de feriado
    result = await db.execute(select(Holiday).where(Holiday.date == holiday_date))
    holiday = result.scalar_one_or_none()
    if holiday is None:
        raise HTTPException(status_code=404, detail="Feriado no encontrado")
    await db.delete(holiday)
    await commit_or_rollback(db, "baja de feriado")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
