import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Response, status
from sqlalchemy import select

from nomina.api.deps import DB, CurrentUser, ManagerOrAdmin
from nomina.api.v1.employees import get_employee_or_404
from nomina.core.database import commit_or_rollback
from nomina.models.sanction import Sanction
from nomina.schemas.sanction import SanctionCreate, SanctionOut

router = APIRouter(prefix="/sanctions", tags=["sanctions"])


@router.get("", response_model=list[SanctionOut])
async def list_sanctions(
    current_user: CurrentUser,
    db: DB,
    employee_id: uuid.UUID | None = None,
    include_deleted: bool = False,
):
    query = select(Sanction)
    if employee_id:
        query = query.where(Sanction.employee_id == employee_id)
    if not include_deleted:
        query = query.where(Sanction.deleted_at.is_(None))
    result = await db.execute(query.order_by(Sanction.date.desc(), Sanction.created_at.desc()))
    return result.scalars().all()


@router.post("", response_model=SanctionOut, status_code=status.HTTP_201_CREATED)
async def create_sanction(payload: SanctionCreate, current_user: ManagerOrAdmin, db: DB):
    await get_employee_or_404(db, payload.employee_id)
    sanction = Sanction(**payload.model_dump(), created_by=current_user.name)
    db.add(sanction)
    await commit_or_rollback(db, "alta de sanción")
    await db.refresh(sanction)
    return sanction


@router.delete("/{sanction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_sanction(sanction_id: uuid.UUID, current_user: ManagerOrAdmin, db: DB):
    """Baja lógica: deja de restar en el saldo pero queda registrada."""
    sanction = await db.get(Sanction, sanction_id)
    if sanction is None:
        raise HTTPException(status_code=404, detail="Sanción no encontrada")
    if sanction.deleted_at is None:
        sanction.deleted_at = datetime.now(timezone.utc)
        sanction.deleted_by = current_user.name
        await commit_or_rollback(db, "baja de sanción")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
