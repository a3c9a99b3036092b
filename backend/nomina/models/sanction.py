import uuid
from datetime import date as date_type, datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey, Numeric, Text, Date
from sqlalchemy.orm import Mapped, mapped_column

from nomina.core.database import Base


SANCTION_TYPES = (
    "APERCIBIMIENTO", "SUSPENSION", "DESCUENTO", "STRIKE",
    "LLEGADA_TARDE", "FALTA_INJUSTIFICADA", "CONDUCTA", "OTRO",
)


class Sanction(Base):
    """Sanción disciplinaria. No es parte del libro: el saldo la resta al vuelo."""
    __tablename__ = "sanctions"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    employee_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("employees.id"), nullable=False)

    date: Mapped[date_type] = mapped_column(Date, nullable=False)
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    amount: Mapped[float] = mapped_column(Numeric(14, 2), default=0)

    status: Mapped[str] = mapped_column(
        String(20), default="PENDING_APPROVAL"
    )  # PENDING_APPROVAL | APPROVED | REJECTED
    created_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Baja lógica
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    deleted_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
