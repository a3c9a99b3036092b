import uuid
from datetime import date as date_type, datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey, Numeric, Text, Date, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nomina.core.database import Base


MOVEMENT_TYPES = ("ASISTENCIA", "PAGO", "DESCUENTO", "REINICIO", "AJUSTE", "FERIADO", "BONO")
DEBIT_TYPES = ("PAGO", "DESCUENTO")

STATUS_ACTIVE = "ACTIVE"
STATUS_VOIDED = "ANULADO"


class PayrollMovement(Base):
    """Un movimiento del libro de nómina. Nunca se borra: se anula."""
    __tablename__ = "payroll_movements"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    employee_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("employees.id"), nullable=False)
    # Sin FK: el registro de asistencia se borra, el movimiento queda anulado
    attendance_id: Mapped[uuid.UUID | None] = mapped_column(nullable=True, index=True)

    type: Mapped[str] = mapped_column(String(20), nullable=False)
    amount: Mapped[float] = mapped_column(Numeric(14, 2), nullable=False)
    date: Mapped[date_type] = mapped_column(Date, nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")

    status: Mapped[str] = mapped_column(String(20), default=STATUS_ACTIVE)  # ACTIVE | ANULADO
    meta: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    created_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    employee: Mapped["Employee"] = relationship(back_populates="payroll_movements")

    @property
    def is_active(self) -> bool:
        return self.status != STATUS_VOIDED
