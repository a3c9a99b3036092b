import uuid
from datetime import date as date_type, datetime, timezone

from sqlalchemy import String, DateTime, Boolean, ForeignKey, Numeric, Date, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nomina.core.database import Base


STATUS_SCHEDULED = "SCHEDULED"
STATUS_CONFIRMED = "CONFIRMED"


class AttendanceRecord(Base):
    __tablename__ = "attendance_records"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    employee_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("employees.id"), nullable=False)

    date: Mapped[date_type] = mapped_column(Date, nullable=False)
    check_in: Mapped[str] = mapped_column(String(5), nullable=False)   # "HH:mm"
    check_out: Mapped[str] = mapped_column(String(5), nullable=False)

    overtime_hours: Mapped[float] = mapped_column(Numeric(6, 2), default=0)
    overtime_amount: Mapped[float] = mapped_column(Numeric(14, 2), default=0)  # monto del turno
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    paid: Mapped[bool] = mapped_column(Boolean, default=False)
    is_holiday: Mapped[bool] = mapped_column(Boolean, default=False)
    status: Mapped[str] = mapped_column(String(20), default=STATUS_CONFIRMED)  # SCHEDULED | CONFIRMED
    created_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Ajuste manual del monto
    manually_modified_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    original_amount: Mapped[float | None] = mapped_column(Numeric(14, 2), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    employee: Mapped["Employee"] = relationship(back_populates="attendance_records")
