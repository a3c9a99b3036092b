import uuid
from datetime import date, datetime, timezone

from sqlalchemy import String, DateTime, Boolean, Numeric, Date
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nomina.core.database import Base


# Modalidad de cobro → período del sueldo
MODALITY_PERIODS = {
    "MENSUAL":   "monthly",
    "QUINCENAL": "biweekly",
    "SEMANAL":   "weekly",
    "DIARIO":    "daily",
}

DEFAULT_SCHEDULE_START = "09:00"
DEFAULT_SCHEDULE_END = "17:00"


class Employee(Base):
    __tablename__ = "employees"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    position: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Texto crudo: hay sueldos históricos cargados como "$ 2.200,50"
    salary_amount: Mapped[str] = mapped_column(String(64), default="0")
    payment_modality: Mapped[str | None] = mapped_column(
        String(20), nullable=True
    )  # MENSUAL | QUINCENAL | SEMANAL | DIARIO
    schedule_start: Mapped[str | None] = mapped_column(String(5), nullable=True)  # "HH:mm"
    schedule_end: Mapped[str | None] = mapped_column(String(5), nullable=True)

    payroll_start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    balance: Mapped[float] = mapped_column(Numeric(14, 2), default=0)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    # Relationships
    attendance_records: Mapped[list["AttendanceRecord"]] = relationship(back_populates="employee")
    payroll_movements: Mapped[list["PayrollMovement"]] = relationship(back_populates="employee")

    @property
    def salary_period(self) -> str:
        return MODALITY_PERIODS.get(self.payment_modality or "MENSUAL", "monthly")

    @property
    def accrues_to_ledger(self) -> bool:
        """DIARIO cobra en el día: no genera deuda en el libro."""
        return self.payment_modality != "DIARIO"

    @property
    def official_start(self) -> str:
        return self.schedule_start or DEFAULT_SCHEDULE_START

    @property
    def official_end(self) -> str:
        return self.schedule_end or DEFAULT_SCHEDULE_END
