import uuid
from datetime import date as date_type, datetime, timezone

from sqlalchemy import String, DateTime, Date, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column

from nomina.core.database import Base


class Holiday(Base):
    __tablename__ = "holidays"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    date: Mapped[date_type] = mapped_column(Date, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), default="Feriado")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )


async def is_holiday(db: AsyncSession, d: date_type) -> bool:
    result = await db.execute(select(Holiday.id).where(Holiday.date == d))
    return result.scalar_one_or_none() is not None
