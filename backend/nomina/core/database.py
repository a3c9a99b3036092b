import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase

from nomina.core.config import settings
from nomina.core.exceptions import LedgerPersistenceError

logger = logging.getLogger(__name__)

# SQLite necesita check_same_thread=False
connect_args = {}
if "sqlite" in settings.DATABASE_URL:
    connect_args = {"check_same_thread": False}

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    connect_args=connect_args,
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


async def get_db():
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def commit_or_rollback(db: AsyncSession, operation: str) -> None:
    """Confirma la transacción completa o la revierte entera.

    Asistencia y movimiento del libro viajan en el mismo commit: o quedan
    los dos o ninguno.
    """
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Error de persistencia en '%s'", operation)
        raise LedgerPersistenceError(f"No se pudo guardar ({operation}): {e}") from e


async def create_tables():
    """Crea todas las tablas (desarrollo local sin Alembic)."""
    import nomina.models  # noqa – registra todos los modelos
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
