"""
Fixtures compartidas de los tests de la API de nómina.

SQLite en memoria con StaticPool: todas las sesiones comparten una conexión,
así lo que escribe una sesión lo ve la otra (necesario para los tests HTTP).
"""
import uuid
from datetime import date

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

import nomina.models  # noqa – registra todos los modelos en Base.metadata
from nomina.core.database import Base, get_db
from nomina.core.security import create_access_token
from nomina.main import app
from nomina.models.employee import Employee

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Fecha "hoy" fija para los tests de servicio
TODAY = date(2025, 9, 15)


# ── Engine (por test: base nueva) ────────────────────────────────────────────

@pytest_asyncio.fixture
async def engine():
    eng = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,          # una conexión compartida → todas las sesiones ven lo mismo
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine) -> AsyncSession:
    """Sesión para preparar e inspeccionar datos dentro del test."""
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


# ── Cliente HTTP ─────────────────────────────────────────────────────────────

@pytest_asyncio.fixture
async def client(engine) -> AsyncClient:
    """
    Cliente de la app con get_db apuntando al engine de test.
    Cada request tiene su sesión, pero todas usan la misma conexión.
    """
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


# ── Empleados ────────────────────────────────────────────────────────────────

async def make_employee(db, **overrides) -> Employee:
    data = dict(
        id=uuid.uuid4(),
        name="Lucía Fernández",
        position="Moza",
        salary_amount="300000",
        payment_modality="MENSUAL",
        schedule_start="09:00",
        schedule_end="17:00",
        balance=0,
        is_active=True,
    )
    data.update(overrides)
    emp = Employee(**data)
    db.add(emp)
    await db.commit()
    await db.refresh(emp)
    return emp


@pytest_asyncio.fixture
async def employee(db) -> Employee:
    return await make_employee(db)


@pytest_asyncio.fixture
async def daily_employee(db) -> Employee:
    """Cobra en el día: no genera deuda en el libro."""
    return await make_employee(
        db, name="Matías Gómez", position="Bachero", salary_amount="20000", payment_modality="DIARIO",
    )


# ── Tokens ───────────────────────────────────────────────────────────────────

@pytest.fixture
def admin_token() -> str:
    return create_access_token("Admin Test", "admin")


@pytest.fixture
def manager_token() -> str:
    return create_access_token("Encargada Test", "manager")


@pytest.fixture
def member_token() -> str:
    return create_access_token("Mozo Test", "member")


# ── Helper ───────────────────────────────────────────────────────────────────

def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
