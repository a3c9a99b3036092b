import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from nomina.core.config import settings
from nomina.core.database import create_tables
from nomina.core.exceptions import (
    AttendanceValidationError, LedgerError, LedgerPersistenceError, NominaError,
)
from nomina.api.v1.employees import router as employees_router
from nomina.api.v1.attendance import router as attendance_router
from nomina.api.v1.payroll import router as payroll_router
from nomina.api.v1.sanctions import router as sanctions_router
from nomina.api.v1.holidays import router as holidays_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Tablas al arrancar (SQLite / desarrollo local)
    await create_tables()
    logger.info("Nómina API iniciada (%s)", settings.APP_ENV)
    yield


app = FastAPI(
    title="Nómina API",
    description="Asistencias, devengado y libro de nómina",
    version="1.0.0",
    lifespan=lifespan,
    # Swagger solo en desarrollo: en producción DEBUG=false
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

ERROR_STATUS = {
    AttendanceValidationError: 400,
    LedgerError: 400,
    LedgerPersistenceError: 503,
}


@app.exception_handler(NominaError)
async def nomina_error_handler(request: Request, exc: NominaError):
    status_code = ERROR_STATUS.get(type(exc), 400)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


API_PREFIX = "/api/v1"

app.include_router(employees_router, prefix=API_PREFIX)
app.include_router(attendance_router, prefix=API_PREFIX)
app.include_router(payroll_router, prefix=API_PREFIX)
app.include_router(sanctions_router, prefix=API_PREFIX)
app.include_router(holidays_router, prefix=API_PREFIX)


@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "Nómina API", "version": "1.0.0"}
