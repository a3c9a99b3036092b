from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    # Base de datos – SQLite para desarrollo local
    DATABASE_URL: str = "sqlite+aiosqlite:///./nomina.db"

    # Seguridad: los tokens los emite el servicio de login externo,
    # acá solo se validan.
    SECRET_KEY: str = "dev_secret_key_change_in_production_min_32_chars!!"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Reglas de liquidación
    HOLIDAY_FACTOR: float = 2.0
    OVERTIME_FACTOR: float = 1.0
    LATE_GRACE_MINUTES: int = 10
    LATE_MAX_MINUTES: int = 240   # más de 4h tarde = error de carga, no tardanza

    # "Hoy" para SCHEDULED/CONFIRMED se calcula en esta zona horaria
    TIMEZONE: str = "America/Argentina/Buenos_Aires"

    @property
    def allowed_origins_list(self) -> list[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",")]

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
