class NominaError(Exception):
    """Base para errores de dominio de la liquidación."""


class AttendanceValidationError(NominaError):
    """Datos de asistencia rechazados antes de calcular (empleado, horarios)."""


class LedgerError(NominaError):
    """Operación inválida sobre el libro de movimientos."""


class LedgerPersistenceError(NominaError):
    """La escritura en la base falló; la operación completa se revirtió."""
