from nomina.models.employee import Employee
from nomina.models.attendance import AttendanceRecord
from nomina.models.payroll import PayrollMovement
from nomina.models.sanction import Sanction
from nomina.models.holiday import Holiday
from nomina.models.audit import AuditLog

__all__ = [
    "Employee",
    "AttendanceRecord",
    "PayrollMovement",
    "Sanction",
    "Holiday",
    "AuditLog",
]
