from nomina.schemas.employee import EmployeeCreate, EmployeeUpdate, EmployeeOut
from nomina.schemas.attendance import (
    AttendanceCreate, AttendanceUpdate, AttendanceOut,
    AttendancePreviewRequest, AttendancePreviewOut, AttendanceMonthSummary,
)
from nomina.schemas.payroll import (
    PayrollMovementOut, PayrollMovementCreate, PayrollVoidRequest, PayrollResetRequest, BalanceOut,
)
from nomina.schemas.sanction import SanctionCreate, SanctionOut
from nomina.schemas.holiday import HolidayCreate, HolidayOut

__all__ = [
    "EmployeeCreate", "EmployeeUpdate", "EmployeeOut",
    "AttendanceCreate", "AttendanceUpdate", "AttendanceOut",
    "AttendancePreviewRequest", "AttendancePreviewOut", "AttendanceMonthSummary",
    "PayrollMovementOut", "PayrollMovementCreate", "PayrollVoidRequest", "PayrollResetRequest", "BalanceOut",
    "SanctionCreate", "SanctionOut",
    "HolidayCreate", "HolidayOut",
]
