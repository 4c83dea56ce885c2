"""
Payroll Exceptions Module

Errors raised by the layers around the payroll engine. The engine itself
never raises; callers reject invalid requests before invoking it.
"""

from typing import Optional


class PayrollError(Exception):
    """Base exception for payroll-related errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class AttendanceNotFinalizedError(PayrollError):
    """Raised when attendance for the period has not been finalized."""

    def __init__(self, period_label: str, message: Optional[str] = None):
        self.period_label = period_label
        super().__init__(
            message or
            f"Attendance for {period_label} has not been finalized yet. "
            f"Please finalize attendance before generating payslips."
        )


class PayslipAlreadyExistsError(PayrollError):
    """Raised when a payslip already exists for the employee and period."""

    def __init__(self, employee_id: str, period_key: str, message: Optional[str] = None):
        self.employee_id = employee_id
        self.period_key = period_key
        super().__init__(
            message or
            f"A payslip for employee '{employee_id}' already exists for {period_key}."
        )


class InactiveEmployeeError(PayrollError):
    """Raised when generating a payslip for an employee who is not active."""

    def __init__(self, employee_id: str, status: str, message: Optional[str] = None):
        self.employee_id = employee_id
        self.status = status
        super().__init__(
            message or
            f"Cannot generate payslip for employee '{employee_id}' with status '{status}'."
        )


class InvalidAttendanceError(PayrollError):
    """Raised when attendance inputs are negative, non-numeric or out of range."""
    pass


class InvalidPeriodError(PayrollError):
    """Raised when a payroll period cannot be used for calculation."""
    pass
