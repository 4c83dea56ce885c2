"""
Domain Entities Module

Core domain entities using dataclasses for the payroll system.
These entities represent the core business concepts independent of infrastructure.
"""

from calendar import monthrange
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Iterable, List, Optional, Set


class PayType(Enum):
    """How an employee's base compensation is expressed."""
    MONTHLY = "monthly"
    DAILY = "daily"
    HOURLY = "hourly"


class EmployeeStatus(Enum):
    """Employment status of an employee."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_LEAVE = "on_leave"


class AttendanceStatus(Enum):
    """Status of attendance for a given day."""
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    HALF_DAY = "half_day"
    ON_LEAVE = "on_leave"


class PeriodAttendanceStatus(Enum):
    """Whether attendance for a payroll period has been locked in."""
    FINALIZED = "finalized"
    PENDING = "pending"
    NOT_STARTED = "not_started"


class PayslipStatus(Enum):
    """Lifecycle of a stored payslip."""
    GENERATED = "generated"
    APPROVED = "approved"
    PAID = "paid"


@dataclass
class Allowances:
    """Fixed monthly allowances, always paid in full."""
    transportation: float = 0.0
    meal: float = 0.0
    communication: float = 0.0
    other: float = 0.0

    @property
    def total(self) -> float:
        return self.transportation + self.meal + self.communication + self.other


@dataclass
class LoanInfo:
    """
    Outstanding loan of an employee.

    Attributes:
        amount: Remaining principal (display only)
        monthly_deduction: Flat amount withheld every period
    """
    amount: float = 0.0
    monthly_deduction: float = 0.0


@dataclass
class CompensationProfile:
    """
    Compensation record of an employee.

    Only the rate field matching ``pay_type`` is read by the engine.

    Attributes:
        pay_type: Monthly, daily or hourly
        monthly_salary: Salary per month (monthly employees)
        daily_rate: Pay per working day (daily employees)
        hourly_rate: Pay per hour (hourly employees)
        allowances: Allowances added to earnings
        loan: Optional loan with a monthly deduction
    """
    pay_type: PayType
    monthly_salary: Optional[float] = None
    daily_rate: Optional[float] = None
    hourly_rate: Optional[float] = None
    allowances: Allowances = field(default_factory=Allowances)
    loan: Optional[LoanInfo] = None

    @property
    def loan_monthly_deduction(self) -> float:
        if self.loan is None:
            return 0.0
        return self.loan.monthly_deduction or 0.0


@dataclass
class Employee:
    """
    Represents an employee on the payroll.

    Attributes:
        id: Internal identifier
        employee_code: Human-facing employee number (e.g. "EMP-001")
        first_name: Given name
        last_name: Family name
        department: Department name
        position: Job title
        status: Employment status
        compensation: Compensation profile used for pay computation
    """
    id: str
    employee_code: str
    first_name: str
    last_name: str
    department: str
    position: str
    status: EmployeeStatus
    compensation: CompensationProfile

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE


@dataclass
class AttendanceRecord:
    """
    Represents a single day's attendance record.

    Attributes:
        date: The date of attendance
        status: Attendance status for the day
        regular_hours: Regular hours worked
        overtime_hours: Hours beyond the regular schedule
        undertime_hours: Scheduled hours not worked
        check_in: Check-in time (None if not recorded)
        check_out: Check-out time (None if not recorded)
    """
    date: date
    status: AttendanceStatus = AttendanceStatus.PRESENT
    regular_hours: float = 0.0
    overtime_hours: float = 0.0
    undertime_hours: float = 0.0
    check_in: Optional[time] = None
    check_out: Optional[time] = None


@dataclass(frozen=True)
class AttendanceTotals:
    """Period totals consumed by the payroll engine."""
    regular_hours: float = 0.0
    overtime_hours: float = 0.0
    undertime_hours: float = 0.0
    absent_days: int = 0

    @classmethod
    def from_records(cls, records: Iterable[AttendanceRecord]) -> "AttendanceTotals":
        """Sum hours and count absences across daily records."""
        regular = 0.0
        overtime = 0.0
        undertime = 0.0
        absent = 0
        for record in records:
            regular += record.regular_hours
            overtime += record.overtime_hours
            undertime += record.undertime_hours
            if record.status == AttendanceStatus.ABSENT:
                absent += 1
        return cls(
            regular_hours=regular,
            overtime_hours=overtime,
            undertime_hours=undertime,
            absent_days=absent
        )


@dataclass
class PayrollPeriod:
    """
    A payroll period, typically one calendar month.

    Attributes:
        month: Display label, e.g. "January 2026"
        start_date: First day of the period
        end_date: Last day of the period
        attendance_status: Whether attendance has been finalized
        working_days: Number of paid working days
    """
    month: str
    start_date: date
    end_date: date
    attendance_status: PeriodAttendanceStatus
    working_days: int

    @property
    def period_key(self) -> str:
        """Stable key for the period (YYYY-MM of the start date)."""
        return f"{self.start_date.year:04d}-{self.start_date.month:02d}"

    @property
    def is_finalized(self) -> bool:
        return self.attendance_status == PeriodAttendanceStatus.FINALIZED

    def working_dates(self, holidays: Optional[Set[date]] = None) -> List[date]:
        """Mon-Fri dates inside the period, excluding holidays."""
        holidays = holidays or set()
        dates = []
        current = self.start_date
        while current <= self.end_date:
            if current.weekday() < 5 and current not in holidays:
                dates.append(current)
            current = date.fromordinal(current.toordinal() + 1)
        return dates

    @classmethod
    def for_month(
        cls,
        year: int,
        month: int,
        holidays: Optional[Set[date]] = None,
        attendance_status: PeriodAttendanceStatus = PeriodAttendanceStatus.FINALIZED
    ) -> "PayrollPeriod":
        """
        Build a calendar-month period.

        Working days are Mon-Fri excluding holidays.
        """
        _, num_days = monthrange(year, month)
        start = date(year, month, 1)
        end = date(year, month, num_days)
        period = cls(
            month=start.strftime("%B %Y"),
            start_date=start,
            end_date=end,
            attendance_status=attendance_status,
            working_days=0
        )
        period.working_days = len(period.working_dates(holidays))
        return period


@dataclass(frozen=True)
class PayRates:
    """Derived rates for one employee and period."""
    hourly_rate: float = 0.0
    daily_rate: float = 0.0
    monthly_base: float = 0.0


@dataclass(frozen=True)
class PayrollCalculation:
    """
    Result of a single payroll computation.

    All monetary fields are rounded to cents. Composite fields are derived
    from the rounded components, so
    ``net_pay == total_earnings - total_deductions`` holds exactly.
    """
    # Hours breakdown
    total_regular_hours: float
    total_overtime_hours: float
    total_undertime_hours: float
    total_absent_days: int

    # Earnings
    basic_pay: float
    overtime_pay: float
    allowances: float
    total_earnings: float

    # Deductions
    withholding_tax: float
    sss_contribution: float
    philhealth_contribution: float
    pagibig_contribution: float
    absent_deductions: float
    undertime_deductions: float
    loan_deductions: float
    other_deductions: float
    total_deductions: float

    # Summary
    gross_pay: float
    net_pay: float

    # Resolved rates (display)
    hourly_rate: float = 0.0
    daily_rate: float = 0.0
    monthly_base: float = 0.0

    @property
    def statutory_deductions(self) -> float:
        return (
            self.sss_contribution
            + self.philhealth_contribution
            + self.pagibig_contribution
        )

    def to_dict(self) -> dict:
        """camelCase mapping matching the payslip payload."""
        return {
            "totalRegularHours": self.total_regular_hours,
            "totalOvertimeHours": self.total_overtime_hours,
            "totalUndertimeHours": self.total_undertime_hours,
            "totalAbsentDays": self.total_absent_days,
            "basicPay": self.basic_pay,
            "overtimePay": self.overtime_pay,
            "allowances": self.allowances,
            "totalEarnings": self.total_earnings,
            "withholdingTax": self.withholding_tax,
            "sssContribution": self.sss_contribution,
            "philhealthContribution": self.philhealth_contribution,
            "pagibigContribution": self.pagibig_contribution,
            "absentDeductions": self.absent_deductions,
            "undertimeDeductions": self.undertime_deductions,
            "loanDeductions": self.loan_deductions,
            "otherDeductions": self.other_deductions,
            "totalDeductions": self.total_deductions,
            "grossPay": self.gross_pay,
            "netPay": self.net_pay,
            "hourlyRate": self.hourly_rate,
            "dailyRate": self.daily_rate,
            "monthlyBase": self.monthly_base,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PayrollCalculation":
        """Inverse of to_dict(); missing keys default to zero."""
        return cls(
            total_regular_hours=data.get("totalRegularHours", 0.0),
            total_overtime_hours=data.get("totalOvertimeHours", 0.0),
            total_undertime_hours=data.get("totalUndertimeHours", 0.0),
            total_absent_days=data.get("totalAbsentDays", 0),
            basic_pay=data.get("basicPay", 0.0),
            overtime_pay=data.get("overtimePay", 0.0),
            allowances=data.get("allowances", 0.0),
            total_earnings=data.get("totalEarnings", 0.0),
            withholding_tax=data.get("withholdingTax", 0.0),
            sss_contribution=data.get("sssContribution", 0.0),
            philhealth_contribution=data.get("philhealthContribution", 0.0),
            pagibig_contribution=data.get("pagibigContribution", 0.0),
            absent_deductions=data.get("absentDeductions", 0.0),
            undertime_deductions=data.get("undertimeDeductions", 0.0),
            loan_deductions=data.get("loanDeductions", 0.0),
            other_deductions=data.get("otherDeductions", 0.0),
            total_deductions=data.get("totalDeductions", 0.0),
            gross_pay=data.get("grossPay", 0.0),
            net_pay=data.get("netPay", 0.0),
            hourly_rate=data.get("hourlyRate", 0.0),
            daily_rate=data.get("dailyRate", 0.0),
            monthly_base=data.get("monthlyBase", 0.0),
        )


@dataclass
class Payslip:
    """
    A generated payslip: a locked snapshot of one calculation.

    Attributes:
        id: Unique payslip identifier
        employee_id: Employee the slip belongs to
        employee_name: Name at generation time
        department: Department at generation time
        position: Position at generation time
        period: The payroll period
        calculation: The locked pay computation
        generated_at: Generation timestamp
        generated_by: User who generated the slip
        status: Lifecycle status
    """
    id: str
    employee_id: str
    employee_name: str
    department: str
    position: str
    period: PayrollPeriod
    calculation: PayrollCalculation
    generated_at: datetime
    generated_by: str
    status: PayslipStatus = PayslipStatus.GENERATED

    @property
    def key(self) -> tuple:
        """Write-once key: (employee_id, period_key)."""
        return (self.employee_id, self.period.period_key)
