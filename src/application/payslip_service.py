"""
Payslip Service Module

Application layer service that orchestrates payslip generation.
Enforces the caller-side rules the payroll engine leaves to its callers:
finalized attendance, one payslip per employee and period, active
employees only, and sane attendance inputs.
"""

import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from config.statutory_tables import StatutorySchedule
from domain.entities import (
    AttendanceRecord, AttendanceTotals, Employee, Payslip, PayslipStatus,
    PayrollCalculation, PayrollPeriod
)
from domain.exceptions import (
    AttendanceNotFinalizedError, InactiveEmployeeError, InvalidAttendanceError,
    InvalidPeriodError, PayrollError, PayslipAlreadyExistsError
)
from domain.payroll_calculator import PayrollCalculator, build_attendance_records
from infrastructure.logger import get_logger
from infrastructure.payslip_store import PayslipStore, InMemoryPayslipStore

logger = get_logger("PayslipService")


@dataclass
class PayrollRunParams:
    """
    Parameters for a batch payroll run.

    Attributes:
        period: The payroll period to generate
        employees: Candidate employees
        attendance: Daily records keyed by employee id
    """
    period: PayrollPeriod
    employees: List[Employee]
    attendance: Dict[str, List[AttendanceRecord]] = field(default_factory=dict)


@dataclass
class PayrollRunResult:
    """Result of a batch payroll run."""
    period: PayrollPeriod
    payslips: List[Payslip] = field(default_factory=list)
    skipped: Dict[str, str] = field(default_factory=dict)  # employee id -> reason

    @property
    def generated_count(self) -> int:
        return len(self.payslips)

    @property
    def total_net_pay(self) -> float:
        return round(sum(p.calculation.net_pay for p in self.payslips), 2)


@dataclass
class GenerationStats:
    """Progress of payslip generation for a period."""
    completed: int = 0
    pending: int = 0
    failed: int = 0


class PayslipService:
    """
    Application service for generating payslips.

    This service:
    - Rejects ineligible requests before the engine runs
    - Runs the payroll engine
    - Persists generated payslips through a write-once store
    - Provides logging for key operations
    """

    def __init__(
        self,
        store: Optional[PayslipStore] = None,
        schedule: Optional[StatutorySchedule] = None,
        generated_by: str = "HR Department",
        require_finalized_attendance: bool = True
    ):
        """
        Initialize the service.

        Args:
            store: Payslip persistence (default: in-memory)
            schedule: Statutory schedule for the engine (default: built-in)
            generated_by: Name recorded on generated payslips
            require_finalized_attendance: Reject periods that are not finalized
        """
        self.store = store or InMemoryPayslipStore()
        self.calculator = PayrollCalculator(schedule)
        self.generated_by = generated_by
        self.require_finalized_attendance = require_finalized_attendance

    # ------------------------------------------------------------------
    # Gates and validation
    # ------------------------------------------------------------------
    def check_eligibility(self, employee: Employee, period: PayrollPeriod) -> None:
        """
        Check whether a payslip may be generated.

        Checks run in order: finalized attendance, existing payslip,
        active employee.

        Raises:
            AttendanceNotFinalizedError: Attendance is not finalized
            PayslipAlreadyExistsError: A payslip already exists
            InactiveEmployeeError: Employee is not active
        """
        if self.require_finalized_attendance and not period.is_finalized:
            raise AttendanceNotFinalizedError(period.month)

        if self.store.exists(employee.id, period.period_key):
            raise PayslipAlreadyExistsError(employee.id, period.period_key)

        if not employee.is_active:
            raise InactiveEmployeeError(employee.id, employee.status.value)

    def validate_period(self, period: PayrollPeriod) -> None:
        """Reject periods without working days."""
        if not isinstance(period.working_days, int) or period.working_days < 1:
            raise InvalidPeriodError(
                f"Payroll period {period.month} must have at least one working day "
                f"(got {period.working_days!r})"
            )

    def validate_totals(self, period: PayrollPeriod, totals: AttendanceTotals) -> None:
        """
        Validate attendance totals against the period.

        Raises:
            InvalidAttendanceError: On non-numeric or negative hours, or
                absent days outside 0..working_days
        """
        for label, value in (
            ("regular hours", totals.regular_hours),
            ("overtime hours", totals.overtime_hours),
            ("undertime hours", totals.undertime_hours),
        ):
            _require_non_negative_number(label, value)

        absent_days = totals.absent_days
        if isinstance(absent_days, bool) or not isinstance(absent_days, int):
            raise InvalidAttendanceError(f"Absent days must be a whole number, got {absent_days!r}")
        if absent_days < 0 or absent_days > period.working_days:
            raise InvalidAttendanceError(
                f"Absent days ({absent_days}) must be between 0 and "
                f"the period's {period.working_days} working days"
            )

    def validate_records(self, period: PayrollPeriod, records: List[AttendanceRecord]) -> AttendanceTotals:
        """Validate each daily record, then the period totals."""
        for record in records:
            for label, value in (
                ("regular hours", record.regular_hours),
                ("overtime hours", record.overtime_hours),
                ("undertime hours", record.undertime_hours),
            ):
                _require_non_negative_number(f"{record.date} {label}", value)
        totals = AttendanceTotals.from_records(records)
        self.validate_totals(period, totals)
        return totals

    # ------------------------------------------------------------------
    # Calculation and generation
    # ------------------------------------------------------------------
    def calculate(
        self,
        employee: Employee,
        period: PayrollPeriod,
        records: List[AttendanceRecord]
    ) -> PayrollCalculation:
        """
        Calculate pay for an employee from daily attendance records.

        Raises:
            PayrollError: If the request fails a gate or validation
        """
        self.check_eligibility(employee, period)
        self.validate_period(period)
        totals = self.validate_records(period, records)
        return self.calculator.calculate(employee.compensation, totals, period)

    def calculate_from_totals(
        self,
        employee: Employee,
        period: PayrollPeriod,
        regular_hours: float,
        overtime_hours: float = 0.0,
        undertime_hours: float = 0.0,
        absent_days: int = 0
    ) -> PayrollCalculation:
        """
        Calculate pay from manually entered period totals.

        The totals are spread over daily records first, the same way the
        payslip screen does for manual entry.
        """
        self.check_eligibility(employee, period)
        self.validate_period(period)
        self.validate_totals(period, AttendanceTotals(
            regular_hours=regular_hours,
            overtime_hours=overtime_hours,
            undertime_hours=undertime_hours,
            absent_days=absent_days
        ))
        records = build_attendance_records(
            period, regular_hours, overtime_hours, undertime_hours, absent_days
        )
        return self.calculator.calculate(employee.compensation, records, period)

    def default_regular_hours(self, period: PayrollPeriod) -> float:
        """Expected regular hours for a full period (8 hours per working day)."""
        return float(period.working_days * 8)

    def generate(
        self,
        employee: Employee,
        period: PayrollPeriod,
        calculation: PayrollCalculation,
        generated_at: Optional[datetime] = None
    ) -> Payslip:
        """
        Lock a calculation into a stored payslip.

        Raises:
            PayrollError: If the employee is no longer eligible
            PayslipAlreadyExistsError: If another payslip was stored first
        """
        self.check_eligibility(employee, period)

        payslip = Payslip(
            id=f"PS-{period.period_key}-{uuid.uuid4().hex[:8].upper()}",
            employee_id=employee.id,
            employee_name=employee.full_name,
            department=employee.department,
            position=employee.position,
            period=period,
            calculation=calculation,
            generated_at=generated_at or datetime.now(),
            generated_by=self.generated_by,
            status=PayslipStatus.GENERATED
        )
        self.store.save(payslip)

        logger.info(
            f"Generated payslip {payslip.id} for {employee.full_name} "
            f"({period.month}): gross {calculation.gross_pay:.2f}, net {calculation.net_pay:.2f}"
        )
        if calculation.net_pay < 0:
            logger.warning(
                f"Payslip {payslip.id} has negative net pay {calculation.net_pay:.2f}"
            )
        return payslip

    def run_payroll(self, params: PayrollRunParams) -> PayrollRunResult:
        """
        Generate payslips for every eligible employee of a period.

        Employees failing a gate or without attendance are skipped and
        reported in the result; the run continues.

        Raises:
            AttendanceNotFinalizedError: If the period itself is not finalized
            InvalidPeriodError: If the period has no working days
        """
        period = params.period
        if self.require_finalized_attendance and not period.is_finalized:
            raise AttendanceNotFinalizedError(period.month)
        self.validate_period(period)

        logger.info(
            f"Starting payroll run for {period.month}: "
            f"{len(params.employees)} employees, {period.working_days} working days"
        )

        result = PayrollRunResult(period=period)
        for employee in params.employees:
            records = params.attendance.get(employee.id)
            if not records:
                result.skipped[employee.id] = "No attendance records for period"
                logger.warning(f"Skipped {employee.id}: no attendance records")
                continue
            try:
                calculation = self.calculate(employee, period, records)
                payslip = self.generate(employee, period, calculation)
            except PayrollError as e:
                result.skipped[employee.id] = e.message
                logger.warning(f"Skipped {employee.id}: {e.message}")
                continue
            result.payslips.append(payslip)

        logger.info(
            f"Payroll run complete: {result.generated_count} generated, "
            f"{len(result.skipped)} skipped, total net pay {result.total_net_pay:.2f}"
        )
        return result

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------
    def pending_employees(
        self,
        employees: List[Employee],
        period: PayrollPeriod,
        search: str = "",
        department: str = ""
    ) -> List[Employee]:
        """
        Active employees still awaiting a payslip for the period.

        Args:
            employees: Candidate employees
            period: Payroll period
            search: Case-insensitive term matched against name, code,
                department and position
            department: Exact department filter (empty = all)
        """
        term = search.strip().lower()
        pending = []
        for employee in employees:
            if not employee.is_active:
                continue
            if self.store.exists(employee.id, period.period_key):
                continue
            if department and employee.department != department:
                continue
            if term:
                haystack = " ".join([
                    employee.first_name, employee.last_name, employee.employee_code,
                    employee.department, employee.position
                ]).lower()
                if term not in haystack:
                    continue
            pending.append(employee)
        return pending

    def generation_stats(self, employees: List[Employee], period: PayrollPeriod) -> GenerationStats:
        """Count completed and pending payslips for the period."""
        completed = sum(
            1 for e in employees if self.store.exists(e.id, period.period_key)
        )
        pending = sum(
            1 for e in employees
            if e.is_active and not self.store.exists(e.id, period.period_key)
        )
        return GenerationStats(completed=completed, pending=pending, failed=0)


def _require_non_negative_number(label: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidAttendanceError(f"{label.capitalize()} must be a number, got {value!r}")
    if math.isnan(value) or math.isinf(value) or value < 0:
        raise InvalidAttendanceError(f"{label.capitalize()} must be a non-negative number, got {value!r}")
