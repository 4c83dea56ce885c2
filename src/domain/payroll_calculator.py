"""
Payroll Calculator Module

Combines attendance totals, resolved rates, allowances, loans and statutory
deductions into a single PayrollCalculation.
"""

from datetime import date
from typing import List, Optional, Set, Union

from config.statutory_tables import StatutorySchedule
from .entities import (
    AttendanceRecord, AttendanceStatus, AttendanceTotals,
    CompensationProfile, PayrollCalculation, PayrollPeriod
)
from .money import round_money, as_amount
from .rate_resolver import resolve_rates
from .statutory import StatutoryCalculator

OVERTIME_MULTIPLIER = 1.25

AttendanceInput = Union[AttendanceTotals, List[AttendanceRecord]]


class PayrollCalculator:
    """
    Computes a payslip's figures for one employee and period.

    Provides:
    - Attendance totals from daily records
    - Earnings (basic, overtime, allowances)
    - Statutory, attendance and loan deductions
    - Cent-rounded result whose totals reconcile exactly

    The calculator holds no per-call state and may be shared across threads.
    """

    def __init__(self, schedule: Optional[StatutorySchedule] = None):
        """
        Initialize calculator.

        Args:
            schedule: Statutory schedule to apply (default: current built-in)
        """
        self.statutory = StatutoryCalculator(schedule)

    @property
    def schedule(self) -> StatutorySchedule:
        return self.statutory.schedule

    def calculate_totals(self, attendance: AttendanceInput) -> AttendanceTotals:
        """Normalize records or pre-summed totals into AttendanceTotals."""
        if isinstance(attendance, AttendanceTotals):
            return attendance
        return AttendanceTotals.from_records(attendance)

    def calculate(
        self,
        profile: CompensationProfile,
        attendance: AttendanceInput,
        period: PayrollPeriod
    ) -> PayrollCalculation:
        """
        Calculate pay for one employee and period.

        Args:
            profile: Compensation profile of the employee
            attendance: Daily attendance records or their totals
            period: Payroll period (working_days must be >= 1)

        Returns:
            PayrollCalculation with every monetary field rounded to cents
        """
        totals = self.calculate_totals(attendance)
        regular_hours = as_amount(totals.regular_hours)
        overtime_hours = as_amount(totals.overtime_hours)
        undertime_hours = as_amount(totals.undertime_hours)
        absent_days = int(as_amount(totals.absent_days))

        rates = resolve_rates(profile, period)

        # Earnings
        basic_pay = regular_hours * rates.hourly_rate
        overtime_pay = overtime_hours * (rates.hourly_rate * OVERTIME_MULTIPLIER)
        allowances = profile.allowances.total
        gross_pay = basic_pay + overtime_pay

        # Statutory deductions use the monthly base regardless of hours worked
        sss = self.statutory.sss(rates.monthly_base)
        philhealth = self.statutory.philhealth(rates.monthly_base)
        pagibig = self.statutory.pagibig(rates.monthly_base)
        withholding_tax = self.statutory.withholding_tax(
            gross_pay, sss + philhealth + pagibig
        )

        # Attendance and loan deductions
        absent_deductions = absent_days * rates.daily_rate
        undertime_deductions = undertime_hours * rates.hourly_rate
        loan_deductions = as_amount(profile.loan_monthly_deduction)

        return self._build_result(
            totals=totals,
            basic_pay=basic_pay,
            overtime_pay=overtime_pay,
            allowances=allowances,
            withholding_tax=withholding_tax,
            sss=sss,
            philhealth=philhealth,
            pagibig=pagibig,
            absent_deductions=absent_deductions,
            undertime_deductions=undertime_deductions,
            loan_deductions=loan_deductions,
            hourly_rate=rates.hourly_rate,
            daily_rate=rates.daily_rate,
            monthly_base=rates.monthly_base
        )

    def _build_result(
        self,
        totals: AttendanceTotals,
        basic_pay: float,
        overtime_pay: float,
        allowances: float,
        withholding_tax: float,
        sss: float,
        philhealth: float,
        pagibig: float,
        absent_deductions: float,
        undertime_deductions: float,
        loan_deductions: float,
        hourly_rate: float,
        daily_rate: float,
        monthly_base: float
    ) -> PayrollCalculation:
        """Round leaf amounts, then derive composite amounts from them."""
        basic_pay = round_money(basic_pay)
        overtime_pay = round_money(overtime_pay)
        allowances = round_money(allowances)
        withholding_tax = round_money(withholding_tax)
        sss = round_money(sss)
        philhealth = round_money(philhealth)
        pagibig = round_money(pagibig)
        absent_deductions = round_money(absent_deductions)
        undertime_deductions = round_money(undertime_deductions)
        loan_deductions = round_money(loan_deductions)

        other_deductions = round_money(absent_deductions + undertime_deductions)
        total_deductions = round_money(
            withholding_tax + sss + philhealth + pagibig
            + other_deductions + loan_deductions
        )
        total_earnings = round_money(basic_pay + overtime_pay + allowances)
        gross_pay = round_money(basic_pay + overtime_pay)
        net_pay = round_money(total_earnings - total_deductions)

        return PayrollCalculation(
            total_regular_hours=totals.regular_hours,
            total_overtime_hours=totals.overtime_hours,
            total_undertime_hours=totals.undertime_hours,
            total_absent_days=totals.absent_days,
            basic_pay=basic_pay,
            overtime_pay=overtime_pay,
            allowances=allowances,
            total_earnings=total_earnings,
            withholding_tax=withholding_tax,
            sss_contribution=sss,
            philhealth_contribution=philhealth,
            pagibig_contribution=pagibig,
            absent_deductions=absent_deductions,
            undertime_deductions=undertime_deductions,
            loan_deductions=loan_deductions,
            other_deductions=other_deductions,
            total_deductions=total_deductions,
            gross_pay=gross_pay,
            net_pay=net_pay,
            hourly_rate=round_money(hourly_rate),
            daily_rate=round_money(daily_rate),
            monthly_base=round_money(monthly_base)
        )


def calculate_payroll(
    profile: CompensationProfile,
    attendance: AttendanceInput,
    period: PayrollPeriod,
    schedule: Optional[StatutorySchedule] = None
) -> PayrollCalculation:
    """Convenience wrapper around PayrollCalculator.calculate()."""
    return PayrollCalculator(schedule).calculate(profile, attendance, period)


def build_attendance_records(
    period: PayrollPeriod,
    regular_hours: float,
    overtime_hours: float = 0.0,
    undertime_hours: float = 0.0,
    absent_days: int = 0,
    holidays: Optional[Set[date]] = None
) -> List[AttendanceRecord]:
    """
    Spread manually entered period totals over daily records.

    The first ``absent_days`` working days are marked absent with no hours;
    the remaining days share the hour totals evenly. If every day is absent
    the hour totals are dropped.

    Args:
        period: Payroll period; one record is produced per working day
        regular_hours: Total regular hours for the period
        overtime_hours: Total overtime hours
        undertime_hours: Total undertime hours
        absent_days: Number of days absent (0..working_days)
        holidays: Holidays to skip when assigning dates

    Returns:
        List of AttendanceRecord, one per working day
    """
    working_days = period.working_days
    dates = period.working_dates(holidays)
    days_present = working_days - absent_days

    records = []
    for i in range(working_days):
        # Fall back to consecutive dates when the calendar has fewer weekdays
        record_date = dates[i] if i < len(dates) else date.fromordinal(
            period.start_date.toordinal() + i
        )
        if i < absent_days or days_present <= 0:
            records.append(AttendanceRecord(
                date=record_date,
                status=AttendanceStatus.ABSENT
            ))
        else:
            records.append(AttendanceRecord(
                date=record_date,
                status=AttendanceStatus.PRESENT,
                regular_hours=regular_hours / days_present,
                overtime_hours=overtime_hours / days_present,
                undertime_hours=undertime_hours / days_present
            ))
    return records
