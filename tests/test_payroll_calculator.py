"""
Unit tests for the payroll aggregator.
"""

import pytest
from datetime import date
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from config.statutory_tables import PH_2026, schedule_from_dict, schedule_to_dict
from domain.entities import (
    Allowances, AttendanceRecord, AttendanceStatus, AttendanceTotals,
    CompensationProfile, LoanInfo, PayrollPeriod, PayType, PeriodAttendanceStatus
)
from domain.money import round_money
from domain.payroll_calculator import (
    OVERTIME_MULTIPLIER, PayrollCalculator, build_attendance_records, calculate_payroll
)


def make_period(working_days: int = 22) -> PayrollPeriod:
    return PayrollPeriod(
        month="January 2026",
        start_date=date(2026, 1, 1),
        end_date=date(2026, 1, 31),
        attendance_status=PeriodAttendanceStatus.FINALIZED,
        working_days=working_days
    )


def monthly_profile(salary: float = 45000, allowances: float = 5000,
                    loan: float = 2500) -> CompensationProfile:
    return CompensationProfile(
        pay_type=PayType.MONTHLY,
        monthly_salary=salary,
        allowances=Allowances(transportation=allowances),
        loan=LoanInfo(amount=50000, monthly_deduction=loan) if loan else None
    )


def assert_reconciles(calc):
    assert calc.total_earnings == round_money(calc.basic_pay + calc.overtime_pay + calc.allowances)
    assert calc.gross_pay == round_money(calc.basic_pay + calc.overtime_pay)
    assert calc.other_deductions == round_money(calc.absent_deductions + calc.undertime_deductions)
    assert calc.total_deductions == round_money(
        calc.withholding_tax + calc.sss_contribution + calc.philhealth_contribution
        + calc.pagibig_contribution + calc.other_deductions + calc.loan_deductions
    )
    assert calc.net_pay == round_money(calc.total_earnings - calc.total_deductions)


class TestConcreteScenario:
    """Monthly employee, full attendance, allowances and a loan."""

    @pytest.fixture
    def calc(self):
        totals = AttendanceTotals(regular_hours=176)
        return calculate_payroll(monthly_profile(), totals, make_period(22))

    def test_rates(self, calc):
        assert calc.daily_rate == 2045.45
        assert calc.hourly_rate == 255.68
        assert calc.monthly_base == 45000.0

    def test_earnings(self, calc):
        assert calc.basic_pay == 45000.0
        assert calc.overtime_pay == 0.0
        assert calc.allowances == 5000.0
        assert calc.total_earnings == 50000.0
        assert calc.gross_pay == 45000.0

    def test_statutory(self, calc):
        assert calc.sss_contribution == 1350.0
        assert calc.philhealth_contribution == 1125.0
        assert calc.pagibig_contribution == 100.0
        assert calc.statutory_deductions == 2575.0
        assert calc.withholding_tax == 3693.33

    def test_totals(self, calc):
        assert calc.loan_deductions == 2500.0
        assert calc.other_deductions == 0.0
        assert calc.total_deductions == 8768.33
        assert calc.net_pay == 41231.67

    def test_reconciles(self, calc):
        assert_reconciles(calc)


class TestAbsencesAndOvertime:
    """Tests for attendance-driven earnings and deductions."""

    def test_daily_employee_with_absences(self):
        profile = CompensationProfile(pay_type=PayType.DAILY, daily_rate=1000)
        totals = AttendanceTotals(regular_hours=160, absent_days=2)
        calc = calculate_payroll(profile, totals, make_period(22))

        assert calc.basic_pay == 20000.0
        assert calc.absent_deductions == 2000.0
        assert calc.sss_contribution == 900.0
        assert calc.philhealth_contribution == 550.0
        assert calc.pagibig_contribution == 100.0
        assert calc.withholding_tax == 0.0
        assert calc.total_deductions == 3550.0
        assert calc.net_pay == 16450.0

    def test_absent_whole_period(self):
        profile = CompensationProfile(
            pay_type=PayType.MONTHLY,
            monthly_salary=45000,
            allowances=Allowances(transportation=2000, meal=1500, communication=1000, other=500)
        )
        calc = calculate_payroll(profile, AttendanceTotals(absent_days=22), make_period(22))

        assert calc.basic_pay == 0.0
        assert calc.overtime_pay == 0.0
        assert calc.absent_deductions == 45000.0
        assert calc.allowances == 5000.0
        assert calc.withholding_tax == 0.0
        assert calc.net_pay == round_money(5000 - 45000 - calc.statutory_deductions)
        assert_reconciles(calc)

    def test_absence_only_changes_absent_deduction(self):
        profile = CompensationProfile(pay_type=PayType.DAILY, daily_rate=1000)
        base = calculate_payroll(profile, AttendanceTotals(regular_hours=160), make_period())
        absent = calculate_payroll(
            profile, AttendanceTotals(regular_hours=160, absent_days=3), make_period()
        )

        assert absent.absent_deductions == 3000.0
        assert absent.basic_pay == base.basic_pay
        assert absent.withholding_tax == base.withholding_tax
        assert absent.net_pay == round_money(base.net_pay - 3000.0)

    def test_overtime_pay(self):
        profile = CompensationProfile(pay_type=PayType.HOURLY, hourly_rate=100)
        calc = calculate_payroll(
            profile, AttendanceTotals(regular_hours=160, overtime_hours=10), make_period()
        )

        assert calc.overtime_pay == 100 * OVERTIME_MULTIPLIER * 10
        assert calc.gross_pay == 17250.0

    def test_undertime_deduction(self):
        profile = CompensationProfile(pay_type=PayType.HOURLY, hourly_rate=100)
        calc = calculate_payroll(
            profile, AttendanceTotals(regular_hours=160, undertime_hours=3.5), make_period()
        )

        assert calc.undertime_deductions == 350.0
        assert calc.other_deductions == 350.0
        assert_reconciles(calc)

    def test_allowances_do_not_affect_tax(self):
        totals = AttendanceTotals(regular_hours=176)
        without = calculate_payroll(monthly_profile(allowances=0), totals, make_period())
        with_allowance = calculate_payroll(monthly_profile(allowances=8000), totals, make_period())

        assert with_allowance.withholding_tax == without.withholding_tax
        assert with_allowance.statutory_deductions == without.statutory_deductions
        assert with_allowance.net_pay == round_money(without.net_pay + 8000)

    def test_statutory_uses_monthly_base_not_hours(self):
        full = calculate_payroll(monthly_profile(), AttendanceTotals(regular_hours=176), make_period())
        partial = calculate_payroll(monthly_profile(), AttendanceTotals(regular_hours=40), make_period())

        assert partial.sss_contribution == full.sss_contribution
        assert partial.philhealth_contribution == full.philhealth_contribution
        assert partial.pagibig_contribution == full.pagibig_contribution
        assert partial.withholding_tax < full.withholding_tax

    def test_net_pay_may_be_negative(self):
        profile = monthly_profile(allowances=0, loan=20000)
        calc = calculate_payroll(profile, AttendanceTotals(regular_hours=8), make_period())

        assert calc.net_pay < 0
        assert_reconciles(calc)


class TestDegenerateInputs:
    """Tests for missing rates and invalid inputs."""

    def test_missing_rate(self):
        profile = CompensationProfile(pay_type=PayType.MONTHLY)
        calc = calculate_payroll(profile, AttendanceTotals(regular_hours=176), make_period())

        assert calc.basic_pay == 0.0
        assert calc.sss_contribution == 180.0
        assert calc.philhealth_contribution == 250.0
        assert calc.pagibig_contribution == 0.0
        assert calc.withholding_tax == 0.0
        assert calc.net_pay == -430.0

    def test_infinite_inputs_treated_as_zero(self):
        profile = CompensationProfile(pay_type=PayType.MONTHLY, monthly_salary=float("inf"))
        calc = calculate_payroll(
            profile, AttendanceTotals(regular_hours=176, overtime_hours=float("inf")), make_period()
        )

        assert calc.basic_pay == 0.0
        assert calc.overtime_pay == 0.0
        assert calc.net_pay == -430.0

    def test_negative_hours_treated_as_zero(self):
        profile = CompensationProfile(pay_type=PayType.HOURLY, hourly_rate=100)
        calc = calculate_payroll(
            profile, AttendanceTotals(regular_hours=-10, overtime_hours=-2), make_period()
        )

        assert calc.basic_pay == 0.0
        assert calc.overtime_pay == 0.0

    def test_no_loan(self):
        calc = calculate_payroll(
            monthly_profile(loan=0), AttendanceTotals(regular_hours=176), make_period()
        )
        assert calc.loan_deductions == 0.0


class TestPayrollCalculator:
    """Tests for PayrollCalculator wiring."""

    def test_records_and_totals_agree(self):
        period = PayrollPeriod.for_month(2026, 1)
        records = build_attendance_records(period, 168, overtime_hours=4, absent_days=1)
        calculator = PayrollCalculator()

        from_records = calculator.calculate(monthly_profile(), records, period)
        from_totals = calculator.calculate(
            monthly_profile(), calculator.calculate_totals(records), period
        )
        assert from_records == from_totals
        assert from_records.total_absent_days == 1

    def test_custom_schedule(self):
        data = schedule_to_dict(PH_2026)
        data["pagibig"]["max_contribution"] = 200.0
        calculator = PayrollCalculator(schedule_from_dict(data))

        calc = calculator.calculate(
            monthly_profile(), AttendanceTotals(regular_hours=176), make_period()
        )
        assert calc.pagibig_contribution == 200.0
        assert calculator.schedule.pagibig.max_contribution == 200.0

    def test_to_dict_round_trip(self):
        calc = calculate_payroll(monthly_profile(), AttendanceTotals(regular_hours=176), make_period())
        data = calc.to_dict()

        assert data["netPay"] == 41231.67
        assert data["sssContribution"] == 1350.0
        assert type(calc).from_dict(data) == calc


class TestBuildAttendanceRecords:
    """Tests for spreading manual totals over daily records."""

    def test_one_record_per_working_day(self):
        period = PayrollPeriod.for_month(2026, 1)
        records = build_attendance_records(period, 176)

        assert period.working_days == 22
        assert len(records) == 22
        assert all(r.date.weekday() < 5 for r in records)
        assert all(r.status == AttendanceStatus.PRESENT for r in records)

    def test_totals_preserved(self):
        period = PayrollPeriod.for_month(2026, 1)
        records = build_attendance_records(period, 160, overtime_hours=10,
                                           undertime_hours=2, absent_days=2)
        totals = AttendanceTotals.from_records(records)

        assert totals.regular_hours == pytest.approx(160)
        assert totals.overtime_hours == pytest.approx(10)
        assert totals.undertime_hours == pytest.approx(2)
        assert totals.absent_days == 2

    def test_first_days_absent(self):
        period = PayrollPeriod.for_month(2026, 1)
        records = build_attendance_records(period, 160, absent_days=2)

        assert [r.status for r in records[:3]] == [
            AttendanceStatus.ABSENT, AttendanceStatus.ABSENT, AttendanceStatus.PRESENT
        ]
        assert records[0].regular_hours == 0.0
        assert records[2].regular_hours == 8.0

    def test_all_absent_drops_hours(self):
        period = PayrollPeriod.for_month(2026, 1)
        records = build_attendance_records(period, 40, absent_days=22)
        totals = AttendanceTotals.from_records(records)

        assert totals.absent_days == 22
        assert totals.regular_hours == 0.0

    def test_holidays_skipped(self):
        holidays = {date(2026, 1, 1), date(2026, 1, 2)}
        period = PayrollPeriod.for_month(2026, 1, holidays)
        records = build_attendance_records(period, 160, holidays=holidays)

        assert period.working_days == 20
        assert records[0].date == date(2026, 1, 5)


class TestAttendanceTotals:
    """Tests for AttendanceTotals.from_records()."""

    def test_counts_only_absent_status(self):
        records = [
            AttendanceRecord(date(2026, 1, 5), AttendanceStatus.PRESENT, regular_hours=8),
            AttendanceRecord(date(2026, 1, 6), AttendanceStatus.ABSENT),
            AttendanceRecord(date(2026, 1, 7), AttendanceStatus.HALF_DAY, regular_hours=4),
            AttendanceRecord(date(2026, 1, 8), AttendanceStatus.ON_LEAVE),
            AttendanceRecord(date(2026, 1, 9), AttendanceStatus.LATE, regular_hours=7.5,
                             undertime_hours=0.5),
        ]
        totals = AttendanceTotals.from_records(records)

        assert totals.regular_hours == 19.5
        assert totals.undertime_hours == 0.5
        assert totals.absent_days == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
