"""
Unit tests for PdfWriter and payslip amount formatting.
"""

import pytest
import tempfile
from datetime import datetime
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.entities import (
    Allowances, AttendanceTotals, CompensationProfile, LoanInfo, Payslip,
    PayrollPeriod, PayType
)
from domain.payroll_calculator import calculate_payroll
from infrastructure.pdf_writer import PdfWriter, PayslipPdf, format_amount, FALLBACK_FONT


def make_payslip(loan: float = 2500) -> Payslip:
    period = PayrollPeriod.for_month(2026, 1)
    calc = calculate_payroll(
        CompensationProfile(
            pay_type=PayType.MONTHLY,
            monthly_salary=45000,
            allowances=Allowances(transportation=5000),
            loan=LoanInfo(amount=30000, monthly_deduction=loan)
        ),
        AttendanceTotals(regular_hours=176),
        period
    )
    return Payslip(
        id="PS-2026-01-ABCD1234",
        employee_id="EMP-001",
        employee_name="Maria Santos",
        department="Engineering",
        position="Developer",
        period=period,
        calculation=calc,
        generated_at=datetime(2026, 2, 1, 9, 0),
        generated_by="HR Department"
    )


class TestFormatAmount:
    """Tests for format_amount()."""

    def test_thousands_separator(self):
        assert format_amount(45000) == "PHP 45,000.00"

    def test_cents(self):
        assert format_amount(3693.33) == "PHP 3,693.33"

    def test_negative(self):
        assert format_amount(-430) == "-PHP 430.00"

    def test_custom_currency(self):
        assert format_amount(1234.5, "USD") == "USD 1,234.50"


class TestPayslipPdf:
    """Tests for PayslipPdf font setup."""

    def test_default_font(self):
        pdf = PayslipPdf(title="Payslip")
        assert pdf.font_family_name == FALLBACK_FONT

    def test_missing_custom_font_falls_back(self):
        pdf = PayslipPdf(title="Payslip", custom_font_path="/nonexistent/font.ttf")
        assert pdf.font_family_name == FALLBACK_FONT


class TestPdfWriter:
    """Tests for PdfWriter.create_payslip()."""

    def test_creates_pdf(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "out" / "Payslip_EMP-001_2026_01.pdf"

            result = PdfWriter(company_name="Acme Corp").create_payslip(make_payslip(), path)

            assert result == path
            assert path.exists()
            assert path.read_bytes().startswith(b"%PDF")

    def test_negative_net_pay(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "negative.pdf"
            payslip = make_payslip(loan=60000)

            PdfWriter().create_payslip(payslip, path)

            assert payslip.calculation.net_pay < 0
            assert path.exists()

    def test_deduction_rows(self):
        rows = PdfWriter()._deduction_rows(make_payslip())
        labels = [label for label, _ in rows]

        assert labels[:4] == [
            "Withholding Tax", "SSS Contribution",
            "PhilHealth Contribution", "Pag-IBIG Contribution"
        ]
        assert ("Loan Deduction", 2500.0) in rows
        assert "Other Deductions" not in labels

    def test_deduction_rows_sum_to_total_with_absences(self):
        period = PayrollPeriod.for_month(2026, 1)
        calc = calculate_payroll(
            CompensationProfile(pay_type=PayType.DAILY, daily_rate=1000),
            AttendanceTotals(regular_hours=8 * 20 - 4, undertime_hours=4, absent_days=2),
            period
        )
        payslip = Payslip(
            id="PS-2026-01-DAILY001",
            employee_id="EMP-002",
            employee_name="Jose Reyes",
            department="Operations",
            position="Technician",
            period=period,
            calculation=calc,
            generated_at=datetime(2026, 2, 1, 9, 0),
            generated_by="HR Department"
        )

        rows = PdfWriter()._deduction_rows(payslip)

        assert calc.absent_deductions == 2000.0
        assert calc.undertime_deductions == 500.0
        assert sum(amount for _, amount in rows) == pytest.approx(calc.total_deductions)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
