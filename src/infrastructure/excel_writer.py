"""
Excel Writer Module

Generates the payroll register workbook: one row per payslip plus a totals row.
"""

from pathlib import Path
from typing import List, Optional, Tuple

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter

from domain.entities import Payslip, PayrollPeriod
from infrastructure.logger import get_logger

logger = get_logger("ExcelWriter")


class ExcelWriter:
    """
    Generates the payroll register.

    Output format:
    - Row 1: Column headers
    - Rows 2..n: One row per payslip
    - Last row: Column totals for hours and amounts

    Styling:
    - Blue header with white bold text
    - Red fill on negative net pay
    - Accounting number format on amount columns
    """

    COLORS = {
        'header': PatternFill(start_color='4472C4', end_color='4472C4', fill_type='solid'),
        'total': PatternFill(start_color='D9E1F2', end_color='D9E1F2', fill_type='solid'),
        'red': PatternFill(start_color='FF6B6B', end_color='FF6B6B', fill_type='solid'),
    }

    BORDER = Border(
        left=Side(style='thin'),
        right=Side(style='thin'),
        top=Side(style='thin'),
        bottom=Side(style='thin')
    )

    AMOUNT_FORMAT = '#,##0.00'
    HOURS_FORMAT = '0.00'

    # (header, attribute on Payslip/PayrollCalculation, kind)
    COLUMNS: List[Tuple[str, str, str]] = [
        ("Employee ID", "employee_id", "text"),
        ("Employee Name", "employee_name", "text"),
        ("Department", "department", "text"),
        ("Position", "position", "text"),
        ("Regular Hours", "total_regular_hours", "hours"),
        ("Overtime Hours", "total_overtime_hours", "hours"),
        ("Undertime Hours", "total_undertime_hours", "hours"),
        ("Absent Days", "total_absent_days", "count"),
        ("Basic Pay", "basic_pay", "amount"),
        ("Overtime Pay", "overtime_pay", "amount"),
        ("Allowances", "allowances", "amount"),
        ("Total Earnings", "total_earnings", "amount"),
        ("Withholding Tax", "withholding_tax", "amount"),
        ("SSS", "sss_contribution", "amount"),
        ("PhilHealth", "philhealth_contribution", "amount"),
        ("Pag-IBIG", "pagibig_contribution", "amount"),
        ("Absences", "absent_deductions", "amount"),
        ("Undertime", "undertime_deductions", "amount"),
        ("Loans", "loan_deductions", "amount"),
        ("Total Deductions", "total_deductions", "amount"),
        ("Gross Pay", "gross_pay", "amount"),
        ("Net Pay", "net_pay", "amount"),
    ]

    def __init__(self):
        self.wb: Optional[Workbook] = None

    def create_register(
        self,
        payslips: List[Payslip],
        period: PayrollPeriod,
        output_path: Path
    ) -> Path:
        """
        Create the payroll register workbook.

        Args:
            payslips: Payslips to list, already sorted
            period: Payroll period (used for the sheet title)
            output_path: Path to save the Excel file

        Returns:
            Path to the created file
        """
        self.wb = Workbook()
        ws = self.wb.active
        ws.title = f"Payroll {period.period_key}"

        self._write_sheet(ws, payslips)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.wb.save(output_path)
        logger.info(f"Payroll register saved: {output_path} ({len(payslips)} payslips)")
        return output_path

    def _write_sheet(self, ws, payslips: List[Payslip]) -> None:
        """Write header, payslip rows and totals row."""
        # Header row
        for col, (header, _, _) in enumerate(self.COLUMNS, start=1):
            cell = ws.cell(1, col, header)
            cell.font = Font(bold=True, color='FFFFFF')
            cell.fill = self.COLORS['header']
            cell.alignment = Alignment(horizontal='center', vertical='center', wrap_text=True)
            cell.border = self.BORDER

        # Data rows
        row = 2
        for payslip in payslips:
            for col, (_, attr, kind) in enumerate(self.COLUMNS, start=1):
                value = self._get_value(payslip, attr)
                cell = ws.cell(row, col, value)
                cell.border = self.BORDER
                self._apply_format(cell, kind)
            if payslip.calculation.net_pay < 0:
                ws.cell(row, len(self.COLUMNS)).fill = self.COLORS['red']
            row += 1

        # Totals row
        total_cell = ws.cell(row, 1, "TOTAL")
        total_cell.font = Font(bold=True)
        for col, (_, attr, kind) in enumerate(self.COLUMNS, start=1):
            cell = ws.cell(row, col)
            cell.fill = self.COLORS['total']
            cell.border = self.BORDER
            if kind == "text":
                continue
            total = sum(self._get_value(p, attr) for p in payslips)
            cell.value = round(total, 2)
            cell.font = Font(bold=True)
            self._apply_format(cell, kind)

        # Adjust column widths
        for col, (header, _, kind) in enumerate(self.COLUMNS, start=1):
            width = 24 if header == "Employee Name" else (14 if kind == "text" else 13)
            ws.column_dimensions[get_column_letter(col)].width = width
        ws.row_dimensions[1].height = 32
        ws.freeze_panes = "C2"

    @staticmethod
    def _get_value(payslip: Payslip, attr: str):
        if hasattr(payslip, attr):
            return getattr(payslip, attr)
        return getattr(payslip.calculation, attr)

    def _apply_format(self, cell, kind: str) -> None:
        if kind == "amount":
            cell.number_format = self.AMOUNT_FORMAT
            cell.alignment = Alignment(horizontal='right')
        elif kind == "hours":
            cell.number_format = self.HOURS_FORMAT
            cell.alignment = Alignment(horizontal='right')
        elif kind == "count":
            cell.alignment = Alignment(horizontal='center')
