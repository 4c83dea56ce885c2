"""
PDF Writer Module

Generates one-page payslip PDFs using fpdf2.
Mirrors the payslip screen: header, employee block, earnings and
deductions tables, and a net pay line.
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple

from fpdf import FPDF

from domain.entities import Payslip
from infrastructure.logger import get_logger

logger = get_logger("PdfWriter")


FALLBACK_FONT = "Helvetica"


def format_amount(value: float, currency: str = "PHP") -> str:
    """Format an amount as e.g. "PHP 45,000.00"; negatives keep their sign."""
    sign = "-" if value < 0 else ""
    return f"{sign}{currency} {abs(value):,.2f}"


# ==============================================================================
# PayslipPdf Class (A4 Portrait)
# ==============================================================================
class PayslipPdf(FPDF):
    """
    Custom FPDF class for A4 portrait payslips, with optional TTF font.
    """

    _font_family: str = FALLBACK_FONT
    _font_loaded: bool = False

    def __init__(
        self,
        title: str = "",
        company_name: str = "",
        custom_font_path: Optional[str] = None
    ):
        super().__init__(orientation='P', unit='mm', format='A4')
        self.title_text = title
        self.company_name = company_name
        self._setup_font(custom_font_path)

    def _setup_font(self, custom_font_path: Optional[str] = None) -> None:
        """Load a custom TTF font if one is configured."""
        if not custom_font_path:
            return

        font_path = Path(custom_font_path)
        if not font_path.exists():
            logger.warning(f"Custom font path does not exist: {font_path}")
            return

        try:
            self.add_font("PayslipFont", "", str(font_path))
            self.add_font("PayslipFont", "B", str(font_path))
            self._font_family = "PayslipFont"
            self._font_loaded = True
            logger.info(f"Loaded custom font: {font_path.name}")
        except (OSError, RuntimeError) as e:
            logger.warning(f"Cannot load font {font_path}: {e}")
            self._font_family = FALLBACK_FONT
            self._font_loaded = False

    @property
    def font_family_name(self) -> str:
        return self._font_family

    def header(self) -> None:
        """Draw company name and centered title."""
        if self.company_name:
            self.set_font(self._font_family, 'B', 12)
            self.cell(0, 7, self.company_name, align='C', new_x='LMARGIN', new_y='NEXT')
        self.set_font(self._font_family, 'B', 16)
        self.cell(0, 10, self.title_text, align='C', new_x='LMARGIN', new_y='NEXT')
        self.ln(2)

    def footer(self) -> None:
        """Draw page footer."""
        self.set_y(-15)
        self.set_font(self._font_family, '', 8)
        self.set_text_color(120, 120, 120)
        self.cell(0, 10, 'This is a system-generated payslip.', align='C')


# ==============================================================================
# PdfWriter Class
# ==============================================================================
class PdfWriter:
    """
    Generates payslip PDFs.

    Layout:
    - Employee and period details in a two-column block
    - Earnings table, then deductions table
    - Highlighted net pay line
    """

    COLORS: Dict[str, Tuple[int, int, int]] = {
        'header': (68, 114, 196),
        'white': (255, 255, 255),
        'light': (217, 225, 242),
        'red': (255, 107, 107),
        'black': (0, 0, 0),
    }

    LABEL_WIDTH = 120
    AMOUNT_WIDTH = 70
    ROW_HEIGHT = 7

    def __init__(
        self,
        currency: str = "PHP",
        company_name: str = "",
        custom_font_path: Optional[str] = None
    ):
        self._currency = currency
        self._company_name = company_name
        self._custom_font_path = custom_font_path

    def create_payslip(self, payslip: Payslip, output_path: Path) -> Path:
        """
        Render a payslip to PDF.

        Args:
            payslip: The payslip to render
            output_path: Destination .pdf path

        Returns:
            Path to the created file
        """
        pdf = PayslipPdf(
            title=f"Payslip - {payslip.period.month}",
            company_name=self._company_name,
            custom_font_path=self._custom_font_path
        )
        pdf.set_auto_page_break(auto=True, margin=20)
        pdf.add_page()

        self._draw_employee_block(pdf, payslip)
        self._draw_table(pdf, "Earnings", self._earnings_rows(payslip),
                         ("Total Earnings", payslip.calculation.total_earnings))
        self._draw_table(pdf, "Deductions", self._deduction_rows(payslip),
                         ("Total Deductions", payslip.calculation.total_deductions))
        self._draw_net_pay(pdf, payslip.calculation.net_pay)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        pdf.output(str(output_path))
        logger.info(f"Payslip PDF saved: {output_path}")
        return output_path

    def _draw_employee_block(self, pdf: PayslipPdf, payslip: Payslip) -> None:
        calc = payslip.calculation
        left = [
            ("Employee", payslip.employee_name),
            ("Employee ID", payslip.employee_id),
            ("Department", payslip.department),
            ("Position", payslip.position),
        ]
        right = [
            ("Payslip No.", payslip.id),
            ("Period", f"{payslip.period.start_date:%b %d, %Y} - {payslip.period.end_date:%b %d, %Y}"),
            ("Working Days", str(payslip.period.working_days)),
            ("Hours (Reg/OT/UT)", f"{calc.total_regular_hours:g} / {calc.total_overtime_hours:g} / "
                                  f"{calc.total_undertime_hours:g}"),
        ]

        pdf.set_font(pdf.font_family_name, '', 9)
        for (l_label, l_value), (r_label, r_value) in zip(left, right):
            pdf.set_font(pdf.font_family_name, 'B', 9)
            pdf.cell(30, 6, f"{l_label}:")
            pdf.set_font(pdf.font_family_name, '', 9)
            pdf.cell(65, 6, l_value)
            pdf.set_font(pdf.font_family_name, 'B', 9)
            pdf.cell(35, 6, f"{r_label}:")
            pdf.set_font(pdf.font_family_name, '', 9)
            pdf.cell(0, 6, r_value, new_x='LMARGIN', new_y='NEXT')
        pdf.ln(4)

    def _earnings_rows(self, payslip: Payslip) -> List[Tuple[str, float]]:
        calc = payslip.calculation
        return [
            ("Basic Pay", calc.basic_pay),
            (f"Overtime Pay ({calc.total_overtime_hours:g} hrs)", calc.overtime_pay),
            ("Allowances", calc.allowances),
        ]

    def _deduction_rows(self, payslip: Payslip) -> List[Tuple[str, float]]:
        calc = payslip.calculation
        return [
            ("Withholding Tax", calc.withholding_tax),
            ("SSS Contribution", calc.sss_contribution),
            ("PhilHealth Contribution", calc.philhealth_contribution),
            ("Pag-IBIG Contribution", calc.pagibig_contribution),
            (f"Absences ({calc.total_absent_days} days)", calc.absent_deductions),
            (f"Undertime ({calc.total_undertime_hours:g} hrs)", calc.undertime_deductions),
            ("Loan Deduction", calc.loan_deductions),
        ]

    def _draw_table(
        self,
        pdf: PayslipPdf,
        title: str,
        rows: List[Tuple[str, float]],
        total: Tuple[str, float]
    ) -> None:
        """Draw a titled two-column table with a totals line."""
        pdf.set_font(pdf.font_family_name, 'B', 10)
        pdf.set_fill_color(*self.COLORS['header'])
        pdf.set_text_color(*self.COLORS['white'])
        pdf.cell(self.LABEL_WIDTH, self.ROW_HEIGHT, title, border=1, fill=True)
        pdf.cell(self.AMOUNT_WIDTH, self.ROW_HEIGHT, "Amount", border=1, fill=True,
                 align='R', new_x='LMARGIN', new_y='NEXT')

        pdf.set_text_color(*self.COLORS['black'])
        pdf.set_font(pdf.font_family_name, '', 9)
        for label, amount in rows:
            pdf.cell(self.LABEL_WIDTH, self.ROW_HEIGHT, label, border=1)
            pdf.cell(self.AMOUNT_WIDTH, self.ROW_HEIGHT, format_amount(amount, self._currency),
                     border=1, align='R', new_x='LMARGIN', new_y='NEXT')

        label, amount = total
        pdf.set_font(pdf.font_family_name, 'B', 9)
        pdf.set_fill_color(*self.COLORS['light'])
        pdf.cell(self.LABEL_WIDTH, self.ROW_HEIGHT, label, border=1, fill=True)
        pdf.cell(self.AMOUNT_WIDTH, self.ROW_HEIGHT, format_amount(amount, self._currency),
                 border=1, fill=True, align='R', new_x='LMARGIN', new_y='NEXT')
        pdf.ln(4)

    def _draw_net_pay(self, pdf: PayslipPdf, net_pay: float) -> None:
        color = self.COLORS['red'] if net_pay < 0 else self.COLORS['light']
        pdf.set_font(pdf.font_family_name, 'B', 12)
        pdf.set_fill_color(*color)
        pdf.cell(self.LABEL_WIDTH, 10, "NET PAY", border=1, fill=True)
        pdf.cell(self.AMOUNT_WIDTH, 10, format_amount(net_pay, self._currency),
                 border=1, fill=True, align='R', new_x='LMARGIN', new_y='NEXT')
