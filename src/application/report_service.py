"""
Report Service Module

Application layer service that orchestrates a monthly payroll run:
roster and attendance import, payslip generation, and the register and
PDF exports.
"""

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Set

from fpdf.errors import FPDFException

from config.config_manager import AppConfig
from config.statutory_tables import StatutorySchedule
from domain.employee_roster import EmployeeRoster
from domain.entities import Payslip, PayrollPeriod
from domain.sorting import sort_payslips
from application.payslip_service import PayslipService, PayrollRunParams, PayrollRunResult
from infrastructure.logger import get_logger

logger = get_logger("ReportService")


@dataclass
class ReportGenerationParams:
    """
    Parameters for a payroll run and its exports.

    This dataclass encapsulates all parameters needed for generation,
    decoupling the service from AppConfig.
    """
    roster_path: Path
    attendance_path: Path
    output_dir: Path

    # Period; inferred from the attendance filename when omitted
    year: Optional[int] = None
    month: Optional[int] = None
    holidays: Set[date] = field(default_factory=set)

    # Payroll
    schedule: Optional[StatutorySchedule] = None
    store_path: Optional[Path] = None
    generated_by: str = "HR Department"
    require_finalized_attendance: bool = True

    # Output settings
    sort_by: str = "name"
    register_filename_pattern: str = "Payroll_Register_{year}_{month}.xlsx"
    generate_pdf: bool = True
    payslip_filename_pattern: str = "Payslip_{employee_id}_{year}_{month}.pdf"
    currency_code: str = "PHP"
    company_name: str = ""
    custom_font_path: Optional[str] = None


@dataclass
class ReportResult:
    """Result of a payroll run and its exports."""
    period: PayrollPeriod
    run: PayrollRunResult
    register_path: Path
    pdf_paths: List[Path] = field(default_factory=list)
    pdf_failures: Dict[str, str] = field(default_factory=dict)  # employee id -> error

    @property
    def payslips(self) -> List[Payslip]:
        return self.run.payslips

    @property
    def skipped(self) -> Dict[str, str]:
        return self.run.skipped


class PayrollReportService:
    """
    Application service for a monthly payroll run.

    This service:
    - Loads the roster and the attendance workbook
    - Generates payslips through PayslipService
    - Writes the payroll register and one PDF per payslip
    - Provides logging for key operations
    """

    def generate_report(self, params: ReportGenerationParams) -> ReportResult:
        """
        Run payroll for one month and export the results.

        Args:
            params: ReportGenerationParams containing all necessary configuration

        Returns:
            ReportResult with generated payslips, skipped employees and file paths

        Raises:
            ValueError: If the period cannot be determined or the roster is empty
            AttendanceFormatError: If the attendance workbook is unreadable
            AttendanceNotFinalizedError: If attendance is required to be finalized
            PermissionError: If files cannot be written
        """
        from infrastructure.attendance_parser import AttendanceParser
        from infrastructure.excel_writer import ExcelWriter
        from infrastructure.filename_parser import FilenameParser, format_filename
        from infrastructure.payslip_store import InMemoryPayslipStore, JsonPayslipStore

        year, month = params.year, params.month
        if year is None or month is None:
            year, month = FilenameParser.parse_period(params.attendance_path.name)
        period = PayrollPeriod.for_month(year, month, params.holidays)

        logger.info(
            f"Payroll period {period.month}: {period.working_days} working days "
            f"({len(params.holidays)} holidays configured)"
        )

        # Load roster
        roster = EmployeeRoster()
        employees = roster.load_from_csv(params.roster_path)
        if not employees:
            raise ValueError(f"No employees found in roster {params.roster_path}")

        # Parse attendance
        parser = AttendanceParser()
        parser.parse_file(params.attendance_path)
        attendance = parser.get_records_by_month(year, month)
        if not attendance:
            logger.warning(f"No attendance records for {period.month} in {params.attendance_path.name}")

        # Generate payslips
        store = JsonPayslipStore(params.store_path) if params.store_path else InMemoryPayslipStore()
        service = PayslipService(
            store=store,
            schedule=params.schedule,
            generated_by=params.generated_by,
            require_finalized_attendance=params.require_finalized_attendance
        )
        run = service.run_payroll(PayrollRunParams(
            period=period,
            employees=employees,
            attendance=attendance
        ))

        payslips = sort_payslips(run.payslips, params.sort_by)

        # Generate Excel register
        register_path = params.output_dir / format_filename(
            params.register_filename_pattern, year, month
        )
        logger.info(f"Writing payroll register: {register_path}")
        ExcelWriter().create_register(payslips, period, register_path)

        result = ReportResult(period=period, run=run, register_path=register_path)

        # Generate PDFs if enabled
        if params.generate_pdf:
            self._generate_pdf_payslips(params, payslips, year, month, result)

        return result

    def _generate_pdf_payslips(
        self,
        params: ReportGenerationParams,
        payslips: List[Payslip],
        year: int,
        month: int,
        result: ReportResult
    ) -> None:
        """Write one PDF per payslip; a failed PDF does not stop the others."""
        from infrastructure.filename_parser import format_filename
        from infrastructure.pdf_writer import PdfWriter

        pdf_writer = PdfWriter(
            currency=params.currency_code,
            company_name=params.company_name,
            custom_font_path=params.custom_font_path
        )

        for payslip in payslips:
            pdf_path = params.output_dir / format_filename(
                params.payslip_filename_pattern, year, month,
                employee_id=payslip.employee_id
            )
            try:
                result.pdf_paths.append(pdf_writer.create_payslip(payslip, pdf_path))
            except (OSError, FPDFException) as e:
                result.pdf_failures[payslip.employee_id] = str(e)
                logger.error(f"PDF generation failed for {payslip.employee_id}: {e}")

    @staticmethod
    def build_params_from_config(
        config: AppConfig,
        roster_path: Path,
        attendance_path: Path,
        output_dir: Path,
        store_path: Optional[Path] = None
    ) -> ReportGenerationParams:
        """
        Build ReportGenerationParams from AppConfig.

        Args:
            config: Application configuration
            roster_path: Path to the roster CSV
            attendance_path: Path to the attendance workbook
            output_dir: Directory for the register and PDFs
            store_path: Payslip store JSON file (None = in-memory)

        Returns:
            ReportGenerationParams ready for generate_report()
        """
        return ReportGenerationParams(
            roster_path=roster_path,
            attendance_path=attendance_path,
            output_dir=output_dir,
            holidays=parse_holidays(config.holidays.custom_dates),
            schedule=config.statutory,
            store_path=store_path,
            generated_by=config.payroll.generated_by,
            require_finalized_attendance=config.payroll.require_finalized_attendance,
            sort_by=config.output_settings.sort_by,
            register_filename_pattern=config.output_settings.register_filename_pattern,
            generate_pdf=config.output_settings.generate_pdf,
            payslip_filename_pattern=config.output_settings.payslip_filename_pattern,
            currency_code=config.output_settings.currency_code,
            company_name=config.output_settings.company_name,
            custom_font_path=config.paths.custom_font_path or None
        )


def parse_holidays(date_strings: List[str]) -> Set[date]:
    """Parse YYYY-MM-DD holiday strings; malformed entries are logged and ignored."""
    holidays: Set[date] = set()
    for date_str in date_strings:
        try:
            holidays.add(date.fromisoformat(str(date_str).strip()))
        except ValueError:
            logger.warning(f"Ignoring malformed holiday date: {date_str!r}")
    return holidays
