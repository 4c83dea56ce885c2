"""
Payslip Generator

Command-line batch payroll: reads the employee roster and a monthly
attendance workbook, generates one payslip per eligible employee, and
writes the payroll register plus payslip PDFs.
"""

import argparse
import sys
from pathlib import Path

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

from application.report_service import PayrollReportService
from config.config_manager import ConfigManager
from domain.exceptions import PayrollError
from infrastructure.attendance_parser import AttendanceFormatError
from infrastructure.logger import get_logger

logger = get_logger("Main")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate monthly payslips from a roster and an attendance workbook.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  python3 main.py --roster staff.csv --attendance Attendance_2026_01.xlsx\n"
            "  python3 main.py --roster staff.csv --attendance dtr.xlsx --year 2026 --month 1 --no-pdf\n"
        ),
    )
    parser.add_argument("--roster", type=Path, help="Employee roster CSV (default: from config)")
    parser.add_argument("--attendance", type=Path, help="Attendance workbook (default: from config)")
    parser.add_argument("--year", type=int, help="Payroll year (default: from attendance filename)")
    parser.add_argument("--month", type=int, help="Payroll month 1-12 (default: from attendance filename)")
    parser.add_argument("--output-dir", type=Path, help="Output directory for register and PDFs")
    parser.add_argument("--store", type=Path, help="Payslip store JSON file (default: from config)")
    parser.add_argument("--config", type=Path, help="Configuration JSON file")
    parser.add_argument("--generated-by", type=str, help="Name recorded on generated payslips")
    parser.add_argument("--no-pdf", action="store_true", help="Skip payslip PDF generation")
    return parser


def main(argv=None) -> int:
    """Application entry point."""
    args = build_arg_parser().parse_args(argv)

    if (args.year is None) != (args.month is None):
        print("  ERROR: --year and --month must be given together", file=sys.stderr)
        return 2
    if args.month is not None and not 1 <= args.month <= 12:
        print(f"  ERROR: Invalid month: {args.month}", file=sys.stderr)
        return 2

    config_manager = ConfigManager(args.config)
    config = config_manager.load()

    roster_path = args.roster or (Path(config.paths.roster_csv) if config.paths.roster_csv else None)
    attendance_path = args.attendance or (
        Path(config.paths.last_attendance_file) if config.paths.last_attendance_file else None
    )
    if roster_path is None or attendance_path is None:
        print("  ERROR: --roster and --attendance are required (or set them in the config)",
              file=sys.stderr)
        return 2

    output_dir = args.output_dir or Path(config.output_settings.output_dir or ".")
    store_path = args.store or (
        Path(config.paths.payslip_store) if config.paths.payslip_store
        else output_dir / "payslips.json"
    )

    params = PayrollReportService.build_params_from_config(
        config, roster_path, attendance_path, output_dir, store_path=store_path
    )
    params.year = args.year
    params.month = args.month
    if args.generated_by:
        params.generated_by = args.generated_by
    if args.no_pdf:
        params.generate_pdf = False

    try:
        result = PayrollReportService().generate_report(params)
    except (PayrollError, AttendanceFormatError) as e:
        logger.error(e.message)
        return 1
    except ValueError as e:
        logger.error(str(e))
        return 1
    except PermissionError as e:
        logger.error(f"Cannot write output: {e}")
        return 1

    # Remember the last attendance file
    config.paths.last_attendance_file = str(attendance_path)
    config_manager.save()

    print(f"Payroll {result.period.month}: {result.run.generated_count} payslips generated, "
          f"total net pay {result.run.total_net_pay:,.2f}")
    print(f"  Register: {result.register_path}")
    if result.pdf_paths:
        print(f"  PDFs:     {len(result.pdf_paths)} written to {output_dir}")
    for employee_id, reason in result.skipped.items():
        print(f"  Skipped {employee_id}: {reason}")
    for employee_id, error in result.pdf_failures.items():
        print(f"  PDF failed {employee_id}: {error}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
