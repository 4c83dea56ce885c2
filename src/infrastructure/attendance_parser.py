"""
Attendance Parser Module

Handles parsing daily attendance sheets exported by the timekeeping system.
Produces AttendanceRecord entities grouped by employee.
"""

import re
from datetime import datetime, time, date
from pathlib import Path
from typing import List, Dict, Optional
from dataclasses import dataclass

from openpyxl import load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from domain.entities import AttendanceRecord, AttendanceStatus
from infrastructure.logger import get_logger

logger = get_logger("AttendanceParser")


# ==============================================================================
# Custom Exceptions
# ==============================================================================
class AttendanceFormatError(Exception):
    """Raised when the attendance workbook format is unrecognized or invalid."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# ==============================================================================
# Data Classes
# ==============================================================================
@dataclass
class ColumnLayout:
    """Detected column indexes (1-based) of a worksheet."""
    header_row: int
    employee_col: int
    date_col: int
    status_col: Optional[int] = None
    regular_col: Optional[int] = None
    overtime_col: Optional[int] = None
    undertime_col: Optional[int] = None
    check_in_col: Optional[int] = None
    check_out_col: Optional[int] = None


# ==============================================================================
# AttendanceParser Class
# ==============================================================================
class AttendanceParser:
    """
    Parses attendance workbooks into daily records.

    Handles:
    - Header detection within the first rows of every worksheet
    - Status aliases ("Present", "AWOL", "Half Day", ...)
    - Hour cells given as numbers, "7.5" strings or "7:30" durations
    """

    # Maximum rows to search for header
    MAX_HEADER_SEARCH_ROWS = 15

    HEADER_KEYWORDS = {
        'employee_col': ['employee id', 'employee no', 'emp id', 'employee code'],
        'date_col': ['date'],
        'status_col': ['status'],
        'regular_col': ['regular'],
        'overtime_col': ['overtime', 'ot hours'],
        'undertime_col': ['undertime', 'ut hours'],
        'check_in_col': ['check in', 'check-in', 'time in'],
        'check_out_col': ['check out', 'check-out', 'time out'],
    }

    STATUS_MAPPING = {
        'present': AttendanceStatus.PRESENT,
        'p': AttendanceStatus.PRESENT,
        'absent': AttendanceStatus.ABSENT,
        'a': AttendanceStatus.ABSENT,
        'awol': AttendanceStatus.ABSENT,
        'late': AttendanceStatus.LATE,
        'half day': AttendanceStatus.HALF_DAY,
        'half_day': AttendanceStatus.HALF_DAY,
        'halfday': AttendanceStatus.HALF_DAY,
        'on leave': AttendanceStatus.ON_LEAVE,
        'on_leave': AttendanceStatus.ON_LEAVE,
        'leave': AttendanceStatus.ON_LEAVE,
    }

    # "7:30" style durations
    DURATION_PATTERN = re.compile(r'^(\d+):(\d{2})$')

    def __init__(self):
        self._records: Dict[str, List[AttendanceRecord]] = {}

    def parse_file(self, file_path: Path) -> Dict[str, List[AttendanceRecord]]:
        """
        Parse an attendance workbook.

        Args:
            file_path: Path to the .xlsx file

        Returns:
            Records grouped by employee id, in sheet order

        Raises:
            AttendanceFormatError: If a worksheet has no recognizable header
        """
        self._records = {}

        if not file_path.exists():
            logger.warning(f"Attendance file not found: {file_path}")
            return {}

        logger.info(f"Parsing attendance workbook: {file_path.name}")

        wb = load_workbook(file_path, data_only=True)
        try:
            for ws in wb.worksheets:
                if ws.max_row <= 1 and ws.max_column <= 1 and ws.cell(1, 1).value is None:
                    continue  # blank sheet
                for employee_id, record in self._parse_worksheet(ws):
                    self._records.setdefault(employee_id, []).append(record)
        finally:
            wb.close()

        total = sum(len(r) for r in self._records.values())
        logger.info(f"Parsed {total} records for {len(self._records)} employees")
        return self._records

    def _detect_layout(self, ws: Worksheet) -> ColumnLayout:
        """
        Find the header row and column indexes.

        Raises:
            AttendanceFormatError: If employee id or date columns are missing
        """
        max_search_rows = min(self.MAX_HEADER_SEARCH_ROWS, ws.max_row)
        max_search_cols = min(20, ws.max_column)

        for row_idx in range(1, max_search_rows + 1):
            found: Dict[str, int] = {}
            for col_idx in range(1, max_search_cols + 1):
                cell_value = str(ws.cell(row_idx, col_idx).value or '').strip().lower()
                if not cell_value:
                    continue
                for attr, keywords in self.HEADER_KEYWORDS.items():
                    if attr not in found and any(k in cell_value for k in keywords):
                        found[attr] = col_idx
                        break
            if 'employee_col' in found and 'date_col' in found:
                return ColumnLayout(header_row=row_idx, **found)

        raise AttendanceFormatError(
            f"Cannot recognize worksheet '{ws.title}'. "
            f"No row within the first {self.MAX_HEADER_SEARCH_ROWS} rows has both "
            f"'Employee ID' and 'Date' columns."
        )

    def _parse_worksheet(self, ws: Worksheet):
        """Yield (employee_id, AttendanceRecord) for every valid data row."""
        layout = self._detect_layout(ws)
        logger.debug(
            f"Worksheet '{ws.title}': header row={layout.header_row}, "
            f"employee col={layout.employee_col}, date col={layout.date_col}"
        )

        skipped_rows = 0
        for row_idx in range(layout.header_row + 1, ws.max_row + 1):
            try:
                employee_id = str(ws.cell(row_idx, layout.employee_col).value or '').strip()
                if not employee_id:
                    continue

                # Skip non-date rows (summary rows at bottom)
                record_date = self._extract_date(ws.cell(row_idx, layout.date_col).value)
                if not record_date:
                    continue

                status = self._extract_status(self._cell(ws, row_idx, layout.status_col))
                if status == AttendanceStatus.ABSENT:
                    regular = overtime = undertime = 0.0
                else:
                    regular = self._extract_hours(self._cell(ws, row_idx, layout.regular_col))
                    overtime = self._extract_hours(self._cell(ws, row_idx, layout.overtime_col))
                    undertime = self._extract_hours(self._cell(ws, row_idx, layout.undertime_col))

                yield employee_id, AttendanceRecord(
                    date=record_date,
                    status=status,
                    regular_hours=regular,
                    overtime_hours=overtime,
                    undertime_hours=undertime,
                    check_in=self._extract_time(self._cell(ws, row_idx, layout.check_in_col)),
                    check_out=self._extract_time(self._cell(ws, row_idx, layout.check_out_col))
                )

            except ValueError as e:
                skipped_rows += 1
                logger.warning(f"Worksheet '{ws.title}' row {row_idx} skipped: {e}")
                continue

        if skipped_rows > 0:
            logger.info(f"Worksheet '{ws.title}': skipped {skipped_rows} invalid rows")

    @staticmethod
    def _cell(ws: Worksheet, row_idx: int, col_idx: Optional[int]):
        if col_idx is None:
            return None
        return ws.cell(row_idx, col_idx).value

    def _extract_status(self, value) -> AttendanceStatus:
        """Map a status cell to AttendanceStatus; blank or unknown means present."""
        if value is None:
            return AttendanceStatus.PRESENT
        key = str(value).strip().lower()
        if not key:
            return AttendanceStatus.PRESENT
        status = self.STATUS_MAPPING.get(key)
        if status is None:
            logger.debug(f"Unknown attendance status '{value}', treated as present")
            return AttendanceStatus.PRESENT
        return status

    def _extract_hours(self, value) -> float:
        """
        Extract an hour amount.

        Raises:
            ValueError: If the value is not a non-negative hour amount
        """
        if value is None or value == '':
            return 0.0
        if isinstance(value, bool):
            raise ValueError(f"invalid hours value {value!r}")
        if isinstance(value, (int, float)):
            hours = float(value)
        else:
            str_val = str(value).strip()
            match = self.DURATION_PATTERN.match(str_val)
            if match:
                hours = int(match.group(1)) + int(match.group(2)) / 60
            else:
                hours = float(str_val)  # raises ValueError on garbage
        if hours < 0:
            raise ValueError(f"negative hours value {value!r}")
        return hours

    def _extract_date(self, value) -> Optional[date]:
        """Extract date from a cell value."""
        if value is None:
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value

        str_val = str(value).strip()
        for fmt in ['%Y-%m-%d', '%Y/%m/%d', '%m/%d/%Y', '%d/%m/%Y']:
            try:
                return datetime.strptime(str_val, fmt).date()
            except ValueError:
                continue
        return None

    def _extract_time(self, value) -> Optional[time]:
        """Extract time from a cell value."""
        if value is None:
            return None
        if isinstance(value, datetime):
            return value.time()
        if isinstance(value, time):
            return value

        str_val = str(value).strip()
        if not str_val:
            return None
        for fmt in ['%H:%M:%S', '%H:%M', '%I:%M %p', '%I:%M:%S %p']:
            try:
                return datetime.strptime(str_val, fmt).time()
            except ValueError:
                continue

        logger.debug(f"Cannot parse time value: '{value}'")
        return None

    def get_employee_ids(self) -> List[str]:
        """Get list of employee ids found in the file."""
        return list(self._records)

    def get_records_for_employee(self, employee_id: str) -> List[AttendanceRecord]:
        """Get all records for a specific employee."""
        return self._records.get(employee_id, [])

    def get_records_by_month(
        self,
        year: int,
        month: int
    ) -> Dict[str, List[AttendanceRecord]]:
        """
        Get records grouped by employee for a specific month.

        Args:
            year: Year to filter
            month: Month to filter (1-12)

        Returns:
            Dictionary mapping employee ids to their records
        """
        result: Dict[str, List[AttendanceRecord]] = {}

        for employee_id, records in self._records.items():
            for record in records:
                if record.date.year == year and record.date.month == month:
                    result.setdefault(employee_id, []).append(record)

        return result
