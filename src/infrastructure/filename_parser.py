"""
Filename Parser Module

Parses attendance export filenames to extract the payroll year and month.
"""

import re
from typing import Tuple, Optional


class FilenameParser:
    """
    Parses attendance export filenames.

    Expected format: a year and month pair anywhere in the name,
    e.g. Attendance_2026_01.xlsx, attendance-2026-01.xlsx or DTR202601.xlsx
    """

    # 4-digit year, optional separator, 2-digit month
    PATTERN = re.compile(r'(?<!\d)(20\d{2})[_\-.]?(\d{2})(?!\d)')

    @classmethod
    def parse_period(cls, filename: str) -> Tuple[int, int]:
        """
        Parse year and month from an attendance export filename.

        Args:
            filename: The filename to parse (e.g. "Attendance_2026_01.xlsx")

        Returns:
            Tuple of (year, month)

        Raises:
            ValueError: If filename doesn't contain a valid year and month
        """
        match = cls.PATTERN.search(filename)
        if not match:
            raise ValueError(
                f"Invalid filename format: {filename}. Expected e.g. Attendance_YYYY_MM.xlsx"
            )

        year = int(match.group(1))
        month = int(match.group(2))

        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month: {month}")

        return year, month

    @classmethod
    def try_parse_period(cls, filename: str) -> Optional[Tuple[int, int]]:
        """
        Try to parse year and month from filename, returning None on failure.
        """
        try:
            return cls.parse_period(filename)
        except ValueError:
            return None


def format_filename(pattern: str, year: int, month: int, **extra) -> str:
    """Format filename pattern with {year}, {month} and extra placeholders."""
    return pattern.format(
        year=year,
        month=f"{month:02d}",
        **extra
    )
