"""
Employee Roster Module

Handles loading employees and their compensation profiles from CSV files.
"""

import csv
from pathlib import Path
from typing import Dict, List, Optional

from .entities import (
    Allowances, CompensationProfile, Employee, EmployeeStatus, LoanInfo, PayType
)
from infrastructure.logger import get_logger

logger = get_logger("EmployeeRoster")


class EmployeeRoster:
    """
    Loads the payroll roster from a CSV file.

    The CSV should have columns: Employee ID, First Name, Last Name,
    Department, Position, Status, Pay Type, Monthly Salary, Daily Rate,
    Hourly Rate, Transportation, Meal, Communication, Other, Loan Amount,
    Loan Monthly Deduction. Header matching is case-insensitive.
    """

    PAY_TYPE_MAPPING = {
        "monthly": PayType.MONTHLY,
        "daily": PayType.DAILY,
        "hourly": PayType.HOURLY,
    }

    STATUS_MAPPING = {
        "active": EmployeeStatus.ACTIVE,
        "inactive": EmployeeStatus.INACTIVE,
        "on_leave": EmployeeStatus.ON_LEAVE,
        "on leave": EmployeeStatus.ON_LEAVE,
    }

    def __init__(self):
        self._employees: List[Employee] = []

    def load_from_csv(self, csv_path: Path) -> List[Employee]:
        """
        Load employees from CSV file.

        Args:
            csv_path: Path to the CSV file

        Returns:
            List of employees in file order
        """
        self._employees = []

        if not csv_path.exists():
            logger.warning(f"Roster file not found: {csv_path}")
            return []

        with open(csv_path, 'r', encoding='utf-8-sig') as f:
            reader = csv.DictReader(f)
            for line_no, row in enumerate(reader, start=2):
                normalized = {
                    (key or '').strip().lower(): (value or '').strip()
                    for key, value in row.items()
                }
                employee = self._parse_row(normalized, line_no)
                if employee:
                    self._employees.append(employee)

        logger.info(f"Loaded {len(self._employees)} employees from {csv_path.name}")
        return self._employees

    def _parse_row(self, row: Dict[str, str], line_no: int) -> Optional[Employee]:
        """Build an Employee from a normalized CSV row, or None to skip it."""
        employee_code = row.get('employee id', '')
        if not employee_code:
            return None

        pay_type_str = row.get('pay type', 'monthly').lower()
        pay_type = self.PAY_TYPE_MAPPING.get(pay_type_str)
        if pay_type is None:
            logger.warning(
                f"Line {line_no}: unknown pay type '{pay_type_str}' for {employee_code}, skipped"
            )
            return None

        status_str = (row.get('status') or 'active').lower()
        status = self.STATUS_MAPPING.get(status_str)
        if status is None:
            logger.warning(
                f"Line {line_no}: unknown status '{status_str}' for {employee_code}, treated as inactive"
            )
            status = EmployeeStatus.INACTIVE

        loan = None
        loan_deduction = _to_float(row.get('loan monthly deduction'))
        if loan_deduction:
            loan = LoanInfo(
                amount=_to_float(row.get('loan amount')) or 0.0,
                monthly_deduction=loan_deduction
            )

        compensation = CompensationProfile(
            pay_type=pay_type,
            monthly_salary=_to_float(row.get('monthly salary')),
            daily_rate=_to_float(row.get('daily rate')),
            hourly_rate=_to_float(row.get('hourly rate')),
            allowances=Allowances(
                transportation=_to_float(row.get('transportation')) or 0.0,
                meal=_to_float(row.get('meal')) or 0.0,
                communication=_to_float(row.get('communication')) or 0.0,
                other=_to_float(row.get('other')) or 0.0
            ),
            loan=loan
        )

        return Employee(
            id=employee_code,
            employee_code=employee_code,
            first_name=row.get('first name', ''),
            last_name=row.get('last name', ''),
            department=row.get('department', ''),
            position=row.get('position', ''),
            status=status,
            compensation=compensation
        )

    @property
    def all_employees(self) -> List[Employee]:
        """Get all loaded employees."""
        return self._employees

    @property
    def active_employees(self) -> List[Employee]:
        """Get active employees only."""
        return [e for e in self._employees if e.is_active]

    @property
    def departments(self) -> List[str]:
        """Distinct departments in first-seen order."""
        seen = []
        for employee in self._employees:
            if employee.department and employee.department not in seen:
                seen.append(employee.department)
        return seen

    def get_employee(self, employee_id: str) -> Optional[Employee]:
        """Find employee by id or employee code."""
        for employee in self._employees:
            if employee.id == employee_id or employee.employee_code == employee_id:
                return employee
        return None


def _to_float(value: Optional[str]) -> Optional[float]:
    """Parse a CSV amount like '45,000.00'; blank or invalid gives None."""
    if not value:
        return None
    try:
        return float(value.replace(',', ''))
    except ValueError:
        return None
