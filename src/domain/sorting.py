"""
Sorting Utilities Module

Provides sorting functions for payroll register output.
"""

from typing import List
from domain.entities import Payslip


def get_name_key(payslip: Payslip) -> tuple:
    """
    Sort key by last name, then first name portion of the stored name.
    Returns tuple of (last_word, full_name) for stable sorting.
    """
    name = payslip.employee_name.strip()
    if not name:
        return ("", "")
    return (name.split()[-1].lower(), name.lower())


def sort_payslips(
    payslips: List[Payslip],
    sort_by: str = "name"
) -> List[Payslip]:
    """
    Sort payslips by specified criteria.

    Args:
        payslips: List of Payslip objects
        sort_by: Sorting method - "name", "department" or "net_pay"

    Returns:
        Sorted list (new list, does not modify original)
    """
    if sort_by == "net_pay":
        # Highest net pay first
        return sorted(payslips, key=lambda p: -p.calculation.net_pay)
    elif sort_by == "department":
        return sorted(
            payslips,
            key=lambda p: (p.department.lower(), get_name_key(p))
        )
    else:
        return sorted(payslips, key=get_name_key)
