"""
Statutory Deductions Module

Evaluates government contribution and withholding tax tables.

The tables themselves live in config.statutory_tables; the functions here
only know how to read them. Inputs that are negative, missing or not
numeric are treated as zero income.
"""

from typing import List, Optional

from config.statutory_tables import (
    SSSTable, PhilHealthRule, PagIbigRule, TaxBracket, StatutorySchedule,
    get_schedule
)
from .money import round_money, as_amount

MONTHS_PER_YEAR = 12


def sss_contribution(monthly_base: float, table: SSSTable) -> float:
    """
    SSS employee share for a monthly salary.

    Args:
        monthly_base: Monthly-equivalent compensation
        table: SSS band table

    Returns:
        Contribution amount
    """
    salary = as_amount(monthly_base)
    for upper_bound, amount in table.bands:
        if salary < upper_bound:
            return amount
    if salary >= table.max_salary_threshold:
        return table.max_contribution
    # Gap between the last band and the threshold
    return table.default_contribution


def philhealth_contribution(monthly_base: float, rule: PhilHealthRule) -> float:
    """PhilHealth employee share: rate times the salary clamped to [min, max]."""
    salary = as_amount(monthly_base)
    base_salary = min(max(salary, rule.min_salary), rule.max_salary)
    return round_money(base_salary * rule.rate)


def pagibig_contribution(monthly_base: float, rule: PagIbigRule) -> float:
    """Pag-IBIG employee share: low rate up to the threshold, else capped high rate."""
    salary = as_amount(monthly_base)
    if salary <= rule.low_threshold:
        return round_money(salary * rule.low_rate)
    contribution = round_money(salary * rule.high_rate)
    return min(contribution, rule.max_contribution)


def annual_income_tax(annual_taxable_income: float, brackets: List[TaxBracket]) -> float:
    """
    Annual tax from the graduated bracket table.

    The applicable bracket is the last one whose lower bound the income
    exceeds; tax is its base tax plus the marginal rate on the excess.
    """
    income = as_amount(annual_taxable_income)
    applicable: Optional[TaxBracket] = None
    for bracket in brackets:
        if income > bracket.lower_bound:
            applicable = bracket
        else:
            break
    if applicable is None:
        return 0.0
    return applicable.base_tax + (income - applicable.lower_bound) * applicable.rate


def monthly_withholding_tax(
    monthly_gross_pay: float,
    monthly_deductions: float,
    brackets: List[TaxBracket]
) -> float:
    """
    Monthly withholding tax approximated from the annual table.

    Taxable income is (gross - statutory deductions), annualized, taxed,
    then divided back to a month and rounded to cents.
    """
    monthly_taxable = as_amount(monthly_gross_pay) - as_amount(monthly_deductions)
    annual_taxable = monthly_taxable * MONTHS_PER_YEAR
    annual_tax = annual_income_tax(annual_taxable, brackets)
    return round_money(annual_tax / MONTHS_PER_YEAR)


class StatutoryCalculator:
    """
    The four statutory calculators bound to one schedule.

    Provides:
    - SSS, PhilHealth and Pag-IBIG contributions from the monthly base
    - Monthly withholding tax from gross pay and statutory deductions
    """

    def __init__(self, schedule: Optional[StatutorySchedule] = None):
        self.schedule = schedule or get_schedule()

    def sss(self, monthly_base: float) -> float:
        return sss_contribution(monthly_base, self.schedule.sss)

    def philhealth(self, monthly_base: float) -> float:
        return philhealth_contribution(monthly_base, self.schedule.philhealth)

    def pagibig(self, monthly_base: float) -> float:
        return pagibig_contribution(monthly_base, self.schedule.pagibig)

    def withholding_tax(self, monthly_gross_pay: float, monthly_deductions: float) -> float:
        return monthly_withholding_tax(
            monthly_gross_pay, monthly_deductions, self.schedule.tax_brackets
        )
