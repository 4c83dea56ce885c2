"""
Rate Resolver Module

Derives hourly, daily and monthly-equivalent rates from a compensation profile.
"""

from .entities import CompensationProfile, PayRates, PayrollPeriod, PayType
from .money import as_amount

STANDARD_HOURS_PER_DAY = 8


def resolve_rates(profile: CompensationProfile, period: PayrollPeriod) -> PayRates:
    """
    Resolve the three rates for an employee in a period.

    The rate field matching the pay type is authoritative; the other two
    rates are derived from it using an 8-hour day and the period's working
    days. A missing or zero rate yields all-zero rates.

    Args:
        profile: Compensation profile of the employee
        period: Payroll period (working_days must be >= 1)

    Returns:
        PayRates with hourly_rate, daily_rate and monthly_base
    """
    working_days = period.working_days

    if profile.pay_type == PayType.MONTHLY:
        monthly_base = as_amount(profile.monthly_salary)
        if monthly_base:
            daily_rate = monthly_base / working_days
            return PayRates(
                hourly_rate=daily_rate / STANDARD_HOURS_PER_DAY,
                daily_rate=daily_rate,
                monthly_base=monthly_base
            )

    elif profile.pay_type == PayType.DAILY:
        daily_rate = as_amount(profile.daily_rate)
        if daily_rate:
            return PayRates(
                hourly_rate=daily_rate / STANDARD_HOURS_PER_DAY,
                daily_rate=daily_rate,
                monthly_base=daily_rate * working_days
            )

    elif profile.pay_type == PayType.HOURLY:
        hourly_rate = as_amount(profile.hourly_rate)
        if hourly_rate:
            daily_rate = hourly_rate * STANDARD_HOURS_PER_DAY
            return PayRates(
                hourly_rate=hourly_rate,
                daily_rate=daily_rate,
                monthly_base=daily_rate * working_days
            )

    return PayRates()
