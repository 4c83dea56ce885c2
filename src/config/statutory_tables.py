"""
Statutory Tables Module

Versioned government contribution and tax schedules.

Schedules are plain data: updating them for a new fiscal year means adding
a schedule (or loading one from JSON), never touching calculation code.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple


@dataclass
class SSSTable:
    """
    Social Security System employee-share table.

    Attributes:
        bands: Ordered (upper_bound_exclusive, contribution) pairs, first match wins
        max_salary_threshold: Salary at or above which max_contribution applies
        max_contribution: Contribution for the top band
        default_contribution: Amount for salaries between the last band and the threshold
    """
    bands: List[Tuple[float, float]] = field(default_factory=list)
    max_salary_threshold: float = 30000.0
    max_contribution: float = 1350.0
    default_contribution: float = 900.0


@dataclass
class PhilHealthRule:
    """PhilHealth employee share: rate applied to a clamped salary."""
    rate: float = 0.025
    min_salary: float = 10000.0
    max_salary: float = 100000.0


@dataclass
class PagIbigRule:
    """Pag-IBIG employee share: two-tier rate with a capped upper tier."""
    low_threshold: float = 1500.0
    low_rate: float = 0.01
    high_rate: float = 0.02
    max_contribution: float = 100.0


@dataclass
class TaxBracket:
    """
    One bracket of the annual graduated income tax.

    Attributes:
        lower_bound: Income above this amount falls in the bracket (exclusive)
        rate: Marginal rate on the excess over lower_bound
        base_tax: Cumulative tax of all lower brackets
    """
    lower_bound: float
    rate: float
    base_tax: float


@dataclass
class StatutorySchedule:
    """A complete set of statutory tables effective for one year."""
    version: str
    effective_year: int
    sss: SSSTable = field(default_factory=SSSTable)
    philhealth: PhilHealthRule = field(default_factory=PhilHealthRule)
    pagibig: PagIbigRule = field(default_factory=PagIbigRule)
    tax_brackets: List[TaxBracket] = field(default_factory=list)


# ==============================================================================
# Philippine schedule, 2026
# ==============================================================================
_SSS_BANDS_2026: List[Tuple[float, float]] = [
    (4250.0, 180.0),
    (4750.0, 202.50),
    (5250.0, 225.0),
    (5750.0, 247.50),
    (6250.0, 270.0),
    (6750.0, 292.50),
    (7250.0, 315.0),
    (7750.0, 337.50),
    (8250.0, 360.0),
    (8750.0, 382.50),
    (9250.0, 405.0),
    (9750.0, 427.50),
    (10250.0, 450.0),
    (10750.0, 472.50),
    (11250.0, 495.0),
    (11750.0, 517.50),
    (12250.0, 540.0),
    (12750.0, 562.50),
    (13250.0, 585.0),
    (13750.0, 607.50),
    (14250.0, 630.0),
    (14750.0, 652.50),
    (15250.0, 675.0),
    (15750.0, 697.50),
    (16250.0, 720.0),
    (16750.0, 742.50),
    (17250.0, 765.0),
    (17750.0, 787.50),
    (18250.0, 810.0),
    (18750.0, 832.50),
    (19250.0, 855.0),
    (19750.0, 877.50),
]

# Cumulative base taxes are the published constants; keep them verbatim.
_TAX_BRACKETS_2026: List[TaxBracket] = [
    TaxBracket(lower_bound=0.0, rate=0.0, base_tax=0.0),
    TaxBracket(lower_bound=250000.0, rate=0.15, base_tax=0.0),
    TaxBracket(lower_bound=400000.0, rate=0.20, base_tax=22500.0),
    TaxBracket(lower_bound=800000.0, rate=0.25, base_tax=102500.0),
    TaxBracket(lower_bound=2000000.0, rate=0.30, base_tax=402500.0),
    TaxBracket(lower_bound=8000000.0, rate=0.35, base_tax=2202500.0),
]

PH_2026 = StatutorySchedule(
    version="PH-2026",
    effective_year=2026,
    sss=SSSTable(
        bands=_SSS_BANDS_2026,
        max_salary_threshold=30000.0,
        max_contribution=1350.0,
        default_contribution=900.0,
    ),
    philhealth=PhilHealthRule(rate=0.025, min_salary=10000.0, max_salary=100000.0),
    pagibig=PagIbigRule(
        low_threshold=1500.0,
        low_rate=0.01,
        high_rate=0.02,
        max_contribution=100.0,
    ),
    tax_brackets=_TAX_BRACKETS_2026,
)

DEFAULT_SCHEDULE_VERSION = PH_2026.version

BUILTIN_SCHEDULES: Dict[str, StatutorySchedule] = {
    PH_2026.version: PH_2026,
}


def get_schedule(version: str = DEFAULT_SCHEDULE_VERSION) -> StatutorySchedule:
    """
    Look up a built-in schedule by version label.

    Raises:
        KeyError: If no schedule is registered under ``version``
    """
    try:
        return BUILTIN_SCHEDULES[version]
    except KeyError:
        raise KeyError(
            f"Unknown statutory schedule '{version}'. "
            f"Available: {', '.join(sorted(BUILTIN_SCHEDULES))}"
        ) from None


def schedule_to_dict(schedule: StatutorySchedule) -> dict:
    """Convert a schedule to a JSON-serializable dict."""
    return {
        "version": schedule.version,
        "effective_year": schedule.effective_year,
        "sss": {
            "bands": [[upper, amount] for upper, amount in schedule.sss.bands],
            "max_salary_threshold": schedule.sss.max_salary_threshold,
            "max_contribution": schedule.sss.max_contribution,
            "default_contribution": schedule.sss.default_contribution
        },
        "philhealth": {
            "rate": schedule.philhealth.rate,
            "min_salary": schedule.philhealth.min_salary,
            "max_salary": schedule.philhealth.max_salary
        },
        "pagibig": {
            "low_threshold": schedule.pagibig.low_threshold,
            "low_rate": schedule.pagibig.low_rate,
            "high_rate": schedule.pagibig.high_rate,
            "max_contribution": schedule.pagibig.max_contribution
        },
        "tax_brackets": [
            {
                "lower_bound": bracket.lower_bound,
                "rate": bracket.rate,
                "base_tax": bracket.base_tax
            }
            for bracket in schedule.tax_brackets
        ]
    }


def schedule_from_dict(data: dict) -> StatutorySchedule:
    """
    Convert a dict (e.g. loaded from JSON) to a schedule.

    Missing sections fall back to the matching section of the built-in
    schedule for the same version, or the default schedule.
    """
    base = BUILTIN_SCHEDULES.get(data.get("version", ""), get_schedule())
    sss_data = data.get("sss", {})
    philhealth_data = data.get("philhealth", {})
    pagibig_data = data.get("pagibig", {})

    if "bands" in sss_data:
        bands = [(float(upper), float(amount)) for upper, amount in sss_data["bands"]]
    else:
        bands = list(base.sss.bands)

    if "tax_brackets" in data:
        brackets = [
            TaxBracket(
                lower_bound=float(item["lower_bound"]),
                rate=float(item["rate"]),
                base_tax=float(item["base_tax"])
            )
            for item in data["tax_brackets"]
        ]
    else:
        brackets = list(base.tax_brackets)

    return StatutorySchedule(
        version=data.get("version", base.version),
        effective_year=data.get("effective_year", base.effective_year),
        sss=SSSTable(
            bands=bands,
            max_salary_threshold=sss_data.get("max_salary_threshold", base.sss.max_salary_threshold),
            max_contribution=sss_data.get("max_contribution", base.sss.max_contribution),
            default_contribution=sss_data.get("default_contribution", base.sss.default_contribution)
        ),
        philhealth=PhilHealthRule(
            rate=philhealth_data.get("rate", base.philhealth.rate),
            min_salary=philhealth_data.get("min_salary", base.philhealth.min_salary),
            max_salary=philhealth_data.get("max_salary", base.philhealth.max_salary)
        ),
        pagibig=PagIbigRule(
            low_threshold=pagibig_data.get("low_threshold", base.pagibig.low_threshold),
            low_rate=pagibig_data.get("low_rate", base.pagibig.low_rate),
            high_rate=pagibig_data.get("high_rate", base.pagibig.high_rate),
            max_contribution=pagibig_data.get("max_contribution", base.pagibig.max_contribution)
        ),
        tax_brackets=brackets
    )
