import math
from collections import namedtuple
from datetime import date
from enum import Enum
from typing import Optional


class EligibilityClass(str, Enum):
    STANDARD_ANNUAL = "standard-annual"
    EXTENDED_BIENNIAL = "extended-biennial"
    DEFAULT = "default"


class EligibilityStatus(str, Enum):
    ELIGIBLE = "eligible"
    NOT_ELIGIBLE = "not-eligible"
    PENDING = "pending"


EntitlementRule = namedtuple(
    "EntitlementRule",
    ["min_years", "entitled_days", "cycle_years", "description", "waiting_description"],
)

NATIONALITY_CLASSES = {
    "maldivian": EligibilityClass.STANDARD_ANNUAL,
    "indian": EligibilityClass.STANDARD_ANNUAL,
    "sri lankan": EligibilityClass.STANDARD_ANNUAL,
    "bangladeshi": EligibilityClass.EXTENDED_BIENNIAL,
    "nepalese": EligibilityClass.EXTENDED_BIENNIAL,
}

ELIGIBILITY_RULES = {
    EligibilityClass.STANDARD_ANNUAL: EntitlementRule(
        1, 30, 1,
        "30 days annual leave (eligible every year after 1 year of service)",
        "Not eligible yet (requires 1 year of service)",
    ),
    EligibilityClass.EXTENDED_BIENNIAL: EntitlementRule(
        2, 60, 2,
        "60 days annual leave (eligible every 2 years after 2 years of service)",
        "Not eligible yet (requires 2 years of service)",
    ),
    EligibilityClass.DEFAULT: EntitlementRule(
        1, 30, 1,
        "30 days annual leave (standard eligibility)",
        "Not eligible yet (requires 1 year of service)",
    ),
}

# Reached only by nationalities outside the named groups.
LONG_SERVICE_RULE = EntitlementRule(
    5, 120, None,
    "120 days maximum leave (5+ years continuous service)",
    None,
)


def normalize_nationality(nationality: Optional[str]) -> str:
    return (nationality or "").strip().lower()


def classify_nationality(nationality: Optional[str]) -> EligibilityClass:
    return NATIONALITY_CLASSES.get(normalize_nationality(nationality), EligibilityClass.DEFAULT)


def add_years(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year + years)
    except ValueError:
        # Feb 29 on a non-leap target year
        return day.replace(year=day.year + years, day=28)


def years_of_service(join_date: date, as_of: date) -> float:
    """
    Completed service years counted by anniversaries, plus the fraction of
    the current service year. The anniversary itself is a whole number.
    """
    if as_of <= join_date:
        return 0.0
    whole_years = as_of.year - join_date.year
    if add_years(join_date, whole_years) > as_of:
        whole_years -= 1
    last_anniversary = add_years(join_date, whole_years)
    next_anniversary = add_years(join_date, whole_years + 1)
    return whole_years + (as_of - last_anniversary).days / (next_anniversary - last_anniversary).days


def next_entitlement_date(join_date: date, years: float, rule: EntitlementRule) -> date:
    """
    Start of the next entitlement cycle.

    Before the first cycle this is join_date + min_years. After it, cycles of
    cycle_years follow, so the date is
    join_date + min_years + (floor((years - min_years) / cycle_years) + 1) * cycle_years.
    """
    if years < rule.min_years:
        return add_years(join_date, rule.min_years)
    completed_cycles = math.floor((years - rule.min_years) / rule.cycle_years)
    return add_years(join_date, rule.min_years + (completed_cycles + 1) * rule.cycle_years)


def _result(entitled_days: int, status: EligibilityStatus, next_date: Optional[date], description: str) -> dict:
    return {
        "entitled_days": entitled_days,
        "status": status,
        "next_entitlement_date": next_date,
        "description": description,
    }


def _apply_rule(rule: EntitlementRule, join_date: date, years: float) -> dict:
    if years >= rule.min_years:
        return _result(
            rule.entitled_days,
            EligibilityStatus.ELIGIBLE,
            next_entitlement_date(join_date, years, rule),
            rule.description,
        )
    return _result(
        0,
        EligibilityStatus.NOT_ELIGIBLE,
        next_entitlement_date(join_date, years, rule),
        rule.waiting_description,
    )


def resolve_eligibility(nationality: Optional[str], join_date: date, years_of_service: float) -> dict:
    """
    Annual-leave entitlement for an employee.

    Precedence: the nationality groups first, then the long-service rule, then
    the default rule. Unknown nationalities fall through to the default.
    """
    eligibility_class = classify_nationality(nationality)

    if eligibility_class != EligibilityClass.DEFAULT:
        return _apply_rule(ELIGIBILITY_RULES[eligibility_class], join_date, years_of_service)

    if years_of_service >= LONG_SERVICE_RULE.min_years:
        return _result(
            LONG_SERVICE_RULE.entitled_days,
            EligibilityStatus.ELIGIBLE,
            None,
            LONG_SERVICE_RULE.description,
        )

    return _apply_rule(ELIGIBILITY_RULES[EligibilityClass.DEFAULT], join_date, years_of_service)
