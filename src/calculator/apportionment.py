"""Residency apportionment by days of residence."""

import calendar
from datetime import date

from models.state import ResidencyType, StateReturnConfig


def days_in_year(year: int) -> int:
    return 366 if calendar.isleap(year) else 365


def apportionment_ratio(config: StateReturnConfig, tax_year: int) -> float:
    """
    Fraction of the tax year the filer was a resident.

    Full-year residents are 1.0 and nonresidents 0.0. Part-year residency
    clips the move dates to the calendar year (defaulting to January 1 and
    December 31), counts days inclusively and divides by the year length.
    """
    if config.residency_type == ResidencyType.FULL_YEAR:
        return 1.0
    if config.residency_type == ResidencyType.NONRESIDENT:
        return 0.0

    year_start = date(tax_year, 1, 1)
    year_end = date(tax_year, 12, 31)
    start = max(config.move_in_date or year_start, year_start)
    end = min(config.move_out_date or year_end, year_end)
    if end < start:
        return 0.0

    days = (end - start).days + 1
    ratio = days / days_in_year(tax_year)
    return max(0.0, min(1.0, ratio))
