"""
Tax-year resolution for document requests.

Assumes the US federal filing deadline of April 15.
"""

from datetime import date
from typing import List


FILING_DEADLINE = (4, 15)  # (month, day)


def latest_filed_tax_year(reference_date: date) -> int:
    """Most recent tax year whose return should already be filed."""
    if (reference_date.month, reference_date.day) < FILING_DEADLINE:
        return reference_date.year - 2
    return reference_date.year - 1


def tax_years(years_needed: int, reference_date: date) -> List[int]:
    """
    Consecutive tax years to request, ascending.

    Example:
        tax_years(2, date(2026, 2, 1)) -> [2023, 2024]
    """
    if years_needed <= 0:
        return []
    last = latest_filed_tax_year(reference_date)
    return list(range(last - years_needed + 1, last + 1))


def format_tax_years(years: List[int]) -> str:
    """Render a year range as "2023-2024", or a single "2024"."""
    if not years:
        return ""
    if len(years) == 1:
        return str(years[0])
    return f"{years[0]}-{years[-1]}"
