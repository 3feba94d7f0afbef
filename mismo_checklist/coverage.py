"""
Employment and residence history coverage.

Coverage totals the months on record against the two-year history rule; gap
detection walks employments in start-date order. Both take the reference date
explicitly so results never depend on the wall clock.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from mismo_checklist.constants import (
    COVERAGE_GAP_DAYS,
    CURRENT_EMPLOYMENT_MARKER,
    HISTORY_MONTHS_REQUIRED,
    LOE_GAP_DAYS,
)
from mismo_checklist.models import Borrower, Employment


@dataclass(frozen=True)
class Coverage:
    total_months: int
    months_needed: int
    is_sufficient: bool


@dataclass(frozen=True)
class EmploymentGap:
    from_employer: str
    to_employer: str
    gap_months: int
    gap_days: int
    from_date: date
    to_date: date


def months_between(start: Optional[date], end: Optional[date]) -> Optional[int]:
    """Whole calendar months from start to end (day of month ignored)."""
    if start is None or end is None:
        return None
    return (end.year - start.year) * 12 + (end.month - start.month)


def calculate_coverage(records: Iterable[object], months_field: str) -> Coverage:
    """
    Sum a months attribute across records.

    Args:
        records: Employment or Residence records
        months_field: Attribute name, e.g. "months_employed"

    Returns:
        Coverage against the 24-month history requirement
    """
    total = 0
    for record in records:
        total += getattr(record, months_field, None) or 0
    return Coverage(
        total_months=total,
        months_needed=max(0, HISTORY_MONTHS_REQUIRED - total),
        is_sufficient=total >= HISTORY_MONTHS_REQUIRED,
    )


def employment_coverage(borrower: Borrower) -> Coverage:
    return calculate_coverage(borrower.employments, "months_employed")


def residence_coverage(borrower: Borrower) -> Coverage:
    return calculate_coverage(borrower.residences, "months_at_residence")


def detect_employment_gaps(
    employments: List[Employment],
    reference_date: date,
) -> List[EmploymentGap]:
    """Gaps long enough to require a letter of explanation (> 30 days)."""
    return _find_gaps(employments, reference_date, LOE_GAP_DAYS)


def detect_coverage_gaps(
    employments: List[Employment],
    reference_date: date,
) -> List[EmploymentGap]:
    """Any break in paystub coverage (> 1 day)."""
    return _find_gaps(employments, reference_date, COVERAGE_GAP_DAYS)


def _employer_label(employment: Employment) -> str:
    return employment.employer_name or "Employer"


def _find_gaps(
    employments: List[Employment],
    reference_date: date,
    min_gap_days: int,
) -> List[EmploymentGap]:
    gaps: List[EmploymentGap] = []
    ordered = sorted(employments, key=lambda e: e.start_date or date.min)
    if not ordered:
        return gaps

    # Latest end seen so far, so overlapping positions do not open false gaps
    covering = ordered[0]
    covered_until = covering.end_date or reference_date

    for following in ordered[1:]:
        if following.start_date is not None:
            gap = _gap(covering, _employer_label(following), covered_until,
                       following.start_date, min_gap_days)
            if gap:
                gaps.append(gap)
        following_end = following.end_date or reference_date
        if following_end >= covered_until:
            covering = following
            covered_until = following_end

    if not any(e.is_current for e in ordered) and covering.end_date is not None:
        gap = _gap(covering, CURRENT_EMPLOYMENT_MARKER, covered_until,
                   reference_date, min_gap_days)
        if gap:
            gaps.append(gap)

    return gaps


def _gap(
    earlier: Employment,
    to_employer: str,
    from_date: date,
    to_date: date,
    min_gap_days: int,
) -> Optional[EmploymentGap]:
    days = (to_date - from_date).days
    if days <= min_gap_days:
        return None
    return EmploymentGap(
        from_employer=_employer_label(earlier),
        to_employer=to_employer,
        gap_months=max(1, months_between(from_date, to_date)),
        gap_days=days,
        from_date=from_date,
        to_date=to_date,
    )
