"""
Tests for employment/residence coverage and gap detection.

Tests cover:
- 24-month history totals
- LOE (> 30 days) and stub-coverage (> 1 day) gap thresholds
- Overlapping and open-ended employment
"""
from datetime import date

import pytest


REFERENCE_DATE = date(2026, 2, 1)


def _employment(name, start, end=None, current=None, months=None):
    from mismo_checklist.models import Employment

    return Employment(
        employer_name=name,
        start_date=start,
        end_date=end or REFERENCE_DATE,
        is_current=end is None if current is None else current,
        months_employed=months,
    )


class TestCoverage:
    """Tests for calculate_coverage and the borrower helpers."""

    def test_sufficient_history(self):
        from mismo_checklist.coverage import employment_coverage
        from mismo_checklist.models import Borrower

        borrower = Borrower(name="A", employments=[
            _employment("Acme", date(2020, 1, 1), months=20),
            _employment("Beta", date(2018, 1, 1), date(2019, 12, 31), months=6),
        ])
        coverage = employment_coverage(borrower)

        assert coverage.total_months == 26
        assert coverage.months_needed == 0
        assert coverage.is_sufficient is True

    def test_short_history(self):
        from mismo_checklist.coverage import residence_coverage
        from mismo_checklist.models import Borrower, Residence

        borrower = Borrower(name="A", residences=[Residence(months_at_residence=10)])
        coverage = residence_coverage(borrower)

        assert coverage.total_months == 10
        assert coverage.months_needed == 14
        assert coverage.is_sufficient is False

    def test_missing_months_count_as_zero(self):
        from mismo_checklist.coverage import calculate_coverage

        coverage = calculate_coverage([_employment("Acme", date(2025, 1, 1))], "months_employed")

        assert coverage.total_months == 0
        assert coverage.months_needed == 24

    def test_months_between(self):
        from mismo_checklist.coverage import months_between

        assert months_between(date(2024, 11, 15), date(2026, 2, 1)) == 15
        assert months_between(None, date(2026, 2, 1)) is None


class TestEmploymentGaps:
    """Tests for detect_employment_gaps / detect_coverage_gaps."""

    def test_two_month_gap_between_jobs(self):
        """Job ends 2023-01-01, next starts 2023-03-01: one gap of ~2 months."""
        from mismo_checklist.coverage import detect_employment_gaps

        employments = [
            _employment("Acme Corp", date(2020, 1, 1), date(2023, 1, 1)),
            _employment("Beta LLC", date(2023, 3, 1)),
        ]
        gaps = detect_employment_gaps(employments, REFERENCE_DATE)

        assert len(gaps) == 1
        gap = gaps[0]
        assert gap.from_employer == "Acme Corp"
        assert gap.to_employer == "Beta LLC"
        assert gap.gap_days == 59
        assert gap.gap_months == 2

    def test_input_order_does_not_matter(self):
        from mismo_checklist.coverage import detect_employment_gaps

        employments = [
            _employment("Beta LLC", date(2023, 3, 1)),
            _employment("Acme Corp", date(2020, 1, 1), date(2023, 1, 1)),
        ]
        gaps = detect_employment_gaps(employments, REFERENCE_DATE)

        assert [(g.from_employer, g.to_employer) for g in gaps] == [("Acme Corp", "Beta LLC")]

    def test_short_gap_below_loe_threshold(self):
        """A 14-day gap needs no LOE but is a stub-coverage gap."""
        from mismo_checklist.coverage import detect_coverage_gaps, detect_employment_gaps

        employments = [
            _employment("Acme", date(2020, 1, 1), date(2023, 1, 1)),
            _employment("Beta", date(2023, 1, 15)),
        ]

        assert detect_employment_gaps(employments, REFERENCE_DATE) == []
        assert len(detect_coverage_gaps(employments, REFERENCE_DATE)) == 1

    def test_back_to_back_jobs_have_no_gap(self):
        from mismo_checklist.coverage import detect_coverage_gaps

        employments = [
            _employment("Acme", date(2020, 1, 1), date(2022, 12, 31)),
            _employment("Beta", date(2023, 1, 1)),
        ]

        assert detect_coverage_gaps(employments, REFERENCE_DATE) == []

    def test_overlapping_jobs_do_not_open_gap(self):
        """A short side job inside a long one must not create a false gap."""
        from mismo_checklist.coverage import detect_employment_gaps

        employments = [
            _employment("Long Co", date(2019, 1, 1)),
            _employment("Side Gig", date(2020, 1, 1), date(2020, 3, 1)),
            _employment("Weekend Job", date(2021, 6, 1), date(2021, 9, 1)),
        ]

        assert detect_employment_gaps(employments, REFERENCE_DATE) == []

    def test_trailing_gap_to_present(self):
        """No current job: the gap from the last end date to now is reported."""
        from mismo_checklist.coverage import detect_employment_gaps

        employments = [_employment("Acme", date(2020, 1, 1), date(2025, 9, 30))]
        gaps = detect_employment_gaps(employments, REFERENCE_DATE)

        assert len(gaps) == 1
        assert gaps[0].from_employer == "Acme"
        assert gaps[0].to_employer == "(current)"

    def test_missing_employer_name_uses_placeholder(self):
        from mismo_checklist.coverage import detect_employment_gaps

        employments = [
            _employment("", date(2020, 1, 1), date(2023, 1, 1)),
            _employment("Beta", date(2023, 6, 1)),
        ]
        gaps = detect_employment_gaps(employments, REFERENCE_DATE)

        assert gaps[0].from_employer == "Employer"

    @pytest.mark.parametrize("employments", [[], None])
    def test_no_employment(self, employments):
        from mismo_checklist.coverage import detect_employment_gaps

        assert detect_employment_gaps(employments or [], REFERENCE_DATE) == []
