"""
Income and employment classification for a borrower.

MISMO income types are free text in practice, so classification is a set of
pattern tables over the type strings. Each predicate is evaluated on its own;
a borrower can be self-employed, receive alimony and have base income at the
same time.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Pattern, Tuple

from mismo_checklist.constants import BASE_INCOME_TYPES, OtherIncomeCategory
from mismo_checklist.models import Borrower, Income


SELF_EMPLOYED_INCOME_PATTERN = re.compile(
    r"self|business|partnership|s-?corp|s\s*corporation|schedule\s*c|1099", re.IGNORECASE
)
ALIMONY_PATTERN = re.compile(r"alimony|child\s*support", re.IGNORECASE)
BASE_INCOME_PATTERN = re.compile(r"military|contract\s*basis|wages", re.IGNORECASE)
RETIRED_CLASSIFICATION_PATTERN = re.compile(r"retired", re.IGNORECASE)
RETIREMENT_INCOME_PATTERN = re.compile(
    r"social\s*security|pension|retirement|disability", re.IGNORECASE
)

# Variable pay and part-time markers used by the W-2 rules
VARIABLE_INCOME_PATTERN = re.compile(r"bonus|tips|overtime|commission", re.IGNORECASE)
PART_TIME_PATTERN = re.compile(r"part[-\s]?time", re.IGNORECASE)
MILITARY_PATTERN = re.compile(r"military", re.IGNORECASE)

# Retirement sub-types
SOCIAL_SECURITY_PATTERN = re.compile(r"social\s*security", re.IGNORECASE)
PENSION_PATTERN = re.compile(r"pension", re.IGNORECASE)
DISABILITY_PATTERN = re.compile(r"disability", re.IGNORECASE)
RETIREMENT_DISTRIBUTION_PATTERN = re.compile(
    r"retirement|distribution|ira|401k|403b", re.IGNORECASE
)

# Ordered: the first matching row decides a record's category
OTHER_INCOME_PATTERNS: List[Tuple[Pattern, OtherIncomeCategory]] = [
    (re.compile(r"capital\s*gain", re.IGNORECASE), OtherIncomeCategory.CAPITAL_GAINS),
    (re.compile(r"dividend|interest", re.IGNORECASE), OtherIncomeCategory.DIVIDEND_INTEREST),
    (re.compile(r"foster\s*care", re.IGNORECASE), OtherIncomeCategory.FOSTER_CARE),
    (re.compile(r"foreign", re.IGNORECASE), OtherIncomeCategory.FOREIGN),
    (re.compile(r"unemployment", re.IGNORECASE), OtherIncomeCategory.UNEMPLOYMENT),
    (re.compile(r"royalt", re.IGNORECASE), OtherIncomeCategory.ROYALTIES),
    (re.compile(r"trust", re.IGNORECASE), OtherIncomeCategory.TRUST),
    (re.compile(r"notes?\s*receivable", re.IGNORECASE), OtherIncomeCategory.NOTE_RECEIVABLE),
    (re.compile(r"boarder", re.IGNORECASE), OtherIncomeCategory.BOARDER_INCOME),
]


def _any_income(borrower: Borrower, pattern: Pattern) -> bool:
    return any(pattern.search(income.income_type or "") for income in borrower.incomes)


def is_self_employed(borrower: Borrower) -> bool:
    has_flag = any(emp.is_self_employed for emp in borrower.employments)
    return has_flag or _any_income(borrower, SELF_EMPLOYED_INCOME_PATTERN)


def has_alimony(borrower: Borrower) -> bool:
    return _any_income(borrower, ALIMONY_PATTERN)


def has_base_income(borrower: Borrower) -> bool:
    return any(
        income.income_type in BASE_INCOME_TYPES
        or BASE_INCOME_PATTERN.search(income.income_type or "")
        for income in borrower.incomes
    )


def is_retired(borrower: Borrower) -> bool:
    retired_class = any(
        RETIRED_CLASSIFICATION_PATTERN.search(emp.classification_type or "")
        for emp in borrower.employments
    )
    if retired_class:
        return True
    return not borrower.employments and _any_income(borrower, RETIREMENT_INCOME_PATTERN)


def classify_other_income(income: Income) -> Optional[OtherIncomeCategory]:
    """Return the other-income category for one record, or None."""
    income_type = income.income_type or ""
    for pattern, category in OTHER_INCOME_PATTERNS:
        if pattern.search(income_type):
            return category
    return None


def other_income_categories(borrower: Borrower) -> List[OtherIncomeCategory]:
    """Distinct other-income categories, in the order first seen."""
    categories: List[OtherIncomeCategory] = []
    for income in borrower.incomes:
        category = classify_other_income(income)
        if category is not None and category not in categories:
            categories.append(category)
    return categories


def has_variable_income(borrower: Borrower) -> bool:
    part_time_job = any(
        PART_TIME_PATTERN.search(emp.classification_type or "")
        for emp in borrower.employments
    )
    return (
        part_time_job
        or _any_income(borrower, VARIABLE_INCOME_PATTERN)
        or _any_income(borrower, PART_TIME_PATTERN)
    )


def has_military_income(borrower: Borrower) -> bool:
    return _any_income(borrower, MILITARY_PATTERN)


@dataclass
class IncomeProfile:
    """All classifier outputs for one borrower."""
    self_employed: bool = False
    alimony: bool = False
    base_income: bool = False
    retired: bool = False
    other_categories: List[OtherIncomeCategory] = field(default_factory=list)


def classify_borrower(borrower: Borrower) -> IncomeProfile:
    return IncomeProfile(
        self_employed=is_self_employed(borrower),
        alimony=has_alimony(borrower),
        base_income=has_base_income(borrower),
        retired=is_retired(borrower),
        other_categories=other_income_categories(borrower),
    )
